"""In-memory live list reconciled by primary key.

Fetches are stamped with a monotonically increasing generation; a snapshot
older than the last applied one is dropped. Rows merged from change
notifications while a fetch is in flight survive that fetch's snapshot.
"""
from typing import Any, Callable, Dict, List, Optional


class LiveList:
    def __init__(
        self,
        key: str = "id",
        sort_key: Optional[Callable[[dict], Any]] = None,
        reverse: bool = False,
        limit: Optional[int] = None
    ):
        self.key = key
        self.sort_key = sort_key
        self.reverse = reverse
        self.limit = limit
        self._items: Dict[Any, dict] = {}
        self._merged_at: Dict[Any, int] = {}
        self._issued = 0
        self._applied = 0

    @property
    def generation(self) -> int:
        """Generation of the snapshot currently applied"""
        return self._applied

    def next_generation(self) -> int:
        """Stamp a new fetch"""
        self._issued += 1
        return self._issued

    def apply_snapshot(self, generation: int, rows: List[dict]) -> bool:
        """Replace the list with a fetch result unless a newer one was already applied"""
        if generation <= self._applied:
            return False
        self._applied = generation
        items = {row[self.key]: row for row in rows}
        for key, stamp in self._merged_at.items():
            # merged after this fetch was issued, so the fetch may predate it
            if stamp >= generation and key not in items and key in self._items:
                items[key] = self._items[key]
        self._merged_at = {k: s for k, s in self._merged_at.items() if s >= generation}
        self._items = items
        return True

    def merge(self, row: dict) -> bool:
        """Upsert a single row; False when it is already present unchanged"""
        key = row[self.key]
        if self._items.get(key) == row:
            return False
        self._items[key] = row
        self._merged_at[key] = self._issued
        return True

    def remove(self, key: Any) -> bool:
        self._merged_at.pop(key, None)
        return self._items.pop(key, None) is not None

    def items(self) -> List[dict]:
        rows = list(self._items.values())
        if self.sort_key:
            rows.sort(key=self.sort_key, reverse=self.reverse)
        if self.limit:
            rows = rows[:self.limit]
        return rows

    def __contains__(self, key: Any) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
