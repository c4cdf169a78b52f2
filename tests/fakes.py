"""In-memory stand-ins for the Supabase client and the realtime change feed."""
import asyncio
import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError

ALL_ROLES = ["teacher", "student", "parent"]

UNIQUE_KEYS = {
    "profiles": [("user_id",)],
    "classrooms": [("classroom_code",)],
    "classroom_members": [("user_id", "classroom_id")],
}

TABLE_DEFAULTS: Dict[str, Callable[[], Dict[str, Any]]] = {
    "tasks": lambda: {"completed": False, "description": None, "due_date": None},
    "fees": lambda: {"status": "unpaid", "paid_date": None, "description": None},
    "grades": lambda: {
        "max_grade": 100, "grade": None, "comments": None,
        "date_assigned": None, "date_submitted": None
    },
    "events": lambda: {"audience": list(ALL_ROLES), "description": None, "classroom_id": None},
    "messages": lambda: {
        "receiver_id": None, "classroom_id": None,
        "attachment_url": None, "attachment_name": None
    },
    "attendance": lambda: {"notes": None},
    "classrooms": lambda: {"subject": None},
    "profiles": lambda: {"first_name": None, "last_name": None},
}

# tables without an updated_at column
NO_UPDATED_AT = {"classroom_members", "messages", "attendance"}


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self._op = "select"
        self._columns = "*"
        self._count = None
        self._payload = None
        self._filters: List[Callable[[dict], bool]] = []
        self._orders: List[Tuple[str, bool]] = []
        self._limit: Optional[int] = None
        self._offset = 0

    # operations
    def select(self, columns: str = "*", count: Optional[str] = None):
        self._op = "select"
        self._columns = columns
        self._count = count
        return self

    def insert(self, payload):
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict):
        self._op = "update"
        self._payload = payload
        return self

    def delete(self):
        self._op = "delete"
        return self

    # filters
    def eq(self, column: str, value):
        self._filters.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column: str, value):
        self._filters.append(lambda r: r.get(column) != value)
        return self

    def in_(self, column: str, values):
        values = list(values)
        self._filters.append(lambda r: r.get(column) in values)
        return self

    def gte(self, column: str, value):
        self._filters.append(lambda r: r.get(column) is not None and str(r[column]) >= str(value))
        return self

    def lte(self, column: str, value):
        self._filters.append(lambda r: r.get(column) is not None and str(r[column]) <= str(value))
        return self

    def gt(self, column: str, value):
        self._filters.append(lambda r: r.get(column) is not None and str(r[column]) > str(value))
        return self

    def lt(self, column: str, value):
        self._filters.append(lambda r: r.get(column) is not None and str(r[column]) < str(value))
        return self

    # modifiers
    def order(self, column: str, desc: bool = False):
        self._orders.append((column, desc))
        return self

    def limit(self, size: int):
        self._limit = size
        return self

    def range(self, start: int, end: int):
        self._offset = start
        self._limit = end - start + 1
        return self

    def execute(self):
        if (self.table, self._op) in self.db.failures:
            raise APIError({"code": "XX000", "message": f"simulated {self._op} failure on {self.table}"})
        rows = self.db.tables.setdefault(self.table, [])
        if self._op == "insert":
            return self._execute_insert(rows)

        matched = [r for r in rows if all(f(r) for f in self._filters)]
        if self._op == "update":
            for row in matched:
                row.update(copy.deepcopy(self._payload))
            return SimpleNamespace(data=copy.deepcopy(matched), count=None)
        if self._op == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in matched]
            return SimpleNamespace(data=copy.deepcopy(matched), count=None)

        for column, desc in reversed(self._orders):
            present = [r for r in matched if r.get(column) is not None]
            missing = [r for r in matched if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=desc)
            matched = present + missing
        total = len(matched)
        matched = matched[self._offset:]
        if self._limit is not None:
            matched = matched[:self._limit]
        return SimpleNamespace(
            data=[self._project(r) for r in matched],
            count=total if self._count else None
        )

    def _project(self, row: dict) -> dict:
        row = copy.deepcopy(row)
        if self._columns.strip() == "*":
            return row
        columns = [c.strip() for c in self._columns.split(",")]
        return {c: row.get(c) for c in columns}

    def _execute_insert(self, rows: List[dict]):
        payload = self._payload if isinstance(self._payload, list) else [self._payload]
        inserted = []
        for item in payload:
            row = self.db.new_row(self.table, item)
            for key in UNIQUE_KEYS.get(self.table, []):
                value = tuple(row.get(k) for k in key)
                if any(tuple(r.get(k) for k in key) == value for r in rows + inserted):
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint "{self.table}_{"_".join(key)}_key"'
                    })
            inserted.append(row)
        rows.extend(inserted)
        self.db.inserted.extend((self.table, copy.deepcopy(r)) for r in inserted)
        return SimpleNamespace(data=copy.deepcopy(inserted), count=None)


class FakeAuth:
    def __init__(self, db: "FakeSupabase"):
        self.db = db
        self.users: Dict[str, dict] = {}
        self.tokens: Dict[str, str] = {}
        self.sign_outs = 0

    def _user(self, record: dict) -> SimpleNamespace:
        return SimpleNamespace(
            id=record["id"],
            email=record["email"],
            user_metadata=copy.deepcopy(record["metadata"]),
            app_metadata={}
        )

    def sign_up(self, credentials: dict):
        email = credentials["email"].lower()
        if email in self.users:
            raise Exception("User already registered")
        record = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": credentials["password"],
            "metadata": (credentials.get("options") or {}).get("data") or {}
        }
        self.users[email] = record
        return SimpleNamespace(user=self._user(record), session=None)

    def sign_in_with_password(self, credentials: dict):
        record = self.users.get(credentials["email"].lower())
        if record is None or record["password"] != credentials["password"]:
            raise Exception("Invalid login credentials")
        token = f"token-{uuid.uuid4().hex}"
        self.tokens[token] = record["email"]
        return SimpleNamespace(
            user=self._user(record),
            session=SimpleNamespace(access_token=token, token_type="bearer")
        )

    def get_user(self, jwt: Optional[str] = None):
        email = self.tokens.get(jwt)
        if email is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self._user(self.users[email]))

    def sign_out(self):
        self.sign_outs += 1


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[dict]] = {}
        self.inserted: List[Tuple[str, dict]] = []
        self.failures = set()
        self.auth = FakeAuth(self)
        self._clock = datetime.now(timezone.utc)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def now(self) -> str:
        """Strictly increasing timestamps so ordering by created_at is deterministic"""
        self._clock = max(datetime.now(timezone.utc), self._clock + timedelta(microseconds=1))
        return self._clock.isoformat()

    def new_row(self, table: str, item: dict) -> dict:
        now = self.now()
        row = {"id": str(uuid.uuid4())}
        row.update(TABLE_DEFAULTS.get(table, dict)())
        if table == "classroom_members":
            row["joined_at"] = now
        else:
            row["created_at"] = now
        if table not in NO_UPDATED_AT:
            row["updated_at"] = now
        row.update(copy.deepcopy(item))
        return row

    def rows(self, table: str, **filters) -> List[dict]:
        return [
            r for r in self.tables.get(table, [])
            if all(r.get(k) == v for k, v in filters.items())
        ]


class FakeChangeFeed:
    """Records subscriptions and delivers inserts the way realtime does."""

    def __init__(self):
        self.subscriptions: Dict[str, dict] = {}

    async def subscribe(self, table, handler, filter=None, event="INSERT") -> str:
        topic = f"{table}-{uuid.uuid4().hex[:8]}"
        self.subscriptions[topic] = {
            "table": table,
            "filter": filter,
            "event": event,
            "handler": handler,
            "loop": asyncio.get_running_loop()
        }
        return topic

    async def unsubscribe(self, topic: str) -> None:
        self.subscriptions.pop(topic, None)

    async def close(self) -> None:
        self.subscriptions.clear()

    def emit(self, table: str, record: dict) -> int:
        """Deliver an INSERT of record to every matching subscription; returns how many got it"""
        delivered = 0
        for sub in list(self.subscriptions.values()):
            if sub["table"] != table or not _matches(sub["filter"], record):
                continue
            payload = {"data": {"type": "INSERT", "table": table, "record": record}}
            asyncio.run_coroutine_threadsafe(sub["handler"](payload), sub["loop"]).result(timeout=5)
            delivered += 1
        return delivered


def _matches(row_filter: Optional[str], record: dict) -> bool:
    if not row_filter:
        return True
    column, _, expected = row_filter.partition("=eq.")
    return str(record.get(column)) == expected
