import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple
from starlette.concurrency import run_in_threadpool
from supabase import Client
from app.core.dependencies import check_classroom_access
from app.core.scoping import resolve_scoped_student_ids
from app.core.session import SessionContext
from app.modules.attendance.service import AttendanceService
from app.modules.events.calendar import is_event_visible
from app.modules.events.service import EventService
from app.modules.grades.service import GradeService
from app.modules.messages.service import MessageService, is_message_visible
from app.modules.realtime.feed import ChangeFeed, extract_record
from app.modules.realtime.reconcile import LiveList

logger = logging.getLogger(__name__)

Subscription = Tuple[str, Optional[str]]


def _dump(models) -> List[dict]:
    return [m.model_dump(mode="json") for m in models]


class LiveStream:
    """A live list kept current from change notifications.

    `fetch` loads the full list, `accept` turns an inserted row into a list
    entry or returns None when the viewer may not see it. Every change to the
    list is pushed as a snapshot onto `updates`.
    """

    def __init__(
        self,
        name: str,
        subscriptions: List[Subscription],
        fetch: Callable[[], List[dict]],
        accept: Callable[[dict], Optional[dict]],
        live: LiveList
    ):
        self.name = name
        self.subscriptions = subscriptions
        self.fetch = fetch
        self.accept = accept
        self.live = live
        self.updates: asyncio.Queue = asyncio.Queue()
        self._topics: List[str] = []

    async def start(self, feed: ChangeFeed) -> None:
        for table, row_filter in self.subscriptions:
            self._topics.append(await feed.subscribe(table, self.on_change, filter=row_filter))
        await self.refresh()

    async def stop(self, feed: ChangeFeed) -> None:
        for topic in self._topics:
            await feed.unsubscribe(topic)
        self._topics = []

    async def refresh(self) -> bool:
        generation = self.live.next_generation()
        rows = await run_in_threadpool(self.fetch)
        if not self.live.apply_snapshot(generation, rows):
            logger.debug(f"Dropped stale {self.name} snapshot {generation}")
            return False
        self.publish()
        return True

    async def on_change(self, payload: Dict[str, Any]) -> None:
        record = extract_record(payload)
        if not record:
            return
        try:
            row = await run_in_threadpool(self.accept, record)
            if row and self.live.merge(row):
                self.publish()
                # reconcile against the store; overlapping refreshes settle by generation
                await self.refresh()
        except Exception as e:
            logger.error(f"Error applying {self.name} change: {e}")

    def publish(self) -> None:
        self.updates.put_nowait({
            "stream": self.name,
            "generation": self.live.generation,
            "items": self.live.items()
        })


def message_feed_stream(session: SessionContext, supabase: Client) -> LiveStream:
    service = MessageService(supabase)
    classroom_ids = service.visible_classroom_ids(session)

    def accept(record: dict) -> Optional[dict]:
        if not is_message_visible(record, session.user_id, classroom_ids):
            return None
        return _dump(service.enrich([record]))[0]

    return LiveStream(
        "messages",
        [("messages", None)],
        lambda: _dump(service.list_feed(session)),
        accept,
        LiveList(sort_key=lambda m: m["created_at"], reverse=True, limit=50)
    )


def classroom_thread_stream(classroom_id: str, session: SessionContext, supabase: Client) -> LiveStream:
    check_classroom_access(classroom_id, session, supabase)
    service = MessageService(supabase)

    def accept(record: dict) -> Optional[dict]:
        if record.get("classroom_id") != classroom_id:
            return None
        if not is_message_visible(record, session.user_id, [classroom_id]):
            return None
        return _dump(service.enrich([record]))[0]

    return LiveStream(
        f"classroom:{classroom_id}",
        [("messages", f"classroom_id=eq.{classroom_id}")],
        lambda: _dump(service.list_classroom_thread(classroom_id, session)),
        accept,
        LiveList(sort_key=lambda m: m["created_at"])
    )


def event_stream(session: SessionContext, supabase: Client) -> LiveStream:
    service = EventService(supabase)

    def accept(record: dict) -> Optional[dict]:
        if not is_event_visible(record, session.user_id, session.role):
            return None
        return _dump(service.enrich([record]))[0]

    return LiveStream(
        "events",
        [("events", None)],
        lambda: _dump(service.list_events(session)),
        accept,
        LiveList(sort_key=lambda e: e["event_date"])
    )


def _student_filter(session: SessionContext) -> Optional[str]:
    if session.role == "student":
        return f"student_id=eq.{session.user_id}"
    return None


def grade_stream(session: SessionContext, supabase: Client) -> LiveStream:
    service = GradeService(supabase)
    student_ids = set(resolve_scoped_student_ids(session, supabase))

    def accept(record: dict) -> Optional[dict]:
        if record.get("student_id") not in student_ids:
            return None
        return _dump(service.enrich([record]))[0]

    return LiveStream(
        "grades",
        [("grades", _student_filter(session))],
        lambda: _dump(service.list_grades(session, limit=50)),
        accept,
        LiveList(sort_key=lambda g: g["created_at"], reverse=True, limit=50)
    )


def attendance_stream(session: SessionContext, supabase: Client) -> LiveStream:
    service = AttendanceService(supabase)
    student_ids = set(resolve_scoped_student_ids(session, supabase))

    def accept(record: dict) -> Optional[dict]:
        if record.get("student_id") not in student_ids:
            return None
        return _dump(service.enrich([record]))[0]

    return LiveStream(
        "attendance",
        [("attendance", _student_filter(session))],
        lambda: _dump(service.list_attendance(session, limit=50)),
        accept,
        LiveList(sort_key=lambda a: (a["date"], a["created_at"]), reverse=True, limit=50)
    )
