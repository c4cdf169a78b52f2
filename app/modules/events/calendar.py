from datetime import date
from typing import Iterable, List
from app.modules.events.schemas import EventResponse


def is_event_visible(event: dict, user_id: str, role: str) -> bool:
    """Creators always see their events; everyone else needs their role in the audience"""
    if event.get("created_by") == user_id:
        return True
    return role in (event.get("audience") or [])


def events_on_day(events: Iterable[EventResponse], day: date) -> List[EventResponse]:
    return [e for e in events if e.event_date.date() == day]


def events_in_month(events: Iterable[EventResponse], year: int, month: int) -> List[EventResponse]:
    return [e for e in events if e.event_date.year == year and e.event_date.month == month]


def parse_month(value: str) -> tuple:
    """'YYYY-MM' -> (year, month)"""
    try:
        year, month = (int(part) for part in value.split("-"))
    except ValueError:
        raise ValueError("month must look like YYYY-MM")
    if not 1 <= month <= 12:
        raise ValueError("month must look like YYYY-MM")
    return year, month
