import math
from typing import Iterable

PENDING_FEE_STATUSES = ("unpaid", "overdue")


def round_half_up(value: float) -> int:
    """Round halves up: 12.5 -> 13"""
    return int(math.floor(value + 0.5))


def average_grade_percent(grades: Iterable[dict]) -> int:
    """Rounded mean of grade/max_grade over graded rows; 0 when nothing is graded"""
    percentages = [
        g["grade"] / g["max_grade"] * 100
        for g in grades
        if g.get("grade") is not None and g.get("max_grade")
    ]
    if not percentages:
        return 0
    return round_half_up(sum(percentages) / len(percentages))


def attendance_rate(records: Iterable[dict]) -> int:
    """Rounded share of 'present' rows"""
    statuses = [r.get("status") for r in records]
    if not statuses:
        return 0
    return round_half_up(statuses.count("present") / len(statuses) * 100)


def pending_fee_total(fees: Iterable[dict]) -> float:
    return round(sum(
        float(f.get("amount") or 0) for f in fees if f.get("status", "unpaid") in PENDING_FEE_STATUSES
    ), 2)


def preview(text: str, length: int = 100) -> str:
    return text if len(text) <= length else f"{text[:length]}..."
