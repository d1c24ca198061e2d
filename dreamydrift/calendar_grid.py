# dreamydrift/calendar_grid.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import calendar
import datetime as dt

from .engine import SleepRecord, classify_record


@dataclass
class DaySlot:
    date: str               # YYYY-MM-DD
    day_number: int
    bucket: Optional[str]   # None when no record exists for the date


WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def first_weekday_offset(year: int, month: int) -> int:
    """Column of day 1, Sunday = 0."""
    return (dt.date(year, month, 1).weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Previous/next month navigation; no I/O involved."""
    idx = year * 12 + (month - 1) + int(delta)
    return idx // 12, idx % 12 + 1


def build_month_grid(year: int, month: int, records: List[SleepRecord]) -> List[Optional[DaySlot]]:
    """
    Leading None placeholders align day 1 under its weekday column,
    followed by one DaySlot per day of the month.
    """
    by_date: Dict[str, SleepRecord] = {}
    for r in records:
        # first match wins, same as a linear find over the stored list
        by_date.setdefault(r.date, r)

    slots: List[Optional[DaySlot]] = [None] * first_weekday_offset(year, month)
    for day in range(1, days_in_month(year, month) + 1):
        date_iso = dt.date(year, month, day).isoformat()
        rec = by_date.get(date_iso)
        slots.append(
            DaySlot(
                date=date_iso,
                day_number=day,
                bucket=classify_record(rec).bucket if rec is not None else None,
            )
        )
    return slots


def grid_weeks(slots: List[Optional[DaySlot]]) -> List[List[Optional[DaySlot]]]:
    """Chunk a month grid into 7-column rows, padding the last row with None."""
    rows: List[List[Optional[DaySlot]]] = []
    for i in range(0, len(slots), 7):
        row = list(slots[i:i + 7])
        row += [None] * (7 - len(row))
        rows.append(row)
    return rows
