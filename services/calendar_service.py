"""Month and week grids for the appointment calendar.

Weeks start on Sunday. Month indexes are zero-based (0 = January) and roll
over into the neighbouring year, so month=12 is January of year + 1.
"""
import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable

from core.time_utils import clinic_date, today
from models import Incident
from services.dashboard_service import sort_by_appointment

GRID_DAYS = 42
MONTH_NAMES = list(calendar.month_name)[1:]


def _week_start(day: date) -> date:
    # date.weekday(): Monday=0 ... Sunday=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def get_month_days(year: int, month: int) -> list[date]:
    """42 consecutive days starting on the Sunday on or before the 1st."""
    year, month = year + month // 12, month % 12
    start = _week_start(date(year, month + 1, 1))
    return [start + timedelta(days=n) for n in range(GRID_DAYS)]


def get_week_days(day: date | datetime) -> list[date]:
    if isinstance(day, datetime):
        day = clinic_date(day)
    start = _week_start(day)
    return [start + timedelta(days=n) for n in range(7)]


def appointments_on(incidents: Iterable[Incident], day: date) -> list[Incident]:
    return sort_by_appointment(i for i in incidents if clinic_date(i.appointment_date) == day)


def bucket_by_day(incidents: Iterable[Incident], days: Iterable[date]) -> dict[date, list[Incident]]:
    """Map each day to the incidents booked on it; incidents outside the days are dropped."""
    buckets = {d: [] for d in days}
    for incident in sort_by_appointment(incidents):
        day = clinic_date(incident.appointment_date)
        if day in buckets:
            buckets[day].append(incident)
    return buckets


@dataclass
class CalendarCell:
    date: date
    in_current_month: bool
    is_today: bool
    appointments: list[Incident] = field(default_factory=list)


def month_grid(
    year: int, month: int, incidents: Iterable[Incident], now: datetime | None = None
) -> list[CalendarCell]:
    days = get_month_days(year, month)
    shown_month = month % 12 + 1
    buckets = bucket_by_day(incidents, days)
    current = today(now)
    return [
        CalendarCell(d, d.month == shown_month, d == current, buckets[d])
        for d in days
    ]


def week_grid(
    day: date, incidents: Iterable[Incident], now: datetime | None = None
) -> list[CalendarCell]:
    days = get_week_days(day)
    buckets = bucket_by_day(incidents, days)
    current = today(now)
    return [CalendarCell(d, d.month == day.month, d == current, buckets[d]) for d in days]


# -----------------------------
# Navigation
# -----------------------------
def shift(day: date, view: str, step: int) -> date:
    """Move by step months (month view) or weeks (week view)."""
    if view == "week":
        return day + timedelta(weeks=step)
    year, month = divmod(day.year * 12 + day.month - 1 + step, 12)
    last = calendar.monthrange(year, month + 1)[1]
    return date(year, month + 1, min(day.day, last))


def view_title(day: date, view: str) -> str:
    if view != "week":
        return f"{MONTH_NAMES[day.month - 1]} {day.year}"
    week = get_week_days(day)
    start, end = week[0], week[-1]
    if start.month == end.month:
        return f"{MONTH_NAMES[start.month - 1]} {start.day}-{end.day}, {start.year}"
    return (
        f"{MONTH_NAMES[start.month - 1]} {start.day} - "
        f"{MONTH_NAMES[end.month - 1]} {end.day}, {start.year}"
    )
