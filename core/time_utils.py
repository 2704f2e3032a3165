from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from core.config import CLINIC_TIMEZONE

CLINIC_TZ = timezone.utc if CLINIC_TIMEZONE.upper() == "UTC" else ZoneInfo(CLINIC_TIMEZONE)


def now_utc() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_datetime(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Accepts a trailing "Z". Naive values are taken to be clinic-local time,
    the way a browser reads "2025-07-01T10:00:00".
    """
    if isinstance(value, datetime):
        dt = value
    elif not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 string, got {type(value).__name__}")
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=CLINIC_TZ)
    return dt


def parse_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise TypeError(f"expected an ISO-8601 date string, got {type(value).__name__}")
    return date.fromisoformat(value.strip()[:10])


def to_clinic_tz(dt: datetime) -> datetime:
    return parse_datetime(dt).astimezone(CLINIC_TZ)


def clinic_date(dt: datetime) -> date:
    """Calendar day of dt as seen in the clinic's timezone."""
    return to_clinic_tz(dt).date()


def today(now: datetime | None = None) -> date:
    return clinic_date(now or now_utc())


# -----------------------------
# Temporal classification
# -----------------------------
def is_upcoming(dt: datetime, now: datetime | None = None) -> bool:
    return parse_datetime(dt) > (now or now_utc())


def is_past(dt: datetime, now: datetime | None = None) -> bool:
    return parse_datetime(dt) < (now or now_utc())


def is_today(dt: datetime, now: datetime | None = None) -> bool:
    return clinic_date(dt) == today(now)


# -----------------------------
# Display formatting
# -----------------------------
def format_date(value: datetime | date) -> str:
    """e.g. July 1, 2025"""
    if isinstance(value, datetime):
        value = clinic_date(value)
    return f"{value:%B} {value.day}, {value.year}"


def format_time(dt: datetime) -> str:
    """e.g. 10:00 AM"""
    return to_clinic_tz(dt).strftime("%I:%M %p")


def format_datetime(dt: datetime) -> str:
    return f"{format_date(dt)} at {format_time(dt)}"
