from .database import get_db_context, engine, SessionLocal, Base, init_db
from .time_utils import now_utc, is_upcoming, is_past, is_today

__all__ = [
    "get_db_context",
    "engine",
    "SessionLocal",
    "Base",
    "init_db",
    "now_utc",
    "is_upcoming",
    "is_past",
    "is_today",
]
