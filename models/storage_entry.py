from sqlalchemy import Column, DateTime, String, Text

from core.database import Base
from core.time_utils import now_utc


class StorageEntry(Base):
    """One key of the local key/value store; value is a JSON document."""

    __tablename__ = "storage_entries"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    def __repr__(self):
        return f"<StorageEntry {self.key} ({len(self.value or '')} chars)>"
