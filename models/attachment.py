from dataclasses import dataclass
from datetime import datetime

from core.time_utils import parse_datetime


@dataclass(frozen=True)
class FileAttachment:
    id: str
    name: str
    # Inline payload: data:<mime>;base64,<bytes>
    url: str
    type: str
    size: int
    uploaded_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "type": self.type,
            "size": self.size,
            "uploadedAt": self.uploaded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileAttachment":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            url=data["url"],
            type=data.get("type") or "application/octet-stream",
            size=int(data.get("size") or 0),
            uploaded_at=parse_datetime(data["uploadedAt"]),
        )

    def __repr__(self):
        return f"<FileAttachment {self.name} ({self.size} bytes)>"
