# models/incident.py

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from core.time_utils import parse_datetime
from models.attachment import FileAttachment
from models.patch import UNSET, Patch


class IncidentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class Incident:
    id: str

    # Link to patient (reference only, the patient owns the lifecycle)
    patient_id: str

    title: str
    description: str
    comments: str
    appointment_date: datetime

    cost: float | None = None
    treatment: str | None = None
    status: IncidentStatus = IncidentStatus.SCHEDULED
    next_appointment_date: datetime | None = None
    files: tuple[FileAttachment, ...] = field(default_factory=tuple)

    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "patientId": self.patient_id,
            "title": self.title,
            "description": self.description,
            "comments": self.comments,
            "appointmentDate": self.appointment_date.isoformat(),
            "status": self.status.value,
            "files": [f.to_dict() for f in self.files],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        # Optional keys are left out when unset, as in the stored layout
        if self.cost is not None:
            data["cost"] = self.cost
        if self.treatment is not None:
            data["treatment"] = self.treatment
        if self.next_appointment_date is not None:
            data["nextAppointmentDate"] = self.next_appointment_date.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Incident":
        cost = data.get("cost")
        next_date = data.get("nextAppointmentDate")
        return cls(
            id=str(data["id"]),
            patient_id=str(data["patientId"]),
            title=data["title"],
            description=data.get("description", ""),
            comments=data.get("comments", ""),
            appointment_date=parse_datetime(data["appointmentDate"]),
            cost=float(cost) if cost is not None else None,
            treatment=data.get("treatment"),
            status=IncidentStatus(data.get("status", IncidentStatus.SCHEDULED.value)),
            next_appointment_date=parse_datetime(next_date) if next_date else None,
            files=tuple(FileAttachment.from_dict(f) for f in data.get("files") or []),
            created_at=parse_datetime(data["createdAt"]),
            updated_at=parse_datetime(data["updatedAt"]),
        )

    def __repr__(self):
        return f"<Incident {self.id} for Patient {self.patient_id} ({self.status.value})>"


@dataclass(frozen=True)
class IncidentPatch(Patch):
    """Fields an appointment edit may change. Setting an optional field to None clears it."""

    patient_id: Any = UNSET
    title: Any = UNSET
    description: Any = UNSET
    comments: Any = UNSET
    appointment_date: Any = UNSET
    cost: Any = UNSET
    treatment: Any = UNSET
    status: Any = UNSET
    next_appointment_date: Any = UNSET
    files: Any = UNSET
