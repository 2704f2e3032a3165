# models/patient.py

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from core.time_utils import parse_date, parse_datetime
from models.patch import UNSET, Patch


@dataclass(frozen=True)
class Patient:
    id: str

    # Demographics
    name: str
    dob: date
    contact: str
    email: str
    address: str
    emergency_contact: str

    # Free-text clinical notes
    health_info: str
    allergies: str
    medications: str

    created_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "dob": self.dob.isoformat(),
            "contact": self.contact,
            "email": self.email,
            "address": self.address,
            "emergencyContact": self.emergency_contact,
            "healthInfo": self.health_info,
            "allergies": self.allergies,
            "medications": self.medications,
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Patient":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            dob=parse_date(data["dob"]),
            contact=data.get("contact", ""),
            email=data.get("email", ""),
            address=data.get("address", ""),
            emergency_contact=data.get("emergencyContact", ""),
            health_info=data.get("healthInfo", ""),
            allergies=data.get("allergies", ""),
            medications=data.get("medications", ""),
            created_at=parse_datetime(data["createdAt"]),
        )

    def __repr__(self):
        return f"<Patient {self.id} - {self.name}>"


@dataclass(frozen=True)
class PatientPatch(Patch):
    """Fields an admin edit may change. id and created_at are fixed."""

    name: Any = UNSET
    dob: Any = UNSET
    contact: Any = UNSET
    email: Any = UNSET
    address: Any = UNSET
    emergency_contact: Any = UNSET
    health_info: Any = UNSET
    allergies: Any = UNSET
    medications: Any = UNSET
