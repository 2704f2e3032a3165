from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    PATIENT = "Patient"


@dataclass(frozen=True)
class User:
    id: str
    role: Role
    email: str
    password: str  # stored and compared as plaintext
    patient_id: str | None = None  # only for Role.PATIENT
    name: str | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "role": self.role.value,
            "email": self.email,
            "password": self.password,
        }
        if self.patient_id is not None:
            data["patientId"] = self.patient_id
        if self.name is not None:
            data["name"] = self.name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data["id"]),
            role=Role(data["role"]),
            email=data["email"],
            password=data["password"],
            patient_id=data.get("patientId"),
            name=data.get("name"),
        )

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"
