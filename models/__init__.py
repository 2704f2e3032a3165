from .attachment import FileAttachment
from .incident import Incident, IncidentPatch, IncidentStatus
from .patch import UNSET
from .patient import Patient, PatientPatch
from .user import Role, User

__all__ = [
    "FileAttachment",
    "Incident",
    "IncidentPatch",
    "IncidentStatus",
    "Patient",
    "PatientPatch",
    "Role",
    "UNSET",
    "User",
]
