"""In-memory patients and incidents with write-through persistence.

Every mutation swaps in a new tuple and immediately saves the whole affected
collection through the storage gateway. Lookups of unknown ids are not errors:
updates and deletes return False, getters return None or an empty list.
"""
import logging
import uuid
from typing import Callable, Iterable

from core.config import MAX_ATTACHMENTS
from core.time_utils import now_utc, parse_date, parse_datetime
from models import FileAttachment, Incident, IncidentPatch, IncidentStatus, Patient, PatientPatch
from services.storage_service import StorageGateway
from services.validation_service import (
    ValidationError,
    required_incident_errors,
    required_patient_errors,
)

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def _parsed(parse: Callable, value, field: str, message: str):
    """Run parse on value; failures become a ValidationError keyed by field."""
    try:
        return parse(value)
    except (TypeError, ValueError):
        raise ValidationError({field: message}) from None


class RecordStore:
    def __init__(
        self,
        gateway: StorageGateway,
        patients: Iterable[Patient] = (),
        incidents: Iterable[Incident] = (),
        *,
        clock: Callable = now_utc,
        max_attachments: int = MAX_ATTACHMENTS,
    ):
        self.gateway = gateway
        self.clock = clock
        self.max_attachments = max_attachments
        self._patients = tuple(patients)
        self._incidents = tuple(incidents)

    @classmethod
    def from_storage(cls, gateway: StorageGateway, **kwargs) -> "RecordStore":
        return cls(gateway, gateway.load_patients(), gateway.load_incidents(), **kwargs)

    def reload(self) -> None:
        self._patients = tuple(self.gateway.load_patients())
        self._incidents = tuple(self.gateway.load_incidents())

    @property
    def patients(self) -> tuple[Patient, ...]:
        return self._patients

    @property
    def incidents(self) -> tuple[Incident, ...]:
        return self._incidents

    # -----------------------------
    # Write-through
    # -----------------------------
    def _set_patients(self, patients) -> bool:
        self._patients = tuple(patients)
        saved = self.gateway.save_patients(self._patients)
        if not saved:
            logger.warning("patients changed in memory but were not persisted")
        return saved

    def _set_incidents(self, incidents) -> bool:
        self._incidents = tuple(incidents)
        saved = self.gateway.save_incidents(self._incidents)
        if not saved:
            logger.warning("incidents changed in memory but were not persisted")
        return saved

    # -----------------------------
    # Lookups
    # -----------------------------
    def get_patient_by_id(self, patient_id: str) -> Patient | None:
        return next((p for p in self._patients if p.id == patient_id), None)

    def get_incident_by_id(self, incident_id: str) -> Incident | None:
        return next((i for i in self._incidents if i.id == incident_id), None)

    def get_patient_incidents(self, patient_id: str) -> list[Incident]:
        return [i for i in self._incidents if i.patient_id == patient_id]

    # -----------------------------
    # Patients
    # -----------------------------
    def add_patient(
        self,
        *,
        name=None,
        dob=None,
        contact=None,
        email=None,
        address=None,
        emergency_contact=None,
        health_info: str = "",
        allergies: str = "",
        medications: str = "",
    ) -> Patient:
        fields = {
            "name": name,
            "dob": dob,
            "contact": contact,
            "email": email,
            "address": address,
            "emergency_contact": emergency_contact,
        }
        errors = required_patient_errors(fields)
        if errors:
            raise ValidationError(errors)

        patient = Patient(
            id=new_id(),
            name=name,
            dob=_parsed(parse_date, dob, "dob", "Please enter a valid date of birth"),
            contact=contact,
            email=email,
            address=address,
            emergency_contact=emergency_contact,
            health_info=health_info or "",
            allergies=allergies or "",
            medications=medications or "",
            created_at=self.clock(),
        )
        self._set_patients(self._patients + (patient,))
        logger.info("added patient %s", patient.id)
        return patient

    def update_patient(self, patient_id: str, patch: PatientPatch) -> bool:
        current = self.get_patient_by_id(patient_id)
        if current is None:
            logger.debug("update_patient: no patient %s", patient_id)
            return False

        changes = patch.changes()
        errors = required_patient_errors(changes, partial=True)
        if errors:
            raise ValidationError(errors)
        if "dob" in changes:
            changes["dob"] = _parsed(
                parse_date, changes["dob"], "dob", "Please enter a valid date of birth"
            )

        updated = PatientPatch(**changes).apply(current)
        self._set_patients(updated if p.id == patient_id else p for p in self._patients)
        return True

    def delete_patient(self, patient_id: str) -> bool:
        """Remove a patient and every incident that references it."""
        if self.get_patient_by_id(patient_id) is None:
            logger.debug("delete_patient: no patient %s", patient_id)
            return False

        remaining = [i for i in self._incidents if i.patient_id != patient_id]
        removed = len(self._incidents) - len(remaining)
        self._set_patients(p for p in self._patients if p.id != patient_id)
        self._set_incidents(remaining)
        logger.info("deleted patient %s and %d incident(s)", patient_id, removed)
        return True

    # -----------------------------
    # Incidents
    # -----------------------------
    def _check_patient_ref(self, patient_id: str) -> None:
        if self.get_patient_by_id(patient_id) is None:
            raise ValidationError({"patient_id": "Please select a patient"})

    def _check_files(self, files) -> tuple[FileAttachment, ...]:
        files = tuple(files or ())
        if len(files) > self.max_attachments:
            raise ValidationError({"files": f"Maximum {self.max_attachments} files allowed"})
        return files

    @staticmethod
    def _coerce_incident_fields(changes: dict) -> dict:
        if "appointment_date" in changes:
            changes["appointment_date"] = _parsed(
                parse_datetime, changes["appointment_date"],
                "appointment_date", "Please enter a valid appointment date",
            )
        if changes.get("next_appointment_date") is not None:
            changes["next_appointment_date"] = _parsed(
                parse_datetime, changes["next_appointment_date"],
                "next_appointment_date", "Please enter a valid next appointment date",
            )
        if changes.get("cost") is not None:
            changes["cost"] = _parsed(float, changes["cost"], "cost", "Cost must be a number")
        if "status" in changes:
            changes["status"] = _parsed(
                IncidentStatus, changes["status"], "status", "Unknown appointment status"
            )
        return changes

    def add_incident(
        self,
        *,
        patient_id=None,
        title=None,
        description=None,
        appointment_date=None,
        comments: str = "",
        cost: float | None = None,
        treatment: str | None = None,
        status=IncidentStatus.SCHEDULED,
        next_appointment_date=None,
        files=(),
    ) -> Incident:
        fields = {
            "patient_id": patient_id,
            "title": title,
            "description": description,
            "appointment_date": appointment_date,
        }
        errors = required_incident_errors(fields)
        if errors:
            raise ValidationError(errors)
        self._check_patient_ref(patient_id)

        values = self._coerce_incident_fields(
            {
                **fields,
                "comments": comments or "",
                "cost": cost,
                "treatment": treatment,
                "status": status,
                "next_appointment_date": next_appointment_date,
            }
        )
        now = self.clock()
        incident = Incident(
            id=new_id(),
            files=self._check_files(files),
            created_at=now,
            updated_at=now,
            **values,
        )
        self._set_incidents(self._incidents + (incident,))
        logger.info("added incident %s for patient %s", incident.id, patient_id)
        return incident

    def update_incident(self, incident_id: str, patch: IncidentPatch) -> bool:
        current = self.get_incident_by_id(incident_id)
        if current is None:
            logger.debug("update_incident: no incident %s", incident_id)
            return False

        changes = patch.changes()
        errors = required_incident_errors(changes, partial=True)
        if errors:
            raise ValidationError(errors)
        if "patient_id" in changes:
            self._check_patient_ref(changes["patient_id"])
        if "files" in changes:
            changes["files"] = self._check_files(changes["files"])

        updated = IncidentPatch(**self._coerce_incident_fields(changes)).apply(
            current, updated_at=self.clock()
        )
        self._set_incidents(updated if i.id == incident_id else i for i in self._incidents)
        return True

    def delete_incident(self, incident_id: str) -> bool:
        if self.get_incident_by_id(incident_id) is None:
            logger.debug("delete_incident: no incident %s", incident_id)
            return False
        self._set_incidents(i for i in self._incidents if i.id != incident_id)
        return True

    # -----------------------------
    # Attachments
    # -----------------------------
    def add_attachments(self, incident_id: str, attachments: Iterable[FileAttachment]) -> bool:
        current = self.get_incident_by_id(incident_id)
        if current is None:
            return False
        return self.update_incident(
            incident_id, IncidentPatch(files=current.files + tuple(attachments))
        )

    def remove_attachment(self, incident_id: str, attachment_id: str) -> bool:
        current = self.get_incident_by_id(incident_id)
        if current is None:
            return False
        kept = tuple(f for f in current.files if f.id != attachment_id)
        if len(kept) == len(current.files):
            return False
        return self.update_incident(incident_id, IncidentPatch(files=kept))
