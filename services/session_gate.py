"""Login state and role gating in front of the record store.

Two states: anonymous (user is None) and authenticated. Admins may read and
change everything; patients may only read records linked to their own
patient id, and asking for anyone else's yields nothing.
"""
import logging
from functools import wraps

from models import Incident, Patient, Role, User
from services.record_store import RecordStore
from services.storage_service import StorageGateway
from services.user_service import authenticate_user

logger = logging.getLogger(__name__)


class AccessDenied(PermissionError):
    pass


def admin_only(method):
    @wraps(method)
    def wrapper(self, *args, **kwargs):
        self.require_role(Role.ADMIN)
        return method(self, *args, **kwargs)

    return wrapper


class SessionGate:
    def __init__(self, gateway: StorageGateway, store: RecordStore, client_id: str | None = None):
        self.gateway = gateway
        self.store = store
        self.client_id = client_id
        self._user: User | None = None

    # -----------------------------
    # State
    # -----------------------------
    @property
    def user(self) -> User | None:
        return self._user

    @property
    def role(self) -> Role | None:
        return self._user.role if self._user else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def login(self, email: str, password: str) -> bool:
        user = authenticate_user(self.gateway, email, password)
        if user is None:
            logger.info("failed login attempt")
            return False
        self._user = user
        self.gateway.save_session(user, self.client_id)
        logger.info("user %s logged in as %s", user.id, user.role.value)
        return True

    def logout(self) -> None:
        if self._user is not None:
            logger.info("user %s logged out", self._user.id)
        self._user = None
        self.gateway.clear_session(self.client_id)

    def restore(self) -> bool:
        """Pick up a previously persisted session, if any. Sessions never expire."""
        self._user = self.gateway.load_session(self.client_id)
        return self._user is not None

    def require_role(self, role: Role | str) -> User:
        if self._user is None:
            raise AccessDenied("Please log in to access this page.")
        if self._user.role != Role(role):
            raise AccessDenied(f"Access denied. This page requires '{Role(role).value}' role.")
        return self._user

    # -----------------------------
    # Scoped reads
    # -----------------------------
    def _own_patient_id(self) -> str | None:
        self.require_authenticated()
        return None if self.is_admin else self._user.patient_id

    def require_authenticated(self) -> User:
        if self._user is None:
            raise AccessDenied("Please log in to access this page.")
        return self._user

    def _may_see(self, patient_id: str) -> bool:
        return self.is_admin or (
            self._user.patient_id is not None and patient_id == self._user.patient_id
        )

    def visible_patients(self) -> list[Patient]:
        self.require_authenticated()
        return [p for p in self.store.patients if self._may_see(p.id)]

    def visible_incidents(self) -> list[Incident]:
        self.require_authenticated()
        return [i for i in self.store.incidents if self._may_see(i.patient_id)]

    def patient_incidents(self, patient_id: str | None = None) -> list[Incident]:
        """Incidents for patient_id, defaulting to the caller's own patient."""
        own = self._own_patient_id()
        patient_id = patient_id or own
        if patient_id is None or not self._may_see(patient_id):
            return []
        return self.store.get_patient_incidents(patient_id)

    def get_patient(self, patient_id: str | None = None) -> Patient | None:
        own = self._own_patient_id()
        patient_id = patient_id or own
        if patient_id is None or not self._may_see(patient_id):
            return None
        return self.store.get_patient_by_id(patient_id)

    def get_incident(self, incident_id: str) -> Incident | None:
        self.require_authenticated()
        incident = self.store.get_incident_by_id(incident_id)
        if incident is None or not self._may_see(incident.patient_id):
            return None
        return incident

    # -----------------------------
    # Admin-only mutations
    # -----------------------------
    @admin_only
    def add_patient(self, **fields) -> Patient:
        return self.store.add_patient(**fields)

    @admin_only
    def update_patient(self, patient_id, patch) -> bool:
        return self.store.update_patient(patient_id, patch)

    @admin_only
    def delete_patient(self, patient_id) -> bool:
        return self.store.delete_patient(patient_id)

    @admin_only
    def add_incident(self, **fields) -> Incident:
        return self.store.add_incident(**fields)

    @admin_only
    def update_incident(self, incident_id, patch) -> bool:
        return self.store.update_incident(incident_id, patch)

    @admin_only
    def delete_incident(self, incident_id) -> bool:
        return self.store.delete_incident(incident_id)

    @admin_only
    def add_attachments(self, incident_id, attachments) -> bool:
        return self.store.add_attachments(incident_id, attachments)

    @admin_only
    def remove_attachment(self, incident_id, attachment_id) -> bool:
        return self.store.remove_attachment(incident_id, attachment_id)
