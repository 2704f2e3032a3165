"""Local key/value storage for the clinic's collections.

Mirrors browser local storage: each key holds one JSON document and every
write replaces the whole document. Nothing here raises on bad stored data;
an unreadable collection comes back empty.
"""
import json
import logging
from enum import Enum
from typing import Callable, Iterable

from sqlalchemy.exc import SQLAlchemyError

from core.config import STORAGE_KEY_PREFIX
from core.database import SessionLocal, get_db_context
from models import Incident, Patient, User
from models.storage_entry import StorageEntry

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    USERS = "users"
    PATIENTS = "patients"
    INCIDENTS = "incidents"


SESSION_KEY = "user"


class StorageGateway:
    def __init__(self, session_factory=SessionLocal, prefix: str = STORAGE_KEY_PREFIX):
        self._session_factory = session_factory
        self.prefix = prefix

    def key_for(self, name: str) -> str:
        return f"{self.prefix}{name}"

    # -----------------------------
    # Raw key/value access
    # -----------------------------
    def get_item(self, key: str) -> str | None:
        try:
            with get_db_context(self._session_factory) as db:
                entry = db.get(StorageEntry, key)
                return entry.value if entry else None
        except SQLAlchemyError:
            logger.exception("could not read storage key %s", key)
            return None

    def set_item(self, key: str, value: str) -> bool:
        try:
            with get_db_context(self._session_factory) as db:
                entry = db.get(StorageEntry, key)
                if entry is None:
                    db.add(StorageEntry(key=key, value=value))
                else:
                    entry.value = value
                db.commit()
            return True
        except SQLAlchemyError:
            logger.exception("could not write storage key %s", key)
            return False

    def remove_item(self, key: str) -> bool:
        try:
            with get_db_context(self._session_factory) as db:
                entry = db.get(StorageEntry, key)
                if entry is not None:
                    db.delete(entry)
                    db.commit()
            return True
        except SQLAlchemyError:
            logger.exception("could not remove storage key %s", key)
            return False

    def has_item(self, key: str) -> bool:
        return self.get_item(key) is not None

    def keys(self, startswith: str = "") -> list[str]:
        prefix = self.key_for(startswith)
        try:
            with get_db_context(self._session_factory) as db:
                rows = db.query(StorageEntry.key).all()
                return sorted(k for (k,) in rows if k.startswith(prefix))
        except SQLAlchemyError:
            logger.exception("could not list storage keys")
            return []

    # -----------------------------
    # Whole-collection access
    # -----------------------------
    def _read_json(self, key: str):
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("stored value under %s is not valid JSON; ignoring it", key)
            return None

    def load(self, collection: Collection) -> list[dict]:
        key = self.key_for(collection.value)
        data = self._read_json(key)
        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            logger.warning("stored value under %s is not a list of records; ignoring it", key)
            return []
        return data

    def save(self, collection: Collection, records: Iterable[dict]) -> bool:
        return self.set_item(self.key_for(collection.value), json.dumps(list(records)))

    def _load_records(self, collection: Collection, parse: Callable[[dict], object]) -> list:
        raw = self.load(collection)
        try:
            return [parse(r) for r in raw]
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("malformed record in %s; treating collection as empty", collection.value)
            return []

    def load_users(self) -> list[User]:
        return self._load_records(Collection.USERS, User.from_dict)

    def load_patients(self) -> list[Patient]:
        return self._load_records(Collection.PATIENTS, Patient.from_dict)

    def load_incidents(self) -> list[Incident]:
        return self._load_records(Collection.INCIDENTS, Incident.from_dict)

    def save_users(self, users: Iterable[User]) -> bool:
        return self.save(Collection.USERS, (u.to_dict() for u in users))

    def save_patients(self, patients: Iterable[Patient]) -> bool:
        return self.save(Collection.PATIENTS, (p.to_dict() for p in patients))

    def save_incidents(self, incidents: Iterable[Incident]) -> bool:
        return self.save(Collection.INCIDENTS, (i.to_dict() for i in incidents))

    # -----------------------------
    # Current session record
    # -----------------------------
    def session_key(self, client_id: str | None = None) -> str:
        """Key of the session record; each browser client gets its own."""
        name = f"{SESSION_KEY}_{client_id}" if client_id else SESSION_KEY
        return self.key_for(name)

    def load_session(self, client_id: str | None = None) -> User | None:
        key = self.session_key(client_id)
        data = self._read_json(key)
        if data is None:
            return None
        try:
            return User.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("stored session under %s is malformed; ignoring it", key)
            return None

    def save_session(self, user: User | None, client_id: str | None = None) -> bool:
        if user is None:
            return self.clear_session(client_id)
        return self.set_item(self.session_key(client_id), json.dumps(user.to_dict()))

    def clear_session(self, client_id: str | None = None) -> bool:
        return self.remove_item(self.session_key(client_id))
