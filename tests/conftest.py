"""
Shared fixtures: an isolated SQLite file per test and a controllable clock.
"""
import pytest

from core.database import init_db, make_engine, make_session_factory
from services.record_store import RecordStore
from services.seed_service import ensure_default_data
from services.session_gate import SessionGate
from services.storage_service import StorageGateway
from tests.factories import T0, FakeClock


@pytest.fixture
def clock():
    return FakeClock(T0)


@pytest.fixture
def engine(tmp_path):
    eng = make_engine(f"sqlite:///{tmp_path / 'clinic.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def gateway(engine):
    return StorageGateway(make_session_factory(engine))


@pytest.fixture
def store(gateway, clock):
    return RecordStore(gateway, clock=clock)


@pytest.fixture
def seeded_gateway(gateway):
    ensure_default_data(gateway)
    return gateway


@pytest.fixture
def seeded_store(seeded_gateway, clock):
    return RecordStore.from_storage(seeded_gateway, clock=clock)


@pytest.fixture
def gate(seeded_gateway, seeded_store):
    return SessionGate(seeded_gateway, seeded_store)


@pytest.fixture
def patient_fields():
    return {
        "name": "Jane Roe",
        "dob": "1985-02-20",
        "contact": "5551234567",
        "email": "jane@example.com",
        "address": "1 Elm St",
        "emergency_contact": "5559876543",
    }
