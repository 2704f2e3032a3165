"""
Tests for the record store: write-through persistence, cascade delete,
timestamps, patches and explicit not-found results.
"""
import pytest

from models import IncidentPatch, IncidentStatus, PatientPatch
from services.attachment_service import create_file_attachment
from services.record_store import RecordStore
from services.validation_service import ValidationError
from tests.factories import T0


@pytest.fixture
def patient(store, patient_fields):
    return store.add_patient(**patient_fields)


@pytest.fixture
def incident(store, patient):
    return store.add_incident(
        patient_id=patient.id,
        title="Cleaning",
        description="Routine cleaning",
        appointment_date="2025-07-01T10:00:00Z",
    )


def reloaded(store):
    return RecordStore.from_storage(store.gateway)


# ============================================================================
# Patients
# ============================================================================

def test_add_patient_assigns_id_and_created_at(store, patient):
    assert patient.id
    assert patient.created_at == T0
    assert store.patients == (patient,)
    assert store.gateway.load_patients() == [patient]


def test_add_patient_ids_are_unique(store, patient_fields):
    a = store.add_patient(**patient_fields)
    b = store.add_patient(**patient_fields)

    assert a.id != b.id


def test_add_patient_requires_fields(store):
    with pytest.raises(ValidationError) as exc:
        store.add_patient(name="  ", dob="1990-01-01")

    assert {"name", "contact", "email", "address", "emergency_contact"} <= set(exc.value.errors)
    assert "dob" not in exc.value.errors
    assert store.patients == ()
    assert not store.gateway.has_item(store.gateway.key_for("patients"))


def test_update_patient_merges_only_set_fields(store, patient):
    assert store.update_patient(patient.id, PatientPatch(allergies="Penicillin")) is True

    updated = store.get_patient_by_id(patient.id)
    assert updated.allergies == "Penicillin"
    assert updated.name == patient.name
    assert updated.created_at == patient.created_at
    assert store.gateway.load_patients() == [updated]


def test_update_patient_rejects_blank_required_field(store, patient):
    with pytest.raises(ValidationError):
        store.update_patient(patient.id, PatientPatch(name=""))

    assert store.get_patient_by_id(patient.id) == patient


def test_update_patient_checks_only_fields_in_patch(store, patient):
    patch = PatientPatch(address="2 Oak Ave", contact=" ")

    with pytest.raises(ValidationError) as exc:
        store.update_patient(patient.id, patch)

    assert set(exc.value.errors) == {"contact"}


def test_add_patient_rejects_unparseable_dob(store, patient_fields):
    with pytest.raises(ValidationError) as exc:
        store.add_patient(**{**patient_fields, "dob": "not-a-date"})

    assert set(exc.value.errors) == {"dob"}
    assert store.patients == ()


def test_update_patient_rejects_unparseable_dob(store, patient):
    with pytest.raises(ValidationError) as exc:
        store.update_patient(patient.id, PatientPatch(dob="31/02/1990"))

    assert set(exc.value.errors) == {"dob"}
    assert store.get_patient_by_id(patient.id) == patient


def test_update_unknown_patient_is_noop(store, patient):
    assert store.update_patient("missing", PatientPatch(name="X")) is False
    assert store.patients == (patient,)


def test_get_patient_by_id_absent(store):
    assert store.get_patient_by_id("missing") is None


# ============================================================================
# Cascade
# ============================================================================

def test_delete_patient_cascades_to_incidents(store, patient_fields):
    p1 = store.add_patient(**patient_fields)
    p2 = store.add_patient(**{**patient_fields, "name": "Other"})
    for n in range(3):
        store.add_incident(patient_id=p1.id, title=f"T{n}", description="d", appointment_date=T0)
    keep = store.add_incident(patient_id=p2.id, title="Keep", description="d", appointment_date=T0)

    assert store.delete_patient(p1.id) is True

    assert store.get_patient_incidents(p1.id) == []
    assert store.incidents == (keep,)
    assert store.gateway.load_incidents() == [keep]
    assert store.gateway.load_patients() == [p2]


def test_delete_unknown_patient_is_noop(store, incident):
    assert store.delete_patient("missing") is False
    assert store.incidents == (incident,)


# ============================================================================
# Incidents
# ============================================================================

def test_add_incident_stamps_both_timestamps(store, incident):
    assert incident.created_at == incident.updated_at == T0
    assert incident.status == IncidentStatus.SCHEDULED
    assert incident.files == ()


def test_add_incident_requires_existing_patient(store, patient):
    with pytest.raises(ValidationError) as exc:
        store.add_incident(patient_id="ghost", title="t", description="d", appointment_date=T0)

    assert set(exc.value.errors) == {"patient_id"}
    assert store.incidents == ()


def test_add_incident_rejects_non_numeric_cost(store, patient):
    with pytest.raises(ValidationError) as exc:
        store.add_incident(patient_id=patient.id, title="t", description="d", appointment_date=T0, cost="lots")

    assert "cost" in exc.value.errors


def test_update_incident_refreshes_updated_at(store, incident, clock):
    clock.advance(hours=3)

    assert store.update_incident(incident.id, IncidentPatch(status="Completed", cost=120)) is True

    updated = store.get_incident_by_id(incident.id)
    assert updated.updated_at == clock.now
    assert updated.updated_at >= incident.updated_at
    assert updated.created_at == incident.created_at
    assert updated.status == IncidentStatus.COMPLETED
    assert updated.cost == 120.0


def test_update_incident_with_empty_patch_still_touches(store, incident, clock):
    clock.advance(minutes=5)

    store.update_incident(incident.id, IncidentPatch())

    assert store.get_incident_by_id(incident.id).updated_at == clock.now


def test_patch_none_clears_optional_field(store, incident):
    store.update_incident(incident.id, IncidentPatch(cost=50, treatment="Scaling"))
    store.update_incident(incident.id, IncidentPatch(cost=None))

    updated = store.get_incident_by_id(incident.id)
    assert updated.cost is None
    assert updated.treatment == "Scaling"
    assert "cost" not in updated.to_dict()


@pytest.mark.parametrize(
    "field, value",
    [
        ("appointment_date", "tomorrow"),
        ("appointment_date", 1751364000000),
        ("next_appointment_date", "2025-13-01"),
        ("status", "Done"),
    ],
)
def test_update_incident_rejects_malformed_values(store, incident, field, value):
    with pytest.raises(ValidationError) as exc:
        store.update_incident(incident.id, IncidentPatch(**{field: value}))

    assert set(exc.value.errors) == {field}
    assert store.get_incident_by_id(incident.id) == incident


def test_add_incident_rejects_unknown_status(store, patient):
    with pytest.raises(ValidationError) as exc:
        store.add_incident(
            patient_id=patient.id, title="t", description="d", appointment_date=T0, status="Done"
        )

    assert set(exc.value.errors) == {"status"}
    assert store.incidents == ()


def test_status_only_patch_keeps_other_fields(store, incident):
    assert store.update_incident(incident.id, IncidentPatch(status="Cancelled")) is True

    updated = store.get_incident_by_id(incident.id)
    assert updated.status == IncidentStatus.CANCELLED
    assert updated.title == incident.title
    assert updated.appointment_date == incident.appointment_date


def test_update_incident_cannot_point_at_missing_patient(store, incident):
    with pytest.raises(ValidationError):
        store.update_incident(incident.id, IncidentPatch(patient_id="ghost"))


def test_update_unknown_incident_is_noop(store, incident):
    assert store.update_incident("missing", IncidentPatch(title="x")) is False
    assert store.incidents == (incident,)


def test_delete_incident(store, incident):
    assert store.delete_incident(incident.id) is True
    assert store.delete_incident(incident.id) is False
    assert store.gateway.load_incidents() == []


def test_get_patient_incidents_keeps_insertion_order(store, patient):
    ids = [
        store.add_incident(patient_id=patient.id, title=t, description="d", appointment_date=T0).id
        for t in ("a", "b", "c")
    ]

    assert [i.id for i in store.get_patient_incidents(patient.id)] == ids
    assert store.get_patient_incidents("nobody") == []


# ============================================================================
# Attachments
# ============================================================================

def _file(n):
    return create_file_attachment(f"xray{n}.png", b"\x89PNG" + bytes([n]), clock=lambda: T0)


def test_add_and_remove_attachment(store, incident):
    f1, f2 = _file(1), _file(2)

    assert store.add_attachments(incident.id, [f1, f2]) is True
    assert store.get_incident_by_id(incident.id).files == (f1, f2)

    assert store.remove_attachment(incident.id, f1.id) is True
    assert store.get_incident_by_id(incident.id).files == (f2,)
    assert store.remove_attachment(incident.id, f1.id) is False
    assert store.remove_attachment("missing", f2.id) is False


def test_attachment_limit(store, incident):
    store.add_attachments(incident.id, [_file(n) for n in range(5)])

    with pytest.raises(ValidationError) as exc:
        store.add_attachments(incident.id, [_file(9)])

    assert "files" in exc.value.errors
    assert len(store.get_incident_by_id(incident.id).files) == 5


# ============================================================================
# Write-through round trip
# ============================================================================

def test_reload_reproduces_in_memory_state(store, patient_fields, clock):
    a = store.add_patient(**patient_fields)
    b = store.add_patient(**{**patient_fields, "name": "B"})
    i1 = store.add_incident(
        patient_id=a.id,
        title="Filling",
        description="d",
        appointment_date="2025-07-02T09:30:00",
        cost=99.5,
        next_appointment_date="2025-10-02T09:30:00Z",
        files=[_file(1)],
    )
    store.add_incident(patient_id=b.id, title="Check", description="d", appointment_date=T0)
    clock.advance(days=1)
    store.update_incident(i1.id, IncidentPatch(status=IncidentStatus.IN_PROGRESS))
    store.update_patient(b.id, PatientPatch(medications="Ibuprofen"))
    store.delete_patient(a.id)

    fresh = reloaded(store)

    assert fresh.patients == store.patients
    assert fresh.incidents == store.incidents


def test_seeded_store_round_trips(seeded_store):
    fresh = reloaded(seeded_store)

    assert fresh.patients == seeded_store.patients
    assert fresh.incidents == seeded_store.incidents
    assert len(seeded_store.incidents) == 3


def test_reload_picks_up_external_writes(store, patient_fields):
    other = RecordStore(store.gateway)
    other.add_patient(**patient_fields)

    assert store.patients == ()
    store.reload()
    assert store.patients == other.patients
