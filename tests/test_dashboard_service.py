"""
Tests for the derived dashboard figures and appointment lists.
"""
from datetime import timedelta

import pytest

from models import IncidentStatus
from services import dashboard_service as ds
from services.attachment_service import create_file_attachment
from tests.factories import T0, make_incident

COMPLETED = IncidentStatus.COMPLETED
SCHEDULED = IncidentStatus.SCHEDULED
CANCELLED = IncidentStatus.CANCELLED


@pytest.fixture
def scenario():
    return [
        make_incident("a", status=COMPLETED, cost=80),
        make_incident("b", status=COMPLETED, cost=120),
        make_incident("c", status=SCHEDULED),
    ]


# ============================================================================
# Aggregates
# ============================================================================

def test_revenue_and_completion_rate(scenario):
    assert ds.total_revenue(scenario) == 200
    assert ds.completion_rate(scenario) == pytest.approx(2 / 3)
    assert round(ds.completion_rate(scenario) * 100, 1) == 66.7


def test_missing_cost_counts_as_zero():
    rows = [make_incident("a", status=COMPLETED), make_incident("b", status=COMPLETED, cost=40)]

    assert ds.total_revenue(rows) == 40
    assert ds.average_treatment_cost(rows) == 20


def test_revenue_ignores_non_completed():
    rows = [make_incident("a", status=CANCELLED, cost=500), make_incident("b", status=SCHEDULED, cost=70)]

    assert ds.total_revenue(rows) == 0


def test_empty_snapshot_does_not_divide_by_zero():
    assert ds.completion_rate([]) == 0.0
    assert ds.average_treatment_cost([]) == 0.0


def test_status_counts_cover_every_status(scenario):
    counts = ds.status_counts(scenario)

    assert counts == {
        IncidentStatus.SCHEDULED: 1,
        IncidentStatus.IN_PROGRESS: 0,
        IncidentStatus.COMPLETED: 2,
        IncidentStatus.CANCELLED: 0,
    }


def test_active_patient_count():
    rows = [make_incident("a", "p1"), make_incident("b", "p1"), make_incident("c", "p2")]

    assert ds.active_patient_count(rows) == 2
    assert ds.active_patient_count([]) == 0


# ============================================================================
# Temporal filters
# ============================================================================

def test_upcoming_and_past_depend_on_now():
    rows = [make_incident("old", when=T0 - timedelta(days=1)), make_incident("new", when=T0 + timedelta(days=1))]

    assert [i.id for i in ds.upcoming(rows, now=T0)] == ["new"]
    assert [i.id for i in ds.past(rows, now=T0)] == ["old"]
    # Same snapshot, later clock
    assert ds.upcoming(rows, now=T0 + timedelta(days=2)) == []


def test_todays_uses_calendar_day():
    rows = [
        make_incident("morning", when=T0.replace(hour=0, minute=5)),
        make_incident("night", when=T0.replace(hour=23, minute=55)),
        make_incident("tomorrow", when=T0 + timedelta(days=1)),
    ]

    assert [i.id for i in ds.todays(rows, now=T0)] == ["morning", "night"]


def test_upcoming_appointments_sorted_and_limited():
    rows = [make_incident(str(n), when=T0 + timedelta(days=12 - n)) for n in range(12)]

    result = ds.upcoming_appointments(rows, limit=10, now=T0)

    assert len(result) == 10
    assert [i.appointment_date for i in result] == sorted(i.appointment_date for i in result)
    assert result[0].id == "11"


def test_upcoming_count_by_patient():
    rows = [
        make_incident("a", "p1", when=T0 + timedelta(days=1)),
        make_incident("b", "p1", when=T0 - timedelta(days=1)),
        make_incident("c", "p2", when=T0 + timedelta(days=3)),
    ]

    counts = ds.upcoming_count_by_patient(rows, now=T0)

    assert counts["p1"] == 1
    assert counts["p2"] == 1
    assert counts["p3"] == 0


# ============================================================================
# Sorting and views
# ============================================================================

def test_sort_is_stable_for_equal_times():
    rows = [make_incident("x"), make_incident("y", when=T0 - timedelta(hours=1)), make_incident("z")]

    assert [i.id for i in ds.sort_by_appointment(rows)] == ["y", "x", "z"]
    assert [i.id for i in ds.sort_by_appointment(rows, descending=True)] == ["x", "z", "y"]


def test_filter_appointments_views():
    rows = [
        make_incident("past-done", when=T0 - timedelta(days=2), status=COMPLETED),
        make_incident("soon", when=T0 + timedelta(days=1)),
        make_incident("later", when=T0 + timedelta(days=5)),
        make_incident("soon-cancelled", when=T0 + timedelta(days=2), status=CANCELLED),
    ]

    def ids(view):
        return [i.id for i in ds.filter_appointments(rows, view, now=T0)]

    assert ids("all") == ["later", "soon-cancelled", "soon", "past-done"]
    assert ids("upcoming") == ["later", "soon"]
    assert ids("completed") == ["past-done"]
    assert ids("cancelled") == ["soon-cancelled"]


# ============================================================================
# Summaries and records
# ============================================================================

def test_admin_dashboard(scenario):
    stats = ds.admin_dashboard(["p1", "p2"], scenario, now=T0 - timedelta(days=1))

    assert stats.total_patients == 2
    assert stats.total_appointments == 3
    assert stats.total_revenue == 200
    assert stats.average_treatment_cost == 100
    assert stats.active_patients == 1
    assert len(stats.upcoming_appointments) == 3
    assert stats.todays_appointments == []


def test_patient_dashboard(scenario):
    later = make_incident("d", when=T0 + timedelta(days=7))
    stats = ds.patient_dashboard(scenario + [later], now=T0 + timedelta(hours=1))

    assert stats.total_appointments == 4
    assert stats.completed == 2
    assert stats.total_cost == 200
    assert stats.next_appointment == later


def test_treatment_history_and_files():
    attachment = create_file_attachment("report.pdf", b"%PDF", clock=lambda: T0)
    rows = [
        make_incident("with-file", status=COMPLETED, files=[attachment]),
        make_incident("no-file", status=COMPLETED),
        make_incident("open-with-file", status=SCHEDULED, files=[attachment]),
    ]

    assert [i.id for i in ds.treatment_history(rows)] == ["with-file"]

    files = ds.collect_files(rows)
    assert [f.appointment_id for f in files] == ["with-file", "open-with-file"]
    assert files[0].attachment == attachment
    assert files[0].appointment_title == "Visit with-file"
