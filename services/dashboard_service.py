"""Filtered lists and aggregate figures derived from an incident snapshot.

Nothing here mutates its input. Functions that depend on "now" take it as an
optional argument and otherwise read the clock at call time.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence

from core.time_utils import is_today, is_upcoming
from models import FileAttachment, Incident, IncidentStatus, Patient

APPOINTMENT_VIEWS = ("all", "upcoming", "completed", "cancelled")


# -----------------------------
# Filtering and sorting
# -----------------------------
def filter_by_status(incidents: Iterable[Incident], *statuses: IncidentStatus) -> list[Incident]:
    wanted = {IncidentStatus(s) for s in statuses}
    return [i for i in incidents if i.status in wanted]


def upcoming(incidents: Iterable[Incident], now: datetime | None = None) -> list[Incident]:
    return [i for i in incidents if is_upcoming(i.appointment_date, now)]


def past(incidents: Iterable[Incident], now: datetime | None = None) -> list[Incident]:
    return [i for i in incidents if not is_upcoming(i.appointment_date, now)]


def todays(incidents: Iterable[Incident], now: datetime | None = None) -> list[Incident]:
    return [i for i in incidents if is_today(i.appointment_date, now)]


def sort_by_appointment(incidents: Iterable[Incident], descending: bool = False) -> list[Incident]:
    """Order by appointment time; equal times keep their original order."""
    return sorted(incidents, key=lambda i: i.appointment_date, reverse=descending)


def filter_appointments(
    incidents: Iterable[Incident], view: str = "all", now: datetime | None = None
) -> list[Incident]:
    """Appointment management list: newest first, narrowed by view."""
    if view == "upcoming":
        rows = [
            i for i in incidents
            if is_upcoming(i.appointment_date, now) and i.status != IncidentStatus.CANCELLED
        ]
    elif view == "completed":
        rows = filter_by_status(incidents, IncidentStatus.COMPLETED)
    elif view == "cancelled":
        rows = filter_by_status(incidents, IncidentStatus.CANCELLED)
    else:
        rows = list(incidents)
    return sort_by_appointment(rows, descending=True)


def upcoming_appointments(
    incidents: Iterable[Incident], limit: int | None = 10, now: datetime | None = None
) -> list[Incident]:
    rows = sort_by_appointment(upcoming(incidents, now))
    return rows if limit is None else rows[:limit]


def past_appointments(incidents: Iterable[Incident], now: datetime | None = None) -> list[Incident]:
    return sort_by_appointment(past(incidents, now), descending=True)


def upcoming_count_by_patient(
    incidents: Iterable[Incident], now: datetime | None = None
) -> Counter:
    return Counter(i.patient_id for i in upcoming(incidents, now))


# -----------------------------
# Aggregates
# -----------------------------
def total_revenue(incidents: Iterable[Incident]) -> float:
    """Sum of cost over completed incidents; a missing cost counts as 0."""
    return sum(i.cost or 0 for i in filter_by_status(incidents, IncidentStatus.COMPLETED))


def average_treatment_cost(incidents: Sequence[Incident]) -> float:
    completed = len(filter_by_status(incidents, IncidentStatus.COMPLETED))
    return total_revenue(incidents) / max(completed, 1)


def completion_rate(incidents: Sequence[Incident]) -> float:
    """Completed share of all incidents, 0.0 for an empty list."""
    completed = len(filter_by_status(incidents, IncidentStatus.COMPLETED))
    return completed / max(len(incidents), 1)


def status_counts(incidents: Iterable[Incident]) -> dict[IncidentStatus, int]:
    counts = Counter(i.status for i in incidents)
    return {status: counts.get(status, 0) for status in IncidentStatus}


def active_patient_count(incidents: Iterable[Incident]) -> int:
    return len({i.patient_id for i in incidents})


@dataclass
class DashboardStats:
    total_patients: int
    total_appointments: int
    todays_appointments: list[Incident]
    upcoming_appointments: list[Incident]
    total_revenue: float
    average_treatment_cost: float
    completion_rate: float
    active_patients: int
    status_counts: dict[IncidentStatus, int] = field(default_factory=dict)


def admin_dashboard(
    patients: Sequence[Patient], incidents: Sequence[Incident], now: datetime | None = None
) -> DashboardStats:
    return DashboardStats(
        total_patients=len(patients),
        total_appointments=len(incidents),
        todays_appointments=todays(incidents, now),
        upcoming_appointments=upcoming_appointments(incidents, 10, now),
        total_revenue=total_revenue(incidents),
        average_treatment_cost=average_treatment_cost(incidents),
        completion_rate=completion_rate(incidents),
        active_patients=active_patient_count(incidents),
        status_counts=status_counts(incidents),
    )


@dataclass
class PatientStats:
    total_appointments: int
    upcoming: list[Incident]
    completed: int
    total_cost: float
    next_appointment: Incident | None


def patient_dashboard(incidents: Sequence[Incident], now: datetime | None = None) -> PatientStats:
    coming = upcoming_appointments(incidents, None, now)
    return PatientStats(
        total_appointments=len(incidents),
        upcoming=coming,
        completed=len(filter_by_status(incidents, IncidentStatus.COMPLETED)),
        total_cost=total_revenue(incidents),
        next_appointment=coming[0] if coming else None,
    )


# -----------------------------
# Medical records
# -----------------------------
def treatment_history(incidents: Iterable[Incident]) -> list[Incident]:
    """Completed incidents that carry attachments, newest first."""
    rows = [i for i in filter_by_status(incidents, IncidentStatus.COMPLETED) if i.files]
    return sort_by_appointment(rows, descending=True)


@dataclass(frozen=True)
class AttachedFile:
    attachment: FileAttachment
    appointment_id: str
    appointment_title: str
    appointment_date: datetime


def collect_files(incidents: Iterable[Incident]) -> list[AttachedFile]:
    return [
        AttachedFile(f, i.id, i.title, i.appointment_date)
        for i in incidents
        for f in i.files
    ]
