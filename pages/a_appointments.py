from datetime import datetime, time

import streamlit as st

from core.config import MAX_ATTACHMENTS
from core.helpers import appointment_when, format_money, render_admin_sidebar, render_attachment, show_errors, status_label
from core.session_manager import require_role
from core.time_utils import to_clinic_tz
from models import IncidentPatch, IncidentStatus, Role
from services.attachment_service import ACCEPTED_TYPES, attachment_from_upload
from services.dashboard_service import APPOINTMENT_VIEWS, filter_appointments
from services.validation_service import ValidationError, parse_cost, validate_incident_form

# Page config is set globally in app.py

gate = require_role(Role.ADMIN)
render_admin_sidebar()

st.title("Appointment Management")
st.caption("Schedule treatments and record their outcome")

patients = gate.visible_patients()
patient_names = {p.id: p.name for p in patients}

if not patients:
    st.info("Add a patient before scheduling appointments.")
    st.stop()


def _combine(day, at):
    if day is None:
        return None
    return datetime.combine(day, at or time(9, 0))


def incident_form(key: str, incident=None):
    """Render the appointment fields; returns the entered values or None if not submitted."""
    local = to_clinic_tz(incident.appointment_date) if incident else None
    next_local = (
        to_clinic_tz(incident.next_appointment_date)
        if incident and incident.next_appointment_date
        else None
    )
    ids = list(patient_names)
    statuses = list(IncidentStatus)

    with st.form(key):
        patient_id = st.selectbox(
            "Patient",
            ids,
            index=ids.index(incident.patient_id) if incident and incident.patient_id in ids else 0,
            format_func=lambda pid: patient_names[pid],
        )
        title = st.text_input("Title", value=incident.title if incident else "")
        description = st.text_area("Description", value=incident.description if incident else "")
        comments = st.text_area("Comments", value=incident.comments if incident else "")
        c1, c2 = st.columns(2)
        with c1:
            day = st.date_input("Appointment Date", value=local.date() if local else None)
            cost = st.text_input(
                "Cost", value="" if not incident or incident.cost is None else f"{incident.cost:g}"
            )
            next_day = st.date_input("Next Appointment (optional)", value=next_local.date() if next_local else None)
        with c2:
            at = st.time_input("Appointment Time", value=local.time() if local else time(9, 0))
            status = st.selectbox(
                "Status",
                statuses,
                index=statuses.index(incident.status) if incident else 0,
                format_func=lambda s: s.value,
            )
            next_at = st.time_input("Next Appointment Time", value=next_local.time() if next_local else time(9, 0))
        treatment = st.text_area("Treatment", value=(incident.treatment or "") if incident else "")
        uploads = st.file_uploader("Attach files", type=ACCEPTED_TYPES, accept_multiple_files=True)
        submitted = st.form_submit_button("Save Appointment" if incident else "Schedule Appointment")

    if not submitted:
        return None
    return {
        "patient_id": patient_id,
        "title": title.strip(),
        "description": description.strip(),
        "comments": comments,
        "appointment_date": _combine(day, at),
        "cost": cost,
        "status": status,
        "treatment": treatment.strip() or None,
        "next_appointment_date": _combine(next_day, next_at),
        "uploads": uploads or [],
    }


def save(values, incident=None):
    errors = validate_incident_form(values)
    if errors:
        show_errors(errors)
        return
    existing = len(incident.files) if incident else 0
    uploads = values.pop("uploads")
    if existing + len(uploads) > MAX_ATTACHMENTS:
        st.error(f"Maximum {MAX_ATTACHMENTS} files allowed")
        return
    files = (incident.files if incident else ()) + tuple(attachment_from_upload(u) for u in uploads)
    values["cost"] = parse_cost(values["cost"])
    try:
        if incident is None:
            gate.add_incident(files=files, **values)
            st.success("Appointment scheduled.")
        elif gate.update_incident(incident.id, IncidentPatch(files=files, **values)):
            st.success("Appointment updated.")
        else:
            st.error("Appointment no longer exists.")
            return
    except ValidationError as e:
        show_errors(e.errors)
        return
    st.rerun()


with st.expander("➕ Schedule Appointment", expanded=False):
    values = incident_form("new_incident_form")
    if values is not None:
        save(values)

view = st.radio(
    "Show",
    APPOINTMENT_VIEWS,
    horizontal=True,
    format_func=lambda v: v.capitalize(),
)
incidents = filter_appointments(gate.visible_incidents(), view)

if not incidents:
    st.info("No appointments found." if view == "all" else f"No {view} appointments to display")
    st.stop()

for incident in incidents:
    with st.container():
        left, right = st.columns([3, 2])
        with left:
            st.write(f"### {incident.title}")
            st.caption(patient_names.get(incident.patient_id, "Unknown Patient"))
            st.write(incident.description)
            if incident.comments:
                st.write(f"_{incident.comments}_")
        with right:
            st.write(appointment_when(incident))
            st.write(status_label(incident.status))
            if incident.cost is not None:
                st.write(f"Cost: {format_money(incident.cost)}")
            if incident.treatment:
                st.write(f"Treatment: {incident.treatment}")
            if incident.files:
                st.write(f"📎 {len(incident.files)} files")

        with st.expander("✏️ Edit Appointment", expanded=False):
            values = incident_form(f"edit_{incident.id}", incident)
            if values is not None:
                save(values, incident)
            for f in incident.files:
                render_attachment(f, key=f"dl_{incident.id}_{f.id}")
                if st.button("Remove file", key=f"rm_{incident.id}_{f.id}"):
                    gate.remove_attachment(incident.id, f.id)
                    st.rerun()

        if st.button("🗑️ Delete Appointment", key=f"delete_{incident.id}"):
            if gate.delete_incident(incident.id):
                st.success("Appointment deleted.")
                st.rerun()
            else:
                st.error("Failed to delete appointment.")
        st.markdown("---")
