import streamlit as st

from core.helpers import render_admin_sidebar, show_errors
from core.session_manager import require_role
from core.time_utils import format_date
from models import PatientPatch, Role
from services.dashboard_service import upcoming_count_by_patient
from services.user_service import get_user_for_patient
from services.validation_service import ValidationError, validate_patient_form

# Page config is set globally in app.py

gate = require_role(Role.ADMIN)
render_admin_sidebar()

st.title("Patient Management")
st.caption("Manage patient information and records")


def patient_form(key: str, patient=None):
    """Render the patient fields; returns the entered values or None if not submitted."""
    with st.form(key):
        c1, c2 = st.columns(2)
        with c1:
            name = st.text_input("Full Name", value=patient.name if patient else "")
            contact = st.text_input("Contact Number", value=patient.contact if patient else "")
            address = st.text_area("Address", value=patient.address if patient else "")
        with c2:
            dob = st.date_input("Date of Birth", value=patient.dob if patient else None)
            email = st.text_input("Email", value=patient.email if patient else "")
            emergency_contact = st.text_input(
                "Emergency Contact", value=patient.emergency_contact if patient else ""
            )
        health_info = st.text_area("Health Information", value=patient.health_info if patient else "")
        allergies = st.text_input("Allergies", value=patient.allergies if patient else "")
        medications = st.text_input("Medications", value=patient.medications if patient else "")
        submitted = st.form_submit_button("Save Patient" if patient else "Add Patient")

    if not submitted:
        return None
    return {
        "name": name.strip(),
        "dob": dob,
        "contact": contact.strip(),
        "email": email.strip(),
        "address": address.strip(),
        "emergency_contact": emergency_contact.strip(),
        "health_info": health_info,
        "allergies": allergies,
        "medications": medications,
    }


with st.expander("➕ Add New Patient", expanded=False):
    values = patient_form("new_patient_form")
    if values is not None:
        errors = validate_patient_form(values)
        if errors:
            show_errors(errors)
        else:
            try:
                patient = gate.add_patient(**values)
                st.success(f"Patient {patient.name} added.")
                st.rerun()
            except ValidationError as e:
                show_errors(e.errors)

search_query = st.text_input("Search by name or email", placeholder="e.g., John")

patients = gate.visible_patients()
if search_query.strip():
    q = search_query.lower()
    patients = [p for p in patients if q in p.name.lower() or q in p.email.lower()]

if not patients:
    st.info("No patients found.")
    st.stop()

upcoming_counts = upcoming_count_by_patient(gate.visible_incidents())

for p in patients:
    with st.container():
        left, right = st.columns([3, 2])
        with left:
            st.write(f"### {p.name}")
            st.caption(f"DOB: {format_date(p.dob)}")
            st.write(f"📞 {p.contact} • ✉️ {p.email}")
            st.write(f"Emergency: {p.emergency_contact}")
        with right:
            st.write(f"Appointments: **{len(gate.patient_incidents(p.id))}**")
            st.write(f"Upcoming: **{upcoming_counts.get(p.id, 0)}**")
            portal = get_user_for_patient(gate.gateway, p.id)
            st.caption(f"Portal login: {portal.email}" if portal else "No portal login")

        with st.expander("✏️ Edit Patient Info", expanded=False):
            values = patient_form(f"edit_{p.id}", p)
            if values is not None:
                errors = validate_patient_form(values)
                if errors:
                    show_errors(errors)
                elif gate.update_patient(p.id, PatientPatch(**values)):
                    st.success("Patient info updated.")
                    st.rerun()
                else:
                    st.error("Failed to update patient.")

        with st.expander("🗑️ Delete Patient", expanded=False):
            st.warning("Deleting a patient will remove all their appointments. This cannot be undone.")
            confirm = st.text_input("Type DELETE to confirm", value="", key=f"confirm_{p.id}")
            if st.button("Delete Patient", key=f"delete_{p.id}", help="Irreversible action"):
                if confirm.strip().upper() != "DELETE":
                    st.error("Confirmation text does not match DELETE.")
                elif gate.delete_patient(p.id):
                    st.success("Patient deleted.")
                    st.rerun()
                else:
                    st.error("Failed to delete patient.")
        st.markdown("---")
