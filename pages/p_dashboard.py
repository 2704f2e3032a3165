import streamlit as st

from core.helpers import appointment_when, format_money, render_patient_sidebar, status_label
from core.session_manager import require_role
from core.time_utils import format_date
from models import Role
from services.dashboard_service import patient_dashboard, sort_by_appointment


def main():
    gate = require_role(Role.PATIENT)
    render_patient_sidebar()

    p = gate.get_patient()
    if not p:
        st.error("Patient record not found.")
        return

    st.title(f"Welcome, {p.name}")

    incidents = gate.patient_incidents()
    stats = patient_dashboard(incidents)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total Appointments", stats.total_appointments)
    c2.metric("Upcoming", len(stats.upcoming))
    c3.metric("Completed", stats.completed)
    c4.metric("Total Spent", format_money(stats.total_cost))

    if stats.next_appointment:
        st.info(f"Next appointment: **{stats.next_appointment.title}** on {appointment_when(stats.next_appointment)}")

    st.subheader("Your Profile")
    st.write(f"**Date of Birth:** {format_date(p.dob)}")
    st.write(f"**Contact:** {p.contact} • {p.email}")
    st.write(f"**Address:** {p.address}")
    st.write(f"**Emergency Contact:** {p.emergency_contact}")
    st.write(f"**Health Info:** {p.health_info or '-'}")
    st.write(f"**Allergies:** {p.allergies or '-'}")
    st.write(f"**Medications:** {p.medications or '-'}")

    st.write("---")
    st.subheader("Recent Appointments")

    if not incidents:
        st.info("You have no appointments yet.")
        return

    for a in sort_by_appointment(incidents, descending=True)[:5]:
        st.write(f"**{a.title}** · {appointment_when(a)} · {status_label(a.status)}")
        if a.files:
            st.caption(f"{len(a.files)} file(s) attached")


if __name__ == "__main__":
    main()
