import streamlit as st

from core.helpers import appointment_when, format_money, render_attachment, render_patient_sidebar, status_label
from core.session_manager import require_role
from core.time_utils import format_datetime
from models import Role
from services.dashboard_service import past_appointments, upcoming_appointments


def show(appointment):
    with st.container():
        st.write(f"### {appointment.title}")
        st.write(f"{appointment_when(appointment)} • {status_label(appointment.status)}")
        st.write(appointment.description)
        if appointment.comments:
            st.write(f"_{appointment.comments}_")
        if appointment.treatment:
            st.write(f"**Treatment:** {appointment.treatment}")
        if appointment.cost is not None:
            st.write(f"**Cost:** {format_money(appointment.cost)}")
        if appointment.next_appointment_date:
            st.write(f"**Next visit:** {format_datetime(appointment.next_appointment_date)}")
        if appointment.files:
            with st.expander(f"Attachments ({len(appointment.files)})"):
                for f in appointment.files:
                    render_attachment(f, key=f"dl_{appointment.id}_{f.id}")
        st.markdown("---")


def main():
    gate = require_role(Role.PATIENT)
    render_patient_sidebar()

    st.title("My Appointments")

    incidents = gate.patient_incidents()
    coming = upcoming_appointments(incidents, limit=None)
    done = past_appointments(incidents)

    st.subheader(f"Upcoming Appointments ({len(coming)})")
    if not coming:
        st.info("No upcoming appointments.")
    for a in coming:
        show(a)

    st.subheader(f"Past Appointments ({len(done)})")
    if not done:
        st.info("No past appointments.")
    for a in done:
        show(a)


if __name__ == "__main__":
    main()
