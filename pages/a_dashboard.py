import streamlit as st

from core.helpers import appointment_when, format_money, render_admin_sidebar, status_label
from core.session_manager import require_role
from models import IncidentStatus, Role
from services.dashboard_service import admin_dashboard

# Page config is set globally in app.py

gate = require_role(Role.ADMIN)
render_admin_sidebar()

st.title("Dashboard Overview")
st.caption("Welcome to your dental center management system")

stats = admin_dashboard(gate.visible_patients(), gate.visible_incidents())

st.subheader("Key Metrics")
c1, c2, c3, c4 = st.columns(4)
c1.metric("Total Patients", stats.total_patients)
c2.metric("Today's Appointments", len(stats.todays_appointments))
c3.metric("Total Revenue", format_money(stats.total_revenue))
c4.metric("Total Appointments", stats.total_appointments)

left, right = st.columns(2)
with left:
    st.subheader("Appointment Status")
    for status in IncidentStatus:
        st.write(f"{status_label(status)}: **{stats.status_counts[status]}**")
with right:
    st.subheader("Quick Stats")
    st.write(f"Average Treatment Cost: **{format_money(stats.average_treatment_cost)}**")
    st.write(f"Completion Rate: **{stats.completion_rate * 100:.1f}%**")
    st.write(f"Active Patients: **{stats.active_patients}**")

st.write("---")
st.subheader("Upcoming Appointments")

if not stats.upcoming_appointments:
    st.info("No upcoming appointments.")
else:
    rows = []
    for incident in stats.upcoming_appointments:
        patient = gate.get_patient(incident.patient_id)
        rows.append(
            {
                "Patient": patient.name if patient else "Unknown Patient",
                "Treatment": incident.title,
                "When": appointment_when(incident),
                "Status": incident.status.value,
            }
        )
    st.table(rows)
