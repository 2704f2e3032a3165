import streamlit as st

from core.helpers import format_money, render_attachment, render_patient_sidebar
from core.session_manager import require_role
from core.time_utils import format_date
from models import IncidentStatus, Role
from services.dashboard_service import collect_files, filter_by_status, total_revenue, treatment_history


def main():
    gate = require_role(Role.PATIENT)
    render_patient_sidebar()

    patient = gate.get_patient()
    if not patient:
        st.error("Patient information not found")
        return

    st.title("Medical Records")

    incidents = gate.patient_incidents()
    files = collect_files(incidents)
    history = treatment_history(incidents)

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Appointments", len(incidents))
    c2.metric("Completed", len(filter_by_status(incidents, IncidentStatus.COMPLETED)))
    c3.metric("Files", len(files))
    c4.metric("Total Cost", format_money(total_revenue(incidents)))

    st.subheader(f"All Medical Files ({len(files)})")
    if not files:
        st.info("No files uploaded yet.")
    for item in files:
        st.caption(f"{item.appointment_title} • {format_date(item.appointment_date)}")
        render_attachment(item.attachment, key=f"file_{item.appointment_id}_{item.attachment.id}")

    st.write("---")
    st.subheader(f"Treatment History ({len(history)})")
    if not history:
        st.info("No completed treatments with records yet.")
    for a in history:
        st.write(f"**{a.title}** · {format_date(a.appointment_date)}")
        if a.treatment:
            st.write(a.treatment)
        st.caption(f"Files ({len(a.files)}): " + ", ".join(f.name for f in a.files))


if __name__ == "__main__":
    main()
