import streamlit as st

from core.time_utils import format_date, format_time
from models import IncidentStatus
from services.attachment_service import decode_data_url, file_icon, format_file_size, is_image_file

STATUS_BADGES = {
    IncidentStatus.SCHEDULED: "🔵",
    IncidentStatus.IN_PROGRESS: "🟡",
    IncidentStatus.COMPLETED: "🟢",
    IncidentStatus.CANCELLED: "🔴",
}


def status_label(status: IncidentStatus) -> str:
    return f"{STATUS_BADGES.get(status, '⚪')} {status.value}"


def format_money(amount: float | None) -> str:
    return f"${amount or 0:,.2f}"


def appointment_when(incident) -> str:
    return f"{format_date(incident.appointment_date)} • {format_time(incident.appointment_date)}"


def show_errors(errors: dict):
    for message in errors.values():
        st.error(message)


def render_attachment(attachment, key: str):
    """Inline preview for images, download button for everything."""
    st.write(f"{file_icon(attachment.type)} **{attachment.name}** ({format_file_size(attachment.size)})")
    data = decode_data_url(attachment.url)
    if is_image_file(attachment.type):
        st.image(data, width=240)
    st.download_button("Download", data=data, file_name=attachment.name, mime=attachment.type, key=key)


# -----------------------------
# Sidebar helpers
# -----------------------------
def hide_default_sidebar_nav():
    """Hide Streamlit's default multi-page navigation for a cleaner custom menu."""
    st.markdown(
        """
        <style>
        /* Hide the auto-generated Pages section */
        [data-testid="stSidebarNav"] { display: none; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def hide_sidebar_completely():
    """Completely hide Streamlit's sidebar and the toggle control.

    Used on the login page where navigation should not be visible.
    """
    st.markdown(
        """
        <style>
        [data-testid="stSidebar"] { display: none !important; }
        [data-testid="collapsedControl"] { display: none !important; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _render_menu(title: str, items):
    from core.session_manager import get_gate, logout

    hide_default_sidebar_nav()
    with st.sidebar:
        st.markdown(f"### {title}")
        user = get_gate().user
        if user:
            st.caption(f"{user.name or user.email} ({user.role.value})")
        for label, page in items:
            if st.button(label, use_container_width=True):
                st.switch_page(page)
        st.divider()
        if st.button("Logout", use_container_width=True):
            logout()


def render_admin_sidebar():
    _render_menu(
        "Admin Menu",
        [
            ("Dashboard", "pages/a_dashboard.py"),
            ("Patients", "pages/a_patients.py"),
            ("Appointments", "pages/a_appointments.py"),
            ("Calendar", "pages/a_calendar.py"),
        ],
    )


def render_patient_sidebar():
    _render_menu(
        "My Care",
        [
            ("Dashboard", "pages/p_dashboard.py"),
            ("My Appointments", "pages/p_appointments.py"),
            ("Medical Records", "pages/p_records.py"),
        ],
    )
