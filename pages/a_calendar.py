import streamlit as st

from core.helpers import render_admin_sidebar, status_label
from core.session_manager import require_role
from core.time_utils import format_time, today
from models import Role
from services.calendar_service import appointments_on, month_grid, shift, view_title, week_grid

# Page config is set globally in app.py

gate = require_role(Role.ADMIN)
render_admin_sidebar()

st.title("Appointment Calendar")

if "calendar_day" not in st.session_state:
    st.session_state["calendar_day"] = today()
view = st.radio("View", ["month", "week"], horizontal=True, format_func=str.capitalize, key="calendar_view")
current = st.session_state["calendar_day"]

nav = st.columns([1, 1, 4, 1])
with nav[0]:
    if st.button("◀ Previous"):
        st.session_state["calendar_day"] = shift(current, view, -1)
        st.rerun()
with nav[1]:
    if st.button("Today"):
        st.session_state["calendar_day"] = today()
        st.rerun()
with nav[2]:
    st.subheader(view_title(current, view))
with nav[3]:
    if st.button("Next ▶"):
        st.session_state["calendar_day"] = shift(current, view, 1)
        st.rerun()

incidents = gate.visible_incidents()
names = {p.id: p.name for p in gate.visible_patients()}

if view == "month":
    cells = month_grid(current.year, current.month - 1, incidents)
else:
    cells = week_grid(current, incidents)

header = st.columns(7)
for col, label in zip(header, ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]):
    col.markdown(f"**{label}**")

per_cell = 3 if view == "month" else None
for week_start in range(0, len(cells), 7):
    row = st.columns(7)
    for col, cell in zip(row, cells[week_start:week_start + 7]):
        with col:
            label = f"**{cell.date.day}**" if cell.in_current_month else f"_{cell.date.day}_"
            if cell.is_today:
                label += " 📍"
            st.markdown(label)
            shown = cell.appointments[:per_cell] if per_cell else cell.appointments
            for incident in shown:
                st.caption(f"{format_time(incident.appointment_date)} {names.get(incident.patient_id, 'Unknown')}")
            if per_cell and len(cell.appointments) > per_cell:
                st.caption(f"+{len(cell.appointments) - per_cell} more")

st.write("---")
st.subheader("Today's Schedule")
todays = appointments_on(incidents, today())
if not todays:
    st.info("No appointments scheduled for today.")
for incident in todays:
    st.write(
        f"{format_time(incident.appointment_date)} • **{incident.title}** • "
        f"{names.get(incident.patient_id, 'Unknown Patient')} • {status_label(incident.status)}"
    )
