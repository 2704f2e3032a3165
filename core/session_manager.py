import uuid

import streamlit as st

from core.database import engine, init_db
from core.logging_utils import configure_logging
from models import Role
from services.record_store import RecordStore
from services.seed_service import ensure_default_data
from services.session_gate import AccessDenied, SessionGate
from services.storage_service import StorageGateway

HOME_PAGES = {
    Role.ADMIN: "pages/a_dashboard.py",
    Role.PATIENT: "pages/p_dashboard.py",
}

CLIENT_PARAM = "sid"


@st.cache_resource
def get_gateway() -> StorageGateway:
    """One gateway per server process; tables and demo data are created on first use."""
    init_db(engine)
    gateway = StorageGateway()
    ensure_default_data(gateway)
    return gateway


def _client_id() -> str:
    """Per-browser token kept in the URL; a fresh visitor gets a new one."""
    client_id = st.query_params.get(CLIENT_PARAM)
    if not client_id:
        client_id = uuid.uuid4().hex
    return client_id


def init_session_state():
    """Build the record store and session gate once per browser session."""
    configure_logging()
    if "gate" not in st.session_state:
        gateway = get_gateway()
        store = RecordStore.from_storage(gateway)
        gate = SessionGate(gateway, store, client_id=_client_id())
        gate.restore()
        st.session_state.store = store
        st.session_state.gate = gate
    # switch_page drops query params; re-add the token on every run
    st.query_params[CLIENT_PARAM] = st.session_state.gate.client_id


def get_gate() -> SessionGate:
    init_session_state()
    return st.session_state.gate


def login(email: str, password: str) -> bool:
    return get_gate().login(email.strip(), password)


def go_home():
    gate = get_gate()
    st.switch_page(HOME_PAGES.get(gate.role, "app.py"))


def logout():
    """Clear session and redirect to main app page."""
    get_gate().logout()

    # Clear page-level selections
    for key in ("selected_patient", "editing_incident", "calendar_day", "calendar_view"):
        st.session_state.pop(key, None)

    st.switch_page("app.py")


def require_role(role: Role) -> SessionGate:
    """Restrict page by role; send unauthorized users to app.py."""
    gate = get_gate()
    try:
        gate.require_role(role)
    except AccessDenied as e:
        st.error(str(e))
        st.switch_page("app.py")
    return gate
