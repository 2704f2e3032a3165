import streamlit as st

from core.helpers import hide_sidebar_completely
from core.session_manager import get_gate, go_home, init_session_state, login, logout
from models import Role
from services.validation_service import validate_login_form


def main():
    st.set_page_config(
        page_title="DentalCare",
        page_icon="🦷",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    init_session_state()
    gate = get_gate()

    cols = st.columns([4, 2])
    with cols[0]:
        st.title("DentalCare")
    with cols[1]:
        if gate.user:
            st.info(f"Logged in as: **{gate.user.name or gate.user.email}** ({gate.role.value})")
            if st.button("Log out"):
                logout()

    st.write("---")

    if not gate.is_authenticated:
        hide_sidebar_completely()

        st.subheader("Sign in to your account")

        with st.form("login_form"):
            email = st.text_input("Email", placeholder="admin@entnt.in")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in")

        if submitted:
            errors = validate_login_form(email, password)
            if errors:
                st.error(errors["form"])
            elif login(email, password):
                st.success("Login successful! Redirecting...")
                go_home()
            else:
                st.error("Invalid email or password")

        with st.expander("Demo accounts"):
            st.write("Admin: `admin@entnt.in` / `admin123`")
            st.write("Patient: `john@entnt.in` / `patient123`")
        return

    st.subheader("Quick navigation")

    if gate.role == Role.ADMIN:
        if st.button("Go to Admin Dashboard"):
            go_home()
    elif gate.role == Role.PATIENT:
        if st.button("Go to My Dashboard"):
            go_home()


if __name__ == "__main__":
    main()
