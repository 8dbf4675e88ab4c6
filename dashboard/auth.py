import streamlit as st

from dashboard.data import repositories
from mastery.db import describe_database_target
from mastery.settings import get_settings


def show_storage_error(exc):
    st.error("Storage is unavailable.")
    st.markdown(
        "I could not read or write the tracker data at:\n"
        f"`{describe_database_target(get_settings().database_url)}`"
    )
    st.markdown("Check `DATABASE_URL` in your environment or `.env` file, then reload the page.")
    st.caption(f"Technical detail: {type(exc).__name__}: {exc}")
    st.stop()


def _submit_login():
    username = st.session_state.get("login.username", "")
    password = st.session_state.get("login.password", "")
    user = repositories.sessions().login(username, password)
    st.session_state["login.failed"] = user is None


def enforce_login():
    user = repositories.sessions().current_user()
    if user is not None:
        return user

    st.markdown("<div class='section-title'>Sign in</div>", unsafe_allow_html=True)
    st.caption("Track your daily self-mastery tasks.")
    with st.form("login.form"):
        st.text_input("Username", key="login.username")
        st.text_input("Password", type="password", key="login.password")
        st.form_submit_button("Login", on_click=_submit_login)
    if st.session_state.get("login.failed"):
        st.error("Invalid username or password.")
    st.caption("Demo accounts: student1 / s1pass, student2 / s2pass, mentor / mentorpass")
    st.stop()


def render_sidebar_account(user):
    with st.sidebar:
        st.caption(f"Logged as: {user.name} ({user.role})")
        if st.button("Logout", key="logout_sidebar"):
            repositories.sessions().logout()
            st.rerun()
