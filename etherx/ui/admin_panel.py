"""Admin panel UI component for attendance and team overview."""
import logging
import traceback

import streamlit as st

from etherx.services.admin_service import is_admin_authenticated, login_admin, logout_admin
from etherx.services.attendance_service import (
    get_attendance_summary,
    get_registrations,
    set_attendance,
)
from etherx.services.team_service import list_teams
from etherx.utils.date_utils import format_timestamp
from etherx.utils.exceptions import RegistrationNotFoundError, StorageError

logger = logging.getLogger(__name__)


def _show_admin_exception(error: Exception, context: str) -> None:
    """Display error details in UI and log full traceback."""
    logger.exception("Admin panel error during %s", context)

    st.error(f"❌ {context} failed: {error}")
    with st.expander("🔍 Error details"):
        st.code("".join(traceback.format_exception(type(error), error, error.__traceback__)))


def team_rows(teams) -> list:
    """Rows for the team overview table."""
    return [
        {
            "Team": team.team_name,
            "Members": team.member_count,
            "Size": team.team_size,
            "Status": "open" if team.is_open() else "full",
        }
        for team in teams
    ]


def render_login_page():
    """Render admin login page."""
    with st.form("admin_login_form", clear_on_submit=False):
        st.markdown("### 🔐 Admin login")

        username = st.text_input("Username", key="admin_username_input")
        password = st.text_input("Password", type="password", key="admin_password_input")

        submit_col, cancel_col = st.columns(2, gap="small")
        with submit_col:
            submit = st.form_submit_button("Log in", use_container_width=True, type="primary")
        with cancel_col:
            cancel = st.form_submit_button("Back", use_container_width=True)

        if submit:
            if not username or not password:
                st.error("❌ Enter username and password")
            else:
                success, message = login_admin(username, password)
                if success:
                    st.success(f"✅ {message}")
                    st.rerun()
                else:
                    st.error(f"❌ {message}")

        if cancel:
            st.session_state.current_page = "register"
            st.rerun()


def _render_attendance_rows(registrations) -> None:
    header = st.columns([2, 1, 1, 1.5, 1.5, 1], gap="small")
    for col, label in zip(header, ["Name", "Roll", "Year", "Team", "Registered", "Attended"]):
        col.markdown(f"**{label}**")

    for registration in registrations:
        cols = st.columns([2, 1, 1, 1.5, 1.5, 1], gap="small")
        cols[0].text(registration.name)
        cols[1].text(registration.roll_number)
        cols[2].text(registration.year)
        cols[3].text(registration.team_name or "-")
        cols[4].text(format_timestamp(registration.registered_at))

        attended = cols[5].checkbox(
            "Attended",
            value=registration.attended,
            key=f"attended_{registration.id}",
            label_visibility="collapsed",
        )
        if attended != registration.attended:
            try:
                set_attendance(registration.id, attended)
            except (RegistrationNotFoundError, StorageError) as error:
                _show_admin_exception(error, "Updating attendance")
                return
            st.rerun()


def render_admin_panel():
    """Render admin panel."""
    try:
        if not is_admin_authenticated():
            render_login_page()
            return

        title_col, home_col, logout_col = st.columns([3, 1, 1], gap="small")
        with title_col:
            st.markdown("## 📊 Admin panel")
        with home_col:
            if st.button("🏠 Registration", use_container_width=True):
                st.session_state.current_page = "register"
                st.rerun()
        with logout_col:
            if st.button("🚪 Log out", use_container_width=True):
                logout_admin()
                st.session_state.current_page = "register"
                st.rerun()

        summary = get_attendance_summary()
        teams = list_teams()

        metric_col1, metric_col2, metric_col3 = st.columns(3, gap="small")
        metric_col1.metric("Registrations", summary["total"])
        metric_col2.metric("Attended", summary["attended"])
        metric_col3.metric("Teams", len(teams))

        st.markdown("### Teams")
        if teams:
            st.dataframe(team_rows(teams), hide_index=True, use_container_width=True)
        else:
            st.info("📝 No teams yet")

        st.markdown("### Registrations")
        registrations = get_registrations()
        if not registrations:
            st.info("📝 No registrations yet")
            return

        _render_attendance_rows(registrations)
    except StorageError as error:
        _show_admin_exception(error, "Loading admin panel")
