"""
EtherX 2026 hackathon registration
"""
import logging

import streamlit as st

from etherx.config import get_settings
from etherx.ui.admin_panel import render_admin_panel
from etherx.ui.registration_page import render_registration_page

logger = logging.getLogger(__name__)


st.set_page_config(
    page_title="EtherX 2026",
    page_icon="⚡",
    layout="centered",
    initial_sidebar_state="collapsed",
)


def configure_logging():
    """Configure root logging once per process."""
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def initialize_session_state():
    """Initialize session state defaults."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "register"

    if "admin_authenticated" not in st.session_state:
        st.session_state.admin_authenticated = False


def render_navigation():
    """Render navigation buttons."""
    nav_col1, _, nav_col2 = st.columns([1, 2, 1], gap="small")

    with nav_col1:
        if st.button("⚡ Register", use_container_width=True, key="nav_register"):
            st.session_state.current_page = "register"

    with nav_col2:
        if st.button("👤 Admin", use_container_width=True, key="nav_admin"):
            st.session_state.current_page = "admin"


def render_current_page():
    """Render the page selected in session state."""
    try:
        if st.session_state.current_page == "register":
            render_registration_page()

        elif st.session_state.current_page == "admin":
            render_admin_panel()

        else:
            st.error(f"Unknown page: {st.session_state.current_page}")
            if st.button("Back to registration"):
                st.session_state.current_page = "register"
                st.rerun()

    except Exception as e:
        logger.exception("Unhandled exception while rendering page")
        st.error("Something went wrong, please try again later")

        with st.expander("🔍 Error details"):
            st.code(str(e))


def main():
    """Application entry point."""
    configure_logging()
    initialize_session_state()
    render_navigation()
    render_current_page()


if __name__ == "__main__":
    main()
