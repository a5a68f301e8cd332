"""Admin service for authentication and session state management."""
import hmac
import os
from typing import Tuple

import streamlit as st

from etherx.config import load_env_file


def authenticate_admin(username: str, password: str) -> bool:
    """
    Authenticate admin credentials.

    Args:
        username: Admin username
        password: Admin password

    Returns:
        True if credentials valid, False otherwise

    Behavior:
        - Loads credentials from environment variables (or .env)
        - An unset ADMIN_PASSWORD never authenticates
        - Single admin user only
    """
    load_env_file()

    admin_username = os.getenv("ADMIN_USERNAME", "admin")
    admin_password = os.getenv("ADMIN_PASSWORD", "")

    if not admin_password:
        return False

    return (
        hmac.compare_digest(username.encode("utf-8"), admin_username.encode("utf-8"))
        and hmac.compare_digest(password.encode("utf-8"), admin_password.encode("utf-8"))
    )


def is_admin_authenticated() -> bool:
    """
    Check if admin is authenticated in current session.

    Returns:
        True if st.session_state['admin_authenticated'] is True
    """
    return st.session_state.get("admin_authenticated", False)


def login_admin(username: str, password: str) -> Tuple[bool, str]:
    """
    Log in admin user.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "Logged in") on success
        - (False, "Invalid username or password") on failure
    """
    if authenticate_admin(username, password):
        st.session_state["admin_authenticated"] = True
        return True, "Logged in"
    return False, "Invalid username or password"


def logout_admin() -> None:
    """Log out admin user."""
    if "admin_authenticated" in st.session_state:
        del st.session_state["admin_authenticated"]
