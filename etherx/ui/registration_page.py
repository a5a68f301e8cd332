"""Registration page UI component."""
import logging
from typing import Any, Mapping, Optional

import streamlit as st

from etherx.config import get_settings
from etherx.models.candidate import CREATE_MODE, JOIN_MODE, RegistrationCandidate
from etherx.models.identity import Principal
from etherx.models.team import TeamAvailability
from etherx.services.identity_service import check_eligibility, current_user_profile
from etherx.services.registration_service import register
from etherx.services.team_service import count_open_seats, list_open_teams
from etherx.utils.exceptions import RegistrationError, StorageError
from etherx.utils.validation import VALID_EXPERIENCE, VALID_YEARS

logger = logging.getLogger(__name__)

MODE_LABELS = {
    CREATE_MODE: "Create team",
    JOIN_MODE: "Join team",
}

REG_FEEDBACK = "registration_feedback"


def principal_from_user_info(user_info: Optional[Mapping[str, Any]]) -> Optional[Principal]:
    """
    Turn the identity provider's user info into a Principal.

    Returns None when nobody is signed in or no email was supplied.
    """
    if not user_info or not user_info.get("is_logged_in", False):
        return None

    email = (user_info.get("email") or "").strip()
    if not email:
        return None

    principal_id = str(user_info.get("sub") or email)
    return Principal(principal_id=principal_id, email=email, name=user_info.get("name"))


def _current_principal() -> Optional[Principal]:
    user_info = getattr(st, "user", None)
    if user_info is None:
        return None
    try:
        return principal_from_user_info(user_info.to_dict())
    except AttributeError:
        return principal_from_user_info(user_info)


def format_team_option(team: TeamAvailability) -> str:
    """Label for the join selector, e.g. "Foo (1/3)"."""
    return f"{team.team_name} ({team.member_count}/{team.team_size})"


def _render_sign_in_prompt() -> None:
    st.info(f"Sign in with your {get_settings().institution_name} Google account to register.")
    if hasattr(st, "login") and st.button("Sign in", type="primary"):
        st.login()


def _render_not_eligible(reason: str) -> None:
    st.warning(reason)
    if hasattr(st, "logout") and st.button("Sign out"):
        st.logout()


def _render_team_stats(open_teams) -> None:
    stat_col1, stat_col2 = st.columns(2, gap="small")
    with stat_col1:
        st.metric("Open teams", len(open_teams))
    with stat_col2:
        st.metric("Open seats", count_open_seats(open_teams))


def _render_form(principal: Principal) -> None:
    """Render the create/join registration form and handle submission."""
    settings = get_settings()
    profile = current_user_profile(principal) or {}
    open_teams = list_open_teams()

    mode = st.radio(
        "Registration mode",
        options=[CREATE_MODE, JOIN_MODE],
        format_func=MODE_LABELS.get,
        horizontal=True,
        key="registration_mode",
    )

    _render_team_stats(open_teams)

    with st.form("registration_form", clear_on_submit=False):
        name_col, roll_col = st.columns(2, gap="small")
        with name_col:
            name = st.text_input("Full name *", value=profile.get("name") or "", max_chars=50)
        with roll_col:
            roll_number = st.text_input(
                "Roll number *",
                value=profile.get("roll_number") or "",
                help="Format: 23N256 (2 digits + 1 letter + 3 digits)",
            )

        phone_col, college_col = st.columns(2, gap="small")
        with phone_col:
            phone = st.text_input("Phone *", placeholder="WhatsApp number")
        with college_col:
            st.text_input("College", value=settings.institution_name, disabled=True)

        year_col, exp_col = st.columns(2, gap="small")
        with year_col:
            year = st.selectbox("Academic year *", VALID_YEARS, index=None, placeholder="Select year")
        with exp_col:
            experience = st.selectbox("Experience *", VALID_EXPERIENCE, format_func=str.capitalize)

        team_name = None
        team_size = None
        if mode == CREATE_MODE:
            team_col, size_col = st.columns(2, gap="small")
            with team_col:
                team_name = st.text_input("Team name *", placeholder="Team identifier")
            with size_col:
                team_size = st.selectbox(
                    "Team size *",
                    list(settings.team_sizes),
                    format_func=lambda size: f"Team of {size}",
                )
        else:
            if open_teams:
                selected = st.selectbox(
                    "Select team to join *",
                    open_teams,
                    format_func=format_team_option,
                    index=None,
                    placeholder="Choose a team",
                )
                team_name = selected.team_name if selected else None
            else:
                st.caption("No teams with open slots. Create instead.")

        submitted = st.form_submit_button(
            MODE_LABELS[mode],
            type="primary",
            use_container_width=True,
        )

    if not submitted:
        return

    candidate = RegistrationCandidate(
        name=name,
        roll_number=roll_number,
        phone=phone,
        college=settings.institution_name,
        year=year or "",
        experience=experience or "",
        team_name=team_name,
        team_size=team_size,
        mode=mode,
    )

    try:
        registration_id = register(principal, candidate)
    except RegistrationError as error:
        st.error(f"❌ {error.message}")
        return
    except StorageError:
        logger.exception("Registration store failure")
        st.error("❌ System error, please try again later")
        return

    st.session_state[REG_FEEDBACK] = f"🎉 Registration submitted ({registration_id})"
    st.rerun()


def render_registration_page() -> None:
    """Render the hackathon registration page."""
    st.markdown("## Register for EtherX 2026")
    st.caption(
        f"One submission per teammate. Use your {get_settings().institution_name} email "
        "and keep team names short."
    )

    feedback = st.session_state.pop(REG_FEEDBACK, None)
    if feedback:
        st.success(feedback)

    principal = _current_principal()
    eligibility = check_eligibility(principal)

    if not eligibility.is_logged_in:
        _render_sign_in_prompt()
        return

    if not eligibility.is_eligible:
        _render_not_eligible(eligibility.reason or "You are not eligible to register")
        return

    st.caption(f"Signed in as {eligibility.email} · Roll number {eligibility.roll_number}")
    _render_form(principal)
