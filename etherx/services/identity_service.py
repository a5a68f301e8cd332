"""Identity resolution and eligibility checks for verified callers."""
import re
from typing import Any, Dict, Optional

from etherx.config import get_settings
from etherx.models.identity import Eligibility, IdentityVerdict, Principal


def _roll_number_pattern(domain: str) -> "re.Pattern[str]":
    return re.compile(rf"^(\d{{2}}[A-Za-z]\d{{3}})@{re.escape(domain)}$", re.IGNORECASE | re.ASCII)


def resolve_identity(email: Optional[str], domain: Optional[str] = None) -> IdentityVerdict:
    """
    Derive roll number and domain validity from a verified email.

    Args:
        email: Verified email of the caller
        domain: Institution domain (defaults to settings)

    Returns:
        IdentityVerdict with the uppercased roll number, or None when the
        local part does not have the roll number shape

    Example:
        "23n256@psgtech.ac.in" → roll_number "23N256", eligible
    """
    domain = (domain or get_settings().institution_domain).lower()
    email = (email or "").strip()

    is_valid_domain = email.lower().endswith(f"@{domain}")
    match = _roll_number_pattern(domain).match(email)
    roll_number = match.group(1).upper() if match else None

    return IdentityVerdict(email=email, is_valid_domain=is_valid_domain, roll_number=roll_number)


def domain_reason(domain: Optional[str] = None) -> str:
    settings = get_settings()
    domain = domain or settings.institution_domain
    return f"Please use your {settings.institution_name} email (@{domain})"


def shape_reason(domain: Optional[str] = None) -> str:
    domain = domain or get_settings().institution_domain
    return f"Email format should be rollnumber@{domain}"


def check_eligibility(principal: Optional[Principal]) -> Eligibility:
    """
    Report whether the current caller may register.

    Never raises for an ineligible or anonymous caller; the reason is
    returned so the UI can show a sign-in prompt or a notice instead of the
    form.
    """
    if principal is None:
        return Eligibility(is_logged_in=False, is_eligible=False, reason="Not logged in")

    verdict = resolve_identity(principal.email)

    if not verdict.is_valid_domain:
        return Eligibility(
            is_logged_in=True,
            is_eligible=False,
            reason=domain_reason(),
            email=verdict.email,
        )

    if verdict.roll_number is None:
        return Eligibility(
            is_logged_in=True,
            is_eligible=False,
            reason=shape_reason(),
            email=verdict.email,
        )

    return Eligibility(
        is_logged_in=True,
        is_eligible=True,
        roll_number=verdict.roll_number,
        name=principal.name,
        email=verdict.email,
    )


def current_user_profile(principal: Optional[Principal]) -> Optional[Dict[str, Any]]:
    """Profile used to prefill the registration form, or None if anonymous."""
    if principal is None:
        return None

    verdict = resolve_identity(principal.email)
    return {
        "user_id": principal.principal_id,
        "name": principal.name,
        "email": verdict.email,
        "roll_number": verdict.roll_number,
        "is_valid_domain": verdict.is_valid_domain,
        "is_eligible": verdict.is_eligible,
    }
