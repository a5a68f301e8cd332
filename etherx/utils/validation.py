"""Data validation utilities."""
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple


ROLL_NUMBER_PATTERN = re.compile(r"^\d{2}[A-Z]\d{3}$", re.ASCII)
VALID_YEARS = ["1st", "2nd", "3rd", "4th"]
VALID_EXPERIENCE = ["beginner", "intermediate", "advanced", "expert"]
REQUIRED_FIELDS = ["name", "phone", "year", "experience"]
NAME_MAX_LENGTH = 50


def clean_text(value: Optional[str]) -> str:
    """Return the trimmed string, or "" for None."""
    if value is None:
        return ""
    return str(value).strip()


def normalize_roll_number(roll_number: Optional[str]) -> str:
    """
    Normalize roll number for comparison and storage.

    Example: " 23n256 " → "23N256"
    """
    return clean_text(roll_number).upper()


def is_valid_roll_number(roll_number: str) -> bool:
    """Check canonical roll number format (2 digits, 1 letter, 3 digits)."""
    return bool(ROLL_NUMBER_PATTERN.match(normalize_roll_number(roll_number)))


def find_missing_fields(values: Dict[str, Any], required: Iterable[str] = REQUIRED_FIELDS) -> List[str]:
    """
    List required fields that are absent or blank after trimming.

    Args:
        values: Field name to submitted value
        required: Field names that must be present

    Returns:
        Missing field names in the order given by ``required``
    """
    return [field for field in required if not clean_text(values.get(field))]


def validate_name(name: str) -> Tuple[bool, str]:
    """
    Validate registrant name.

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if valid
        - (False, "Name cannot be empty") if empty
        - (False, "Name cannot exceed 50 characters") if too long
    """
    if not name or not name.strip():
        return False, "Name cannot be empty"
    if len(name.strip()) > NAME_MAX_LENGTH:
        return False, f"Name cannot exceed {NAME_MAX_LENGTH} characters"
    return True, ""


def validate_year(year: str) -> Tuple[bool, str]:
    """Validate academic year against the allowed values."""
    if year not in VALID_YEARS:
        return False, f"Year must be one of {VALID_YEARS}"
    return True, ""


def validate_experience(experience: str) -> Tuple[bool, str]:
    """Validate experience level against the allowed values."""
    if experience not in VALID_EXPERIENCE:
        return False, f"Experience must be one of {VALID_EXPERIENCE}"
    return True, ""


def validate_team_size(team_size: Any, allowed: range) -> Tuple[bool, str]:
    """
    Validate the size requested by a team's creator.

    Args:
        team_size: Requested capacity
        allowed: Range of permitted sizes from settings

    Returns:
        Tuple of (is_valid: bool, error_message: str)
    """
    message = f"Team size must be between {allowed.start} and {allowed.stop - 1}"
    if isinstance(team_size, bool) or not isinstance(team_size, int):
        return False, message
    if team_size not in allowed:
        return False, message
    return True, ""
