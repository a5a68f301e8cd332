"""Registration data model."""
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from etherx.utils.date_utils import parse_iso
from etherx.utils.validation import (
    is_valid_roll_number,
    validate_experience,
    validate_name,
    validate_year,
)


@dataclass
class Registration:
    """A participant's stored registration for the hackathon."""

    id: str
    name: str
    roll_number: str
    phone: str
    college: str
    year: str
    team_name: Optional[str]
    team_size: int
    experience: str
    user_id: Optional[str]
    registered_at: str  # ISO 8601 format
    attended: bool = False

    def __post_init__(self):
        """Validate registration data after initialization."""
        if not re.match(r"^reg_\d{4,}$", self.id or ""):
            raise ValueError(f"Registration ID must match format 'reg_XXXX': {self.id}")

        is_valid, error_msg = validate_name(self.name)
        if not is_valid:
            raise ValueError(error_msg)

        if not is_valid_roll_number(self.roll_number) or self.roll_number != self.roll_number.upper():
            raise ValueError(f"Invalid roll number: {self.roll_number}")

        if not self.phone or not self.phone.strip():
            raise ValueError("Phone cannot be empty")

        is_valid, error_msg = validate_year(self.year)
        if not is_valid:
            raise ValueError(error_msg)

        is_valid, error_msg = validate_experience(self.experience)
        if not is_valid:
            raise ValueError(error_msg)

        if not isinstance(self.team_size, int) or self.team_size <= 0:
            raise ValueError("Team size must be a positive integer")

        parse_iso(self.registered_at)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored JSON shape."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Registration":
        """Build a Registration from a stored record."""
        return cls(
            id=data["id"],
            name=data["name"],
            roll_number=data["roll_number"],
            phone=data["phone"],
            college=data.get("college", ""),
            year=data["year"],
            team_name=data.get("team_name"),
            team_size=data["team_size"],
            experience=data["experience"],
            user_id=data.get("user_id"),
            registered_at=data["registered_at"],
            attended=bool(data.get("attended", False)),
        )
