"""Identity and eligibility data models."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Principal:
    """Verified caller supplied by the identity provider."""

    principal_id: str
    email: str
    name: Optional[str] = None

    def __post_init__(self):
        if not self.principal_id or not self.principal_id.strip():
            raise ValueError("Principal ID cannot be empty")


@dataclass(frozen=True)
class IdentityVerdict:
    """Result of resolving a verified email against the institution pattern."""

    email: str
    is_valid_domain: bool
    roll_number: Optional[str]

    @property
    def is_eligible(self) -> bool:
        return self.is_valid_domain and self.roll_number is not None


@dataclass(frozen=True)
class Eligibility:
    """Eligibility report for the current caller."""

    is_logged_in: bool
    is_eligible: bool
    reason: Optional[str] = None
    roll_number: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
