"""Registration form submission model."""
from dataclasses import dataclass
from typing import Optional

CREATE_MODE = "create"
JOIN_MODE = "join"


@dataclass
class RegistrationCandidate:
    """
    Unvalidated registration submitted by the presentation layer.

    Fields are kept as submitted; trimming and normalization happen in the
    registration service. ``team_size`` is only honoured in create mode.
    """

    name: str
    roll_number: str
    phone: str
    year: str
    experience: str
    college: str = ""
    team_name: Optional[str] = None
    team_size: Optional[int] = None
    mode: str = CREATE_MODE

    def __post_init__(self):
        if self.mode not in (CREATE_MODE, JOIN_MODE):
            raise ValueError(f"Mode must be '{CREATE_MODE}' or '{JOIN_MODE}', got: {self.mode}")

    @property
    def is_join(self) -> bool:
        return self.mode == JOIN_MODE
