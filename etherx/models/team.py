"""Team availability data model."""
from dataclasses import dataclass


@dataclass
class TeamAvailability:
    """Aggregated membership of a team."""

    team_name: str
    member_count: int
    team_size: int

    def __post_init__(self):
        """Validate team data."""
        if not self.team_name or not self.team_name.strip():
            raise ValueError("Team name cannot be empty")

        if self.member_count < 0:
            raise ValueError("Member count cannot be negative")

        if self.team_size <= 0:
            raise ValueError("Team size must be positive")

    @property
    def open_slots(self) -> int:
        return max(self.team_size - self.member_count, 0)

    def is_open(self) -> bool:
        """Check if team still has a free slot."""
        return self.member_count < self.team_size

    def is_full(self) -> bool:
        """Check if team is at capacity."""
        return self.member_count >= self.team_size
