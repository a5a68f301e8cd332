"""Team directory built from stored registrations."""
from typing import Dict, Iterable, List, Optional

from etherx.models.registration import Registration
from etherx.models.team import TeamAvailability
from etherx.services.registration_store import RegistrationStore, get_default_store


def aggregate_teams(registrations: Iterable[Registration]) -> List[TeamAvailability]:
    """
    Group registrations by team name in first-seen order.

    Registrations without a team are ignored. A team's size is the size on
    its first (creating) registration.
    """
    teams: Dict[str, TeamAvailability] = {}
    for registration in registrations:
        if not registration.team_name:
            continue
        team = teams.get(registration.team_name)
        if team is None:
            teams[registration.team_name] = TeamAvailability(
                team_name=registration.team_name,
                member_count=1,
                team_size=registration.team_size,
            )
        else:
            team.member_count += 1
    return list(teams.values())


def list_teams(store: Optional[RegistrationStore] = None) -> List[TeamAvailability]:
    """All teams, full ones included."""
    store = store or get_default_store()
    return aggregate_teams(store.list_all())


def list_open_teams(store: Optional[RegistrationStore] = None) -> List[TeamAvailability]:
    """
    Teams that still have at least one free slot.

    Returns:
        List[TeamAvailability] in first-registration order, recomputed from
        the full registration set on every call
    """
    return [team for team in list_teams(store) if team.is_open()]


def count_open_seats(teams: Iterable[TeamAvailability]) -> int:
    """Total free slots across the given teams."""
    return sum(team.open_slots for team in teams)
