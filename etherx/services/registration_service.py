"""Registration service for hackathon team sign-up."""
import logging
from typing import Optional

from etherx.config import get_settings
from etherx.models.candidate import RegistrationCandidate
from etherx.models.identity import Principal
from etherx.models.registration import Registration
from etherx.services.identity_service import resolve_identity
from etherx.services.registration_store import (
    RegistrationStore,
    RegistrationView,
    get_default_store,
)
from etherx.utils.date_utils import now_iso
from etherx.utils.exceptions import (
    DuplicatePhone,
    DuplicateRoll,
    InvalidField,
    MissingFields,
    NotEligible,
    RegistrationError,
    RollNumberMismatch,
    TeamFull,
    TeamRequired,
    TeamUnavailable,
    Unauthenticated,
)
from etherx.utils.validation import (
    clean_text,
    find_missing_fields,
    normalize_roll_number,
    validate_experience,
    validate_name,
    validate_team_size,
    validate_year,
)

logger = logging.getLogger(__name__)


def _require_eligible_roll_number(principal: Optional[Principal]) -> str:
    """Recompute eligibility from the verified identity and return its roll number."""
    if principal is None:
        raise Unauthenticated("You must be logged in to register")

    settings = get_settings()
    verdict = resolve_identity(principal.email, settings.institution_domain)

    if not verdict.is_valid_domain:
        raise NotEligible(
            f"Only {settings.institution_name} students (@{settings.institution_domain}) can register"
        )
    if verdict.roll_number is None:
        raise NotEligible(
            f"Invalid {settings.institution_name} email format. "
            f"Email should be rollnumber@{settings.institution_domain}"
        )
    return verdict.roll_number


def _validate_fields(candidate: RegistrationCandidate) -> None:
    for is_valid, error_msg in (
        validate_name(candidate.name),
        validate_year(clean_text(candidate.year)),
        validate_experience(clean_text(candidate.experience)),
    ):
        if not is_valid:
            raise InvalidField(error_msg)


def _resolve_team_size(txn: RegistrationView, candidate: RegistrationCandidate, team_name: str) -> int:
    """
    Decide the capacity the new member's record will carry.

    Joiners inherit the size recorded by the team's first member; only a
    creator's requested size is used, after a range check.
    """
    members = txn.find_by_team(team_name)

    if candidate.is_join:
        if not members:
            raise TeamUnavailable(f"Team '{team_name}' is unavailable")
        team_size = members[0].team_size
        if len(members) >= team_size:
            raise TeamFull("Team is already full")
        return team_size

    is_valid, error_msg = validate_team_size(candidate.team_size, get_settings().team_sizes)
    if not is_valid:
        raise InvalidField(error_msg)
    if members:
        raise TeamUnavailable(f"Team name '{team_name}' is already taken, join it instead")
    return candidate.team_size


def register(
    principal: Optional[Principal],
    candidate: RegistrationCandidate,
    store: Optional[RegistrationStore] = None,
) -> str:
    """
    Register the calling participant for a team.

    Args:
        principal: Verified caller from the identity provider (None if anonymous)
        candidate: Submitted form values
        store: Registration store (defaults to the configured one)

    Returns:
        str: ID of the new registration

    Raises:
        RegistrationError: Subclass naming the first failed rule, in order:
            Unauthenticated, NotEligible, MissingFields, RollNumberMismatch,
            InvalidField, TeamRequired, TeamUnavailable/TeamFull,
            DuplicateRoll/DuplicatePhone, TeamFull
        StorageError: If the store cannot be locked, read or written

    Behavior:
        - Eligibility is recomputed from ``principal`` on every call
        - Team resolution, uniqueness and capacity checks and the insert run
          in one store transaction
    """
    store = store or get_default_store()

    try:
        expected_roll = _require_eligible_roll_number(principal)

        missing = find_missing_fields({
            "name": candidate.name,
            "phone": candidate.phone,
            "year": candidate.year,
            "experience": candidate.experience,
        })
        if missing:
            raise MissingFields(missing)

        if normalize_roll_number(candidate.roll_number) != expected_roll:
            raise RollNumberMismatch(expected_roll)

        _validate_fields(candidate)

        team_name = clean_text(candidate.team_name)
        if not team_name:
            if candidate.is_join:
                raise TeamRequired("Pick a team to join")
            raise TeamRequired("Team name is required")

        phone = clean_text(candidate.phone)

        with store.transaction() as txn:
            team_size = _resolve_team_size(txn, candidate, team_name)

            if txn.find_by_roll_number(expected_roll) is not None:
                raise DuplicateRoll("Roll number already registered")
            if txn.find_by_phone(phone) is not None:
                raise DuplicatePhone("Phone number already registered")

            if len(txn.find_by_team(team_name)) >= team_size:
                raise TeamFull("Team is already full")

            registration = txn.insert(Registration(
                id=txn.next_id(),
                name=clean_text(candidate.name),
                roll_number=expected_roll,
                phone=phone,
                college=clean_text(candidate.college) or get_settings().institution_name,
                year=clean_text(candidate.year),
                team_name=team_name,
                team_size=team_size,
                experience=clean_text(candidate.experience),
                user_id=principal.principal_id,
                registered_at=now_iso(),
                attended=False,
            ))

    except RegistrationError as e:
        logger.info(f"Registration rejected ({e.kind}): {e.message}")
        raise

    logger.info(
        f"Registered {registration.roll_number} as {registration.id} "
        f"in team '{team_name}' ({len(txn.find_by_team(team_name))}/{team_size})"
    )
    return registration.id
