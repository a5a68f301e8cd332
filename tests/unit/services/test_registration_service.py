"""Unit tests for registration_service."""
import logging
from datetime import datetime

import pytest

from etherx.models.candidate import CREATE_MODE, JOIN_MODE, RegistrationCandidate
from etherx.models.identity import Principal
from etherx.services.registration_service import register
from etherx.services.registration_store import RegistrationStore
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


@pytest.fixture
def store(tmp_path):
    return RegistrationStore(str(tmp_path / "registrations.json"), lock_timeout=2.0)


def principal_for(roll: str) -> Principal:
    return Principal(principal_id=f"user-{roll.lower()}", email=f"{roll.lower()}@psgtech.ac.in")


def candidate_for(roll: str, **overrides) -> RegistrationCandidate:
    data = {
        "name": f"Member {roll}",
        "roll_number": roll,
        "phone": f"9{roll[-3:]}000000",
        "college": "PSG College of Technology",
        "year": "2nd",
        "experience": "intermediate",
        "team_name": "Foo",
        "team_size": 3,
        "mode": CREATE_MODE,
    }
    data.update(overrides)
    return RegistrationCandidate(**data)


def join_candidate(roll: str, team: str = "Foo", **overrides) -> RegistrationCandidate:
    overrides.setdefault("team_size", None)
    return candidate_for(roll, team_name=team, mode=JOIN_MODE, **overrides)


class TestSuccessfulRegistration:
    """Happy-path behavior of register."""

    def test_create_team(self, store):
        registration_id = register(principal_for("23N256"), candidate_for("23N256"), store)

        assert registration_id == "reg_0001"
        record = store.get(registration_id)
        assert record.roll_number == "23N256"
        assert record.team_name == "Foo"
        assert record.team_size == 3
        assert record.attended is False
        assert record.user_id == "user-23n256"

    def test_fields_are_trimmed_and_normalized(self, store):
        candidate = candidate_for(
            " 23n256 ",
            name="  Asha Raman ",
            phone=" 9000000001 ",
            college="  PSG Tech ",
            team_name="  Foo  ",
        )
        registration_id = register(principal_for("23N256"), candidate, store)

        record = store.get(registration_id)
        assert record.roll_number == "23N256"
        assert record.name == "Asha Raman"
        assert record.phone == "9000000001"
        assert record.college == "PSG Tech"
        assert record.team_name == "Foo"

    def test_blank_college_defaults_to_institution(self, store):
        registration_id = register(principal_for("23N256"), candidate_for("23N256", college=""), store)
        assert store.get(registration_id).college == "PSG College of Technology"

    def test_registered_at_is_iso_8601(self, store):
        registration_id = register(principal_for("23N256"), candidate_for("23N256"), store)

        timestamp = store.get(registration_id).registered_at
        assert "T" in timestamp
        assert datetime.fromisoformat(timestamp).tzinfo is not None

    def test_join_inherits_team_size(self, store):
        """A joiner's submitted size is ignored in favor of the creator's."""
        register(principal_for("23N001"), candidate_for("23N001", team_size=4), store)
        registration_id = register(
            principal_for("23N002"),
            join_candidate("23N002", team_size=5),
            store,
        )

        assert store.get(registration_id).team_size == 4

    def test_success_is_logged(self, store, caplog):
        with caplog.at_level(logging.INFO, logger="etherx.services.registration_service"):
            register(principal_for("23N256"), candidate_for("23N256"), store)

        assert "Registered 23N256 as reg_0001" in caplog.text


class TestPreconditionOrder:
    """Each rule, in order, with the first failure winning."""

    def test_unauthenticated(self, store):
        with pytest.raises(Unauthenticated):
            register(None, candidate_for("23N256"), store)

    def test_wrong_domain(self, store):
        principal = Principal(principal_id="u1", email="23n256@gmail.com")
        with pytest.raises(NotEligible, match="Only PSG College of Technology students"):
            register(principal, candidate_for("23N256"), store)

    def test_wrong_email_shape(self, store):
        principal = Principal(principal_id="u1", email="asha@psgtech.ac.in")
        with pytest.raises(NotEligible, match="Invalid PSG College of Technology email format"):
            register(principal, candidate_for("23N256"), store)

    @pytest.mark.parametrize("email", [
        "\uff12\uff13n256@psgtech.ac.in",
        "23\u212a256@psgtech.ac.in",
    ])
    def test_non_ascii_roll_in_email_not_eligible(self, store, email):
        """Lookalike characters are rejected before anything is stored."""
        principal = Principal(principal_id="u1", email=email)
        with pytest.raises(NotEligible, match="email format"):
            register(principal, candidate_for("23K256"), store)

        assert store.count() == 0

    def test_eligibility_checked_before_fields(self, store):
        principal = Principal(principal_id="u1", email="asha@gmail.com")
        with pytest.raises(NotEligible):
            register(principal, candidate_for("23N256", name="", phone=""), store)

    def test_missing_fields_listed(self, store):
        candidate = candidate_for("23N256", name="  ", phone="", year="")
        with pytest.raises(MissingFields) as excinfo:
            register(principal_for("23N256"), candidate, store)

        assert excinfo.value.fields == ["name", "phone", "year"]
        assert excinfo.value.kind == "MissingFields"

    def test_missing_fields_reported_before_mismatch(self, store):
        """Blank required fields win over a wrong roll number."""
        with pytest.raises(MissingFields):
            register(principal_for("23N256"), candidate_for("99Z999", phone=""), store)

    def test_roll_number_mismatch_includes_expected(self, store):
        with pytest.raises(RollNumberMismatch) as excinfo:
            register(principal_for("23N256"), candidate_for("23N257"), store)

        assert "23N256" in excinfo.value.message
        assert excinfo.value.expected == "23N256"

    @pytest.mark.parametrize("overrides", [
        {"team_name": None},
        {"team_size": 99},
        {"year": "9th"},
        {"mode": JOIN_MODE, "team_name": "Ghost"},
    ])
    def test_mismatch_wins_over_later_failures(self, store, overrides):
        with pytest.raises(RollNumberMismatch):
            register(principal_for("23N256"), candidate_for("99Z999", **overrides), store)

    def test_blank_roll_number_is_a_mismatch(self, store):
        with pytest.raises(RollNumberMismatch):
            register(principal_for("23N256"), candidate_for(""), store)

    @pytest.mark.parametrize("overrides, message", [
        ({"year": "5th"}, "Year must be one of"),
        ({"experience": "guru"}, "Experience must be one of"),
        ({"name": "A" * 51}, "Name cannot exceed 50 characters"),
    ])
    def test_invalid_field_values(self, store, overrides, message):
        with pytest.raises(InvalidField, match=message):
            register(principal_for("23N256"), candidate_for("23N256", **overrides), store)

    def test_create_without_team_name(self, store):
        with pytest.raises(TeamRequired, match="Team name is required"):
            register(principal_for("23N256"), candidate_for("23N256", team_name="  "), store)

    def test_join_without_team(self, store):
        with pytest.raises(TeamRequired, match="Pick a team to join"):
            register(principal_for("23N256"), join_candidate("23N256", team=None), store)


class TestTeamResolution:
    """Team creation and joining rules."""

    @pytest.mark.parametrize("size", [2, 6, None])
    def test_create_size_outside_range(self, store, size):
        with pytest.raises(InvalidField, match="Team size must be between 3 and 5"):
            register(principal_for("23N256"), candidate_for("23N256", team_size=size), store)

    def test_create_existing_team_name(self, store):
        register(principal_for("23N001"), candidate_for("23N001"), store)

        with pytest.raises(TeamUnavailable, match="already taken"):
            register(principal_for("23N002"), candidate_for("23N002"), store)

    def test_join_unknown_team(self, store):
        with pytest.raises(TeamUnavailable) as excinfo:
            register(principal_for("23N256"), join_candidate("23N256", team="Ghost"), store)

        assert not isinstance(excinfo.value, TeamFull)

    def test_join_full_team(self, store):
        register(principal_for("23N001"), candidate_for("23N001"), store)
        register(principal_for("23N002"), join_candidate("23N002"), store)
        register(principal_for("23N003"), join_candidate("23N003"), store)

        with pytest.raises(TeamFull, match="Team is already full"):
            register(principal_for("23N004"), join_candidate("23N004"), store)

        assert store.count() == 3

    def test_team_full_is_a_team_unavailable(self):
        assert issubclass(TeamFull, TeamUnavailable)
        assert TeamFull("x").kind == "TeamFull"

    def test_team_names_are_case_sensitive(self, store):
        register(principal_for("23N001"), candidate_for("23N001"), store)

        with pytest.raises(TeamUnavailable):
            register(principal_for("23N002"), join_candidate("23N002", team="foo"), store)


class TestUniqueness:
    """Duplicate roll number and phone checks."""

    def test_duplicate_roll_case_insensitive(self, store):
        register(principal_for("23N256"), candidate_for("23n256"), store)

        with pytest.raises(DuplicateRoll, match="Roll number already registered"):
            register(
                principal_for("23N256"),
                candidate_for("23N256", team_name="Bar", phone="9111111111"),
                store,
            )

    def test_duplicate_phone(self, store):
        register(principal_for("23N001"), candidate_for("23N001", phone="9000000000"), store)

        with pytest.raises(DuplicatePhone, match="Phone number already registered"):
            register(
                principal_for("23N002"),
                join_candidate("23N002", phone=" 9000000000 "),
                store,
            )

    def test_rejections_are_logged_and_reraised(self, store, caplog):
        register(principal_for("23N256"), candidate_for("23N256"), store)

        with caplog.at_level(logging.INFO, logger="etherx.services.registration_service"):
            with pytest.raises(RegistrationError):
                register(principal_for("23N256"), candidate_for("23N256", team_name="Bar"), store)

        assert "Registration rejected (DuplicateRoll)" in caplog.text
