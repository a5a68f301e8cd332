"""Tests for data models."""
import pytest

from etherx.models.candidate import JOIN_MODE, RegistrationCandidate
from etherx.models.identity import IdentityVerdict, Principal
from etherx.models.registration import Registration
from etherx.models.team import TeamAvailability


def make_record(**overrides):
    data = {
        "id": "reg_0001",
        "name": "Asha Raman",
        "roll_number": "23N256",
        "phone": "9876543210",
        "college": "PSG College of Technology",
        "year": "2nd",
        "team_name": "Foo",
        "team_size": 3,
        "experience": "beginner",
        "user_id": "user-1",
        "registered_at": "2026-01-10T09:30:00+05:30",
    }
    data.update(overrides)
    return data


class TestRegistrationValidation:
    """Tests for Registration data validation."""

    def test_create_valid_registration(self):
        registration = Registration(**make_record())
        assert registration.roll_number == "23N256"
        assert registration.attended is False

    def test_invalid_id_raises_error(self):
        with pytest.raises(ValueError, match="reg_XXXX"):
            Registration(**make_record(id="session_001"))

    def test_empty_name_raises_error(self):
        with pytest.raises(ValueError, match="Name cannot be empty"):
            Registration(**make_record(name="  "))

    def test_lowercase_roll_number_rejected(self):
        """Stored roll numbers are always uppercase."""
        with pytest.raises(ValueError, match="Invalid roll number"):
            Registration(**make_record(roll_number="23n256"))

    def test_invalid_year_raises_error(self):
        with pytest.raises(ValueError, match="Year must be one of"):
            Registration(**make_record(year="final"))

    def test_invalid_experience_raises_error(self):
        with pytest.raises(ValueError, match="Experience must be one of"):
            Registration(**make_record(experience="guru"))

    def test_non_positive_team_size_raises_error(self):
        with pytest.raises(ValueError, match="Team size must be a positive integer"):
            Registration(**make_record(team_size=0))

    def test_invalid_timestamp_raises_error(self):
        with pytest.raises(ValueError, match="Invalid timestamp format"):
            Registration(**make_record(registered_at="10/01/2026 09:30"))

    def test_timestamp_with_z_suffix_accepted(self):
        registration = Registration(**make_record(registered_at="2026-01-10T04:00:00Z"))
        assert registration.registered_at == "2026-01-10T04:00:00Z"


class TestRegistrationSerialization:
    """Tests for to_dict / from_dict."""

    def test_from_dict_defaults_attended_to_false(self):
        registration = Registration.from_dict(make_record())
        assert registration.attended is False

    def test_to_dict_uses_snake_case_fields(self):
        data = Registration(**make_record(attended=True)).to_dict()
        assert data["roll_number"] == "23N256"
        assert data["team_name"] == "Foo"
        assert data["attended"] is True
        assert Registration.from_dict(data) == Registration(**make_record(attended=True))


class TestTeamAvailability:
    """Tests for TeamAvailability."""

    def test_open_team(self):
        team = TeamAvailability(team_name="Foo", member_count=1, team_size=3)
        assert team.is_open() is True
        assert team.is_full() is False
        assert team.open_slots == 2

    def test_full_team(self):
        team = TeamAvailability(team_name="Foo", member_count=3, team_size=3)
        assert team.is_open() is False
        assert team.is_full() is True
        assert team.open_slots == 0

    def test_empty_name_raises_error(self):
        with pytest.raises(ValueError, match="Team name cannot be empty"):
            TeamAvailability(team_name="", member_count=1, team_size=3)


class TestIdentityModels:
    """Tests for Principal and IdentityVerdict."""

    def test_principal_requires_id(self):
        with pytest.raises(ValueError, match="Principal ID cannot be empty"):
            Principal(principal_id="", email="23n256@psgtech.ac.in")

    def test_verdict_eligible_needs_domain_and_roll(self):
        assert IdentityVerdict("a@psgtech.ac.in", True, None).is_eligible is False
        assert IdentityVerdict("23n256@psgtech.ac.in", True, "23N256").is_eligible is True


class TestRegistrationCandidate:
    """Tests for RegistrationCandidate."""

    def test_join_mode(self):
        candidate = RegistrationCandidate(
            name="A", roll_number="23N256", phone="1", year="1st",
            experience="beginner", mode=JOIN_MODE,
        )
        assert candidate.is_join is True

    def test_unknown_mode_raises_error(self):
        with pytest.raises(ValueError, match="Mode must be"):
            RegistrationCandidate(
                name="A", roll_number="23N256", phone="1", year="1st",
                experience="beginner", mode="merge",
            )
