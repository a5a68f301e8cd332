"""Custom exception classes."""


class RegistrationError(Exception):
    """Business-rule rejection of a registration; safe to show to the user."""

    kind = "RegistrationError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class Unauthenticated(RegistrationError):
    """Raised when no verified identity is present."""
    kind = "Unauthenticated"


class NotEligible(RegistrationError):
    """Raised when the verified email fails the domain or shape check."""
    kind = "NotEligible"


class MissingFields(RegistrationError):
    """Raised when required form fields are blank."""
    kind = "MissingFields"

    def __init__(self, fields):
        self.fields = list(fields)
        super().__init__(f"Fill out all required fields: {', '.join(self.fields)}")


class RollNumberMismatch(RegistrationError):
    """Raised when the submitted roll number disagrees with the verified email."""
    kind = "RollNumberMismatch"

    def __init__(self, expected: str):
        self.expected = expected
        super().__init__(f"Roll number must match your email ({expected})")


class InvalidField(RegistrationError):
    """Raised when a field value is outside its allowed format or range."""
    kind = "InvalidField"


class TeamRequired(RegistrationError):
    """Raised when no team was chosen or named."""
    kind = "TeamRequired"


class TeamUnavailable(RegistrationError):
    """Raised when the named team cannot be joined or created."""
    kind = "TeamUnavailable"


class TeamFull(TeamUnavailable):
    """Raised when the team is already at capacity."""
    kind = "TeamFull"


class DuplicateRoll(RegistrationError):
    """Raised when the roll number is already registered."""
    kind = "DuplicateRoll"


class DuplicatePhone(RegistrationError):
    """Raised when the phone number is already registered."""
    kind = "DuplicatePhone"


class RegistrationNotFoundError(Exception):
    """Raised when registration ID doesn't exist."""
    pass


class StorageError(Exception):
    """Raised when the registration store cannot be read, locked or written."""
    pass
