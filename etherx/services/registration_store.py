"""Durable registration collection with unique indices and transactions."""
import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from etherx.config import get_settings
from etherx.models.registration import Registration
from etherx.services.storage_service import ensure_json_file, load_json, lock_file, save_json
from etherx.utils.exceptions import (
    DuplicatePhone,
    DuplicateRoll,
    RegistrationNotFoundError,
    StorageError,
)
from etherx.utils.validation import clean_text, normalize_roll_number

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT: Dict[str, Any] = {"registrations": []}


def _parse_records(data: Dict[str, Any]) -> List[Registration]:
    return [Registration.from_dict(record) for record in data.get("registrations", [])]


class RegistrationView:
    """
    Registrations as loaded inside one store transaction.

    Lookups see inserts made earlier in the same transaction. Changes are
    written back only when the owning transaction exits cleanly.
    """

    def __init__(self, registrations: List[Registration]):
        self._registrations = registrations
        self.dirty = False

    def list_all(self) -> List[Registration]:
        """All registrations in insertion order."""
        return list(self._registrations)

    def count(self) -> int:
        return len(self._registrations)

    def get(self, registration_id: str) -> Optional[Registration]:
        for registration in self._registrations:
            if registration.id == registration_id:
                return registration
        return None

    def find_by_roll_number(self, roll_number: str) -> Optional[Registration]:
        """Point lookup on the unique roll number index (case-insensitive input)."""
        normalized = normalize_roll_number(roll_number)
        for registration in self._registrations:
            if registration.roll_number == normalized:
                return registration
        return None

    def find_by_phone(self, phone: str) -> Optional[Registration]:
        """Point lookup on the unique phone index."""
        normalized = clean_text(phone)
        for registration in self._registrations:
            if registration.phone == normalized:
                return registration
        return None

    def find_by_team(self, team_name: str) -> List[Registration]:
        """All members of a team in registration order."""
        return [r for r in self._registrations if r.team_name == team_name]

    def next_id(self) -> str:
        max_id = 0
        for registration in self._registrations:
            try:
                max_id = max(max_id, int(registration.id.split("_")[1]))
            except (IndexError, ValueError):
                pass
        return f"reg_{max_id + 1:04d}"

    def insert(self, registration: Registration) -> Registration:
        """
        Append a registration, enforcing the unique indices.

        Raises:
            DuplicateRoll: If the roll number is already registered
            DuplicatePhone: If the phone number is already registered
        """
        if self.find_by_roll_number(registration.roll_number) is not None:
            raise DuplicateRoll("Roll number already registered")
        if self.find_by_phone(registration.phone) is not None:
            raise DuplicatePhone("Phone number already registered")
        if self.get(registration.id) is not None:
            raise ValueError(f"Registration ID already exists: {registration.id}")

        self._registrations.append(registration)
        self.dirty = True
        return registration

    def set_attended(self, registration_id: str, attended: bool) -> bool:
        """
        Set the attendance flag.

        Returns:
            True if the stored value changed, False if it already matched

        Raises:
            RegistrationNotFoundError: If registration doesn't exist
        """
        registration = self.get(registration_id)
        if registration is None:
            raise RegistrationNotFoundError(f"Registration not found: {registration_id}")

        if registration.attended == attended:
            return False

        registration.attended = attended
        self.dirty = True
        return True

    def to_document(self) -> Dict[str, Any]:
        return {"registrations": [r.to_dict() for r in self._registrations]}


class RegistrationStore:
    """
    JSON file backed registration store.

    All writes go through ``transaction()``, which holds an exclusive lock for
    the whole read-check-write sequence. Read helpers load the latest file
    without locking.
    """

    def __init__(self, file_path: str, lock_timeout: float = 5.0):
        self.file_path = file_path
        self.lock_timeout = lock_timeout

    def _load(self) -> List[Registration]:
        try:
            ensure_json_file(self.file_path, EMPTY_DOCUMENT)
            return _parse_records(load_json(self.file_path))
        except (OSError, json.JSONDecodeError, KeyError, ValueError) as e:
            logger.error(f"Failed to load registrations from {self.file_path}: {e}")
            raise StorageError(f"Registration data unavailable: {e}") from e

    def snapshot(self) -> RegistrationView:
        """Read-only view of the current registrations."""
        return RegistrationView(self._load())

    @contextmanager
    def transaction(self) -> Iterator[RegistrationView]:
        """
        Run a check-then-write sequence atomically.

        Usage:
            with store.transaction() as txn:
                if txn.find_by_phone(phone) is None:
                    txn.insert(registration)

        Raises:
            StorageError: If the lock cannot be acquired or the file cannot
                be read or written
        """
        try:
            ensure_json_file(self.file_path, EMPTY_DOCUMENT)
        except OSError as e:
            raise StorageError(f"Registration data unavailable: {e}") from e

        locked = False
        try:
            with lock_file(self.file_path, timeout=self.lock_timeout):
                locked = True
                view = RegistrationView(self._load())
                yield view
                if view.dirty:
                    self._save(view)
        except (TimeoutError, OSError) as e:
            if locked:
                raise
            logger.error(f"Could not lock {self.file_path}: {e}")
            raise StorageError(f"Registration store is busy: {e}") from e

    def _save(self, view: RegistrationView) -> None:
        try:
            save_json(self.file_path, view.to_document(), backup=True)
        except OSError as e:
            logger.error(f"Failed to save registrations to {self.file_path}: {e}")
            raise StorageError(f"Could not save registration: {e}") from e

    def list_all(self) -> List[Registration]:
        return self.snapshot().list_all()

    def count(self) -> int:
        return self.snapshot().count()

    def get(self, registration_id: str) -> Optional[Registration]:
        return self.snapshot().get(registration_id)

    def find_by_roll_number(self, roll_number: str) -> Optional[Registration]:
        return self.snapshot().find_by_roll_number(roll_number)

    def find_by_phone(self, phone: str) -> Optional[Registration]:
        return self.snapshot().find_by_phone(phone)

    def find_by_team(self, team_name: str) -> List[Registration]:
        return self.snapshot().find_by_team(team_name)

    def set_attended(self, registration_id: str, attended: bool) -> bool:
        """Patch the attendance flag of one registration."""
        with self.transaction() as txn:
            return txn.set_attended(registration_id, attended)


_default_store: Optional[RegistrationStore] = None


def get_default_store() -> RegistrationStore:
    """Return the store configured by settings."""
    global _default_store

    settings = get_settings()
    if _default_store is None or _default_store.file_path != settings.registrations_file:
        _default_store = RegistrationStore(settings.registrations_file, settings.lock_timeout)
    return _default_store
