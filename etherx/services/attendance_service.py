"""Attendance tracking and registration listings for admin tooling."""
import logging
from typing import Dict, List, Optional

from etherx.models.registration import Registration
from etherx.services.registration_store import RegistrationStore, get_default_store

logger = logging.getLogger(__name__)


def set_attendance(
    registration_id: str,
    attended: bool,
    store: Optional[RegistrationStore] = None,
) -> None:
    """
    Mark a registration as attended or not attended.

    Args:
        registration_id: Registration to update
        attended: New flag value
        store: Registration store (defaults to the configured one)

    Raises:
        RegistrationNotFoundError: If registration doesn't exist
        StorageError: If the store cannot be locked, read or written

    Behavior:
        - Idempotent: writing the current value leaves the file untouched
        - Access control is the caller's concern (admin panel login)
    """
    store = store or get_default_store()
    changed = store.set_attended(registration_id, bool(attended))
    if changed:
        logger.info(f"Attendance for {registration_id} set to {bool(attended)}")


def get_registrations(store: Optional[RegistrationStore] = None) -> List[Registration]:
    """All registrations in registration order."""
    store = store or get_default_store()
    return store.list_all()


def get_registration_count(store: Optional[RegistrationStore] = None) -> int:
    store = store or get_default_store()
    return store.count()


def get_attendance_summary(store: Optional[RegistrationStore] = None) -> Dict[str, int]:
    """Return {"total": n, "attended": m} for the admin header."""
    registrations = get_registrations(store)
    return {
        "total": len(registrations),
        "attended": sum(1 for r in registrations if r.attended),
    }
