"""Low-level JSON file I/O operations with locking."""
import json
import logging
import os
import shutil
import sys
import tempfile
import threading
import time
from contextlib import contextmanager
from typing import Any, Dict

if sys.platform == "win32":
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)

# One in-process lock per data file; the OS lock only covers other processes
# reliably on every platform.
_THREAD_LOCKS: Dict[str, threading.RLock] = {}
_THREAD_LOCKS_GUARD = threading.Lock()


def _thread_lock_for(file_path: str) -> threading.RLock:
    key = os.path.abspath(file_path)
    with _THREAD_LOCKS_GUARD:
        if key not in _THREAD_LOCKS:
            _THREAD_LOCKS[key] = threading.RLock()
        return _THREAD_LOCKS[key]


def load_json(file_path: str, retry_count: int = 3, retry_delay: float = 0.1) -> Dict[str, Any]:
    """
    Load and parse JSON file with UTF-8 encoding.

    Args:
        file_path: Path to JSON file
        retry_count: Number of retry attempts for permission errors (default: 3)
        retry_delay: Delay in seconds between retries (default: 0.1)

    Returns:
        dict: Parsed JSON content

    Raises:
        FileNotFoundError: If file doesn't exist
        json.JSONDecodeError: If JSON is malformed
        PermissionError: If file not readable after retries
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    for attempt in range(retry_count):
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except PermissionError:
            if attempt < retry_count - 1:
                time.sleep(retry_delay)
        except json.JSONDecodeError as e:
            raise json.JSONDecodeError(f"Malformed JSON in {file_path}: {e.msg}", e.doc, e.pos)

    raise PermissionError(f"Cannot read file after {retry_count} attempts: {file_path}")


def _replace_file(temp_path: str, file_path: str) -> None:
    if sys.platform != "win32":
        os.replace(temp_path, file_path)
        return

    # Windows can briefly refuse the rename while a reader holds the file
    for attempt in range(3):
        try:
            os.replace(temp_path, file_path)
            return
        except PermissionError:
            if attempt == 2:
                raise
            time.sleep(0.1)


def save_json(file_path: str, data: Dict[str, Any], backup: bool = True) -> None:
    """
    Save data to JSON file atomically with UTF-8 encoding.

    Args:
        file_path: Path to JSON file
        data: Dictionary to save
        backup: If True, copy the current file to ``<file>.backup`` first

    Raises:
        IOError: If backup or write operation fails
    """
    dir_path = os.path.dirname(file_path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    if backup and os.path.exists(file_path):
        try:
            shutil.copy2(file_path, f"{file_path}.backup")
        except OSError as e:
            raise IOError(f"Failed to create backup: {e}") from e

    temp_fd, temp_path = tempfile.mkstemp(dir=dir_path or ".", prefix=".tmp_", suffix=".json")

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        _replace_file(temp_path, file_path)
    except OSError as e:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise IOError(f"Failed to write file {file_path}: {e}") from e


def ensure_json_file(file_path: str, initial: Dict[str, Any]) -> None:
    """Create ``file_path`` with ``initial`` content if it does not exist yet."""
    if os.path.exists(file_path):
        return
    with _thread_lock_for(file_path):
        if not os.path.exists(file_path):
            logger.info("Creating data file %s", file_path)
            save_json(file_path, initial, backup=False)



def _os_lock(handle) -> None:
    """Take a non-blocking exclusive lock; the OS drops it if the process dies."""
    if sys.platform == "win32":
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _os_unlock(handle) -> None:
    if sys.platform == "win32":
        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@contextmanager
def lock_file(file_path: str, timeout: float = 5.0):
    """
    Context manager for exclusive access to a data file.

    The OS lock is taken on a sidecar ``<file>.lock`` so that the atomic
    rename in ``save_json`` never swaps the locked inode away. The lock file
    itself is never removed; only the OS lock on it marks ownership, so a
    crashed holder leaves nothing that blocks later callers.

    Usage:
        with lock_file('data/registrations.json'):
            data = load_json('data/registrations.json')
            data['registrations'].append(record)
            save_json('data/registrations.json', data)

    Raises:
        TimeoutError: If unable to acquire lock within timeout
    """
    thread_lock = _thread_lock_for(file_path)
    if not thread_lock.acquire(timeout=timeout):
        raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")

    lock_path = f"{file_path}.lock"
    dir_path = os.path.dirname(lock_path)
    if dir_path:
        os.makedirs(dir_path, exist_ok=True)

    try:
        with open(lock_path, "a+") as lock_handle:
            start_time = time.time()
            while True:
                try:
                    _os_lock(lock_handle)
                    break
                except OSError:
                    if time.time() - start_time > timeout:
                        raise TimeoutError(f"Could not acquire lock on {file_path} within {timeout}s")
                    time.sleep(0.05)
            try:
                yield
            finally:
                _os_unlock(lock_handle)
    finally:
        thread_lock.release()
