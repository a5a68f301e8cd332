"""Application settings loaded from environment variables and .env."""
import os
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Tuple

from dotenv import dotenv_values


# Team size range per rule set: (min, max)
RULESETS: Dict[str, Tuple[int, int]] = {
    "identity-roll-v1": (2, 4),
    "identity-roll-v2": (3, 5),
}
DEFAULT_RULESET = "identity-roll-v2"

_ENV_KEYS = {
    "ETHERX_INSTITUTION_DOMAIN",
    "ETHERX_INSTITUTION_NAME",
    "ETHERX_RULESET",
    "ETHERX_TEAM_SIZE_MIN",
    "ETHERX_TEAM_SIZE_MAX",
    "ETHERX_REGISTRATIONS_FILE",
    "ETHERX_LOCK_TIMEOUT",
    "ETHERX_LOG_LEVEL",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
}

_ENV_LOADED = False
_ENV_LOCK = Lock()
_settings_cache: Optional["Settings"] = None


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the registration service."""

    institution_domain: str = "psgtech.ac.in"
    institution_name: str = "PSG College of Technology"
    ruleset: str = DEFAULT_RULESET
    team_size_min: int = 3
    team_size_max: int = 5
    registrations_file: str = "data/registrations.json"
    lock_timeout: float = 5.0
    log_level: str = "INFO"

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.institution_domain or not self.institution_domain.strip():
            raise ValueError("Institution domain cannot be empty")

        if self.ruleset not in RULESETS:
            raise ValueError(f"Unknown ruleset: {self.ruleset}")

        if self.team_size_min < 1:
            raise ValueError("Minimum team size must be at least 1")

        if self.team_size_min > self.team_size_max:
            raise ValueError(
                f"Minimum team size ({self.team_size_min}) cannot exceed "
                f"maximum team size ({self.team_size_max})"
            )

        if self.lock_timeout <= 0:
            raise ValueError("Lock timeout must be positive")

    @property
    def team_sizes(self) -> range:
        """Allowed team sizes for a newly created team."""
        return range(self.team_size_min, self.team_size_max + 1)


def load_env_file(env_path: Path = Path(".env")) -> None:
    """Load known settings from a .env file without overriding the environment."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        if env_path.exists():
            for key, value in dotenv_values(env_path).items():
                if key in _ENV_KEYS and value is not None and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def _env_int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be an integer, got: {raw}") from e


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{key} must be a number, got: {raw}") from e


def load_settings() -> Settings:
    """
    Build settings from the environment.

    Returns:
        Settings: validated settings

    Raises:
        ValueError: If a variable is malformed or the team size range is invalid

    Behavior:
        - Loads .env once per process (real environment variables win)
        - Team size bounds default to the selected ruleset's range
    """
    load_env_file()

    ruleset = os.getenv("ETHERX_RULESET", DEFAULT_RULESET).strip()
    if ruleset not in RULESETS:
        raise ValueError(f"Unknown ruleset: {ruleset}")
    default_min, default_max = RULESETS[ruleset]

    return Settings(
        institution_domain=os.getenv("ETHERX_INSTITUTION_DOMAIN", "psgtech.ac.in").strip().lower(),
        institution_name=os.getenv("ETHERX_INSTITUTION_NAME", "PSG College of Technology").strip(),
        ruleset=ruleset,
        team_size_min=_env_int("ETHERX_TEAM_SIZE_MIN", default_min),
        team_size_max=_env_int("ETHERX_TEAM_SIZE_MAX", default_max),
        registrations_file=os.getenv("ETHERX_REGISTRATIONS_FILE", "data/registrations.json"),
        lock_timeout=_env_float("ETHERX_LOCK_TIMEOUT", 5.0),
        log_level=os.getenv("ETHERX_LOG_LEVEL", "INFO").strip().upper(),
    )


def get_settings() -> Settings:
    """Return the process-wide settings, loading them on first use."""
    global _settings_cache

    if _settings_cache is None:
        _settings_cache = load_settings()
    return _settings_cache


def _clear_cache() -> None:
    """Forget cached settings so the next call re-reads the environment."""
    global _settings_cache
    _settings_cache = None
