"""Date and time utility functions."""
from datetime import datetime


def now_iso() -> str:
    """Return the current local time as an ISO 8601 string with offset."""
    return datetime.now().astimezone().isoformat()


def parse_iso(timestamp: str) -> datetime:
    """
    Parse ISO 8601 timestamp, accepting a trailing "Z".

    Raises:
        ValueError: If timestamp format is invalid
    """
    try:
        return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid timestamp format: {timestamp}") from e


def format_timestamp(timestamp: str) -> str:
    """
    Format stored timestamp for display (YYYY-MM-DD HH:MM).

    Returns the input unchanged if it cannot be parsed.
    """
    try:
        return parse_iso(timestamp).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return timestamp
