from datetime import datetime, timezone
from typing import Optional


def datetime_converter(iso_string: str) -> datetime:
    """Converts an ISO 8601 string to a timezone-aware datetime object.

    PurlDB release dates come either as plain dates ('2021-02-20') or as
    timestamps with a 'Z' suffix and optional fractional seconds, which this
    function handles. Naive values are taken to be UTC.

    Args:
        iso_string: The ISO 8601 datetime string, e.g.,
            '2025-03-01T07:10:35.20124Z'.

    Returns:
        A timezone-aware datetime object.

    Raises:
        ValueError: If the string is not an ISO 8601 date or datetime.
    """
    value = iso_string.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_release_date(value: Optional[str]) -> Optional[datetime]:
    """Parses a release date, returning None when it is missing or malformed."""
    if not value:
        return None
    try:
        return datetime_converter(value)
    except ValueError:
        return None


def format_date(value: Optional[str]) -> str:
    """Formats a release date as e.g. 'Feb 20, 2021'.

    Empty values give an empty string; unparseable values are returned as-is.
    """
    if not value:
        return ""
    dt = parse_release_date(value)
    if dt is None:
        return value
    return f"{dt.strftime('%b')} {dt.day}, {dt.year}"
