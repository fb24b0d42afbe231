"""
Core Utilities.

Timestamp helpers shared across the engine. Note timestamps are stored
as ISO 8601 strings exactly as they were captured or persisted; parsing
happens only when something needs to order them.
"""

import math
from datetime import datetime, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Return current UTC time as an aware datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """
    Return the current UTC time as an ISO 8601 string.

    Millisecond precision with a trailing 'Z', e.g. 2024-05-01T09:30:00.123Z.
    """
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(value: object) -> datetime:
    """
    Interpret a stored timestamp as a point in time.

    Accepts ISO 8601 strings (naive values are taken as UTC) and numbers
    as epoch milliseconds. Anything absent or unparsable maps to EPOCH.

    Args:
        value: Raw timestamp from a note or snapshot

    Returns:
        Timezone-aware datetime
    """
    if isinstance(value, bool):
        return EPOCH

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return EPOCH
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return EPOCH

    if not isinstance(value, str) or not value.strip():
        return EPOCH

    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return EPOCH

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
