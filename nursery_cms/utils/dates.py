from datetime import date, datetime
from typing import Optional


def isoformat(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        # Timestamps are stored as naive UTC
        return value.isoformat() + 'Z'
    return value.isoformat()


def parse_date(value: str) -> date:
    """Parse ``YYYY-MM-DD``; a full ISO timestamp is accepted and truncated."""
    value = value.strip()
    if len(value) > 10:
        return parse_datetime(value).date()
    return date.fromisoformat(value)


def parse_datetime(value: str) -> datetime:
    value = value.strip()
    if value.endswith('Z'):
        value = value[:-1]
    parsed = datetime.fromisoformat(value)
    # Stored timestamps are naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.replace(tzinfo=None) - parsed.utcoffset()
    return parsed
