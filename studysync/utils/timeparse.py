from datetime import datetime

import pytz

from studysync.errors import ValidationError


def utcnow():
    """Current time as a naive UTC datetime, matching what is stored."""
    return datetime.now(pytz.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def parse_iso(value, field='time'):
    """Parse an ISO-8601 string (``Z`` suffix, offset or naive) into naive UTC."""
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if not value or not isinstance(value, str):
        raise ValidationError(f"{field} is required")
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f"Invalid {field}: {value}")
    return to_naive_utc(parsed)


def parse_window(start_value, end_value):
    """Parse a start/end pair and require end to be after start."""
    start = parse_iso(start_value, 'start_time')
    end = parse_iso(end_value, 'end_time')
    if end <= start:
        raise ValidationError("End time must be after start time")
    return start, end


def isoformat_utc(value):
    if value is None:
        return None
    return value.isoformat() + 'Z'
