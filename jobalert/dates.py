"""Posting-date parsing: ISO / RFC-2822 strings, unix seconds and milliseconds."""
from __future__ import annotations

import math
from datetime import datetime, timezone

from dateutil import parser as date_parser

from jobalert.models import PostedAt

# Below this a numeric timestamp is read as seconds, above it as milliseconds.
_MS_THRESHOLD = 10_000_000_000


def _from_number(value: float) -> datetime | None:
    seconds = value if value < _MS_THRESHOLD else value / 1000.0
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_posted_at(value: PostedAt | datetime) -> datetime | None:
    """Return an aware UTC datetime, or None when missing or unparseable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return None
        return _from_number(float(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            return _from_number(float(text))
        except ValueError:
            pass
        try:
            dt = date_parser.parse(text)
        except (ValueError, OverflowError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_since(value: PostedAt, now: datetime | None = None) -> float:
    """Days elapsed since posting; ``math.inf`` when the date is unknown."""
    posted = parse_posted_at(value)
    if posted is None:
        return math.inf
    now = now or datetime.now(timezone.utc)
    return max(0.0, (now - posted).total_seconds() / 86400.0)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
