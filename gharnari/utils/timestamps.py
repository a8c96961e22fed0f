"""
Ghar Nari - Timestamp Utilities
===============================

ISO-8601 helpers. Stored timestamps are UTC with millisecond precision
and a trailing "Z"; file names use microseconds so snapshots sort and
never collide.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    """Format an aware datetime as e.g. 2026-10-19T04:59:00.123Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def utc_now_iso() -> str:
    return to_iso(utc_now())


def parse_iso(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 string, None when malformed. Naive values are UTC."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def file_stamp(moment: datetime) -> str:
    """Filesystem-safe sortable stamp: 2026-10-19T04-59-00-123456Z."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H-%M-%S-%fZ")


def epoch_ns(moment: datetime) -> int:
    """Exact nanoseconds since the epoch, for os.utime."""
    return (moment - EPOCH) // timedelta(microseconds=1) * 1000


def from_epoch_ns(value: int) -> datetime:
    return EPOCH + timedelta(microseconds=value // 1000)


__all__ = [
    "utc_now",
    "utc_now_iso",
    "to_iso",
    "parse_iso",
    "file_stamp",
    "epoch_ns",
    "from_epoch_ns",
]
