"""Helpers for the YYYY-MM-DD publication windows used by manuals and news."""

import re
from datetime import UTC, date, datetime
from typing import Any

_YMD = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def normalize_ymd(value: Any) -> str | None:
    """Return the leading YYYY-MM-DD of value, or None if it is empty or malformed."""
    if not value:
        return None
    text = str(value)[:10]
    if not _YMD.match(text):
        return None
    try:
        date.fromisoformat(text)
    except ValueError:
        return None
    return text


def today_ymd() -> str:
    return datetime.now(UTC).date().isoformat()


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def within_window(start: str | None, end: str | None, today: str) -> bool:
    """True when today lies in [start, end]; an empty bound is open."""
    return (not start or start <= today) and (not end or end >= today)
