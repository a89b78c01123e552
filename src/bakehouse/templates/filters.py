"""Custom Jinja2 filters for site templates."""

from __future__ import annotations

from datetime import datetime
from email.utils import format_datetime as rfc2822
from typing import Any


def format_date(value: Any, format_str: str = "%Y-%m-%d") -> str:
    """Format a datetime with strftime; other values are stringified."""
    if not isinstance(value, datetime):
        return "" if value is None else str(value)
    return value.strftime(format_str)


def rfc822(value: Any) -> str:
    """Date as used by RSS ``pubDate`` elements."""
    if not isinstance(value, datetime):
        return "" if value is None else str(value)
    return rfc2822(value.astimezone())


def isoformat(value: Any) -> str:
    if not isinstance(value, datetime):
        return "" if value is None else str(value)
    return value.isoformat()
