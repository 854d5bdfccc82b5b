"""Conversions between user-entered text and distances/dates."""

import re
from datetime import date
from typing import Optional, Union

from dateutil import parser as date_parser

_NON_DIGITS = re.compile(r"\D")


def parse_distance(text: Union[str, int, None]) -> int:
    """
    Parse a user-entered distance such as "12.500" or "12,500 km".

    Every non-digit is dropped. Empty or digitless input gives 0.
    """
    if text is None:
        return 0
    if isinstance(text, int) and not isinstance(text, bool):
        return max(text, 0)
    digits = _NON_DIGITS.sub("", str(text))
    return int(digits) if digits else 0


def format_distance(value: Optional[float]) -> str:
    """Format a distance for display."""
    if value is None:
        return "-"
    if value < 0:
        return f"-{abs(value):,.0f}"
    return f"{value:,.0f}"


def parse_date(text: str) -> str:
    """
    Parse a user-entered date into ISO format.

    ISO input is taken as-is; anything else is read day-first
    ("15/01/2025"). Raises ValueError when the text is not a date.
    """
    text = (text or "").strip()
    if not text:
        raise ValueError("Empty date")
    try:
        return date.fromisoformat(text).isoformat()
    except ValueError:
        pass
    try:
        return date_parser.parse(text, dayfirst=True).date().isoformat()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Invalid date: {text!r}") from e


def format_date(date_str: Optional[str]) -> str:
    """Format an ISO date as dd/mm/yyyy for display. Non-ISO text is shown as-is."""
    if not date_str:
        return "-"
    try:
        return date.fromisoformat(date_str).strftime("%d/%m/%Y")
    except ValueError:
        return date_str


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if not text:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
