"""
Label and value helpers for the exporter's collectors.

Each helper maps an optional record field to its metric representation:
absent values become the empty string so that every sample of a family
carries the same label names.
"""

from datetime import datetime
from typing import Iterable, Optional


def string_or_empty(value: Optional[str]) -> str:
    """Return the text value, or "" when absent."""
    if value is None:
        return ""
    return str(value)


def int_or_empty(value: Optional[int]) -> str:
    """Return the decimal form of an integer, or "" when absent."""
    if value is None:
        return ""
    return str(int(value))


def bool_or_empty(value: Optional[bool]) -> str:
    """Return "true"/"false", or "" when absent."""
    if value is None:
        return ""
    return "true" if value else "false"


def time_or_empty(value: Optional[datetime]) -> str:
    """Return the default human-readable form of a timestamp, or "" when absent."""
    if value is None:
        return ""
    return str(value)


def first_or_empty(values: Optional[Iterable[Optional[str]]]) -> str:
    """Return the first element of a list of names, or "" when empty."""
    for value in values or []:
        return string_or_empty(value)
    return ""


def join_or_empty(values: Optional[Iterable[str]], separator: str = ",") -> str:
    """Join a list of names, giving "" for an empty list."""
    return separator.join(string_or_empty(value) for value in values or [])


def bool_to_float(value: bool) -> float:
    return 1.0 if value else 0.0


def timestamp_value(value: datetime) -> float:
    """Unix epoch seconds of an aware timestamp."""
    return float(int(value.timestamp()))
