"""
Metrics utilities package for the GitHub exporter.
"""

from .utils import (
    string_or_empty,
    int_or_empty,
    bool_or_empty,
    time_or_empty,
    first_or_empty,
    join_or_empty,
    bool_to_float,
    timestamp_value,
)
