"""
Time expression parser.

Turns human-authored windows in scene names ("(18:23h-sunset)",
"(6AM-6PM)") into minute-of-day ranges, resolving symbolic variables such
as sunrise and sunset at evaluation time.
"""

from .models import MINUTES_PER_DAY, ParseResult, TimeRange
from .parser import TimeRangeParser, first_match, matches

__all__ = [
    "MINUTES_PER_DAY",
    "ParseResult",
    "TimeRange",
    "TimeRangeParser",
    "first_match",
    "matches",
]
