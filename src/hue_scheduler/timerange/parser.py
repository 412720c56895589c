"""The time expression parser.

Scene names carry their schedule in parentheses, e.g.
``"Living room (18:23h-sunset, 6AM-8AM)"``. Every parenthesised group holds
comma-separated ``<left>-<right>`` segments. Each endpoint is one of:

- a 24-hour literal ``H[:MM]h`` (``24h`` is allowed and means 1440),
- a 12-hour literal ``H[:MM]AM`` / ``H[:MM]PM``,
- a variable name looked up in the parser's variable table (``sunrise``).

Parsing is best effort: a segment with an unresolvable endpoint is dropped
and the rest of the label is still used.

Licensed under MIT License
"""

import logging
import re
from types import MappingProxyType
from typing import Iterable, Mapping

from .models import MINUTES_PER_DAY, ParseResult, TimeRange

_LOGGER = logging.getLogger(__name__)

_GROUP_RE = re.compile(r"\(([^()]*)\)")
_TIME_24H_RE = re.compile(r"^(?P<hours>\d{1,2})(?::(?P<minutes>\d{2}))?h$")
_TIME_12H_RE = re.compile(
    r"^(?P<hours>\d{1,2})(?::(?P<minutes>\d{2}))?\s*(?P<meridiem>AM|PM)$",
    re.IGNORECASE,
)


def matches(time_range: TimeRange, value: int) -> bool:
    """Check if a minute-of-day falls inside a window.

    Windows are half-open: ``start`` is inside, ``end`` is not. A wrapping
    window matches from ``start`` to midnight and from midnight to ``end``.
    A zero-width window never matches.

    Args:
        time_range: The window to test.
        value: Minute of day.

    Returns:
        True if ``value`` is inside the window.
    """
    if time_range.start < time_range.end:
        return time_range.start <= value < time_range.end
    if time_range.start > time_range.end:
        return value >= time_range.start or value < time_range.end
    return False


def first_match(ranges: Iterable[TimeRange], value: int) -> TimeRange | None:
    """Return the first window containing ``value``, or None."""
    for time_range in ranges:
        if matches(time_range, value):
            return time_range
    return None


def _parse_24h(token: str) -> int | None:
    match = _TIME_24H_RE.match(token)
    if not match:
        return None

    hours = int(match["hours"])
    minutes = int(match["minutes"] or 0)

    if minutes > 59 or hours > 24:
        raise ValueError(f"24-hour time out of range: {token}")
    if hours == 24 and minutes:
        raise ValueError(f"24-hour time past midnight: {token}")

    return hours * 60 + minutes


def _parse_12h(token: str) -> int | None:
    match = _TIME_12H_RE.match(token)
    if not match:
        return None

    hours = int(match["hours"])
    minutes = int(match["minutes"] or 0)

    if minutes > 59 or hours > 12:
        raise ValueError(f"12-hour time out of range: {token}")

    # 12AM is midnight, 12PM is noon
    value = (hours % 12) * 60 + minutes
    if match["meridiem"].upper() == "PM":
        value += 12 * 60
    return value


class TimeRangeParser:
    """Turns scene labels into minute-of-day windows."""

    def __init__(self, variables: Mapping[str, int] | None = None) -> None:
        """Initialize the parser.

        Args:
            variables: Optional symbolic names (e.g. sunrise) to minute-of-day.
        """
        self._variables: dict[str, int] = {}
        self.define_variables(variables or {})

    @property
    def variables(self) -> Mapping[str, int]:
        """Current variable table (read-only view)."""
        return MappingProxyType(self._variables)

    def define_variables(self, variables: Mapping[str, int]) -> None:
        """Add or replace symbolic names used by later parses."""
        for name, value in variables.items():
            if not 0 <= value <= MINUTES_PER_DAY:
                raise ValueError(f"Variable {name!r} out of range: {value}")
            self._variables[name] = value

    def resolve(self, token: str) -> int | None:
        """Resolve one endpoint to a minute-of-day.

        Literal forms are tried first. A token that looks like a literal but is
        out of range does not fall through to the variable table.

        Args:
            token: Endpoint text, e.g. "18:23h", "6PM" or "sunset".

        Returns:
            Minute of day, or None if the token does not resolve.
        """
        token = token.strip()
        if not token:
            return None

        try:
            for literal in (_parse_24h, _parse_12h):
                value = literal(token)
                if value is not None:
                    return value
        except ValueError as e:
            _LOGGER.debug(f"Rejected time literal: {e}")
            return None

        return self._variables.get(token)

    def parse_segment(self, segment: str) -> TimeRange | None:
        """Parse a single ``<left>-<right>`` segment."""
        left, sep, right = segment.partition("-")
        if not sep or "-" in right:
            return None

        start = self.resolve(left)
        end = self.resolve(right)
        if start is None or end is None:
            return None

        return TimeRange(start, end)

    def parse_with_report(self, text: str) -> ParseResult:
        """Parse every window in a label and count dropped segments.

        Args:
            text: Free text, typically a scene name.

        Returns:
            ParseResult with the resolved windows and the skipped count.
        """
        ranges: list[TimeRange] = []
        skipped = 0

        for group in _GROUP_RE.findall(text):
            for segment in group.split(","):
                if not segment.strip():
                    continue

                time_range = self.parse_segment(segment)
                if time_range is None:
                    _LOGGER.debug(f"Skipping unparseable segment {segment!r} in {text!r}")
                    skipped += 1
                    continue

                ranges.append(time_range)

        return ParseResult(ranges=ranges, skipped=skipped)

    def parse(self, text: str) -> list[TimeRange]:
        """Parse every window in a label; malformed segments are dropped."""
        return self.parse_with_report(text).ranges
