"""Data models for the time expression parser.

Licensed under MIT License
"""

from dataclasses import dataclass, field

MINUTES_PER_DAY = 1440


@dataclass(frozen=True)
class TimeRange:
    """A minute-of-day window.

    ``start > end`` means the window wraps past midnight. ``end`` may be 1440
    only through the literal ``24h``; it is never reduced modulo a day.

    Attributes:
        start: First minute inside the window.
        end: First minute after the window (half-open).
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        for value in (self.start, self.end):
            if not 0 <= value <= MINUTES_PER_DAY:
                raise ValueError(f"Minute-of-day out of range: {value}")

    @property
    def is_wrapping(self) -> bool:
        """True if the window spans midnight."""
        return self.start > self.end

    @property
    def is_empty(self) -> bool:
        """Zero-width windows never match."""
        return self.start == self.end


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing one label.

    Attributes:
        ranges: Every window that resolved, in label order.
        skipped: Number of segments dropped because an endpoint did not resolve.
    """

    ranges: list[TimeRange] = field(default_factory=list)
    skipped: int = 0
