"""Time interval value type and the overlap test used to prevent double-booking."""

from dataclasses import dataclass
from datetime import datetime


class InvalidIntervalError(ValueError):
    """Raised when an interval finishes before it starts."""


@dataclass(frozen=True)
class TimeInterval:
    """A span of time with inclusive start and end instants."""

    start: datetime
    end: datetime

    def is_well_formed(self) -> bool:
        return self.start <= self.end


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    # Closed bounds: an interval ending at 11:00 overlaps one starting at 11:00.
    return a.start <= b.end and b.start <= a.end


def require_well_formed(interval: TimeInterval) -> TimeInterval:
    if not interval.is_well_formed():
        raise InvalidIntervalError('Appointments cannot finish before they start.')
    return interval
