"""
Domain models for weekly rules, booked intervals and time slots.

Local clock times (``datetime.time``) and absolute instants (timezone-aware
``pendulum.DateTime``) are kept apart: rules only ever carry clock times,
intervals and slots only ever carry instants.
"""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime, time
from typing import FrozenSet, Iterable, Optional

import pendulum
from pendulum import DateTime

from .exceptions import InvalidEventTypeError, InvalidRuleError

CLOCK_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")

WEEKDAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


def _as_instant(value: datetime, label: str) -> DateTime:
    if value.tzinfo is None:
        raise ValueError(f"{label} {value} must be timezone-aware")
    return pendulum.instance(value)


def parse_instant(value: str, timezone: Optional[str] = None) -> DateTime:
    """
    Parse an ISO 8601 string into an instant.

    Strings without an offset are read in ``timezone`` (UTC when omitted).

    Raises:
        ValueError: If the string is not a date-time, e.g. a duration
    """
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO 8601 string, got {value!r}")

    parsed = pendulum.parse(value, tz=timezone or "UTC")
    if not isinstance(parsed, DateTime):
        raise ValueError(f"'{value}' is not a date-time")

    return parsed


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable range between two absolute instants.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        object.__setattr__(self, "start", _as_instant(self.start, "Start time"))
        object.__setattr__(self, "end", _as_instant(self.end, "End time"))
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return self.start < other.end and self.end > other.start

    def expand(self, before_minutes: int = 0, after_minutes: int = 0) -> "TimeRange":
        """Return a new range widened outward on both edges."""
        return TimeRange(
            start=self.start.subtract(minutes=before_minutes),
            end=self.end.add(minutes=after_minutes),
        )

    def __str__(self) -> str:
        return f"{self.start.format('YYYY-MM-DD HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class BookedInterval(TimeRange):
    """
    An existing committed reservation that occupies the owner's calendar.
    """

    def envelope(self, before_buffer: int = 0, after_buffer: int = 0) -> TimeRange:
        """
        Return the interval padded by the event type's buffers.

        No other booking may start or end inside the envelope.
        """
        return self.expand(before_minutes=before_buffer, after_minutes=after_buffer)


def parse_clock_time(value: str) -> time:
    """
    Parse an ``HH:mm`` clock string into a naive ``time``.

    Raises:
        InvalidRuleError: If the string is not a valid 24h clock time
    """
    match = CLOCK_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidRuleError(f"Invalid clock time '{value}', expected HH:mm")
    return time(hour=int(match.group(1)), minute=int(match.group(2)))


@dataclass(frozen=True)
class WeeklyRule:
    """
    A recurring weekly working-hours window.

    ``days`` uses 0=Sunday ... 6=Saturday. Start and end are local clock
    times interpreted in the owner's timezone; a rule never spans midnight.
    """
    days: FrozenSet[int]
    start_time: time
    end_time: time

    def __post_init__(self):
        object.__setattr__(self, "days", frozenset(self.days))

        if not self.days:
            raise InvalidRuleError("A weekly rule needs at least one weekday")

        invalid_days = sorted(day for day in self.days if day not in range(7))
        if invalid_days:
            raise InvalidRuleError(f"Weekdays must be between 0 and 6, got {invalid_days}")

        for value in (self.start_time, self.end_time):
            if value.tzinfo is not None:
                raise InvalidRuleError(f"Rule clock time {value} must not carry a timezone")

        if self.start_time >= self.end_time:
            raise InvalidRuleError(
                f"Rule start {self.start_time:%H:%M} must be before end {self.end_time:%H:%M}"
            )

    @classmethod
    def parse(cls, days: Iterable[int], start_time: str, end_time: str) -> "WeeklyRule":
        """Build a rule from ``HH:mm`` strings."""
        return cls(
            days=frozenset(days),
            start_time=parse_clock_time(start_time),
            end_time=parse_clock_time(end_time),
        )

    def applies_to(self, weekday: int) -> bool:
        """Check if the rule covers a weekday (0=Sunday)."""
        return weekday in self.days

    def __str__(self) -> str:
        names = ", ".join(WEEKDAY_NAMES[day][:3] for day in sorted(self.days))
        return f"{names} {self.start_time:%H:%M}-{self.end_time:%H:%M}"


@dataclass(frozen=True)
class EventTypeConfig:
    """
    Booking rules for one offerable event type. All values are minutes.
    """
    length: int
    before_buffer: int = 0
    after_buffer: int = 0
    slot_interval: Optional[int] = None
    minimum_booking_notice: int = 0

    def __post_init__(self):
        if self.length <= 0:
            raise InvalidEventTypeError(f"Event length must be greater than zero, got {self.length}")
        if self.slot_interval is not None and self.slot_interval <= 0:
            raise InvalidEventTypeError(
                f"Slot interval must be greater than zero, got {self.slot_interval}"
            )
        if self.before_buffer < 0 or self.after_buffer < 0:
            raise InvalidEventTypeError("Buffers must not be negative")
        if self.minimum_booking_notice < 0:
            raise InvalidEventTypeError("Minimum booking notice must not be negative")

    @property
    def step(self) -> int:
        """Minutes between consecutive slot starts."""
        return self.slot_interval or self.length


@dataclass(frozen=True)
class TimeSlot:
    """
    A candidate booking window produced by the engine.
    """
    start: DateTime
    end: DateTime
    available: bool = field(default=True)

    def __post_init__(self):
        object.__setattr__(self, "start", _as_instant(self.start, "Slot start"))
        object.__setattr__(self, "end", _as_instant(self.end, "Slot end"))
        if self.start >= self.end:
            raise ValueError(f"Slot start {self.start} must be before slot end {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def mark_unavailable(self) -> "TimeSlot":
        return replace(self, available=False)

    def in_timezone(self, timezone: str) -> "TimeSlot":
        """Re-express both instants in another zone."""
        return replace(
            self,
            start=self.start.in_timezone(timezone),
            end=self.end.in_timezone(timezone),
        )

    def to_dict(self) -> dict:
        """Serialize as UTC ISO-8601 instants."""
        return {
            "start": self.start.in_timezone("UTC").to_iso8601_string(),
            "end": self.end.in_timezone("UTC").to_iso8601_string(),
        }

    def format_display(self, timezone: Optional[str] = None, clock: str = "12") -> str:
        """
        Format the slot for display.

        Format: ``9:00 AM - 9:30 AM`` (clock="12") or ``09:00 - 09:30`` (clock="24").
        """
        if clock not in ("12", "24"):
            raise ValueError(f"clock must be '12' or '24', got {clock!r}")

        pattern = "h:mm A" if clock == "12" else "HH:mm"
        start = self.start.in_timezone(timezone) if timezone else self.start
        end = self.end.in_timezone(timezone) if timezone else self.end

        return f"{start.format(pattern)} - {end.format(pattern)}"
