"""
Availability for one owner: weekly rules in, chronological slots out.

``SlotCalculator`` runs rule selection, slot generation, conflict
resolution, notice filtering and display projection in that order. Every
call works on its own inputs and only reads the wall clock when no ``now``
is passed in.
"""

import logging
from datetime import date, datetime
from typing import List, Optional, Sequence

import pendulum
from pendulum import Date, DateTime

from .conflicts import resolve_conflicts
from .models import BookedInterval, EventTypeConfig, TimeSlot, WeeklyRule
from .notice import apply_minimum_notice
from .projection import project_slots
from .rules import dates_with_availability, local_date, select_rules
from .slot_generator import generate_slots
from .timezones import resolve_timezone

logger = logging.getLogger(__name__)


class SlotCalculator:
    """
    Calculates bookable slots for one owner's weekly working hours.

    Algorithm:
    1. Select the weekly rules covering the target date's weekday
    2. Expand each rule into fixed-length candidate slots
    3. Mark slots overlapping a buffered booking as unavailable
    4. Drop slots starting before now + minimum notice
    5. Re-express the survivors in the display timezone
    """

    def __init__(self, weekly_rules: Sequence[WeeklyRule], owner_timezone: str):
        self.weekly_rules = tuple(weekly_rules)
        self.owner_timezone = resolve_timezone(owner_timezone).name

    def compute_availability(
        self,
        target: date,
        booked_intervals: Sequence[BookedInterval],
        event_type: EventTypeConfig,
        target_timezone: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> List[TimeSlot]:
        """
        Compute the slots offered for one date and event type.

        Args:
            target: Calendar date, interpreted in the owner's timezone
            booked_intervals: Committed bookings occupying the calendar
            event_type: Duration, buffer, interval and notice settings
            target_timezone: Display timezone for the returned slots
            now: Reference instant for notice filtering, read from the
                wall clock when omitted

        Returns:
            Slots in chronological order, each flagged available or not.
            Empty when no rule applies or every candidate was filtered out.
        """
        if target_timezone is not None:
            resolve_timezone(target_timezone)

        reference = self._reference_now(now)
        day = local_date(target, self.owner_timezone)

        rules = select_rules(day, self.weekly_rules, self.owner_timezone)
        if not rules:
            return []

        candidates = self._generate_candidates(day, rules, event_type)

        resolved = resolve_conflicts(
            candidates,
            booked_intervals,
            before_buffer=event_type.before_buffer,
            after_buffer=event_type.after_buffer,
        )

        upcoming = apply_minimum_notice(
            resolved,
            event_type.minimum_booking_notice,
            now=reference,
            owner_timezone=self.owner_timezone,
        )

        slots = project_slots(upcoming, target_timezone, self.owner_timezone)

        logger.debug(
            "%s: %d slot(s), %d available",
            day.to_date_string(),
            len(slots),
            sum(1 for slot in slots if slot.available),
        )

        return slots

    def is_slot_available(
        self,
        candidate_start: datetime,
        event_type: EventTypeConfig,
        booked_intervals: Sequence[BookedInterval]
    ) -> bool:
        """
        Check one proposed booking against existing bookings and buffers.

        Only conflicts are evaluated; working hours and notice are not.
        """
        return is_slot_available(
            candidate_start,
            event_type,
            booked_intervals,
            self.owner_timezone,
        )

    def dates_with_availability(self, year: int, month: int) -> List[Date]:
        """List the dates of a month (1-12) covered by any weekly rule."""
        return dates_with_availability(year, month, self.weekly_rules, self.owner_timezone)

    def _reference_now(self, now: Optional[datetime]) -> DateTime:
        if now is None:
            return pendulum.now(self.owner_timezone)
        if now.tzinfo is None:
            raise ValueError(f"Reference time {now} must be timezone-aware")
        return pendulum.instance(now).in_timezone(self.owner_timezone)

    def _generate_candidates(
        self,
        day: Date,
        rules: Sequence[WeeklyRule],
        event_type: EventTypeConfig
    ) -> List[TimeSlot]:
        """
        Expand every applicable rule and order the result by start instant.

        Rules are expanded independently; overlapping rule blocks are not
        merged and may yield slots with the same start.
        """
        candidates: List[TimeSlot] = []

        for rule in rules:
            candidates.extend(
                generate_slots(rule, day, event_type, self.owner_timezone)
            )

        return sorted(candidates, key=lambda slot: slot.start)


def compute_availability(
    target: date,
    weekly_rules: Sequence[WeeklyRule],
    booked_intervals: Sequence[BookedInterval],
    event_type: EventTypeConfig,
    owner_timezone: str,
    target_timezone: Optional[str] = None,
    now: Optional[datetime] = None
) -> List[TimeSlot]:
    """Compute the slots offered for one date; see ``SlotCalculator``."""
    calculator = SlotCalculator(weekly_rules=weekly_rules, owner_timezone=owner_timezone)
    return calculator.compute_availability(
        target,
        booked_intervals,
        event_type,
        target_timezone=target_timezone,
        now=now,
    )


def is_slot_available(
    candidate_start: datetime,
    event_type: EventTypeConfig,
    booked_intervals: Sequence[BookedInterval],
    owner_timezone: str
) -> bool:
    """
    Check a single proposed booking just before it is committed.

    Builds the slot ``[candidate_start, candidate_start + length)`` and runs
    it through the same conflict resolution as the full computation.
    """
    zone = resolve_timezone(owner_timezone)

    if candidate_start.tzinfo is None:
        start = pendulum.instance(candidate_start, tz=zone)
    else:
        start = pendulum.instance(candidate_start).in_timezone(zone)

    slot = TimeSlot(start=start, end=start.add(minutes=event_type.length))

    resolved = resolve_conflicts(
        [slot],
        booked_intervals,
        before_buffer=event_type.before_buffer,
        after_buffer=event_type.after_buffer,
    )

    return resolved[0].available
