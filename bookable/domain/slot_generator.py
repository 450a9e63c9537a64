"""
Slot generation: expand one weekly rule into fixed-length candidate slots.
"""

import logging
from datetime import date, time
from typing import List

import pendulum
from pendulum import DateTime

from .exceptions import InvalidEventTypeError
from .models import EventTypeConfig, TimeSlot, WeeklyRule
from .timezones import resolve_timezone

logger = logging.getLogger(__name__)


def localize(day: date, clock: time, owner_timezone: str) -> DateTime:
    """Anchor a local clock time on a date in the owner's timezone."""
    return pendulum.datetime(
        day.year,
        day.month,
        day.day,
        clock.hour,
        clock.minute,
        tz=resolve_timezone(owner_timezone),
    )


def generate_slots(
    rule: WeeklyRule,
    target_date: date,
    event_type: EventTypeConfig,
    owner_timezone: str
) -> List[TimeSlot]:
    """
    Generate every candidate slot for one rule on one date.

    The first slot starts at the rule's start time; each following slot starts
    ``event_type.step`` minutes later. A slot is emitted only when it ends at
    or before the rule's end time, and generation stops at the first slot
    that would overshoot it.

    Raises:
        InvalidEventTypeError: If length or step is not positive
    """
    length = event_type.length
    step = event_type.step

    # The loop never advances with a non-positive step
    if length <= 0 or step <= 0:
        raise InvalidEventTypeError(
            f"Slot length and interval must be positive, got {length} and {step}"
        )

    window_start = localize(target_date, rule.start_time, owner_timezone)
    window_end = localize(target_date, rule.end_time, owner_timezone)

    slots: List[TimeSlot] = []
    current = window_start

    while current < window_end:
        slot_end = current.add(minutes=length)
        if slot_end > window_end:
            break

        slots.append(TimeSlot(start=current, end=slot_end, available=True))
        current = current.add(minutes=step)

    logger.debug("Rule %s produced %d candidate slot(s) on %s", rule, len(slots), target_date)

    return slots
