"""
Minimum booking notice: drop slots that start too soon.
"""

import logging
from datetime import datetime
from typing import List, Sequence

import pendulum
from pendulum import DateTime

from .models import TimeSlot
from .timezones import resolve_timezone

logger = logging.getLogger(__name__)


def notice_cutoff(now: datetime, minimum_notice: int, owner_timezone: str) -> DateTime:
    """Return the earliest instant a slot may start after (exclusive)."""
    if now.tzinfo is None:
        raise ValueError(f"Reference time {now} must be timezone-aware")
    zone = resolve_timezone(owner_timezone)
    return pendulum.instance(now).in_timezone(zone).add(minutes=minimum_notice)


def apply_minimum_notice(
    slots: Sequence[TimeSlot],
    minimum_notice: int,
    now: datetime,
    owner_timezone: str
) -> List[TimeSlot]:
    """
    Keep only slots starting strictly after ``now + minimum_notice``.

    Slots failing the check are removed, not flagged.
    """
    if minimum_notice < 0:
        raise ValueError(f"Minimum notice must not be negative, got {minimum_notice}")

    cutoff = notice_cutoff(now, minimum_notice, owner_timezone)
    kept = [slot for slot in slots if slot.start > cutoff]

    logger.debug("Notice cutoff %s dropped %d slot(s)", cutoff, len(slots) - len(kept))

    return kept
