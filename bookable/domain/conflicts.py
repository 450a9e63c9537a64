"""
Conflict resolution between candidate slots and existing bookings.
"""

import logging
from typing import List, Sequence

from .models import BookedInterval, TimeRange, TimeSlot

logger = logging.getLogger(__name__)


def conflicts_with(slot: TimeSlot, envelope: TimeRange) -> bool:
    """
    Check a slot against one buffered booking envelope.

    A conflict is any of:
    - the slot starts inside ``[envelope.start, envelope.end)``
    - the slot ends inside ``(envelope.start, envelope.end]``
    - the slot fully contains the envelope

    The last case only matters when a slot is longer than a booking plus its
    buffers, e.g. a half-day event against a short meeting.
    """
    starts_inside = envelope.start <= slot.start < envelope.end
    ends_inside = envelope.start < slot.end <= envelope.end
    contains = slot.start <= envelope.start and slot.end >= envelope.end

    return starts_inside or ends_inside or contains


def resolve_conflicts(
    slots: Sequence[TimeSlot],
    bookings: Sequence[BookedInterval],
    before_buffer: int = 0,
    after_buffer: int = 0
) -> List[TimeSlot]:
    """
    Mark slots unavailable when they conflict with any buffered booking.

    Slots are never removed, and a slot that is already unavailable stays
    unavailable. Returns new slot objects; the inputs are left untouched.
    """
    envelopes = [
        booking.envelope(before_buffer=before_buffer, after_buffer=after_buffer)
        for booking in bookings
    ]

    resolved: List[TimeSlot] = []

    for slot in slots:
        if slot.available and any(conflicts_with(slot, envelope) for envelope in envelopes):
            resolved.append(slot.mark_unavailable())
        else:
            resolved.append(slot)

    blocked = sum(1 for slot in resolved if not slot.available)
    logger.debug(
        "%d of %d slot(s) blocked by %d booking(s)",
        blocked,
        len(resolved),
        len(envelopes),
    )

    return resolved
