"""
Request handling around the slot calculator.

``AvailabilityService`` looks up the owner's bookings for the requested day
through any object satisfying ``BookingStoreProtocol``, hands them to
``SlotCalculator`` and shapes the result for callers: full slot lists,
serialized free slots, a pre-commit check and month highlighting.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Protocol

import pendulum
from pendulum import Date, DateTime

from ..domain.models import BookedInterval, EventTypeConfig, TimeSlot
from ..domain.rules import local_date
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)


class BookingStoreProtocol(Protocol):
    """Protocol describing the booking lookup needed by the service."""

    async def get_bookings(
        self,
        owner: str,
        start_time: DateTime,
        end_time: DateTime,
    ) -> List[BookedInterval]:
        """Return occupying bookings overlapping the window."""


class AvailabilityService:
    """
    Orchestrates booking retrieval and slot calculation for one owner.
    """

    def __init__(
        self,
        booking_store: BookingStoreProtocol,
        slot_calculator: SlotCalculator,
        owner: str,
    ) -> None:
        self._booking_store = booking_store
        self._slot_calculator = slot_calculator
        self.owner = owner

    @property
    def owner_timezone(self) -> str:
        return self._slot_calculator.owner_timezone

    async def fetch_bookings(
        self,
        *,
        target_date: date,
        event_type: EventTypeConfig,
    ) -> List[BookedInterval]:
        """
        Fetch bookings that can affect slots on the owner-local day.

        The day is widened by the buffers so that a booking just outside the
        day still blocks the slots its envelope reaches.
        """
        day = local_date(target_date, self.owner_timezone)
        day_start = pendulum.datetime(day.year, day.month, day.day, tz=self.owner_timezone)
        day_end = day_start.add(days=1)

        return await self._booking_store.get_bookings(
            owner=self.owner,
            start_time=day_start.subtract(minutes=event_type.after_buffer),
            end_time=day_end.add(minutes=event_type.before_buffer),
        )

    async def find_slots(
        self,
        *,
        target_date: date,
        event_type: EventTypeConfig,
        target_timezone: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[TimeSlot]:
        """Retrieve bookings and compute every slot for the date."""
        bookings = await self.fetch_bookings(target_date=target_date, event_type=event_type)

        logger.debug("Loaded %d booking(s) for %s", len(bookings), self.owner)

        return self._slot_calculator.compute_availability(
            target_date,
            bookings,
            event_type,
            target_timezone=target_timezone,
            now=now,
        )

    async def find_available_slots(
        self,
        *,
        target_date: date,
        event_type: EventTypeConfig,
        target_timezone: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> List[Dict[str, str]]:
        """
        Compute slots and serialize only the available ones.

        Returns:
            ``[{"start": ISO-8601, "end": ISO-8601}, ...]`` in UTC
        """
        slots = await self.find_slots(
            target_date=target_date,
            event_type=event_type,
            target_timezone=target_timezone,
            now=now,
        )

        return [slot.to_dict() for slot in slots if slot.available]

    async def check_slot(
        self,
        *,
        candidate_start: datetime,
        event_type: EventTypeConfig,
    ) -> bool:
        """Validate a booking attempt immediately before it is committed."""
        if candidate_start.tzinfo is None:
            start = pendulum.instance(candidate_start, tz=self.owner_timezone)
        else:
            start = pendulum.instance(candidate_start)

        bookings = await self._booking_store.get_bookings(
            owner=self.owner,
            start_time=start.subtract(minutes=event_type.after_buffer),
            end_time=start.add(minutes=event_type.length + event_type.before_buffer),
        )

        return self._slot_calculator.is_slot_available(start, event_type, bookings)

    def available_dates(self, year: int, month: int) -> List[Date]:
        """Dates of a month that have working hours, for calendar highlighting."""
        return self._slot_calculator.dates_with_availability(year, month)
