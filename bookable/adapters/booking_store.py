"""
File-backed booking store for existing reservations.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pendulum import DateTime

from ..domain.exceptions import BookingStoreError
from ..domain.models import BookedInterval, parse_instant

logger = logging.getLogger(__name__)

# Reservation states that occupy the calendar; cancelled / rejected do not
OCCUPYING_STATUSES = frozenset({"PENDING", "ACCEPTED"})


class InMemoryBookingStore:
    """
    Booking store over already-parsed intervals, keyed by owner.

    Used when no bookings file is configured.
    """

    def __init__(self, bookings: Dict[str, List[BookedInterval]] | None = None):
        self.bookings = bookings or {}

    async def get_bookings(
        self,
        owner: str,
        start_time: DateTime,
        end_time: DateTime
    ) -> List[BookedInterval]:
        """Return the owner's bookings overlapping a time window."""
        return sorted(
            (
                booking
                for booking in self.bookings.get(owner, [])
                if booking.start < end_time and booking.end > start_time
            ),
            key=lambda booking: booking.start,
        )


class JsonBookingStore:
    """
    Loads committed reservations from a JSON file.

    Expected format::

        [
            {
                "owner": "alice",
                "start": "2024-11-25T10:00:00Z",
                "end": "2024-11-25T10:30:00Z",
                "status": "ACCEPTED"
            }
        ]

    Entries without a status count as accepted.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.records = self._load_records()

    def _load_records(self) -> List[Dict[str, Any]]:
        """Load raw booking records from the JSON file."""
        if not self.path.exists():
            raise BookingStoreError(f"Bookings file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise BookingStoreError(f"Could not read bookings from {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise BookingStoreError("Bookings file must contain a list at the root level.")

        return data

    async def get_bookings(
        self,
        owner: str,
        start_time: DateTime,
        end_time: DateTime
    ) -> List[BookedInterval]:
        """
        Return the owner's occupying bookings overlapping a time window.

        Args:
            owner: Owner identifier as stored in the file
            start_time: Start of the window
            end_time: End of the window

        Returns:
            Booked intervals ordered by start
        """
        bookings: List[BookedInterval] = []

        for record in self.records:
            if not isinstance(record, dict) or record.get("owner") != owner:
                continue

            status = str(record.get("status", "ACCEPTED")).upper()
            if status not in OCCUPYING_STATUSES:
                continue

            try:
                booking = BookedInterval(
                    start=parse_instant(record["start"]),
                    end=parse_instant(record["end"]),
                )
            except (KeyError, TypeError, ValueError) as exc:
                # Skip invalid entries
                logger.warning("Skipping unparseable booking %r: %s", record, exc)
                continue

            if booking.start < end_time and booking.end > start_time:
                bookings.append(booking)

        return sorted(bookings, key=lambda booking: booking.start)
