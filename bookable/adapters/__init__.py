"""
Adapters layer - Sources of existing bookings.
"""

from .booking_store import InMemoryBookingStore, JsonBookingStore

__all__ = ["InMemoryBookingStore", "JsonBookingStore"]
