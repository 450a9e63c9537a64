"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    BookableError,
    BookingStoreError,
    ConfigurationError,
    InvalidEventTypeError,
    InvalidRuleError,
    UnknownTimezoneError,
)
from .models import BookedInterval, EventTypeConfig, TimeRange, TimeSlot, WeeklyRule
from .slot_calculator import SlotCalculator, compute_availability, is_slot_available

__all__ = [
    "BookableError",
    "BookingStoreError",
    "ConfigurationError",
    "InvalidEventTypeError",
    "InvalidRuleError",
    "UnknownTimezoneError",
    "BookedInterval",
    "EventTypeConfig",
    "TimeRange",
    "TimeSlot",
    "WeeklyRule",
    "SlotCalculator",
    "compute_availability",
    "is_slot_available",
]
