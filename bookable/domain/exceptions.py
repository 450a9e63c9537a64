"""
Domain-specific exception hierarchy for the availability engine.
"""


class BookableError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(BookableError, ValueError):
    """Raised when rules, event types or timezones are misconfigured."""


class InvalidRuleError(ConfigurationError):
    """Raised when a weekly working-hours rule cannot be used."""


class InvalidEventTypeError(ConfigurationError):
    """Raised when event type durations, buffers or notice are invalid."""


class UnknownTimezoneError(ConfigurationError):
    """Raised when an IANA timezone identifier cannot be resolved."""


class BookingStoreError(BookableError):
    """Raised when existing bookings cannot be loaded or parsed."""
