"""
Timezone resolution at the boundary of the availability engine.
"""

from typing import Optional
from zoneinfo import ZoneInfoNotFoundError

import pendulum
from pendulum import Timezone

from .exceptions import UnknownTimezoneError


def resolve_timezone(name: str) -> Timezone:
    """
    Resolve an IANA timezone identifier.

    Raises:
        UnknownTimezoneError: If the identifier is empty or unknown
    """
    if not name or not name.strip():
        raise UnknownTimezoneError("Timezone identifier must not be empty")

    try:
        return pendulum.timezone(name)
    except (ValueError, ZoneInfoNotFoundError) as exc:
        raise UnknownTimezoneError(f"Unknown timezone: '{name}'") from exc


def same_timezone(first: Optional[str], second: Optional[str]) -> bool:
    """Check whether two identifiers name the same zone."""
    if first is None or second is None:
        return first == second
    return resolve_timezone(first).name == resolve_timezone(second).name
