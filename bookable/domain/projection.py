"""
Timezone projection of resolved slots for display.
"""

from typing import List, Optional, Sequence

from .models import TimeSlot
from .timezones import resolve_timezone, same_timezone


def project_slots(
    slots: Sequence[TimeSlot],
    target_timezone: Optional[str],
    owner_timezone: str
) -> List[TimeSlot]:
    """
    Re-express slots in the caller's display timezone.

    Only the local representation changes; every instant stays the same.
    Returns the slots unchanged when no target is given or the target is the
    owner's own zone.
    """
    if target_timezone is None or same_timezone(target_timezone, owner_timezone):
        return list(slots)

    zone = resolve_timezone(target_timezone)
    return [slot.in_timezone(zone.name) for slot in slots]
