"""
Rule selection: which weekly working-hours rules apply to a calendar date.
"""

import calendar
import logging
from datetime import date, datetime
from typing import List, Sequence

import pendulum
from pendulum import Date

from .models import WeeklyRule
from .timezones import resolve_timezone

logger = logging.getLogger(__name__)


def local_date(target: date, owner_timezone: str) -> Date:
    """
    Resolve the calendar date a target refers to in the owner's timezone.

    Plain dates are taken as-is. Aware datetimes are instants and are first
    converted to the owner's zone; naive datetimes are read as wall-clock
    values in that zone.
    """
    if isinstance(target, datetime):
        if target.tzinfo is None:
            return Date(target.year, target.month, target.day)
        return pendulum.instance(target).in_timezone(resolve_timezone(owner_timezone)).date()

    return Date(target.year, target.month, target.day)


def weekday_of(target: date, owner_timezone: str) -> int:
    """Return the weekday of a target in the owner's timezone (0=Sunday)."""
    return local_date(target, owner_timezone).isoweekday() % 7


def select_rules(
    target: date,
    rules: Sequence[WeeklyRule],
    owner_timezone: str
) -> List[WeeklyRule]:
    """
    Return every rule covering the target's weekday, in input order.

    Several rules may apply to the same weekday (e.g. a morning and an
    afternoon block); each one is returned separately.
    """
    weekday = weekday_of(target, owner_timezone)
    applicable = [rule for rule in rules if rule.applies_to(weekday)]

    logger.debug(
        "Selected %d of %d rule(s) for weekday %d",
        len(applicable),
        len(rules),
        weekday,
    )

    return applicable


def dates_with_availability(
    year: int,
    month: int,
    rules: Sequence[WeeklyRule],
    owner_timezone: str
) -> List[Date]:
    """
    List the dates of a month that have at least one applicable rule.

    Args:
        year: Calendar year
        month: Calendar month, 1-12
        rules: The owner's weekly rules
        owner_timezone: IANA timezone of the owner

    Returns:
        Dates in ascending order; conflicts and notice are not considered
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")

    resolve_timezone(owner_timezone)

    _, days_in_month = calendar.monthrange(year, month)
    covered_weekdays = set()
    for rule in rules:
        covered_weekdays.update(rule.days)

    return [
        day
        for day in (Date(year, month, number) for number in range(1, days_in_month + 1))
        if day.isoweekday() % 7 in covered_weekdays
    ]
