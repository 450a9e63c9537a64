"""
Tests for domain models.
"""

from datetime import datetime, time

import pendulum
import pytest

from bookable.domain.exceptions import InvalidEventTypeError, InvalidRuleError
from bookable.domain.models import (
    BookedInterval,
    EventTypeConfig,
    TimeRange,
    TimeSlot,
    WeeklyRule,
    parse_clock_time,
    parse_instant,
)


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end
        assert tr.duration_minutes() == 480  # 8 hours

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_naive_datetimes_are_rejected(self):
        """Instants must carry a timezone."""
        with pytest.raises(ValueError, match="timezone-aware"):
            TimeRange(start=datetime(2024, 11, 25, 9), end=datetime(2024, 11, 25, 10))

    def test_overlaps(self):
        """Test overlap detection."""
        tr1 = TimeRange(
            start=pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin")
        )
        tr2 = TimeRange(
            start=pendulum.parse("2024-11-25 11:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 14:00", tz="Europe/Berlin")
        )
        tr3 = TimeRange(
            start=pendulum.parse("2024-11-25 12:00", tz="Europe/Berlin"),
            end=pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        )

        assert tr1.overlaps(tr2)
        assert tr2.overlaps(tr1)
        assert not tr1.overlaps(tr3)

    def test_expand(self):
        """Expanding widens both edges."""
        tr = TimeRange(
            start=pendulum.parse("2024-11-25 10:00", tz="UTC"),
            end=pendulum.parse("2024-11-25 10:30", tz="UTC")
        )

        expanded = tr.expand(before_minutes=10, after_minutes=15)

        assert expanded.start == pendulum.parse("2024-11-25 09:50", tz="UTC")
        assert expanded.end == pendulum.parse("2024-11-25 10:45", tz="UTC")
        assert tr.duration_minutes() == 30


class TestBookedInterval:
    """Tests for BookedInterval model."""

    def test_envelope_without_buffers_is_the_booking(self):
        booking = BookedInterval(
            start=pendulum.parse("2024-11-25 10:00", tz="UTC"),
            end=pendulum.parse("2024-11-25 10:30", tz="UTC")
        )

        envelope = booking.envelope()

        assert envelope.start == booking.start
        assert envelope.end == booking.end

    def test_envelope_is_asymmetric(self):
        booking = BookedInterval(
            start=pendulum.parse("2024-11-25 10:00", tz="UTC"),
            end=pendulum.parse("2024-11-25 10:30", tz="UTC")
        )

        envelope = booking.envelope(before_buffer=0, after_buffer=15)

        assert envelope.start == pendulum.parse("2024-11-25 10:00", tz="UTC")
        assert envelope.end == pendulum.parse("2024-11-25 10:45", tz="UTC")

    def test_accepts_stdlib_aware_datetimes(self):
        """Aware stdlib datetimes are converted to pendulum instants."""
        booking = BookedInterval(
            start=datetime(2024, 11, 25, 10, tzinfo=pendulum.timezone("UTC")),
            end=datetime(2024, 11, 25, 11, tzinfo=pendulum.timezone("UTC"))
        )

        assert booking.duration_minutes() == 60
        assert booking.start == pendulum.parse("2024-11-25 10:00", tz="UTC")


class TestWeeklyRule:
    """Tests for WeeklyRule model."""

    def test_parse(self):
        rule = WeeklyRule.parse([1, 2, 3, 4, 5], "09:00", "17:00")

        assert rule.days == frozenset({1, 2, 3, 4, 5})
        assert rule.start_time == time(9, 0)
        assert rule.end_time == time(17, 0)
        assert rule.applies_to(1)
        assert not rule.applies_to(0)

    def test_single_digit_hours(self):
        assert parse_clock_time("9:05") == time(9, 5)

    @pytest.mark.parametrize("value", ["24:00", "9", "09:60", "nine", "", "09:00:00"])
    def test_malformed_clock_strings(self, value):
        with pytest.raises(InvalidRuleError, match="Invalid clock time"):
            WeeklyRule.parse([1], value, "17:00")

    def test_start_must_precede_end(self):
        with pytest.raises(InvalidRuleError, match="must be before end"):
            WeeklyRule.parse([1], "17:00", "09:00")

        with pytest.raises(InvalidRuleError, match="must be before end"):
            WeeklyRule.parse([1], "09:00", "09:00")

    def test_invalid_days(self):
        with pytest.raises(InvalidRuleError, match="between 0 and 6"):
            WeeklyRule.parse([1, 7], "09:00", "17:00")

        with pytest.raises(InvalidRuleError, match="at least one weekday"):
            WeeklyRule.parse([], "09:00", "17:00")

    def test_str(self):
        rule = WeeklyRule.parse([5, 1], "09:00", "12:30")

        assert str(rule) == "Mon, Fri 09:00-12:30"


class TestEventTypeConfig:
    """Tests for EventTypeConfig model."""

    def test_defaults(self):
        config = EventTypeConfig(length=30)

        assert config.before_buffer == 0
        assert config.after_buffer == 0
        assert config.minimum_booking_notice == 0
        assert config.step == 30

    def test_step_uses_slot_interval(self):
        assert EventTypeConfig(length=60, slot_interval=15).step == 15

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"length": 0},
            {"length": -30},
            {"length": 30, "slot_interval": 0},
            {"length": 30, "slot_interval": -15},
            {"length": 30, "before_buffer": -1},
            {"length": 30, "after_buffer": -1},
            {"length": 30, "minimum_booking_notice": -10},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(InvalidEventTypeError):
            EventTypeConfig(**kwargs)


class TestTimeSlot:
    """Tests for TimeSlot model."""

    def _slot(self) -> TimeSlot:
        return TimeSlot(
            start=pendulum.parse("2024-11-25 09:00", tz="UTC"),
            end=pendulum.parse("2024-11-25 09:30", tz="UTC")
        )

    def test_available_by_default(self):
        slot = self._slot()

        assert slot.available
        assert slot.duration_minutes() == 30

    def test_mark_unavailable_returns_new_slot(self):
        slot = self._slot()

        blocked = slot.mark_unavailable()

        assert not blocked.available
        assert slot.available
        assert blocked.start == slot.start

    def test_format_display(self):
        slot = self._slot()

        assert slot.format_display(clock="24") == "09:00 - 09:30"
        assert slot.format_display(clock="12") == "9:00 AM - 9:30 AM"
        assert slot.format_display("America/New_York", clock="12") == "4:00 AM - 4:30 AM"

    def test_format_display_rejects_unknown_clock(self):
        with pytest.raises(ValueError):
            self._slot().format_display(clock="13")

    def test_to_dict_is_utc(self):
        slot = self._slot().in_timezone("Asia/Tokyo")

        assert slot.to_dict() == {
            "start": "2024-11-25T09:00:00Z",
            "end": "2024-11-25T09:30:00Z",
        }


class TestParseInstant:
    """Tests for parse_instant."""

    def test_offset_is_kept(self):
        parsed = parse_instant("2024-11-25T09:00:00+01:00", "America/New_York")

        assert parsed == pendulum.parse("2024-11-25 08:00", tz="UTC")

    def test_naive_string_uses_given_zone(self):
        parsed = parse_instant("2024-11-25T08:00", "Europe/Berlin")

        assert parsed == pendulum.parse("2024-11-25 07:00", tz="UTC")

    def test_naive_string_defaults_to_utc(self):
        assert parse_instant("2024-11-25T08:00") == pendulum.parse("2024-11-25 08:00", tz="UTC")

    @pytest.mark.parametrize("value", ["P1D", "not a date"])
    def test_rejects_non_datetimes(self, value):
        with pytest.raises(ValueError):
            parse_instant(value)

    def test_rejects_non_strings(self):
        with pytest.raises(ValueError):
            parse_instant(20241125)
