"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.exceptions import ConfigurationError
from .domain.models import CLOCK_PATTERN, EventTypeConfig, WeeklyRule
from .domain.timezones import resolve_timezone


class WeeklyRuleSettings(BaseModel):
    """Working hours for a set of weekdays (0=Sunday)."""
    days: List[int]
    start_time: str = "09:00"
    end_time: str = "17:00"

    @field_validator("days")
    @classmethod
    def validate_days(cls, value: List[int]) -> List[int]:
        """Ensure weekdays are in valid range and deduplicated."""
        if not value:
            raise ValueError("days must contain at least one weekday")
        invalid_days = [day for day in value if day not in range(7)]
        if invalid_days:
            raise ValueError(f"days must be between 0 and 6, got {invalid_days}")
        # Preserve order while removing duplicates
        seen: set[int] = set()
        deduped: List[int] = []
        for day in value:
            if day not in seen:
                deduped.append(day)
                seen.add(day)
        return deduped

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Validate HH:mm format."""
        if not CLOCK_PATTERN.match(value):
            raise ValueError(f"Time must be in HH:mm format, got '{value}'")
        return value

    def to_domain(self) -> WeeklyRule:
        """Convert to the domain rule, enforcing start < end."""
        return WeeklyRule.parse(self.days, self.start_time, self.end_time)


class EventTypeSettings(BaseModel):
    """A bookable event type."""
    slug: str = Field(pattern=r"^[a-z0-9-]+$", max_length=50)
    title: str = ""
    length: int = Field(gt=0)
    before_buffer: int = Field(default=0, ge=0)
    after_buffer: int = Field(default=0, ge=0)
    slot_interval: Optional[int] = Field(default=None, gt=0)
    minimum_booking_notice: int = Field(default=0, ge=0)

    def display_name(self) -> str:
        """Get display name."""
        return self.title or self.slug

    def to_domain(self) -> EventTypeConfig:
        return EventTypeConfig(
            length=self.length,
            before_buffer=self.before_buffer,
            after_buffer=self.after_buffer,
            slot_interval=self.slot_interval,
            minimum_booking_notice=self.minimum_booking_notice,
        )


class AppConfig(BaseModel):
    """Application configuration."""
    owner: str
    timezone: str = "UTC"
    clock: Literal["12", "24"] = "24"
    availability: List[WeeklyRuleSettings] = Field(default_factory=list)
    event_types: List[EventTypeSettings] = Field(default_factory=list)
    bookings_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the owner's timezone is a known IANA identifier."""
        return resolve_timezone(value).name

    @field_validator("event_types")
    @classmethod
    def validate_event_types(cls, value: List[EventTypeSettings]) -> List[EventTypeSettings]:
        """Ensure event type slugs are unique."""
        seen_slugs: set[str] = set()
        for event_type in value:
            if event_type.slug in seen_slugs:
                raise ValueError(f"Duplicate event type slug detected: {event_type.slug}")
            seen_slugs.add(event_type.slug)
        return value

    @model_validator(mode="after")
    def validate_rules(self) -> "AppConfig":
        """Ensure every working-hours block opens before it closes."""
        for rule in self.availability:
            rule.to_domain()
        return self

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)

        # Relative bookings paths are resolved against the config file
        if config.bookings_file is not None and not config.bookings_file.is_absolute():
            config.bookings_file = config_path.parent / config.bookings_file

        return config

    def weekly_rules(self) -> List[WeeklyRule]:
        """Get the configured working hours as domain rules."""
        return [rule.to_domain() for rule in self.availability]

    def find_event_type(self, slug: str) -> EventTypeSettings:
        """
        Find an event type by its slug.

        Raises:
            ConfigurationError: If no event type has that slug
        """
        for event_type in self.event_types:
            if event_type.slug == slug.lower():
                return event_type

        known = ", ".join(event_type.slug for event_type in self.event_types) or "none"
        raise ConfigurationError(f"Unknown event type '{slug}'. Configured: {known}")


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
