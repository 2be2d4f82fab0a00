"""
Configuration parser for Parcel Calendar.

Handles TOML file parsing into dataclasses.
"""

import tomllib
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from .debug import debug_print


def _debug_print(msg: str) -> None:
    debug_print("CONFIG", msg)


WEEKDAY_NAMES = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

VIEW_NAMES = ["month", "week", "day", "agenda"]


@dataclass
class Subscription:
    """Configuration for an iCal feed of shipping events."""
    name: str
    url: str
    account: Optional[str] = None  # Applied to events that carry no account


@dataclass
class LayoutConfig:
    """Configuration for text layout."""
    max_events_per_cell: int = 3  # Month cells show this many, then "+K more"
    hour_start: int = 0           # First hour row printed in week/day view
    hour_end: int = 23            # Last hour row printed in week/day view


@dataclass
class LabelsConfig:
    """Configuration for UI labels."""
    today: str = "Today"
    no_events: str = "No shipping events found"
    more_events: str = "+{} more"
    invalid_events: str = "{} event(s) skipped: unparsable timestamp ({})"
    all_day: str = "All day"


@dataclass
class LocalizationConfig:
    """Configuration for localized day and month names."""
    # Default to English full day names, Monday first
    day_names: list[str] = None
    # Default to English full month names
    month_names: list[str] = None

    def __post_init__(self):
        if self.day_names is None:
            self.day_names = [
                "Monday", "Tuesday", "Wednesday", "Thursday",
                "Friday", "Saturday", "Sunday"
            ]
        if self.month_names is None:
            self.month_names = [
                "January", "February", "March", "April", "May", "June",
                "July", "August", "September", "October", "November", "December"
            ]

    def get_day_name(self, weekday: int) -> str:
        """Get localized day name for weekday (0=Monday, 6=Sunday)."""
        return self.day_names[weekday] if 0 <= weekday < len(self.day_names) else ""

    def get_day_abbr(self, weekday: int) -> str:
        return self.get_day_name(weekday)[:3]

    def get_month_name(self, month: int) -> str:
        """Get localized month name (1=January, 12=December)."""
        return self.month_names[month - 1] if 1 <= month <= len(self.month_names) else ""

    def get_month_abbr(self, month: int) -> str:
        return self.get_month_name(month)[:3]


@dataclass
class Config:
    """Main configuration container for Parcel Calendar."""

    state_file: Path
    timezone: str = "UTC"
    week_start: int = 6  # Python weekday number, 6 = Sunday
    default_view: str = "month"
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    localization: LocalizationConfig = field(default_factory=LocalizationConfig)
    labels: LabelsConfig = field(default_factory=LabelsConfig)
    subscriptions: list[Subscription] = field(default_factory=list)

    @classmethod
    def get_default_config_path(cls) -> Path:
        """Get the default configuration file path."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(xdg_config) / 'parcel-calendar' / 'parcel-calendar.toml'

    @classmethod
    def get_default_state_path(cls) -> Path:
        """Get the default state file path."""
        xdg_state = os.environ.get('XDG_STATE_HOME', os.path.expanduser('~/.local/state'))
        return Path(xdg_state) / 'parcel-calendar' / 'state.json'

    @classmethod
    def default(cls) -> 'Config':
        return cls(state_file=cls.get_default_state_path())

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> 'Config':
        """
        Load configuration from TOML file.

        An explicit path must exist. Without a path, a missing default
        file yields the default configuration.
        """
        if config_path is None:
            config_path = cls.get_default_config_path()
            if not config_path.exists():
                _debug_print(f"No config at {config_path}, using defaults")
                return cls.default()

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'rb') as f:
            data = tomllib.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        """Build a Config from already parsed TOML data."""
        # Parse General section
        general = data.get('General', {})
        timezone = general.get('timezone', 'UTC')
        week_start = parse_weekday(general.get('week_start', 'sunday'))

        default_view = str(general.get('default_view', 'month')).lower()
        if default_view == 'list':
            default_view = 'agenda'
        if default_view not in VIEW_NAMES:
            raise ValueError(f"General.default_view: unknown view '{default_view}'")

        state_file_str = general.get('state_file', str(cls.get_default_state_path()))
        state_file = Path(os.path.expanduser(state_file_str))

        # Parse subscriptions
        # Supports both [Subscription.Name] and [Subscription] with nested sub-tables
        subscriptions = []
        for key, value in data.items():
            if key.startswith('Subscription.') and isinstance(value, dict):
                subscriptions.append(_parse_subscription(key.split('.', 1)[1], value))
            elif key == 'Subscription' and isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    if isinstance(sub_value, dict):
                        subscriptions.append(_parse_subscription(sub_key, sub_value))
        _debug_print(f"Total subscriptions found: {len(subscriptions)}")

        # Parse Layout section
        layout_data = data.get('Layout', {})
        layout = LayoutConfig(
            max_events_per_cell=int(layout_data.get('max_events_per_cell', LayoutConfig.max_events_per_cell)),
            hour_start=int(layout_data.get('hour_start', LayoutConfig.hour_start)),
            hour_end=int(layout_data.get('hour_end', LayoutConfig.hour_end)),
        )
        if layout.max_events_per_cell < 1:
            raise ValueError("Layout.max_events_per_cell must be at least 1")
        if not 0 <= layout.hour_start <= layout.hour_end <= 23:
            raise ValueError("Layout.hour_start/hour_end must satisfy 0 <= start <= end <= 23")

        # Parse Localization section
        localization_data = data.get('Localization', {})
        day_names_str = localization_data.get('day_names', '')
        month_names_str = localization_data.get('month_names', '')

        # Space-separated names (if provided)
        day_names = day_names_str.split() if day_names_str else None
        month_names = month_names_str.split() if month_names_str else None
        if day_names is not None and len(day_names) != 7:
            raise ValueError("Localization.day_names must list 7 names")
        if month_names is not None and len(month_names) != 12:
            raise ValueError("Localization.month_names must list 12 names")

        localization = LocalizationConfig(
            day_names=day_names,
            month_names=month_names
        )

        # Parse Labels section
        labels_data = data.get('Labels', {})
        labels = LabelsConfig(
            today=labels_data.get('today', LabelsConfig.today),
            no_events=labels_data.get('no_events', LabelsConfig.no_events),
            more_events=labels_data.get('more_events', LabelsConfig.more_events),
            invalid_events=labels_data.get('invalid_events', LabelsConfig.invalid_events),
            all_day=labels_data.get('all_day', LabelsConfig.all_day),
        )

        return cls(
            state_file=state_file,
            timezone=timezone,
            week_start=week_start,
            default_view=default_view,
            layout=layout,
            localization=localization,
            labels=labels,
            subscriptions=subscriptions,
        )


def _parse_subscription(sub_id: str, value: dict) -> Subscription:
    _debug_print(f"Found subscription: {sub_id} url={value.get('url', '')}")
    return Subscription(
        name=value.get('name', sub_id),
        url=value.get('url', ''),
        account=value.get('account'),
    )


def parse_weekday(value) -> int:
    """
    Parse a weekday name ("sunday", "Mon") or Python weekday number.

    Returns 0 for Monday through 6 for Sunday.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if 0 <= value <= 6:
            return value
        raise ValueError(f"General.week_start: weekday number out of range: {value}")
    name = str(value).strip().lower()
    for i, day in enumerate(WEEKDAY_NAMES):
        if len(name) >= 3 and day.startswith(name):
            return i
    raise ValueError(f"General.week_start: unknown weekday '{value}'")
