#!/usr/bin/env python3
"""
Parcel Calendar - shipment tracking events in month, week, day and agenda views.

This is the main entry point for the application.
"""

import sys
import argparse
from datetime import date
from pathlib import Path

from backend.config import Config
from backend.debug import set_debug, debug_print
from backend.feed_import import (
    FeedImportError, import_feed, import_subscriptions, SOURCE_URL, SOURCE_FILE,
)
from backend.state_store import load_view_state, save_view_state
from backend.timezone_utils import set_timezone, local_today
from display.text_view import render
from views.layout import build_view
from views.navigation import NavigationStateMachine
from views.types import Granularity, ViewState, coerce_granularity


COMMANDS = ["show", "next", "prev", "today"]


def _debug_print(msg: str) -> None:
    debug_print("MAIN", msg)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Parcel Calendar - shipping events from iCal feeds in calendar form"
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=COMMANDS,
        default="show",
        help="Navigation step to apply before showing (default: show)"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--import-url",
        help="Read events from this iCal feed URL instead of the configured subscriptions"
    )
    source.add_argument(
        "--import-file",
        type=Path,
        help="Read events from this .ics file instead of the configured subscriptions"
    )
    parser.add_argument(
        "--view",
        choices=[g.value for g in Granularity],
        help="Switch to this view"
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        help="Focus on this day (YYYY-MM-DD)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    return parser.parse_args(argv)


def load_events(args, config: Config) -> list:
    """Events from the command-line feed, or from all configured subscriptions."""
    if args.import_url:
        return import_feed(SOURCE_URL, args.import_url).events
    if args.import_file:
        return import_feed(SOURCE_FILE, args.import_file).events

    events, errors = import_subscriptions(config.subscriptions)
    for name, message in errors.items():
        print(f"Warning: subscription '{name}': {message}", file=sys.stderr)
    return events


def restore_state(config: Config, today: date) -> ViewState:
    view, focus = load_view_state(config.state_file)
    granularity = coerce_granularity(view or config.default_view)
    return ViewState(granularity, focus or today)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    set_debug(args.debug)

    # Load configuration
    try:
        config = Config.load(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("\nPlease create a configuration file at:")
        print(f"  - {Config.get_default_config_path()}")
        print("\nExample configuration:")
        print("""
[General]
timezone = "America/New_York"
week_start = "sunday"

[Subscription.Parcel]
url = "https://example.com/parcel.ics"
account = "Home"
""")
        return 1
    except (ValueError, OSError) as e:
        print(f"Error loading configuration: {e}")
        return 1

    set_timezone(config.timezone)
    today = local_today()
    _debug_print(f"timezone={config.timezone} today={today} subscriptions={len(config.subscriptions)}")

    navigator = NavigationStateMachine(
        state=restore_state(config, today),
        week_start=config.week_start,
        clock=local_today,
    )

    # Explicit selections first, then the navigation step
    if args.date:
        navigator.select_date(args.date)
    if args.view:
        navigator.set_granularity(args.view)
    if args.command == "next":
        navigator.next()
    elif args.command == "prev":
        navigator.previous()
    elif args.command == "today":
        navigator.today()

    try:
        events = load_events(args, config)
    except FeedImportError as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 2

    view = build_view(
        events,
        navigator.state,
        today=today,
        week_start=config.week_start,
        localization=config.localization,
    )
    print(render(view, config, today))

    try:
        save_view_state(config.state_file, navigator.granularity.value, navigator.focus_date)
    except OSError as e:
        print(f"Warning: could not save state: {e}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
