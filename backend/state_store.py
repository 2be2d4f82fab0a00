"""
Persistence of the view state between runs.

Stored in the JSON state file under the "ui" key, next to anything else
the file holds.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from .debug import debug_print


def _debug_print(msg: str) -> None:
    debug_print("STATE", msg)


def load_ui_state(state_file: Path) -> dict:
    """Read the "ui" section of the state file; {} when missing or corrupt."""
    if not state_file.exists():
        return {}
    try:
        with open(state_file, 'r') as f:
            state = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        _debug_print(f"Error loading UI state: {e}")
        return {}
    ui = state.get('ui', {}) if isinstance(state, dict) else {}
    return ui if isinstance(ui, dict) else {}


def save_ui_state(state_file: Path, ui_state: dict) -> None:
    """Write the "ui" section, preserving other keys in the file."""
    existing_state = {}
    if state_file.exists():
        try:
            with open(state_file, 'r') as f:
                existing_state = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            _debug_print(f"Overwriting unreadable state file: {e}")
        if not isinstance(existing_state, dict):
            existing_state = {}

    existing_state['ui'] = ui_state

    # Ensure directory exists
    state_file.parent.mkdir(parents=True, exist_ok=True)

    with open(state_file, 'w') as f:
        json.dump(existing_state, f, indent=2)


def load_view_state(state_file: Path) -> tuple[Optional[str], Optional[date]]:
    """
    Stored (view name, focus date).

    Either element is None when absent or unreadable.
    """
    ui_state = load_ui_state(state_file)

    view = ui_state.get('view_type')
    view = view if isinstance(view, str) else None

    focus = None
    date_str = ui_state.get('current_date')
    if isinstance(date_str, str):
        try:
            focus = date.fromisoformat(date_str)
        except ValueError:
            _debug_print(f"Ignoring bad stored date {date_str!r}")
    return view, focus


def save_view_state(state_file: Path, view: str, focus: date) -> None:
    ui_state = load_ui_state(state_file)
    ui_state['view_type'] = view
    ui_state['current_date'] = focus.isoformat()
    save_ui_state(state_file, ui_state)
    _debug_print(f"Saved view={view} date={focus.isoformat()}")
