"""
Debug output switch for Parcel Calendar.

Modules define their own ``_debug_print`` with a tag and route through
``debug_print`` so that ``--debug`` turns everything on at once.
"""

import sys
from datetime import datetime


_enabled: bool = False


def set_debug(enabled: bool):
    """Enable or disable debug output on stderr."""
    global _enabled
    _enabled = enabled


def debug_print(tag: str, msg: str) -> None:
    if not _enabled:
        return
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {tag}: {msg}", file=sys.stderr)
