"""
Parcel Calendar Backend Module

This module provides everything around the view engine:
- Configuration parsing (config.py)
- Shipping event records (shipping_event.py)
- iCal feed import (feed_import.py)
- Timezone and "today" resolution (timezone_utils.py)
- View state persistence (state_store.py)
"""

from .config import Config
from .shipping_event import ShippingEvent
from .feed_import import FeedImportError, ImportResult, import_feed

__all__ = [
    'Config',
    'ShippingEvent',
    'FeedImportError',
    'ImportResult',
    'import_feed',
]
