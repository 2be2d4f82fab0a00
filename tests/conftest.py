"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add the repository root to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from backend.shipping_event import ShippingEvent
from backend import timezone_utils


FIXED_TODAY = date(2024, 3, 20)


def make_event(event_id: str, timestamp, **kwargs) -> ShippingEvent:
    """Shipping event with sensible defaults for the fields tests ignore."""
    fields = {
        "title": f"Shipment {event_id}",
        "carrier": "UPS",
        "status": "in_transit",
        "tracking_number": f"1Z999AA1{event_id:0>10}",
    }
    fields.update(kwargs)
    return ShippingEvent(id=event_id, timestamp=timestamp, **fields)


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed 'today' for deterministic navigation."""
    return lambda: FIXED_TODAY


@pytest.fixture
def sample_events():
    """The three demo shipments plus one malformed record."""
    return [
        make_event("1", "2024-03-21T09:15:00", title="UPS Delivery - ACME",
                   carrier="UPS", status="in_transit", account_name="ACME Corp"),
        make_event("2", "2024-03-20T14:00:00", title="FedEx Shipment - XYZ",
                   carrier="FedEx", status="delivered", account_name="XYZ Inc"),
        make_event("3", "2024-03-19T08:45:00", title="USPS Package - ABC",
                   carrier="USPS", status="out_for_delivery"),
        make_event("bad", "not-a-date", title="Broken feed entry"),
    ]


@pytest.fixture
def restore_timezone():
    """Reset the module-level timezone after a test changes it."""
    previous = timezone_utils.get_timezone_name()
    yield
    timezone_utils.set_timezone(previous)
