"""
Shipping event record as produced by feed import.

The view engine only reads these. The timestamp is deliberately loosely
typed: importers and stored lists hand over datetimes, dates, ISO strings or
epoch milliseconds, and some of them are malformed. Validation happens in
views.validator, never here.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, date
from typing import Optional, Union


Timestamp = Union[datetime, date, str, int, float, None]

UNKNOWN_CARRIER = "Unknown"

# Carrier name -> keywords that identify it in free text (lowercase)
CARRIER_KEYWORDS: dict[str, tuple[str, ...]] = {
    "UPS": ("ups",),
    "FedEx": ("fedex", "fed ex"),
    "USPS": ("usps", "postal service"),
    "DHL": ("dhl",),
    "Amazon": ("amazon",),
    "OnTrac": ("ontrac",),
    "Canada Post": ("canada post",),
    "Royal Mail": ("royal mail",),
}


@dataclass(frozen=True)
class ShippingEvent:
    """
    A single time-stamped shipment/tracking event.

    ``account_name`` is None when the source has no account; an empty
    string means the source explicitly sent an empty account.
    """
    id: str
    title: str
    timestamp: Timestamp
    carrier: str = UNKNOWN_CARRIER
    status: str = ""
    tracking_number: str = ""
    account_name: Optional[str] = None
    notes: Optional[str] = None
    categories: tuple[str, ...] = field(default_factory=tuple)

    @property
    def carrier_key(self) -> str:
        """Carrier normalized for case-insensitive classification."""
        return self.carrier.strip().lower()

    @property
    def short_tracking(self) -> str:
        """Last 8 characters of the tracking number, as shown in grid cells."""
        return self.tracking_number[-8:]

    @property
    def status_label(self) -> str:
        """Status with underscores turned into spaces for display."""
        return self.status.replace("_", " ")

    def __repr__(self):
        return f"ShippingEvent(id={self.id!r}, title={self.title!r}, timestamp={self.timestamp!r})"


def detect_carrier(*texts: Optional[str]) -> str:
    """
    Classify the carrier from free text (summary, description, categories).

    Matches whole words so that e.g. "groups" is not read as UPS.
    Returns UNKNOWN_CARRIER when nothing matches.
    """
    words = set()
    joined = []
    for text in texts:
        if not text:
            continue
        lowered = text.lower()
        joined.append(lowered)
        words.update(re.findall(r"[a-z0-9]+", lowered))

    haystack = " ".join(joined)
    for carrier, keywords in CARRIER_KEYWORDS.items():
        for keyword in keywords:
            if " " in keyword:
                if keyword in haystack:
                    return carrier
            elif keyword in words:
                return carrier
    return UNKNOWN_CARRIER

