"""
iCal feed import for shipping events.

Fetches a feed (URL, pasted text or file), parses it with icalendar and maps
each VEVENT to a ShippingEvent. Aware start times are converted to the
configured local zone here, once, so the view engine never has to.
"""

import hashlib
import re
from dataclasses import dataclass, field
from datetime import datetime, date
from pathlib import Path
from typing import Optional

import requests
from icalendar import Calendar as ICalCalendar

from .config import Subscription
from .debug import debug_print
from .shipping_event import ShippingEvent, detect_carrier
from .timezone_utils import to_local_naive


def _debug_print(msg: str) -> None:
    debug_print("IMPORT", msg)


SOURCE_URL = "url"
SOURCE_TEXT = "text"
SOURCE_FILE = "file"

# Checked in order against lowercase summary + description
STATUS_KEYWORDS = [
    ("out_for_delivery", ("out for delivery", "out_for_delivery")),
    ("delivered", ("delivered",)),
    ("delayed", ("delayed", "delay", "exception")),
    ("in_transit", ("in transit", "in_transit", "intransit", "shipped", "departed", "arrived")),
]
DEFAULT_STATUS = "pending"

TRACKING_PATTERNS = [
    re.compile(r"\b1Z[0-9A-Z]{16}\b"),           # UPS
    re.compile(r"\b[A-Z]{2}[0-9]{9}[A-Z]{2}\b"),  # UPU S10 (postal)
    re.compile(r"\b[0-9]{12,22}\b"),             # FedEx, USPS, DHL numeric
]
TRACKING_LABEL = re.compile(r"(?:tracking|track)\s*(?:number|no\.?|#)?\s*[:#]\s*([A-Za-z0-9-]{6,})", re.IGNORECASE)


class FeedImportError(Exception):
    """Raised when a feed cannot be fetched, read or parsed."""


@dataclass
class ImportResult:
    """Outcome of one import: the events plus the duplicate count."""
    source: str
    events: list[ShippingEvent] = field(default_factory=list)
    duplicates_count: int = 0

    @property
    def events_count(self) -> int:
        return len(self.events)

    @property
    def message(self) -> str:
        text = f"{self.events_count} events imported"
        if self.duplicates_count:
            text += f", {self.duplicates_count} duplicates skipped"
        return text


def fetch_feed(url: str, timeout: int = 30) -> str:
    """
    Fetch raw VCALENDAR text from a URL.

    Raises FeedImportError on any network or HTTP error.
    """
    try:
        response = requests.get(
            url,
            timeout=timeout,
            headers={
                'User-Agent': 'Parcel-Calendar/1.0',
                'Accept': 'text/calendar'
            }
        )
        response.raise_for_status()
    except requests.RequestException as e:
        raise FeedImportError(f"Network error: {e}") from e

    # Ensure proper UTF-8 decoding
    response.encoding = 'utf-8'
    return response.text


def import_feed(
    source: str,
    payload,
    account: Optional[str] = None,
    timeout: int = 30,
) -> ImportResult:
    """
    Import shipping events from an iCal feed.

    Args:
        source: "url", "text" or "file"
        payload: the URL, the VCALENDAR text, or a file path
        account: account name for events that do not carry one

    Raises:
        FeedImportError: the feed could not be fetched, read or parsed
    """
    if source == SOURCE_URL:
        text = fetch_feed(str(payload), timeout=timeout)
    elif source == SOURCE_TEXT:
        text = payload
    elif source == SOURCE_FILE:
        try:
            text = Path(payload).read_text(encoding='utf-8')
        except OSError as e:
            raise FeedImportError(f"Cannot read {payload}: {e}") from e
    else:
        raise FeedImportError(f"Unknown import source: {source!r}")

    if not text or not str(text).strip():
        raise FeedImportError("Parse error: empty feed")

    result = parse_feed(text, account=account)
    result.source = source
    _debug_print(f"{source}: {result.message}")
    return result


def parse_feed(ical_text: str, account: Optional[str] = None) -> ImportResult:
    """Parse VCALENDAR text into shipping events, skipping duplicate UIDs."""
    try:
        calendar = ICalCalendar.from_ical(ical_text)
    except ValueError as e:
        raise FeedImportError(f"Parse error: {e}") from e

    result = ImportResult(source=SOURCE_TEXT)
    seen: set[str] = set()
    for component in calendar.walk('VEVENT'):
        event = event_from_component(component, account=account)
        if event.id in seen:
            result.duplicates_count += 1
            continue
        seen.add(event.id)
        result.events.append(event)
    return result


def event_from_component(component, account: Optional[str] = None) -> ShippingEvent:
    """Map one icalendar VEVENT to a ShippingEvent."""
    summary = _text(component.get('SUMMARY'))
    description = _text(component.get('DESCRIPTION'))
    categories = _categories(component.get('CATEGORIES'))
    timestamp = _timestamp(component.get('DTSTART'))

    uid = _text(component.get('UID'))
    if not uid:
        uid = hashlib.md5(f"{summary}|{timestamp}".encode()).hexdigest()[:12]

    carrier = _text(component.get('X-CARRIER')) or detect_carrier(summary, description, *categories)
    status = _text(component.get('X-STATUS')) or detect_status(summary, description)
    tracking = _text(component.get('X-TRACKING-NUMBER')) or find_tracking_number(summary, description)
    event_account = _text(component.get('X-ACCOUNT')) or account

    return ShippingEvent(
        id=uid,
        title=summary or 'Untitled',
        timestamp=timestamp,
        carrier=carrier,
        status=status,
        tracking_number=tracking,
        account_name=event_account,
        notes=description or None,
        categories=tuple(categories),
    )


def detect_status(*texts: Optional[str]) -> str:
    haystack = " ".join(t.lower() for t in texts if t)
    for status, keywords in STATUS_KEYWORDS:
        for keyword in keywords:
            if keyword in haystack:
                return status
    return DEFAULT_STATUS


def find_tracking_number(*texts: Optional[str]) -> str:
    """First tracking-number-like token in the texts, or ""."""
    for text in texts:
        if not text:
            continue
        labelled = TRACKING_LABEL.search(text)
        if labelled:
            return labelled.group(1)
        for pattern in TRACKING_PATTERNS:
            match = pattern.search(text)
            if match:
                return match.group(0)
    return ""


def import_subscriptions(subscriptions: list[Subscription], timeout: int = 30) -> tuple[list[ShippingEvent], dict[str, str]]:
    """
    Import every configured subscription.

    A failing feed does not stop the others. Returns the events of all
    feeds in configuration order and subscription name -> error message.
    """
    events: list[ShippingEvent] = []
    errors: dict[str, str] = {}
    for sub in subscriptions:
        try:
            result = import_feed(SOURCE_URL, sub.url, account=sub.account, timeout=timeout)
        except FeedImportError as e:
            _debug_print(f"{sub.name}: {e}")
            errors[sub.name] = str(e)
            continue
        events.extend(result.events)
    return events, errors


def _text(prop) -> str:
    if prop is None:
        return ''
    return str(prop).strip()


def _categories(prop) -> list[str]:
    if prop is None:
        return []
    items = prop if isinstance(prop, list) else [prop]
    names = []
    for item in items:
        cats = getattr(item, 'cats', None)
        if cats is None:
            cats = str(item).split(',')
        names.extend(str(c).strip() for c in cats if str(c).strip())
    return names


def _timestamp(prop):
    """
    DTSTART value for the engine: a local naive datetime, a date, or the
    raw text when icalendar could not decode it. None when absent.
    """
    if prop is None:
        return None
    value = getattr(prop, 'dt', None)
    if isinstance(value, datetime):
        return to_local_naive(value)
    if isinstance(value, date):
        return value
    return _text(prop) or None
