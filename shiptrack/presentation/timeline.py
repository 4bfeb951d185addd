"""Event timeline labels and dates as shown on the tracking page.

The short event label is ``"MMM D"``. It carries no year, so turning a label
back into a timestamp has to assume one: the reference date's year. Labels may
carry an explicit year (``"MMM D YYYY"``) to round-trip exactly.
"""
from datetime import date, datetime
from typing import Iterable, Optional, Union
import re

from shiptrack.core.clock import isoformat_utc, parse_iso, utcnow

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_LABEL = re.compile(r"^([A-Za-z]{3})[a-z]*\.?\s+(\d{1,2})(?:,?\s+(\d{4}))?$")

DateLike = Union[datetime, date, str, None]


def _coerce(value: DateLike) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return parse_iso(value)
    except ValueError:
        return None


def format_event_label(value: DateLike) -> str:
    """``datetime(2025, 1, 9)`` -> ``"Jan 9"``. Unparseable strings come back unchanged."""
    moment = _coerce(value)
    if moment is None:
        return value if isinstance(value, str) else ""
    return f"{MONTHS[moment.month - 1]} {moment.day}"


def parse_event_label(label: Optional[str], today: Optional[date] = None) -> datetime:
    """Turn a form timestamp back into a datetime.

    Empty input means "now". ISO strings are parsed as-is. ``"Jan 9"`` is
    placed in ``today``'s year; ``"Jan 9 2024"`` keeps 2024.
    Raises ValueError for anything else.
    """
    if label is None or not label.strip():
        return utcnow()
    text = label.strip()
    if _ISO_PREFIX.match(text):
        return parse_iso(text)

    match = _LABEL.match(text)
    if not match:
        raise ValueError(f"Unrecognised timestamp: {label!r}")
    month_name, day, year = match.groups()
    month_name = month_name.capitalize()
    if month_name not in MONTHS:
        raise ValueError(f"Unknown month: {month_name!r}")
    if year is None:
        year = (today or utcnow().date()).year
    return datetime(int(year), MONTHS.index(month_name) + 1, int(day))


def format_date(value: DateLike, with_year: bool = True, empty: str = "Not specified") -> str:
    """Calendar date without time-of-day, e.g. ``"Jan 9, 2025"``."""
    moment = _coerce(value)
    if moment is None:
        return value if isinstance(value, str) and value else empty
    text = f"{MONTHS[moment.month - 1]} {moment.day}"
    return f"{text}, {moment.year}" if with_year else text


def format_event_datetime(value: DateLike) -> str:
    moment = _coerce(value)
    if moment is None:
        return ""
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{format_date(moment)}, {hour:02d}:{moment.minute:02d} {meridiem}"


def build_timeline(events: Iterable[dict]) -> list[dict]:
    """Render events in the order given; the server already sorts newest first."""
    rows = []
    for event in events:
        ts = event.get("timestamp")
        rows.append({
            "id": event.get("id"),
            "status": event.get("status"),
            "description": event.get("description") or "",
            "location": event.get("location") or "Unknown location",
            "timestamp": isoformat_utc(ts) if isinstance(ts, datetime) else ts,
            "label": format_event_label(ts),
            "datetime": format_event_datetime(ts),
        })
    return rows
