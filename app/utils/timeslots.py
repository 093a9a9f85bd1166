import re
from datetime import date, datetime, time
from typing import Iterable, List

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

WEEKDAYS = ("MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN")

_WEEKDAY_ALIASES = {
    "MONDAY": "MON", "TUESDAY": "TUE", "WEDNESDAY": "WED", "THURSDAY": "THU",
    "FRIDAY": "FRI", "SATURDAY": "SAT", "SUNDAY": "SUN",
    "TUES": "TUE", "WEDS": "WED", "THUR": "THU", "THURS": "THU",
}


def parse_hhmm(text: str) -> time:
    """
    "09:05" -> time(9, 5)
    Only zero-padded 24-hour values are accepted, so that the strings compare
    correctly as plain text.
    """
    s = (text or "").strip()
    m = HHMM_PATTERN.match(s)
    if not m:
        raise ValueError(f"invalid time {text!r}, expected HH:mm (24-hour)")
    return time(int(m.group(1)), int(m.group(2)))


def format_hhmm(value: time | datetime) -> str:
    # fixed width, never locale dependent
    return f"{value.hour:02d}:{value.minute:02d}"


def combine(reference_date: date, hhmm: str) -> datetime:
    return datetime.combine(reference_date, parse_hhmm(hhmm))


def normalize_weekday(name: str) -> str:
    """
    "monday" / "Mon" / "MON" -> "MON"
    """
    if not isinstance(name, str):
        raise ValueError(f"weekday must be a string, got {name!r}")
    key = name.strip().upper()
    key = _WEEKDAY_ALIASES.get(key, key)
    if key not in WEEKDAYS:
        raise ValueError(f"unknown weekday {name!r}")
    return key


def normalize_weekdays(names: Iterable[str] | None) -> List[str]:
    if not names:
        return []
    out = {normalize_weekday(n) for n in names}
    # keep week order and drop duplicates
    return [d for d in WEEKDAYS if d in out]
