"""Calendar date helpers for record date fields.

Upstream rows carry date-only values ("2024-01-15"), sometimes with a
trailing time component or in day-first local notation ("15/01/2024").
Everything here works on ``datetime.date`` so month and range boundaries
are never shifted by a timezone.
"""

from datetime import date, datetime
from functools import lru_cache

import dateparser

MONTH_NAMES_PT_BR = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

_DATEPARSER_SETTINGS: dict = {
    "DATE_ORDER": "DMY",
    "RETURN_AS_TIMEZONE_AWARE": False,
    "REQUIRE_PARTS": ["day", "month", "year"],
}


@lru_cache(maxsize=4096)
def parse_calendar_date(raw_date: str | None) -> date | None:
    """Parse a record date field into a calendar date.

    ISO dates (optionally followed by a time part) are read directly;
    anything else goes through dateparser with day-first ordering.

    Args:
        raw_date: Date text as received from the record source

    Returns:
        Parsed date, or None if raw_date is empty or unparsable

    Examples:
        >>> parse_calendar_date("2024-02-01")
        datetime.date(2024, 2, 1)
        >>> parse_calendar_date("2024-02-01T23:30:00-03:00")
        datetime.date(2024, 2, 1)
        >>> parse_calendar_date("01/02/2024")
        datetime.date(2024, 2, 1)
    """
    if raw_date is None:
        return None

    text = raw_date.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass

    try:
        parsed = dateparser.parse(
            text, languages=["pt", "en"], settings=_DATEPARSER_SETTINGS
        )
    except Exception:
        # dateparser can raise various exceptions on malformed input
        return None
    if parsed is None:
        return None
    return parsed.date()


def as_calendar_date(value: date | datetime | str | None) -> date | None:
    """Coerce a date-like value to a calendar date, dropping any time part."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_calendar_date(value)


def shift_months(day: date, months: int) -> date:
    """Return the first day of the month ``months`` away from ``day``.

    Examples:
        >>> shift_months(date(2024, 3, 31), -1)
        datetime.date(2024, 2, 1)
        >>> shift_months(date(2024, 1, 15), -5)
        datetime.date(2023, 8, 1)
    """
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def short_month_label(day: date) -> str:
    """Abbreviated pt-BR month name, e.g. ``"fev"``."""
    return MONTH_NAMES_PT_BR[day.month - 1][:3]


def full_month_label(day: date) -> str:
    """Full pt-BR month name with year, e.g. ``"fevereiro 2024"``."""
    return f"{MONTH_NAMES_PT_BR[day.month - 1]} {day.year}"
