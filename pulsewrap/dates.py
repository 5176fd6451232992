"""Compact display ranges for sets of dates."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from . import utils


def _parse_long_form(value: str) -> date | None:
    """Parse ``"November 1, 2025"`` using the fixed English month table."""

    parts = value.split(" ")
    if len(parts) < 3:
        return None
    try:
        month = utils.MONTH_NAMES.index(parts[0]) + 1
        day_text = parts[1].removesuffix(",")
        if not all(text.isascii() and text.isdigit() for text in (day_text, parts[2])):
            return None
        day = int(day_text)
        year = int(parts[2])
        return date(year, month, day)
    except ValueError:
        return None


def _parse_any(value: str) -> date | None:
    return utils.parse_iso_date(value) or _parse_long_form(value)


def format_date_range(date_strings: Iterable[str]) -> str | None:
    """Merge ISO or long-form date strings into one human range.

    Unparsable entries are ignored. Returns ``None`` when nothing parses so
    the caller can substitute its own label.
    """

    parsed = sorted(d for d in (_parse_any(value) for value in date_strings) if d is not None)
    if not parsed:
        return None

    first, last = parsed[0], parsed[-1]
    first_month = utils.MONTH_NAMES[first.month - 1]
    last_month = utils.MONTH_NAMES[last.month - 1]

    if first == last:
        return utils.format_date(first)
    if (first.year, first.month) == (last.year, last.month):
        return f"{first_month} {first.day}–{last.day}, {first.year}"
    if first.year == last.year:
        return f"{first_month} {first.day}–{last_month} {last.day}, {first.year}"
    return f"{utils.format_date(first)}–{utils.format_date(last)}"
