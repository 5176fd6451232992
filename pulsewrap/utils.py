"""Shared utilities for the PulseWrap project."""

from __future__ import annotations

import re
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Iterable, Sequence

import pandas as pd

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def ensure_dataframe(
    records: Iterable[object] | pd.DataFrame,
    columns: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Normalise records (dataclasses or mappings) to a :class:`pandas.DataFrame`."""

    if isinstance(records, pd.DataFrame):
        return records.copy()

    rows = [asdict(row) if is_dataclass(row) else dict(row) for row in records]
    if not rows:
        return pd.DataFrame(columns=list(columns or []))
    return pd.DataFrame(rows, columns=list(columns) if columns else None)


def parse_iso_date(value: object) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` calendar date, returning ``None`` on failure."""

    if not isinstance(value, str) or not _ISO_DATE.fullmatch(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def format_currency(value: float, currency: str = "$") -> str:
    """Return a human-readable currency string such as ``-$1,234.50``."""

    amount = round(float(value), 2)
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency}{abs(amount):,.2f}"


def format_number(value: float) -> str:
    """Group thousands and keep at most three fraction digits."""

    if isinstance(value, int):
        return f"{value:,}"
    text = f"{float(value):,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_date(value: date) -> str:
    return f"{MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"
