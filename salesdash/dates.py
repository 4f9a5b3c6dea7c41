from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Optional

import pandas as pd

logger = logging.getLogger(__name__)

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

# Month token -> 0-based month index. Zero-padded numbers are accepted as a fallback.
MONTH_INDEX: Dict[str, int] = {name: idx for idx, name in enumerate(MONTH_ABBR)}
MONTH_INDEX.update({f"{idx + 1:02d}": idx for idx in range(12)})


def _today() -> date:
    return datetime.now().date()


def parse_date(value: object) -> date:
    """Parse a ``DD-Mon-YYYY`` string (e.g. ``01-Jan-2023``) into a date.

    Never raises. Input that does not split into three hyphen-delimited parts,
    or whose day/year are not integers, resolves to today's date. An unknown
    month token resolves to January. Day overflow rolls into the next month.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    parts = str(value).split("-")
    if len(parts) != 3:
        logger.debug("Unsplittable date %r; using today", value)
        return _today()

    day_text, month_text, year_text = parts
    month = MONTH_INDEX.get(month_text, 0) + 1
    try:
        day = int(day_text.strip())
        year = int(year_text.strip())
        return date(year, month, 1) + timedelta(days=day - 1)
    except (ValueError, OverflowError):
        logger.debug("Malformed date %r; using today", value)
        return _today()


def try_parse_date(value: object) -> Optional[date]:
    """Strict variant of :func:`parse_date`: returns None instead of guessing."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    parts = text.split("-")
    if len(parts) != 3 or parts[1] not in MONTH_INDEX:
        return None
    try:
        return date(int(parts[2]), MONTH_INDEX[parts[1]] + 1, int(parts[0]))
    except ValueError:
        return None


def format_date(value: date) -> str:
    return f"{value.day:02d}-{MONTH_ABBR[value.month - 1]}-{value.year:04d}"


def month_label(year: int, month: int) -> str:
    """``(2023, 1)`` -> ``"Jan 2023"`` (month is 1-based)."""
    return f"{MONTH_ABBR[month - 1]} {year:04d}"


def parse_date_column(series: pd.Series) -> pd.Series:
    return series.map(parse_date)
