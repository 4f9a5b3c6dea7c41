from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional

import pandas as pd

from salesdash.dates import parse_date_column, try_parse_date

logger = logging.getLogger(__name__)

CATEGORICAL_FIELDS = ["location", "category", "product", "entity_name"]

OPTION_KEYS = {
    "location": "locations",
    "category": "categories",
    "product": "products",
    "entity_name": "entities",
}


@dataclass(frozen=True)
class FilterCriteria:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Optional[str] = None
    category: Optional[str] = None
    product: Optional[str] = None
    entity_name: Optional[str] = None

    @property
    def is_active(self) -> bool:
        return bool(
            self.start_date
            or self.end_date
            or any(getattr(self, name) for name in CATEGORICAL_FIELDS)
        )


def _as_choice(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value)
    if not s.strip():
        return None
    return s


def _as_bound(raw: dict, key: str) -> Optional[date]:
    value = raw.get(key)
    if value is None or value == "":
        return None
    parsed = try_parse_date(value)
    if parsed is None:
        logger.warning("Ignoring unparseable %s filter: %r", key, value)
    return parsed


def normalize_filters(raw: Optional[dict]) -> FilterCriteria:
    raw = raw or {}
    return FilterCriteria(
        start_date=_as_bound(raw, "start_date"),
        end_date=_as_bound(raw, "end_date"),
        location=_as_choice(raw.get("location")),
        category=_as_choice(raw.get("category")),
        product=_as_choice(raw.get("product")),
        entity_name=_as_choice(raw.get("entity_name")),
    )


def filter_transactions(df: pd.DataFrame, criteria: Optional[FilterCriteria]) -> pd.DataFrame:
    """Return the rows matching every active criterion, in their original order.

    With no active criterion the input frame itself is returned.
    """
    if criteria is None or not criteria.is_active:
        return df

    mask = pd.Series(True, index=df.index)
    for name in CATEGORICAL_FIELDS:
        wanted = getattr(criteria, name)
        if wanted:
            mask &= df[name] == wanted

    if criteria.start_date or criteria.end_date:
        days = parse_date_column(df["date"])
        if criteria.start_date:
            start = criteria.start_date
            mask &= days.map(lambda d: d >= start).astype(bool)
        if criteria.end_date:
            end = criteria.end_date
            mask &= days.map(lambda d: d <= end).astype(bool)

    return df[mask]


def filter_options(df: pd.DataFrame) -> Dict[str, List[str]]:
    """Distinct values per categorical field, computed from the full (unfiltered) dataset."""
    options: Dict[str, List[str]] = {}
    for name, key in OPTION_KEYS.items():
        if df.empty or name not in df.columns:
            options[key] = []
            continue
        options[key] = sorted(str(x) for x in df[name].dropna().unique().tolist())
    return options
