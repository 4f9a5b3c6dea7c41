"""Monthly time series. Buckets are (year, month) pairs in chronological order."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pandas as pd

from salesdash.dates import month_label
from salesdash.grouping import group_sum, with_period


def _monthly_totals(df: pd.DataFrame, value_cols: Sequence[str]) -> pd.DataFrame:
    # Sorting on integer (year, month) keys avoids the lexical "2023-10" < "2023-9" trap.
    return group_sum(with_period(df), ["year", "month"], value_cols, sort=True).reset_index()


def _monthly_series(df: pd.DataFrame, value_cols: Sequence[str]) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    monthly = _monthly_totals(df, value_cols)
    out: List[Dict[str, Any]] = []
    for row in monthly.to_dict(orient="records"):
        point: Dict[str, Any] = {"label": month_label(int(row["year"]), int(row["month"]))}
        for col in value_cols:
            point[col] = float(row[col])
        out.append(point)
    return out


def sales_trend(df: pd.DataFrame) -> List[Dict[str, Any]]:
    return _monthly_series(df, ["sales"])


def sales_profit_trend(df: pd.DataFrame) -> List[Dict[str, Any]]:
    return _monthly_series(df, ["sales", "profit"])


def margin_percent_trend(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Per-month blended margin ratio (summed margin / summed sales, 0 unless sales is positive)."""
    return [
        {
            "label": point["label"],
            "margin_percent": point["margin"] / point["sales"] if point["sales"] > 0 else 0.0,
        }
        for point in _monthly_series(df, ["margin", "sales"])
    ]
