from __future__ import annotations

import pandas as pd

from salesdash.grouping import group_sum, pick_top
from salesdash.models import KPISummary


def _total(df: pd.DataFrame, col: str) -> float:
    # Record-order running sum, so totals agree with summing the records one by one.
    return float(sum(df[col].tolist(), 0.0))


def compute_kpis(df: pd.DataFrame) -> KPISummary:
    if df.empty:
        return KPISummary()

    total_sales = _total(df, "sales")
    total_cost = _total(df, "cost")
    total_margin = _total(df, "margin")
    avg_margin_pct = total_margin / total_sales if total_sales > 0 else 0.0

    return KPISummary(
        total_sales=total_sales,
        total_cost=total_cost,
        avg_margin_percent=avg_margin_pct,
        top_location=pick_top(group_sum(df, "location", "sales")),
        top_product=pick_top(group_sum(df, "product", "sales")),
        top_customer=pick_top(group_sum(df, "entity_name", "sales")),
    )
