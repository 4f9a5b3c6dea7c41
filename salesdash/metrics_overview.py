from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

import pandas as pd

from salesdash.charts import bar_chart, donut_chart, stacked_year_chart, to_vega_spec, trend_chart
from salesdash.filters import FilterCriteria
from salesdash.metrics_breakdowns import (
    financials_by_year,
    profit_by_category_year,
    profit_by_location,
    sales_by_category,
    sales_by_location,
    top_customers,
)
from salesdash.metrics_kpis import compute_kpis
from salesdash.metrics_trends import margin_percent_trend, sales_profit_trend, sales_trend


def compute_series(df: pd.DataFrame) -> Dict[str, Any]:
    return {
        "sales_trend": sales_trend(df),
        "sales_by_location": sales_by_location(df),
        "sales_by_category": sales_by_category(df),
        "top_customers": top_customers(df),
        "financials_by_year": financials_by_year(df),
        "profit_by_category_year": profit_by_category_year(df),
        "profit_by_location": profit_by_location(df),
        "sales_profit_trend": sales_profit_trend(df),
        "margin_percent_trend": margin_percent_trend(df),
    }


def compute_charts(series: Dict[str, Any]) -> Dict[str, Any]:
    by_cat_year = series["profit_by_category_year"]
    candidates = {
        "sales_trend": trend_chart(series["sales_trend"], ["sales"]),
        "sales_by_location": bar_chart(series["sales_by_location"]),
        "sales_by_category": donut_chart(series["sales_by_category"]),
        "top_customers": bar_chart(series["top_customers"], horizontal=True),
        "financials_by_year": stacked_year_chart(series["financials_by_year"], ["cost", "expenses", "profit"]),
        "profit_by_category_year": stacked_year_chart(by_cat_year["data"], by_cat_year["categories"], series_title="Category"),
        "profit_by_location": bar_chart(series["profit_by_location"]),
        "sales_profit_trend": trend_chart(series["sales_profit_trend"], ["sales", "profit"]),
        "margin_percent_trend": trend_chart(series["margin_percent_trend"], ["margin_percent"], percent=True),
    }
    return {name: to_vega_spec(chart) for name, chart in candidates.items() if chart is not None}


def compute_overview(filters: FilterCriteria, ctx: Dict[str, Any], *, include_charts: bool = True) -> Dict[str, Any]:
    df: pd.DataFrame = ctx.get("filtered", pd.DataFrame())
    all_rows: pd.DataFrame = ctx.get("transactions", df)
    series = compute_series(df)
    return {
        "filters": asdict(filters),
        "row_counts": {"total": int(len(all_rows)), "filtered": int(len(df))},
        "kpis": asdict(compute_kpis(df)),
        "series": series,
        "charts": compute_charts(series) if include_charts else {},
    }
