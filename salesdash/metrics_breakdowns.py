from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from salesdash.grouping import group_sum, with_period

TOP_CUSTOMERS_LIMIT = 10


def _name_value(totals: pd.Series) -> List[Dict[str, Any]]:
    return [{"name": str(name), "value": float(value)} for name, value in totals.items()]


def sales_by_location(df: pd.DataFrame) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    return _name_value(group_sum(df, "location", "sales"))


def sales_by_category(df: pd.DataFrame) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    return _name_value(group_sum(df, "category", "sales"))


def profit_by_location(df: pd.DataFrame) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    return _name_value(group_sum(df, "location", "profit"))


def top_customers(df: pd.DataFrame, limit: int = TOP_CUSTOMERS_LIMIT) -> List[Dict[str, Any]]:
    """Customers ranked by summed sales, descending. Equal totals keep first-seen order."""
    if df.empty:
        return []
    totals = group_sum(df, "entity_name", "sales").sort_values(ascending=False, kind="stable")
    return _name_value(totals.head(max(0, int(limit))))


def financials_by_year(df: pd.DataFrame) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    cols = ["sales", "cost", "expenses", "profit"]
    yearly = group_sum(with_period(df), "year", cols, sort=True).reset_index()
    return [
        {"name": str(int(row["year"])), **{c: float(row[c]) for c in cols}}
        for row in yearly.to_dict(orient="records")
    ]


def profit_by_category_year(df: pd.DataFrame) -> Dict[str, Any]:
    """Profit stacked by category within each year.

    Returns ``{"data": [{"name": "2023", "<category>": profit, ...}], "categories": [...]}``.
    Years ascend numerically; categories are listed in first-seen order and a
    year row only carries the categories that occur in that year.
    """
    if df.empty:
        return {"data": [], "categories": []}

    categories = [str(c) for c in dict.fromkeys(df["category"].tolist())]
    totals = group_sum(with_period(df), ["year", "category"], "profit")

    rows: Dict[int, Dict[str, Any]] = {}
    for (year, category), profit in totals.items():
        row = rows.setdefault(int(year), {"name": str(int(year))})
        row[str(category)] = float(profit)

    return {"data": [rows[y] for y in sorted(rows)], "categories": categories}
