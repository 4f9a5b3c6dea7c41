"""Delimited-text export of the active transaction subset."""

from __future__ import annotations

import math
from datetime import date
from typing import List, Optional

import pandas as pd

from salesdash.models import AMOUNT_COLUMNS, RATIO_COLUMNS, STRING_COLUMNS, TRANSACTION_COLUMNS

EXPORT_HEADERS = [
    "Date",
    "Entity Name",
    "Product",
    "Category",
    "Location",
    "Sales",
    "Cost",
    "Margin",
    "Expenses",
    "Profit",
    "Margin %",
    "Profit %",
]


def _quote(value: object) -> str:
    text = "" if value is None else str(value)
    return '"' + text.replace('"', '""') + '"'


def _number(value: object) -> str:
    num = float(value)
    if math.isfinite(num) and num.is_integer():
        return str(int(num))
    return repr(num)


def _ratio(value: object) -> str:
    return f"{float(value) * 100:.2f}%"


def _format_row(row: dict) -> str:
    cells: List[str] = []
    for col in TRANSACTION_COLUMNS:
        if col in STRING_COLUMNS:
            cells.append(_quote(row[col]))
        elif col in AMOUNT_COLUMNS:
            cells.append(_number(row[col]))
        elif col in RATIO_COLUMNS:
            cells.append(_ratio(row[col]))
    return ",".join(cells)


def to_csv_text(df: pd.DataFrame) -> str:
    lines = [",".join(EXPORT_HEADERS)]
    if not df.empty:
        lines.extend(_format_row(row) for row in df[TRANSACTION_COLUMNS].to_dict(orient="records"))
    return "".join(f"{line}\n" for line in lines)


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"sales_export_{today.isoformat()}.csv"
