from __future__ import annotations

import pandas as pd

from salesdash.models import NOT_AVAILABLE


def format_currency(value: object) -> str:
    if value is None or pd.isna(value):
        return NOT_AVAILABLE
    amount = float(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.0f}"


def format_percent(value: object, decimals: int = 1) -> str:
    if value is None or pd.isna(value):
        return NOT_AVAILABLE
    return f"{float(value) * 100:.{decimals}f}%"
