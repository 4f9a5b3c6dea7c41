"""Group-then-reduce helpers shared by the aggregation functions.

Groups come back in first-seen order unless ``sort=True`` is asked for, which
is what makes the first-wins tie-break of :func:`pick_top` deterministic.
"""

from __future__ import annotations

from typing import List, Sequence, Union

import pandas as pd

from salesdash.dates import parse_date_column
from salesdash.models import NOT_AVAILABLE

Keys = Union[str, List[str]]


def group_sum(
    df: pd.DataFrame,
    key: Keys,
    values: Union[str, Sequence[str]],
    sort: bool = False,
) -> Union[pd.Series, pd.DataFrame]:
    """Sum ``values`` per group, one entry per distinct key.

    Keys keep first-seen order by default; ``sort=True`` orders them ascending.
    """
    cols = values if isinstance(values, str) else list(values)
    return df.groupby(key, sort=sort, dropna=False)[cols].sum()


def with_period(df: pd.DataFrame) -> pd.DataFrame:
    """Add integer ``year``/``month`` columns (1-based month) derived from ``date``."""
    days = parse_date_column(df["date"])
    return df.assign(
        year=days.map(lambda d: d.year).astype(int),
        month=days.map(lambda d: d.month).astype(int),
    )


def pick_top(totals: pd.Series) -> str:
    """Label of the largest total; the first group wins ties."""
    if totals.empty:
        return NOT_AVAILABLE
    return str(totals.idxmax())
