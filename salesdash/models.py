from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, List, Mapping, Union

import pandas as pd

STRING_COLUMNS = ["date", "entity_name", "product", "category", "location"]
AMOUNT_COLUMNS = ["sales", "cost", "margin", "expenses", "profit"]
RATIO_COLUMNS = ["margin_percent", "profit_percent"]
NUMERIC_COLUMNS = AMOUNT_COLUMNS + RATIO_COLUMNS
TRANSACTION_COLUMNS = STRING_COLUMNS + NUMERIC_COLUMNS

NOT_AVAILABLE = "N/A"

_CAMEL_ALIASES = {
    "entityName": "entity_name",
    "marginPercent": "margin_percent",
    "profitPercent": "profit_percent",
}


@dataclass(frozen=True)
class Transaction:
    date: str
    entity_name: str
    product: str
    category: str
    location: str
    sales: float = 0.0
    cost: float = 0.0
    margin: float = 0.0
    expenses: float = 0.0
    profit: float = 0.0
    margin_percent: float = 0.0
    profit_percent: float = 0.0

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Transaction":
        """Build from a snake_case or camelCase mapping; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in raw.items():
            name = _CAMEL_ALIASES.get(key, key)
            if name in known:
                values[name] = value
        for col in STRING_COLUMNS:
            values[col] = str(values.get(col, ""))
        for col in NUMERIC_COLUMNS:
            values[col] = float(values.get(col, 0.0) or 0.0)
        return cls(**values)


@dataclass(frozen=True)
class KPISummary:
    total_sales: float = 0.0
    total_cost: float = 0.0
    avg_margin_percent: float = 0.0
    top_location: str = NOT_AVAILABLE
    top_product: str = NOT_AVAILABLE
    top_customer: str = NOT_AVAILABLE


RecordLike = Union[Transaction, Mapping[str, Any]]


def records_to_frame(records: Iterable[RecordLike]) -> pd.DataFrame:
    """Convert Transaction objects (or plain dicts) into the engine's DataFrame shape."""
    rows = [asdict(r) if isinstance(r, Transaction) else asdict(Transaction.from_dict(r)) for r in records]
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    for col in NUMERIC_COLUMNS:
        df[col] = df[col].astype(float)
    return df


def frame_to_records(df: pd.DataFrame) -> List[Transaction]:
    return [Transaction.from_dict(row) for row in df[TRANSACTION_COLUMNS].to_dict(orient="records")]
