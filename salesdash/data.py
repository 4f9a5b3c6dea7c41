from __future__ import annotations

import logging
from datetime import date, datetime
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from salesdash.config import Settings, load_settings
from salesdash.dates import format_date
from salesdash.filters import FilterCriteria, filter_options, filter_transactions, normalize_filters
from salesdash.models import (
    NUMERIC_COLUMNS,
    RATIO_COLUMNS,
    STRING_COLUMNS,
    TRANSACTION_COLUMNS,
    records_to_frame,
)
from salesdash.sample import generate_sample_transactions

logger = logging.getLogger(__name__)

# Header spellings seen in exported sales sheets -> engine column.
TRANSACTION_HEADER_ALIASES = {
    "Date": "date",
    "Order Date": "date",
    "Entity Name": "entity_name",
    "entityName": "entity_name",
    "Customer": "entity_name",
    "Customer Name": "entity_name",
    "Product": "product",
    "Category": "category",
    "Location": "location",
    "Region": "location",
    "Sales": "sales",
    "Cost": "cost",
    "Margin": "margin",
    "Expenses": "expenses",
    "Profit": "profit",
    "Margin %": "margin_percent",
    "Margin%": "margin_percent",
    "marginPercent": "margin_percent",
    "Profit %": "profit_percent",
    "Profit%": "profit_percent",
    "profitPercent": "profit_percent",
}

SUPPORTED_SUFFIXES = {".csv", ".xlsx", ".json"}


class SalesDashError(Exception):
    """Base exception for the dashboard core."""


class DataLoadError(SalesDashError):
    """A transaction file could not be read."""


def get_source_files(data_dir: Path, file_glob: str) -> List[Path]:
    if not data_dir.is_dir():
        return []
    return sorted(p for p in data_dir.glob(file_glob) if p.suffix.lower() in SUPPORTED_SUFFIXES)


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def coerce_str_safe(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            series = df[col].astype("string").str.strip()
            df[col] = series.fillna("").astype(str)
    return df


def numericize(df: pd.DataFrame, cols: Iterable[str]) -> pd.DataFrame:
    for col in cols:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0.0).astype(float)
    return df


def _ratio_value(value: object) -> object:
    # "60.00%" -> 0.6; plain numbers pass through.
    if isinstance(value, str) and value.strip().endswith("%"):
        try:
            return float(value.strip().rstrip("%").replace(",", "")) / 100.0
        except ValueError:
            return None
    return value


def _date_text(value: object) -> object:
    if value is pd.NaT:
        return None
    if isinstance(value, (datetime, date)):
        return format_date(value if not isinstance(value, datetime) else value.date())
    return value


def normalize_transactions(raw: pd.DataFrame) -> pd.DataFrame:
    """Map a raw sheet onto the engine's columns and clean the values."""
    df = raw.rename(columns=lambda c: TRANSACTION_HEADER_ALIASES.get(str(c).strip(), str(c).strip()))
    df = df.loc[:, ~df.columns.duplicated()].copy()
    for col in TRANSACTION_COLUMNS:
        if col not in df.columns:
            df[col] = "" if col in STRING_COLUMNS else 0.0

    df["date"] = df["date"].map(_date_text)
    for col in RATIO_COLUMNS:
        df[col] = df[col].map(_ratio_value)

    df = coerce_str_safe(df, STRING_COLUMNS)
    df = numericize(df, NUMERIC_COLUMNS)
    return df[TRANSACTION_COLUMNS].reset_index(drop=True)


def read_transactions_file(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            raw = pd.read_csv(path)
        elif suffix == ".xlsx":
            raw = pd.read_excel(path)
        elif suffix == ".json":
            raw = pd.read_json(path, orient="records", convert_dates=False)
        else:
            raise DataLoadError(f"Unsupported transaction file type: {path.name}")
    except DataLoadError:
        raise
    except Exception as exc:
        raise DataLoadError(f"Could not read {path.name}: {exc}") from exc
    logger.info("Loaded %d rows from %s", len(raw), path.name)
    return normalize_transactions(raw)


# ---------------- Public API (Streamlit + FastAPI use) ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    frames = [read_transactions_file(Path(name)) for name, _ in files_sig]
    transactions = pd.concat(frames, ignore_index=True) if frames else records_to_frame([])
    return {
        "files": [Path(name).name for name, _ in files_sig],
        "transactions": transactions,
        "options": filter_options(transactions),
    }


@lru_cache(maxsize=1)
def _load_sample_data() -> Dict[str, object]:
    transactions = records_to_frame(generate_sample_transactions())
    return {"files": [], "transactions": transactions, "options": filter_options(transactions)}


def load_dashboard_data(settings: Optional[Settings] = None) -> Dict[str, object]:
    settings = settings or load_settings()
    files = get_source_files(settings.data_dir, settings.file_glob)
    if files:
        return _load_dashboard_data_cached(file_signature(files))
    if settings.use_sample_data:
        logger.info("No transaction files in %s; using sample data", settings.data_dir)
        return _load_sample_data()
    empty = records_to_frame([])
    return {"files": [], "transactions": empty, "options": filter_options(empty)}


def prepare_context(filters: dict | FilterCriteria | None, data_ctx: Dict[str, object]) -> Dict[str, object]:
    transactions: pd.DataFrame = data_ctx.get("transactions", records_to_frame([]))
    criteria = filters if isinstance(filters, FilterCriteria) else normalize_filters(filters)
    filtered = filter_transactions(transactions, criteria)
    logger.debug("Filter kept %d of %d transactions", len(filtered), len(transactions))
    return {
        "filters": criteria,
        "transactions": transactions,
        "filtered": filtered,
        "options": data_ctx.get("options") or filter_options(transactions),
    }
