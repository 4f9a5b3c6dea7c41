from __future__ import annotations

from dataclasses import asdict
import logging
import math
from datetime import date

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from api.schemas import AssistantRequest, FilterCriteriaModel
from salesdash.assistant import SalesAssistant
from salesdash.config import configure_logging, load_settings
from salesdash.data import load_dashboard_data, prepare_context
from salesdash.export import export_filename, to_csv_text
from salesdash.filters import FilterCriteria, normalize_filters
from salesdash.metrics_kpis import compute_kpis
from salesdash.metrics_overview import compute_overview

settings = load_settings()
configure_logging(settings.log_level)

app = FastAPI(title="Sales Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_assistant() -> SalesAssistant:
    return SalesAssistant(api_key=settings.gemini_api_key, model=settings.gemini_model)


def _criteria_from_model(model: FilterCriteriaModel) -> FilterCriteria:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
                date: lambda d: d.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/options")
def meta_options():
    try:
        data_ctx = load_dashboard_data(settings)
        return _json({"options": data_ctx.get("options", {})})
    except Exception as exc:
        logger.exception("meta_options failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: FilterCriteriaModel, include_charts: bool = Query(default=True)):
    try:
        data_ctx = load_dashboard_data(settings)
        f = _criteria_from_model(filters)
        ctx = prepare_context(f, data_ctx)
        return _json(compute_overview(f, ctx, include_charts=include_charts))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/kpis")
def kpis(filters: FilterCriteriaModel):
    try:
        data_ctx = load_dashboard_data(settings)
        ctx = prepare_context(_criteria_from_model(filters), data_ctx)
        return _json({"kpis": asdict(compute_kpis(ctx["filtered"]))})
    except Exception as exc:
        logger.exception("kpis failed")
        return _error(exc)


@app.post("/export")
def export_csv(filters: FilterCriteriaModel):
    data_ctx = load_dashboard_data(settings)
    ctx = prepare_context(_criteria_from_model(filters), data_ctx)
    csv_bytes = to_csv_text(ctx["filtered"]).encode("utf-8")
    filename = export_filename()
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})


@app.post("/assistant")
def assistant(request: AssistantRequest):
    try:
        data_ctx = load_dashboard_data(settings)
        ctx = prepare_context(_criteria_from_model(request.filters), data_ctx)
        df = ctx["filtered"]
        answer = get_assistant().ask(request.question, compute_kpis(df), df)
        return _json({"answer": answer})
    except ValueError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc), "type": type(exc).__name__})
    except Exception as exc:
        logger.exception("assistant failed")
        return _error(exc)
