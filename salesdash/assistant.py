"""Natural-language Q&A over the current dashboard state, backed by Gemini.

The assistant only ever sees a finished :class:`KPISummary` plus the first rows
of the active subset. Any failure on the model side is turned into an advisory
message here and never reaches the aggregation code.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import pandas as pd
from google import genai

from salesdash.config import DEFAULT_GEMINI_MODEL
from salesdash.formatting import format_currency
from salesdash.models import KPISummary, frame_to_records

logger = logging.getLogger(__name__)

SAMPLE_ROWS = 50

CONNECTION_ADVISORY = (
    "I'm having trouble connecting to the analysis engine. "
    "Please ensure the API Key is configured correctly."
)
EMPTY_RESPONSE_TEXT = "I couldn't generate a response based on the data."
WELCOME_TEXT = (
    "Hello! I am your Business Intelligence Assistant. I have analyzed the current dashboard data. "
    "Ask me about trends, top performers, or profitability!"
)

SYSTEM_PROMPT = """You are an expert Business Intelligence Analyst AI attached to a sales dashboard.

Current Dashboard Context (based on active filters):
{context}

Instructions:
1. Answer the user's question based strictly on the provided data.
2. If the user asks about "Top 10" or specific details not in the summary, make a reasonable inference based on the provided sample or explain that you are analyzing the visible dataset.
3. Keep answers concise, professional, and insightful.
4. Format currency appropriately.
5. If the data shows negative profit, highlight it as a concern.
"""


def build_context(kpis: KPISummary, df: pd.DataFrame, sample_size: int = SAMPLE_ROWS) -> Dict[str, Any]:
    sample = frame_to_records(df.head(max(0, sample_size)))
    return {
        "KPIs": {
            "TotalSales": format_currency(kpis.total_sales),
            "TotalCost": format_currency(kpis.total_cost),
            "AvgMargin": f"{kpis.avg_margin_percent * 100:.1f}%",
            "TopLocation": kpis.top_location,
            "TopProduct": kpis.top_product,
            "TopCustomer": kpis.top_customer,
        },
        "SampleTransactions": [
            {"Date": t.date, "Location": t.location, "Category": t.category, "Sales": t.sales, "Profit": t.profit}
            for t in sample
        ],
    }


def build_prompt(context: Dict[str, Any], question: str) -> str:
    return SYSTEM_PROMPT.format(context=json.dumps(context, indent=2)) + "\n\nUser Question: " + question


class SalesAssistant:
    """Thin wrapper around a google-genai client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GEMINI_MODEL,
        client: Optional[Any] = None,
        sample_size: int = SAMPLE_ROWS,
    ):
        self.api_key = api_key
        self.model = model
        self.sample_size = sample_size
        self._client = client

    @property
    def client(self) -> Optional[Any]:
        if self._client is None and self.api_key:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def ask(self, question: str, kpis: KPISummary, df: pd.DataFrame) -> str:
        question = (question or "").strip()
        if not question:
            raise ValueError("question must not be empty")

        prompt = build_prompt(build_context(kpis, df, self.sample_size), question)
        try:
            client = self.client
            if client is None:
                logger.warning("Assistant called without an API key")
                return CONNECTION_ADVISORY
            response = client.models.generate_content(model=self.model, contents=prompt)
        except Exception:
            logger.exception("Assistant request failed")
            return CONNECTION_ADVISORY

        text = getattr(response, "text", None)
        return text or EMPTY_RESPONSE_TEXT
