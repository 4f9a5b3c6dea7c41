import altair as alt
import pandas as pd
import streamlit as st
from typing import Optional

from salesdash.assistant import WELCOME_TEXT, SalesAssistant
from salesdash.charts import bar_chart, donut_chart, stacked_year_chart, trend_chart
from salesdash.config import configure_logging, load_settings
from salesdash.data import load_dashboard_data, prepare_context
from salesdash.export import export_filename, to_csv_text
from salesdash.formatting import format_currency, format_percent
from salesdash.metrics_kpis import compute_kpis
from salesdash.metrics_overview import compute_series

alt.data_transformers.disable_max_rows()

ALL = "All"


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


def format_filter_summary(raw: dict) -> str:
    chips = [
        f"From: {raw['start_date'] or 'Any'}",
        f"To: {raw['end_date'] or 'Any'}",
        f"Location: {raw['location'] or ALL}",
        f"Category: {raw['category'] or ALL}",
        f"Product: {raw['product'] or ALL}",
        f"Customer: {raw['entity_name'] or ALL}",
    ]
    return "".join(f"<span class='chip'>{txt}</span>" for txt in chips)


def show_chart(title: str, chart: Optional[alt.Chart]):
    st.markdown(f"**{title}**")
    if chart is None:
        st.info("No data for the selected filters.")
        return
    st.altair_chart(chart, use_container_width=True)


def choice(label: str, options: list) -> Optional[str]:
    picked = st.selectbox(label, [ALL] + options, index=0)
    return None if picked == ALL else picked


# ---------- UI setup ----------
settings = load_settings()
configure_logging(settings.log_level)
st.set_page_config(page_title="Sales Performance Dashboard", layout="wide")
inject_base_styles()
st.title("Sales Performance Dashboard")

data_ctx = load_dashboard_data(settings)
transactions: pd.DataFrame = data_ctx["transactions"]
if transactions.empty:
    st.error(f"No transactions found. Place CSV/XLSX/JSON files in {settings.data_dir}.")
    st.stop()
options = data_ctx["options"]

with st.sidebar:
    st.markdown("### Filters")
    start_date = st.date_input("Start date", value=None)
    end_date = st.date_input("End date", value=None)
    raw_filters = {
        "start_date": start_date,
        "end_date": end_date,
        "location": choice("Location", options["locations"]),
        "category": choice("Category", options["categories"]),
        "product": choice("Product", options["products"]),
        "entity_name": choice("Customer", options["entities"]),
    }

ctx = prepare_context(raw_filters, data_ctx)
filtered: pd.DataFrame = ctx["filtered"]
kpis = compute_kpis(filtered)
series = compute_series(filtered)

c1, c2 = st.columns([8, 2])
c1.markdown(f"<div class='chip-row'>{format_filter_summary(raw_filters)}</div>", unsafe_allow_html=True)
c2.download_button(
    "Export CSV",
    data=to_csv_text(filtered).encode("utf-8"),
    file_name=export_filename(),
    mime="text/csv",
)

cols = st.columns(6)
cols[0].metric("Total Sales", format_currency(kpis.total_sales))
cols[1].metric("Total Cost", format_currency(kpis.total_cost))
cols[2].metric("Avg Margin", format_percent(kpis.avg_margin_percent))
cols[3].metric("Top Location", kpis.top_location)
cols[4].metric("Top Product", kpis.top_product)
cols[5].metric("Top Customer", kpis.top_customer)

left, right = st.columns(2)
with left:
    show_chart("Sales Trend", trend_chart(series["sales_trend"], ["sales"]))
    show_chart("Top 10 Customers", bar_chart(series["top_customers"], horizontal=True))
    show_chart(
        "Profit by Category (Yearly)",
        stacked_year_chart(
            series["profit_by_category_year"]["data"],
            series["profit_by_category_year"]["categories"],
            series_title="Category",
        ),
    )
    show_chart("Sales vs Profit Trend", trend_chart(series["sales_profit_trend"], ["sales", "profit"]))
with right:
    show_chart("Sales by Location", bar_chart(series["sales_by_location"]))
    show_chart("Sales by Category", donut_chart(series["sales_by_category"]))
    show_chart("Cost, Expenses & Profit by Year", stacked_year_chart(series["financials_by_year"], ["cost", "expenses", "profit"]))
    show_chart("Profit by Location", bar_chart(series["profit_by_location"]))
show_chart("Profit Margin % Trend", trend_chart(series["margin_percent_trend"], ["margin_percent"], percent=True))

# ----- Assistant -----
st.markdown("---")
st.subheader("AI Analysis")
if "chat" not in st.session_state:
    st.session_state["chat"] = [{"role": "assistant", "text": WELCOME_TEXT}]
for msg in st.session_state["chat"]:
    with st.chat_message(msg["role"]):
        st.markdown(msg["text"])

question = st.chat_input("Ask about sales, trends, or profits...")
if question and question.strip():
    st.session_state["chat"].append({"role": "user", "text": question})
    with st.spinner("Analyzing data..."):
        answer = SalesAssistant(api_key=settings.gemini_api_key, model=settings.gemini_model).ask(question, kpis, filtered)
    st.session_state["chat"].append({"role": "assistant", "text": answer})
    st.rerun()
