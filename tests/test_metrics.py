"""KPI, trend and breakdown aggregation tests."""

from datetime import date

import numpy as np

from salesdash.dates import month_label
from salesdash.grouping import group_sum, pick_top, with_period
from salesdash.metrics_breakdowns import (
    financials_by_year,
    profit_by_category_year,
    profit_by_location,
    sales_by_category,
    sales_by_location,
    top_customers,
)
from salesdash.metrics_kpis import compute_kpis
from salesdash.metrics_overview import compute_series
from salesdash.metrics_trends import margin_percent_trend, sales_profit_trend, sales_trend
from salesdash.models import KPISummary, records_to_frame
from tests.factories import make_row


class TestKPIs:
    def test_two_record_example(self, two_frame):
        kpis = compute_kpis(two_frame)
        assert kpis.total_sales == 300
        assert kpis.total_cost == 120
        assert abs(kpis.avg_margin_percent - 0.6) < 1e-12
        assert kpis.top_location == "LA"
        assert kpis.top_product == "P2"
        assert kpis.top_customer == "B"

    def test_empty_input(self, empty_frame):
        kpis = compute_kpis(empty_frame)
        assert kpis == KPISummary(
            total_sales=0.0,
            total_cost=0.0,
            avg_margin_percent=0.0,
            top_location="N/A",
            top_product="N/A",
            top_customer="N/A",
        )

    def test_zero_sales_guard(self):
        df = records_to_frame([make_row(sales=0, margin=-25), make_row(sales=0, margin=10)])
        assert compute_kpis(df).avg_margin_percent == 0

    def test_totals_match_record_sums(self):
        rows = [make_row(sales=s, cost=c) for s, c in [(10.5, 3), (20.25, 7), (0, 0), (99, 50)]]
        kpis = compute_kpis(records_to_frame(rows))
        assert kpis.total_sales == sum(r["sales"] for r in rows)
        assert kpis.total_cost == sum(r["cost"] for r in rows)

    def test_totals_match_record_sums_over_many_values(self):
        rng = np.random.default_rng(2023)
        sales = rng.uniform(0, 1000, size=1000).tolist()
        costs = rng.uniform(-50, 500, size=1000).tolist()
        df = records_to_frame([make_row(sales=s, cost=c) for s, c in zip(sales, costs)])
        kpis = compute_kpis(df)
        assert kpis.total_sales == sum(sales, 0.0)
        assert kpis.total_cost == sum(costs, 0.0)

    def test_negative_sales_total_gives_zero_margin(self):
        df = records_to_frame([make_row(sales=-100, margin=-20)])
        kpis = compute_kpis(df)
        assert kpis.total_sales == -100
        assert kpis.avg_margin_percent == 0

    def test_first_group_wins_ties(self):
        df = records_to_frame(
            [
                make_row(location="Boston", sales=50),
                make_row(location="Austin", sales=30),
                make_row(location="Austin", sales=20),
            ]
        )
        assert compute_kpis(df).top_location == "Boston"

    def test_groups_are_summed_before_picking(self):
        df = records_to_frame(
            [
                make_row(entityName="Big Once", sales=90),
                make_row(entityName="Steady", sales=50),
                make_row(entityName="Steady", sales=50),
            ]
        )
        assert compute_kpis(df).top_customer == "Steady"


class TestTrends:
    def test_chronological_across_year_boundary(self):
        df = records_to_frame(
            [
                make_row(date="05-Jan-2023", sales=10),
                make_row(date="15-Dec-2022", sales=20),
                make_row(date="20-Jan-2023", sales=5),
            ]
        )
        assert sales_trend(df) == [
            {"label": "Dec 2022", "sales": 20.0},
            {"label": "Jan 2023", "sales": 15.0},
        ]

    def test_month_ten_sorts_after_month_nine(self):
        df = records_to_frame([make_row(date="01-Oct-2023"), make_row(date="01-Sep-2023")])
        assert [p["label"] for p in sales_trend(df)] == ["Sep 2023", "Oct 2023"]

    def test_sales_profit_trend(self, two_frame):
        assert sales_profit_trend(two_frame) == [
            {"label": "Jan 2023", "sales": 100.0, "profit": 50.0},
            {"label": "Feb 2023", "sales": 200.0, "profit": 100.0},
        ]

    def test_margin_percent_trend(self):
        df = records_to_frame(
            [
                make_row(date="01-Jan-2023", sales=100, margin=30),
                make_row(date="02-Jan-2023", sales=300, margin=170),
                make_row(date="01-Feb-2023", sales=0, margin=40),
            ]
        )
        assert margin_percent_trend(df) == [
            {"label": "Jan 2023", "margin_percent": 0.5},
            {"label": "Feb 2023", "margin_percent": 0.0},
        ]

    def test_margin_percent_is_zero_for_negative_month(self):
        df = records_to_frame([make_row(date="01-Mar-2023", sales=-100, margin=-20)])
        assert margin_percent_trend(df) == [{"label": "Mar 2023", "margin_percent": 0.0}]

    def test_malformed_date_lands_in_current_month(self):
        df = records_to_frame([make_row(date="bad-data", sales=7)])
        today = date.today()
        assert sales_trend(df) == [{"label": month_label(today.year, today.month), "sales": 7.0}]
        assert financials_by_year(df)[0]["name"] == str(today.year)

    def test_empty(self, empty_frame):
        assert sales_trend(empty_frame) == []
        assert sales_profit_trend(empty_frame) == []
        assert margin_percent_trend(empty_frame) == []


class TestBreakdowns:
    def test_categorical_totals_first_seen_order(self):
        df = records_to_frame(
            [
                make_row(location="NY", category="X", sales=10, profit=1),
                make_row(location="LA", category="Y", sales=20, profit=-4),
                make_row(location="NY", category="Y", sales=5, profit=2),
            ]
        )
        assert sales_by_location(df) == [{"name": "NY", "value": 15.0}, {"name": "LA", "value": 20.0}]
        assert sales_by_category(df) == [{"name": "X", "value": 10.0}, {"name": "Y", "value": 25.0}]
        assert profit_by_location(df) == [{"name": "NY", "value": 3.0}, {"name": "LA", "value": -4.0}]

    def test_top_customers_limit_and_order(self):
        rows = [make_row(entityName=f"C{i:02d}", sales=i) for i in range(15)]
        ranked = top_customers(records_to_frame(rows))
        assert len(ranked) == 10
        values = [r["value"] for r in ranked]
        assert values == sorted(values, reverse=True)
        assert ranked[0] == {"name": "C14", "value": 14.0}
        assert ranked[-1]["name"] == "C05"

    def test_top_customers_ties_keep_first_seen_order(self):
        df = records_to_frame(
            [
                make_row(entityName="Zed", sales=10),
                make_row(entityName="Amy", sales=10),
                make_row(entityName="Max", sales=30),
            ]
        )
        assert [r["name"] for r in top_customers(df)] == ["Max", "Zed", "Amy"]

    def test_financials_by_year_ascending(self):
        df = records_to_frame(
            [
                make_row(date="01-Mar-2024", sales=1, cost=2, expenses=3, profit=4),
                make_row(date="01-Mar-2022", sales=10, cost=20, expenses=30, profit=40),
                make_row(date="09-Jul-2024", sales=1, cost=1, expenses=1, profit=1),
            ]
        )
        assert financials_by_year(df) == [
            {"name": "2022", "sales": 10.0, "cost": 20.0, "expenses": 30.0, "profit": 40.0},
            {"name": "2024", "sales": 2.0, "cost": 3.0, "expenses": 4.0, "profit": 5.0},
        ]

    def test_profit_by_category_year(self):
        df = records_to_frame(
            [
                make_row(date="01-Jan-2024", category="Y", profit=5),
                make_row(date="01-Jan-2023", category="X", profit=1),
                make_row(date="01-Jun-2023", category="X", profit=2),
                make_row(date="01-Jun-2023", category="Y", profit=3),
            ]
        )
        out = profit_by_category_year(df)
        assert out["categories"] == ["Y", "X"]
        assert out["data"] == [
            {"name": "2023", "X": 3.0, "Y": 3.0},
            {"name": "2024", "Y": 5.0},
        ]

    def test_empty(self, empty_frame):
        assert sales_by_location(empty_frame) == []
        assert sales_by_category(empty_frame) == []
        assert profit_by_location(empty_frame) == []
        assert top_customers(empty_frame) == []
        assert financials_by_year(empty_frame) == []
        assert profit_by_category_year(empty_frame) == {"data": [], "categories": []}


class TestSeriesBundle:
    def test_every_series_handles_malformed_dates(self):
        df = records_to_frame([make_row(date="bad-data"), make_row(date="01-Foo-2023")])
        series = compute_series(df)
        today = date.today()
        labels = [p["label"] for p in series["sales_trend"]]
        assert labels == ["Jan 2023", month_label(today.year, today.month)]
        assert len(series["margin_percent_trend"]) == 2
        assert [r["name"] for r in series["financials_by_year"]] == ["2023", str(today.year)]

    def test_empty_bundle(self, empty_frame):
        series = compute_series(empty_frame)
        assert series["profit_by_category_year"] == {"data": [], "categories": []}
        assert all(v == [] for k, v in series.items() if k != "profit_by_category_year")


class TestGrouping:
    def test_group_sum_keeps_first_seen_order(self):
        df = records_to_frame(
            [make_row(location="NY"), make_row(location="LA"), make_row(location="NY", sales=1)]
        )
        totals = group_sum(df, "location", "sales")
        assert totals.index.tolist() == ["NY", "LA"]
        assert totals.tolist() == [101.0, 100.0]

    def test_group_sum_sorted_keys(self):
        df = with_period(
            records_to_frame([make_row(date="01-Oct-2023"), make_row(date="01-Sep-2023"), make_row(date="01-Jan-2022")])
        )
        totals = group_sum(df, ["year", "month"], ["sales"], sort=True).reset_index()
        assert totals[["year", "month"]].values.tolist() == [[2022, 1], [2023, 9], [2023, 10]]

    def test_pick_top(self, empty_frame):
        df = records_to_frame([make_row(product="P1", sales=5), make_row(product="P2", sales=5)])
        assert pick_top(group_sum(df, "product", "sales")) == "P1"
        assert pick_top(group_sum(empty_frame, "product", "sales")) == "N/A"

    def test_with_period_columns(self):
        df = with_period(records_to_frame([make_row(date="15-Dec-2022")]))
        assert df[["year", "month"]].iloc[0].tolist() == [2022, 12]
