from __future__ import annotations

from typing import Any, Dict, List, Optional

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def _label_sort(rows: List[Dict[str, Any]]) -> List[str]:
    # Keep the chronological order the aggregators produced instead of Altair's alphabetical default.
    return [r["label"] for r in rows]


def trend_chart(rows: List[Dict[str, Any]], fields: List[str], *, percent: bool = False) -> Optional[alt.Chart]:
    if not rows:
        return None
    long_df = pd.DataFrame(rows).melt(id_vars="label", value_vars=fields, var_name="metric", value_name="value")
    axis_format = ".1%" if percent else "$~s"
    tooltip_format = ".2%" if percent else "$,.0f"
    hover = alt.selection_point(fields=["metric"], on="mouseover", empty="all")
    return (
        alt.Chart(long_df)
        .mark_line(point={"filled": True, "size": 60})
        .encode(
            x=alt.X("label:N", title=None, sort=_label_sort(rows), axis=alt.Axis(grid=False)),
            y=alt.Y("value:Q", title=None, axis=alt.Axis(format=axis_format, gridDash=[4, 4], domain=False, ticks=False)),
            color=alt.Color("metric:N", title="Metric"),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.2)),
            tooltip=["label", "metric", alt.Tooltip("value:Q", format=tooltip_format)],
        )
        .add_params(hover)
        .properties(height=260)
    )


def bar_chart(rows: List[Dict[str, Any]], *, horizontal: bool = False) -> Optional[alt.Chart]:
    if not rows:
        return None
    df = pd.DataFrame(rows)
    value = alt.X("value:Q", title=None, axis=alt.Axis(format="$~s")) if horizontal else alt.Y("value:Q", title=None, axis=alt.Axis(format="$~s"))
    name = alt.Y("name:N", title=None, sort="-x") if horizontal else alt.X("name:N", title=None, sort=None)
    encoding = {"x": value, "y": name} if horizontal else {"x": name, "y": value}
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(**encoding, tooltip=["name", alt.Tooltip("value:Q", format="$,.0f")])
        .properties(height=260)
    )


def donut_chart(rows: List[Dict[str, Any]]) -> Optional[alt.Chart]:
    if not rows:
        return None
    return (
        alt.Chart(pd.DataFrame(rows))
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("value:Q"),
            color=alt.Color("name:N", title=None),
            tooltip=["name", alt.Tooltip("value:Q", format="$,.0f")],
        )
        .properties(height=260)
    )


def stacked_year_chart(rows: List[Dict[str, Any]], series: List[str], *, series_title: str = "Series") -> Optional[alt.Chart]:
    if not rows or not series:
        return None
    wide = pd.DataFrame(rows)
    long_df = (
        wide.melt(id_vars="name", value_vars=[s for s in series if s in wide.columns], var_name="series", value_name="value")
        .dropna(subset=["value"])
    )
    return (
        alt.Chart(long_df)
        .mark_bar()
        .encode(
            x=alt.X("name:O", title="Year"),
            y=alt.Y("value:Q", stack="zero", title=None, axis=alt.Axis(format="$~s")),
            color=alt.Color("series:N", title=series_title),
            tooltip=["name", "series", alt.Tooltip("value:Q", format="$,.0f")],
        )
        .properties(height=260)
    )
