"""Vega-Lite exports of the dashboard datasets for API consumers."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Sequence

import altair as alt
import pandas as pd

from dashboard.models import CategorySlice, MetricPoint, RankedItem
from dashboard.theme import PIE_PALETTE, THEME

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def revenue_trend_chart(points: Sequence[MetricPoint]) -> alt.Chart:
    df = pd.DataFrame([asdict(p) for p in points], columns=["label", "value"])
    df["label"] = pd.to_datetime(df["label"])
    base = alt.Chart(df).encode(
        x=alt.X("label:T", title="Date", axis=alt.Axis(format="%m/%d", grid=False)),
        y=alt.Y("value:Q", title="Revenue", axis=alt.Axis(format="$~s", gridDash=[4, 4], domain=False, ticks=False)),
        tooltip=[alt.Tooltip("label:T", title="Date"), alt.Tooltip("value:Q", title="Revenue", format="$,.0f")],
    )
    area = base.mark_area(color=THEME.bright_red, opacity=0.3)
    line = base.mark_line(color=THEME.bright_red, point={"filled": True, "size": 60})
    return (area + line).properties(height=260)


def ranked_bar_chart(items: Sequence[RankedItem], *, title: str = "Revenue") -> alt.Chart:
    df = pd.DataFrame([asdict(i) for i in items], columns=["name", "value"])
    return (
        alt.Chart(df)
        .mark_bar(color=THEME.maroon)
        .encode(
            x=alt.X("value:Q", title=title, axis=alt.Axis(format="$~s")),
            # input order is display order
            y=alt.Y("name:N", title=None, sort=None),
            tooltip=["name", alt.Tooltip("value:Q", title=title, format="$,.0f")],
        )
    )


def category_pie_chart(slices: Sequence[CategorySlice]) -> alt.Chart:
    df = pd.DataFrame([asdict(s) for s in slices], columns=["category", "percentage"])
    return (
        alt.Chart(df)
        .mark_arc(stroke=THEME.wedge_stroke)
        .encode(
            theta=alt.Theta("percentage:Q"),
            color=alt.Color(
                "category:N",
                sort=None,
                scale=alt.Scale(domain=df["category"].tolist(), range=list(PIE_PALETTE)),
            ),
            tooltip=["category", alt.Tooltip("percentage:Q", format=".0f")],
        )
    )
