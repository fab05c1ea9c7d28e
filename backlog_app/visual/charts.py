"""Chart builders (Altair) for the daily backlog series."""

from __future__ import annotations

import altair as alt
import pandas as pd

from backlog_app.core.models import BacklogSeries

STOCK_COLOR = "#3B82F6"
OPENED_COLOR = "#F59E0B"
CLOSED_COLOR = "#10B981"
THRESHOLD_COLOR = "#EF4444"


def _weekend_shading(chart_df: pd.DataFrame) -> alt.Chart:
    shading = alt.Chart(pd.DataFrame()).mark_rect()  # default empty rect
    unique_dates = chart_df[["date"]].drop_duplicates()
    unique_dates = unique_dates.assign(weekday=unique_dates["date"].dt.weekday)
    weekend = unique_dates[unique_dates["weekday"].isin([5, 6])].copy()
    if not weekend.empty:
        weekend = weekend.assign(date_end=weekend["date"] + pd.Timedelta(days=1))
        shading = alt.Chart(weekend).mark_rect(color="#f2f2f2").encode(x="date:T", x2="date_end:T")
    return shading


def backlog_chart(series: BacklogSeries, threshold: float | None = None, cutoff_label: str = "08:00"):
    """Layered chart: backlog line over opened/closed bars, plus the target rule.

    Returns None for an empty series.
    """
    if series.is_empty:
        return None
    chart_df = series.to_frame()
    stock_title = f"Backlog at {cutoff_label}"

    volumes = chart_df.melt(
        id_vars=["date"],
        value_vars=["opened_volume", "closed_volume"],
        var_name="volume",
        value_name="count",
    )
    volumes["volume"] = volumes["volume"].map({"opened_volume": "Opened", "closed_volume": "Closed"})
    bars = (
        alt.Chart(volumes)
        .mark_bar(opacity=0.6)
        .encode(
            x=alt.X("date:T", title="Date"),
            xOffset="volume:N",
            y=alt.Y("count:Q", title="Tickets"),
            color=alt.Color(
                "volume:N",
                scale=alt.Scale(domain=["Opened", "Closed"], range=[OPENED_COLOR, CLOSED_COLOR]),
                legend=alt.Legend(title="Volume"),
            ),
            tooltip=[
                alt.Tooltip("date:T", title="Date"),
                alt.Tooltip("volume:N", title="Volume"),
                alt.Tooltip("count:Q", title="Count"),
            ],
        )
    )
    line = (
        alt.Chart(chart_df)
        .mark_line(color=STOCK_COLOR)
        .encode(
            x="date:T",
            y=alt.Y("backlog_stock:Q", title="Tickets"),
        )
    )
    points = (
        alt.Chart(chart_df)
        .mark_circle(color=STOCK_COLOR, opacity=0.85, size=70)
        .encode(
            x="date:T",
            y="backlog_stock:Q",
            tooltip=[
                alt.Tooltip("date:T", title="Date"),
                alt.Tooltip("backlog_stock:Q", title=stock_title),
                alt.Tooltip("opened_volume:Q", title="Opened"),
                alt.Tooltip("closed_volume:Q", title="Closed"),
                alt.Tooltip("filled:N", title="Carried forward"),
            ],
        )
    )

    layers = [_weekend_shading(chart_df), bars, line, points]
    if threshold is not None:
        rule = (
            alt.Chart(pd.DataFrame({"threshold": [float(threshold)]}))
            .mark_rule(color=THRESHOLD_COLOR, strokeDash=[6, 4])
            .encode(y="threshold:Q", tooltip=[alt.Tooltip("threshold:Q", title="Target")])
        )
        layers.append(rule)
    return alt.layer(*layers).properties(height=320, title=stock_title)
