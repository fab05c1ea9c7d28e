"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from backlog_app.core.config import SERIES_COLUMN_LABELS, SETTINGS
from backlog_app.core.models import BacklogSeries

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def series_table(series: BacklogSeries) -> pd.DataFrame:
    """Display-ready frame: ISO date, weekday label, and friendly headers."""
    df = series.to_frame()
    if df.empty:
        return pd.DataFrame(columns=["Date", "Day", *list(SERIES_COLUMN_LABELS.values())[1:]])
    out = df.copy()
    out.insert(1, "day", out["date"].dt.weekday.map(lambda i: WEEKDAY_LABELS[i]))
    out["date"] = out["date"].dt.strftime("%Y-%m-%d")
    return out.rename(columns={**SERIES_COLUMN_LABELS, "day": "Day"})


def series_csv(series: BacklogSeries) -> bytes:
    return series_table(series).to_csv(index=False).encode(SETTINGS.download_encoding)


def render_series_table(series: BacklogSeries, limit: int | None = None):
    table = series_table(series)
    st.dataframe(table.head(limit or SETTINGS.max_table_rows), hide_index=True)
