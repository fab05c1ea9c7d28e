"""Backlog page: daily open-ticket stock at a fixed cutoff with opened/closed volume."""

from __future__ import annotations

import streamlit as st

from backlog_app.analytics.business_days import BusinessCalendar, parse_holidays
from backlog_app.app import register_page
from backlog_app.core.config import (
    DEFAULT_BACKLOG_THRESHOLD,
    DEFAULT_BUSINESS_DAYS_ONLY,
    DEFAULT_CUTOFF,
    DEFAULT_FILL_WEEKENDS,
)
from backlog_app.core.models import Policy
from backlog_app.core.service import BacklogService
from backlog_app.visual.charts import backlog_chart
from backlog_app.visual.tables import render_series_table, series_csv


@register_page("Backlog")
def backlog_page():
    st.title("Daily Backlog")
    service: BacklogService | None = st.session_state.get("backlog_service")
    if service is None:
        st.warning("Load a ticket export on the Data Import page first.")
        return

    today = service.clock()
    c1, c2, c3 = st.columns(3)
    month = c1.text_input("Month (YYYY-MM)", value=today.strftime("%Y-%m"))
    cutoff = c2.text_input("Cutoff (HH:mm)", value=DEFAULT_CUTOFF)
    threshold = c3.number_input("Target backlog", min_value=0, value=DEFAULT_BACKLOG_THRESHOLD, step=1)
    o1, o2 = st.columns(2)
    business_days_only = o1.checkbox(
        "Volumes since previous business day",
        value=DEFAULT_BUSINESS_DAYS_ONLY,
    )
    fill_weekends = o2.checkbox(
        "Weekends and holidays inherit the last business day",
        value=DEFAULT_FILL_WEEKENDS,
    )
    with st.expander("Holidays"):
        holidays_text = st.text_area("One date per line (YYYY-MM-DD)", value="")

    try:
        policy = Policy.from_inputs(
            month,
            cutoff,
            business_days_only=business_days_only,
            fill_weekends=fill_weekends,
        )
        calendar = BusinessCalendar(holidays=parse_holidays(holidays_text))
    except ValueError as exc:
        st.error(str(exc))
        return

    result = service.compute(policy, threshold, calendar=calendar)
    if not service.is_current(result):
        return
    series = result.series
    if series.is_empty:
        st.info("No data for this period.")
        return

    end_day = series[len(series) - 1].date
    st.caption(f"Backlog at {policy.cutoff_label} through {end_day:%d/%m/%Y}")
    summary = result.summary
    m1, m2, m3 = st.columns(3)
    m1.metric(
        "Mean backlog",
        f"{summary.mean:.1f}",
        delta=f"{summary.mean - summary.threshold:+.1f} vs target",
        delta_color="inverse",
    )
    m2.metric("Peak backlog", summary.peak)
    m3.metric("Days above target", summary.days_above_threshold)

    chart = backlog_chart(series, threshold=threshold, cutoff_label=policy.cutoff_label)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    st.markdown("---")
    render_series_table(series)
    st.download_button(
        "Download Backlog CSV",
        data=series_csv(series),
        file_name=f"backlog_{policy.month_label}.csv",
        mime="text/csv",
    )
