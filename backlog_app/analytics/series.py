"""Daily backlog series reconstruction.

A series has one point per calendar day of the reporting month, clamped to
"today". Each point samples the backlog stock at the policy cutoff and counts
the tickets opened/closed since the previous cutoff.

Optionally the series is reconciled with a fill-forward pass: non-business
days carry the last accepted stock, and closed volume is re-derived through
the conservation identity ``stock[d] = stock[d-1] + opened[d] - closed[d]``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

import pandas as pd
import pytz

from backlog_app.core.clock import Clock, localize_moment
from backlog_app.core.config import TIMEZONE
from backlog_app.core.models import BacklogSeries, DailyPoint, Policy, TicketRecord

from .business_days import DEFAULT_CALENDAR, BusinessCalendar, cutoff_instant, iter_days, month_interval
from .metrics.stock import backlog_stock_at
from .metrics.volume import Window, closed_volume, opened_volume

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SeriesSummary:
    mean: float
    peak: int
    days_above_threshold: int
    threshold: float


def build_raw_series(
    records: Iterable[TicketRecord],
    policy: Policy,
    today: date,
    *,
    calendar: BusinessCalendar = DEFAULT_CALENDAR,
    tz=None,
) -> BacklogSeries:
    """Measure stock and window volumes for every day of the reporting month.

    ``business_days_only`` only moves the start of the look-back window back
    to the previous business-day cutoff; every calendar day still gets a
    sample.
    """
    tz = tz or pytz.timezone(TIMEZONE)
    interval = month_interval(policy.year, policy.month, today)
    if interval is None:
        return BacklogSeries()
    snapshot = tuple(records)
    points: list[DailyPoint] = []
    for day in iter_days(*interval):
        instant = cutoff_instant(day, policy.cutoff_hour, policy.cutoff_minute, tz)
        window = Window(calendar.previous_cutoff_instant(instant, policy.business_days_only), instant)
        points.append(
            DailyPoint(
                date=day,
                backlog_stock=backlog_stock_at(snapshot, instant),
                opened_volume=opened_volume(snapshot, window),
                closed_volume=closed_volume(snapshot, window),
            )
        )
    return BacklogSeries(tuple(points))


def reconcile_fill_forward(
    series: BacklogSeries,
    records: Iterable[TicketRecord],
    policy: Policy,
    *,
    calendar: BusinessCalendar = DEFAULT_CALENDAR,
    tz=None,
) -> BacklogSeries:
    """Carry stock across non-business days and derive closed volume.

    Non-business days take the last accepted stock with zero opened volume.
    Leading non-business days keep their measured stock since there is nothing
    to carry yet. Every accepted point after the first counts its openings over
    ``(last accepted cutoff, cutoff]``, so tickets opened on carried days land
    on the next accepted day exactly once. Closed volume becomes
    ``max(0, previous stock + opened - stock)``; the first point reports 0.
    """
    tz = tz or pytz.timezone(TIMEZONE)
    snapshot = tuple(records)
    points: list[DailyPoint] = []
    carry: int | None = None
    last_accepted: pd.Timestamp | None = None
    prev_stock: int | None = None
    for point in series:
        filled = carry is not None and not calendar.is_business_day(point.date)
        if filled:
            stock, opened = carry, 0
        else:
            instant = cutoff_instant(point.date, policy.cutoff_hour, policy.cutoff_minute, tz)
            stock = point.backlog_stock
            if last_accepted is None:
                opened = point.opened_volume
            else:
                opened = opened_volume(snapshot, Window(last_accepted, instant))
            carry = stock
            last_accepted = instant
        if prev_stock is None:
            closed = 0
        else:
            closed = max(0, prev_stock + opened - stock)
        prev_stock = stock
        points.append(DailyPoint(point.date, stock, opened, closed, filled=filled))
    return BacklogSeries(tuple(points))


def build_series(
    records: Iterable[TicketRecord],
    policy: Policy,
    clock: Clock,
    *,
    calendar: BusinessCalendar | None = None,
    tz=None,
) -> BacklogSeries:
    """Build the backlog series for ``policy``; never raises.

    An empty record set yields an empty series. Any failure while building is
    logged and degrades to an empty series, which pages render as "no data
    for this period".
    """
    calendar = calendar or DEFAULT_CALENDAR
    tz = tz or pytz.timezone(TIMEZONE)
    try:
        snapshot = tuple(records)
        if not snapshot:
            return BacklogSeries()
        started = time.perf_counter()
        today = localize_moment(clock(), tz).date()
        series = build_raw_series(snapshot, policy, today, calendar=calendar, tz=tz)
        if policy.fill_weekends:
            series = reconcile_fill_forward(series, snapshot, policy, calendar=calendar, tz=tz)
        logger.debug(
            "Built %s backlog point(s) for %s from %s record(s) in %.3fs",
            len(series),
            policy.month_label,
            len(snapshot),
            time.perf_counter() - started,
        )
        return series
    except Exception:
        logger.exception("Failed to build backlog series for %s", policy.month_label)
        return BacklogSeries()


def summarize_series(series: BacklogSeries, threshold: float) -> SeriesSummary:
    """Mean/peak stock and the number of days above ``threshold``."""
    if series.is_empty:
        return SeriesSummary(mean=0.0, peak=0, days_above_threshold=0, threshold=float(threshold))
    stocks = [p.backlog_stock for p in series]
    return SeriesSummary(
        mean=sum(stocks) / len(stocks),
        peak=max(stocks),
        days_above_threshold=sum(1 for s in stocks if s > threshold),
        threshold=float(threshold),
    )
