"""BacklogService: holds the ticket snapshot and orchestrates series builds."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd
import pytz

from backlog_app.analytics.business_days import DEFAULT_CALENDAR, BusinessCalendar
from backlog_app.analytics.series import SeriesSummary, build_series, summarize_series

from .clock import Clock, system_clock
from .config import DEFAULT_BACKLOG_THRESHOLD, MAX_INPUT_RECORDS, TIMEZONE
from .mappers import dataframe_to_records, records_to_dataframe
from .models import BacklogSeries, Policy, TicketRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BacklogResult:
    policy: Policy
    series: BacklogSeries
    summary: SeriesSummary
    generation: int


class BacklogService:
    """Compute backlog series over an immutable record snapshot.

    Each ``compute`` call takes a new generation number. Callers that build
    asynchronously check ``is_current`` before publishing a result so a
    superseded computation never overwrites a newer one.
    """

    def __init__(
        self,
        records: Iterable[TicketRecord],
        *,
        clock: Clock | None = None,
        calendar: BusinessCalendar | None = None,
        max_records: int | None = MAX_INPUT_RECORDS,
    ):
        self._tz = pytz.timezone(TIMEZONE)
        self.clock = clock or system_clock(self._tz)
        self.calendar = calendar or DEFAULT_CALENDAR
        snapshot = tuple(records)
        if max_records is not None and len(snapshot) > max_records:
            logger.info("Capping ticket snapshot at %s of %s record(s)", max_records, len(snapshot))
            snapshot = snapshot[:max_records]
        self._records = snapshot
        self._generations = itertools.count(1)
        self._latest = 0

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, **kwargs) -> BacklogService:
        return cls(dataframe_to_records(df), **kwargs)

    @property
    def records(self) -> tuple[TicketRecord, ...]:
        return self._records

    @property
    def latest_generation(self) -> int:
        return self._latest

    def records_frame(self) -> pd.DataFrame:
        return records_to_dataframe(self._records)

    def compute(
        self,
        policy: Policy,
        threshold: float = DEFAULT_BACKLOG_THRESHOLD,
        *,
        calendar: BusinessCalendar | None = None,
    ) -> BacklogResult:
        generation = next(self._generations)
        self._latest = generation
        series = build_series(
            self._records,
            policy,
            self.clock,
            calendar=calendar or self.calendar,
            tz=self._tz,
        )
        return BacklogResult(
            policy=policy,
            series=series,
            summary=summarize_series(series, threshold),
            generation=generation,
        )

    def is_current(self, result: BacklogResult) -> bool:
        return result.generation == self._latest
