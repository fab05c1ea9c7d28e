"""Domain data models for tickets, backlog policies, and daily series."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum

import pandas as pd

from .config import (
    DEFAULT_BUSINESS_DAYS_ONLY,
    DEFAULT_CUTOFF,
    DEFAULT_CUTOFF_HOUR,
    DEFAULT_CUTOFF_MINUTE,
    DEFAULT_FILL_WEEKENDS,
    SERIES_COLUMNS,
    parse_cutoff,
)


class TicketStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class TicketRecord:
    """Normalized ticket as consumed by the backlog engine.

    ``closed_at`` is only meaningful when ``status`` is CLOSED; it carries the
    record's last-update timestamp. ``excluded`` marks hold/pending tickets,
    which never count toward backlog stock.
    """

    id: str
    opened_at: pd.Timestamp | None
    closed_at: pd.Timestamp | None = None
    status: TicketStatus = TicketStatus.OPEN
    excluded: bool = False
    state: str | None = None

    @property
    def is_closed(self) -> bool:
        return self.status is TicketStatus.CLOSED


def parse_month(value: str) -> tuple[int, int]:
    """Parse ``"YYYY-MM"`` into ``(year, month)``; raise ``ValueError`` otherwise."""
    text = str(value or "").strip()
    try:
        year_text, month_text = text.split("-")[:2]
        year, month = int(year_text), int(month_text)
    except ValueError as exc:
        raise ValueError(f"Invalid month: {value!r} (expected YYYY-MM)") from exc
    if not 1 <= month <= 12 or year < 1:
        raise ValueError(f"Invalid month: {value!r} (expected YYYY-MM)")
    return year, month


@dataclass(frozen=True, slots=True)
class Policy:
    year: int
    month: int
    cutoff_hour: int = DEFAULT_CUTOFF_HOUR
    cutoff_minute: int = DEFAULT_CUTOFF_MINUTE
    business_days_only: bool = DEFAULT_BUSINESS_DAYS_ONLY
    fill_weekends: bool = DEFAULT_FILL_WEEKENDS

    @classmethod
    def from_inputs(
        cls,
        month: str,
        cutoff: str = DEFAULT_CUTOFF,
        *,
        business_days_only: bool = DEFAULT_BUSINESS_DAYS_ONLY,
        fill_weekends: bool = DEFAULT_FILL_WEEKENDS,
    ) -> Policy:
        """Build a policy from the raw UI values (``"YYYY-MM"``, ``"HH:mm"``)."""
        year, month_num = parse_month(month)
        hour, minute = parse_cutoff(cutoff)
        return cls(
            year=year,
            month=month_num,
            cutoff_hour=hour,
            cutoff_minute=minute,
            business_days_only=bool(business_days_only),
            fill_weekends=bool(fill_weekends),
        )

    @property
    def cutoff_label(self) -> str:
        return f"{self.cutoff_hour:02d}:{self.cutoff_minute:02d}"

    @property
    def month_label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True, slots=True)
class DailyPoint:
    date: date
    backlog_stock: int
    opened_volume: int
    closed_volume: int
    # True when the stock was carried forward instead of measured
    filled: bool = False


@dataclass(frozen=True, slots=True)
class BacklogSeries:
    points: tuple[DailyPoint, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[DailyPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> DailyPoint:
        return self.points[index]

    @property
    def is_empty(self) -> bool:
        return not self.points

    def to_frame(self) -> pd.DataFrame:
        """Tabular view with one row per day (``date`` as a datetime column)."""
        if not self.points:
            return pd.DataFrame(columns=list(SERIES_COLUMNS))
        df = pd.DataFrame([asdict(p) for p in self.points], columns=list(SERIES_COLUMNS))
        df["date"] = pd.to_datetime(df["date"])
        return df
