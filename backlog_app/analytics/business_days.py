"""Business-day calendar and cutoff-instant arithmetic."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

import pandas as pd

WEEKEND_DAYS: frozenset[int] = frozenset({5, 6})  # Saturday, Sunday


@dataclass(frozen=True, slots=True)
class BusinessCalendar:
    """Weekday-based business calendar with an optional injected holiday set.

    With no holidays supplied only Saturday and Sunday are non-business days.
    """

    holidays: frozenset[date] = field(default_factory=frozenset)

    @classmethod
    def with_holidays(cls, holidays: Iterable[date]) -> BusinessCalendar:
        return cls(holidays=frozenset(holidays))

    def is_business_day(self, day: date) -> bool:
        if isinstance(day, datetime):
            day = day.date()
        if day.weekday() in WEEKEND_DAYS:
            return False
        return day not in self.holidays

    def previous_cutoff_instant(self, instant: pd.Timestamp, business_days_only: bool) -> pd.Timestamp:
        """Return the cutoff one civil day before ``instant``.

        With ``business_days_only`` the walk continues backwards until it lands
        on a business day. The time of day is kept, so the result is always a
        cutoff instant even across DST transitions.
        """
        day = instant.date() - timedelta(days=1)
        if business_days_only:
            while not self.is_business_day(day):
                day -= timedelta(days=1)
        return cutoff_instant(day, instant.hour, instant.minute, instant.tz)


DEFAULT_CALENDAR = BusinessCalendar()


def cutoff_instant(day: date, hour: int, minute: int, tz) -> pd.Timestamp:
    """Localize ``day`` at ``hour:minute`` into ``tz``."""
    naive = pd.Timestamp(datetime.combine(day, time(hour, minute)))
    return naive.tz_localize(tz, ambiguous=False, nonexistent="shift_forward")


def month_interval(year: int, month: int, today: date) -> tuple[date, date] | None:
    """Reporting interval ``[first of month, min(last of month, today)]``.

    Returns None when the month starts after ``today`` (nothing to report yet).
    """
    period = pd.Period(year=year, month=month, freq="M")
    first = period.start_time.date()
    last = period.end_time.date()
    end = min(last, today)
    if end < first:
        return None
    return first, end


def iter_days(first: date, last: date) -> Iterator[date]:
    for ts in pd.date_range(first, last, freq="D"):
        yield ts.date()


def parse_holidays(text: str | None) -> frozenset[date]:
    """Parse ``YYYY-MM-DD`` dates separated by newlines or commas.

    Raises ``ValueError`` naming the first entry that is not a valid date.
    """
    holidays: set[date] = set()
    for chunk in (text or "").replace(",", "\n").splitlines():
        entry = chunk.strip()
        if not entry:
            continue
        try:
            holidays.add(date.fromisoformat(entry))
        except ValueError as exc:
            raise ValueError(f"Invalid holiday date: {entry!r}") from exc
    return frozenset(holidays)
