"""Clock capabilities injected into the backlog engine."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytz

from .config import TIMEZONE

# Returns the current moment; naive values are read as civil time in TIMEZONE
Clock = Callable[[], datetime]


def localize_moment(moment: datetime, tz=None) -> datetime:
    """Express ``moment`` in ``tz``; naive values are localized, aware ones converted."""
    zone = tz or pytz.timezone(TIMEZONE)
    if moment.tzinfo is None:
        return zone.localize(moment)
    return moment.astimezone(zone)


def system_clock(tz=None) -> Clock:
    """Wall clock in ``tz`` (defaults to the reporting timezone)."""
    zone = tz or pytz.timezone(TIMEZONE)

    def _now() -> datetime:
        return datetime.now(tz=zone)

    return _now


def fixed_clock(moment: datetime, tz=None) -> Clock:
    """Clock frozen at ``moment``; naive values are localized into ``tz``."""
    frozen = localize_moment(moment, tz)

    def _now() -> datetime:
        return frozen

    return _now
