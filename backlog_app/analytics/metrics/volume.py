"""Opened/closed event volumes inside half-open windows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

import pandas as pd

from backlog_app.core.models import TicketRecord

from .stock import is_measurable


@dataclass(frozen=True, slots=True)
class Window:
    """Interval ``(start, end]``: an event exactly on ``start`` belongs to the previous window."""

    start: pd.Timestamp
    end: pd.Timestamp

    def contains(self, ts: pd.Timestamp | None) -> bool:
        if ts is None:
            return False
        return self.start < ts <= self.end


def opened_volume(records: Iterable[TicketRecord], window: Window) -> int:
    return sum(1 for r in records if is_measurable(r) and window.contains(r.opened_at))


def closed_volume(records: Iterable[TicketRecord], window: Window) -> int:
    # Excluded (hold/pending) tickets still count: their closure is a real event.
    return sum(1 for r in records if is_measurable(r) and r.is_closed and window.contains(r.closed_at))
