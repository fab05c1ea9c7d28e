"""Point-in-time backlog stock (pure functions)."""

from __future__ import annotations

from collections.abc import Iterable

import pandas as pd

from backlog_app.core.models import TicketRecord


def is_measurable(record: TicketRecord) -> bool:
    """A record takes part in calculations only with usable timestamps."""
    if record.opened_at is None:
        return False
    return not (record.is_closed and record.closed_at is None)


def in_backlog_at(record: TicketRecord, instant: pd.Timestamp) -> bool:
    if not is_measurable(record) or record.excluded:
        return False
    if record.opened_at > instant:
        return False
    return not record.is_closed or record.closed_at > instant


def backlog_stock_at(records: Iterable[TicketRecord], instant: pd.Timestamp) -> int:
    """Count tickets open at ``instant``.

    A ticket counts when it was opened at or before the instant, is not on
    hold/pending, and is either still open or closed strictly after the
    instant.
    """
    return sum(1 for record in records if in_backlog_at(record, instant))
