"""Mapping imported spreadsheet rows into TicketRecord instances."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import IO, Any

import pandas as pd
import pytz

from backlog_app.analytics.metrics.timestamps import parse_timestamp

from .config import COLUMN_ALIASES, RECORD_COLUMNS, REQUIRED_COLUMNS, SUPPORTED_UPLOAD_TYPES, TIMEZONE
from .models import TicketRecord, TicketStatus
from .status import is_excluded_state, normalize_state

logger = logging.getLogger(__name__)


class TicketImportError(ValueError):
    """Raised when an uploaded ticket file cannot be turned into records."""


def resolve_columns(columns: Iterable[Any]) -> dict[str, str]:
    """Map canonical names (id/opened/updated/state) to the source header names.

    Headers are matched case-insensitively against ``COLUMN_ALIASES``; the first
    matching header wins for each canonical name.
    """
    lookup: dict[str, str] = {}
    for col in columns:
        key = str(col).strip().lower()
        if key and key not in lookup:
            lookup[key] = col
    resolved: dict[str, str] = {}
    for canonical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in lookup:
                resolved[canonical] = lookup[alias]
                break
    return resolved


def _text(value: Any) -> str | None:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    text = str(value).strip()
    return text or None


def map_row(row: Mapping[str, Any], tz=None, *, dayfirst: bool = False) -> TicketRecord | None:
    """Normalize one raw row (canonical keys) into a TicketRecord.

    Returns None when the row cannot take part in any calculation: no opened
    timestamp, or a closed ticket whose close (last update) timestamp is
    unparseable. The updated timestamp falls back to the opened one.
    """
    tz = tz or pytz.timezone(TIMEZONE)
    opened_at = parse_timestamp(row.get("opened"), tz, dayfirst=dayfirst)
    if opened_at is None:
        return None
    state = _text(row.get("state"))
    status = normalize_state(state)
    closed_at = None
    if status is TicketStatus.CLOSED:
        raw_updated = row.get("updated")
        if _text(raw_updated) is None:
            closed_at = opened_at
        else:
            closed_at = parse_timestamp(raw_updated, tz, dayfirst=dayfirst)
            if closed_at is None:
                return None
    return TicketRecord(
        id=_text(row.get("id")) or "",
        opened_at=opened_at,
        closed_at=closed_at,
        status=status,
        excluded=is_excluded_state(state),
        state=state,
    )


def rows_to_records(
    rows: Iterable[Mapping[str, Any]],
    tz=None,
    *,
    dayfirst: bool = False,
) -> list[TicketRecord]:
    """Map raw rows (canonical or aliased keys) into records, dropping unusable ones."""
    tz = tz or pytz.timezone(TIMEZONE)
    records: list[TicketRecord] = []
    dropped = 0
    for row in rows:
        columns = resolve_columns(row.keys())
        canonical = {name: row.get(src) for name, src in columns.items()}
        record = map_row(canonical, tz, dayfirst=dayfirst)
        if record is None:
            dropped += 1
            continue
        records.append(record)
    if dropped:
        logger.warning("Dropped %s ticket row(s) with unparseable timestamps", dropped)
    return records


def dataframe_to_records(df: pd.DataFrame, tz=None, *, dayfirst: bool = False) -> list[TicketRecord]:
    """Validate headers of an imported sheet and map every row to a record."""
    if df is None or df.empty:
        return []
    columns = resolve_columns(df.columns)
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise TicketImportError(f"Missing required column(s): {', '.join(missing)}")
    renamed = df[list(columns.values())].rename(columns={src: name for name, src in columns.items()})
    # object dtype keeps NaN/NaT checks uniform across column types
    rows = renamed.astype(object).to_dict("records")
    return rows_to_records(rows, tz, dayfirst=dayfirst)


def read_ticket_file(source: str | Path | IO[bytes], filename: str | None = None) -> pd.DataFrame:
    """Read an uploaded ``.xlsx`` or ``.csv`` export into a DataFrame."""
    name = filename or (str(source) if isinstance(source, (str, Path)) else getattr(source, "name", ""))
    suffix = Path(str(name)).suffix.lower().lstrip(".")
    if suffix not in SUPPORTED_UPLOAD_TYPES:
        raise TicketImportError(f"Unsupported file type: {suffix or '(none)'}")
    try:
        if suffix == "csv":
            return pd.read_csv(source)
        return pd.read_excel(source, engine="openpyxl")
    except (OSError, ValueError) as exc:
        raise TicketImportError(f"Could not read {name}: {exc}") from exc


def records_to_dataframe(records: Sequence[TicketRecord]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame(columns=list(RECORD_COLUMNS))
    rows = [
        {
            "id": r.id,
            "state": r.state,
            "status": r.status.value,
            "excluded": r.excluded,
            "opened_at": r.opened_at,
            "closed_at": r.closed_at,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=list(RECORD_COLUMNS))
