"""Central configuration, constants, and shared column definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Time Settings
# =============================================================================
# Every timestamp is interpreted in this single civil zone.
TIMEZONE = "America/Sao_Paulo"

# =============================================================================
# Backlog Policy Defaults
# =============================================================================
DEFAULT_CUTOFF: str = "08:00"
DEFAULT_CUTOFF_HOUR: int = 8
DEFAULT_CUTOFF_MINUTE: int = 0
DEFAULT_BUSINESS_DAYS_ONLY: bool = True
DEFAULT_FILL_WEEKENDS: bool = True
DEFAULT_BACKLOG_THRESHOLD: int = 18  # Target line drawn on the backlog chart

# Input cap applied by callers before building a series (latency bound)
MAX_INPUT_RECORDS: int = 1000

# =============================================================================
# Ticket State Vocabulary
# =============================================================================
# Free-text states treated as closed (lowercase keys)
CLOSED_STATE_ALIASES: frozenset[str] = frozenset(
    {
        "closed",
        "fechado",
        "resolved",
        "resolvido",
        "cancelled",
        "canceled",
        "cancelado",
        "cancelada",
    }
)

# Substrings marking tickets that never count toward backlog stock
EXCLUDED_STATE_MARKERS: Sequence[str] = (
    "hold",
    "pending",
    "aguardando",
)

# =============================================================================
# Spreadsheet Column Aliases
# =============================================================================
# Canonical column -> accepted header spellings (matched case-insensitively)
COLUMN_ALIASES: dict[str, Sequence[str]] = {
    "id": ("number", "numero", "número", "id", "ticket"),
    "opened": ("opened", "aberto", "created", "opened at"),
    "updated": ("updated", "atualizado", "updated at", "resolved"),
    "state": ("state", "status", "estado"),
}

REQUIRED_COLUMNS: Sequence[str] = ("id", "opened", "state")

SUPPORTED_UPLOAD_TYPES: Sequence[str] = ("xlsx", "csv")

# =============================================================================
# Display
# =============================================================================
SERIES_COLUMNS: Sequence[str] = (
    "date",
    "backlog_stock",
    "opened_volume",
    "closed_volume",
    "filled",
)

SERIES_COLUMN_LABELS: dict[str, str] = {
    "date": "Date",
    "backlog_stock": "Backlog",
    "opened_volume": "Opened",
    "closed_volume": "Closed",
    "filled": "Carried",
}

RECORD_COLUMNS: Sequence[str] = (
    "id",
    "state",
    "status",
    "excluded",
    "opened_at",
    "closed_at",
)


def parse_cutoff(value: str | None) -> tuple[int, int]:
    """Parse an ``"HH:mm"`` cutoff into ``(hour, minute)``.

    Missing parts fall back to the defaults (``"9"`` -> ``(9, 0)``, ``""`` ->
    ``(8, 0)``). Non-numeric or out-of-range parts raise ``ValueError``.

    Examples
    --------
    >>> parse_cutoff("08:30")
    (8, 30)
    >>> parse_cutoff("17")
    (17, 0)
    """
    text = str(value or "").strip()
    parts = text.split(":") if text else []
    hour_text = parts[0].strip() if len(parts) > 0 else ""
    minute_text = parts[1].strip() if len(parts) > 1 else ""
    try:
        hour = int(hour_text) if hour_text else DEFAULT_CUTOFF_HOUR
        minute = int(minute_text) if minute_text else DEFAULT_CUTOFF_MINUTE
    except ValueError as exc:
        raise ValueError(f"Invalid cutoff time: {value!r}") from exc
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Cutoff time out of range: {value!r}")
    return hour, minute


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"


SETTINGS = AppSettings()
