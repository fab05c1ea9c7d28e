"""Ticket state normalization utilities.

Free-text ticket states (English or Portuguese, any casing) are reduced to the
two-state ``TicketStatus`` plus an "excluded" flag. Vocabularies live in
config.py (CLOSED_STATE_ALIASES, EXCLUDED_STATE_MARKERS).
"""

from __future__ import annotations

from .config import CLOSED_STATE_ALIASES, EXCLUDED_STATE_MARKERS
from .models import TicketStatus


def clean_state_text(value: str | None) -> str:
    """Lowercase and strip a raw state; null-like values become ``""``."""
    if value is None:
        return ""
    text = str(value).strip().lower()
    if text in {"nan", "none", "null", "nat"}:
        return ""
    return text


def normalize_state(value: str | None) -> TicketStatus:
    """Map a free-text state to OPEN or CLOSED.

    Parameters
    ----------
    value : str | None
        Raw state string from the imported spreadsheet.

    Returns
    -------
    TicketStatus
        CLOSED for any alias in ``CLOSED_STATE_ALIASES``, OPEN otherwise
        (including empty values).

    Examples
    --------
    >>> normalize_state("Fechado")
    <TicketStatus.CLOSED: 'closed'>
    >>> normalize_state("Work in Progress")
    <TicketStatus.OPEN: 'open'>
    """
    text = clean_state_text(value)
    if text in CLOSED_STATE_ALIASES:
        return TicketStatus.CLOSED
    return TicketStatus.OPEN


def is_excluded_state(value: str | None) -> bool:
    """Check if a state marks the ticket as on hold / pending / awaiting."""
    text = clean_state_text(value)
    if not text:
        return False
    return any(marker in text for marker in EXCLUDED_STATE_MARKERS)
