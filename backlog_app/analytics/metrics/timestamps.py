"""Timestamp normalization into the fixed reporting timezone."""

from __future__ import annotations

import numbers
from datetime import date, datetime

import pandas as pd

# Excel stores dates as day counts from this origin
EXCEL_EPOCH = "1899-12-30"


def parse_timestamp(value, target_tz, *, dayfirst: bool = False) -> pd.Timestamp | None:
    """Normalize a timestamp-like value into ``target_tz``.

    Naive values are read as civil time in ``target_tz`` (spreadsheet exports
    carry local wall-clock times); aware values are converted. Numeric values
    are treated as Excel serial dates. Returns None when the input cannot be
    parsed.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        if isinstance(value, numbers.Real) and not isinstance(value, (datetime, date)):
            if pd.isna(value):
                return None
            ts = pd.to_datetime(float(value), unit="D", origin=EXCEL_EPOCH, errors="coerce")
        else:
            ts = pd.to_datetime(value, errors="coerce", dayfirst=dayfirst)
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    try:
        if getattr(ts, "tzinfo", None) is None:
            ts = ts.tz_localize(target_tz, ambiguous=False, nonexistent="shift_forward")
        else:
            ts = ts.tz_convert(target_tz)
    except (TypeError, ValueError):
        return None
    if pd.isna(ts):
        return None
    return ts
