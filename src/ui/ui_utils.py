from __future__ import annotations

# Standard Library Imports
import logging
import sys
from datetime import datetime
from typing import Iterable, List
from zoneinfo import ZoneInfo

# Third-Party Imports
import pandas as pd

# Local Application Imports
from api.models import FileRecord

SIZE_UNITS = ["B", "KB", "MB", "GB"]

CATALOG_COLUMNS = [
    "uuid",
    "original_filename",
    "mime_type",
    "file_size",
    "size_display",
    "upload_count",
    "created_at",
    "last_accessed",
    "sha256_hash",
    "file",
]


def format_size(num_bytes) -> str:
    """Formats a byte count with 1024-based units, e.g. 1536 -> "1.50 KB"."""
    if not num_bytes or num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{value:.2f} {SIZE_UNITS[index]}"


def format_percentage(value) -> str:
    """Formats an already-computed percentage (e.g. 42.0 -> "42.0%")."""
    if value is None or pd.isna(value):
        return "N/A"
    return f"{float(value):.1f}%"


def format_exception_for_ui(error: BaseException | None = None) -> str:
    """Formats an exception as "TypeName: message" for display in the UI.

    Without an argument the exception currently being handled is used.
    """
    if error is None:
        error = sys.exc_info()[1]
    if error is None:
        return "No exception information available."
    message = str(error)
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


def human_readable_timestamp(ts_value, _logger_obj: logging.Logger | None = None) -> str:
    """Converts an ISO timestamp or datetime object to a human-readable UTC string."""
    if ts_value is None or ts_value == "" or (not isinstance(ts_value, str) and pd.isna(ts_value)):
        return "N/A"
    try:
        if isinstance(ts_value, str):
            dt_obj = datetime.fromisoformat(ts_value.replace("Z", "+00:00"))
        elif isinstance(ts_value, pd.Timestamp):
            dt_obj = ts_value.to_pydatetime()
        elif isinstance(ts_value, datetime):
            dt_obj = ts_value
        else:
            return "Invalid date format"

        if dt_obj.tzinfo is None:
            dt_obj = dt_obj.replace(tzinfo=ZoneInfo("UTC"))
        else:
            dt_obj = dt_obj.astimezone(ZoneInfo("UTC"))
        return dt_obj.strftime("%Y-%m-%d %H:%M:%S UTC")
    except ValueError as e:
        if _logger_obj:
            _logger_obj.warning(f"Could not parse timestamp '{ts_value}': {e}")
        return "Invalid date format"


def files_to_dataframe(records: Iterable[FileRecord]) -> pd.DataFrame:
    """Tabulates catalog entries for display, newest first."""
    rows = [record.to_dict() for record in records]
    if not rows:
        return pd.DataFrame(columns=CATALOG_COLUMNS)
    df = pd.DataFrame.from_records(rows)
    df["size_display"] = df["file_size"].apply(format_size)
    df = df.sort_values("created_at", ascending=False, kind="stable").reset_index(drop=True)
    return df[CATALOG_COLUMNS]


def available_file_types(df: pd.DataFrame, selected: str = "") -> List[str]:
    """Distinct MIME types in a result table, keeping the current selection offered."""
    types = set()
    if not df.empty and "mime_type" in df.columns:
        types.update(t for t in df["mime_type"].dropna().unique() if t)
    if selected:
        types.add(selected)
    return sorted(types)
