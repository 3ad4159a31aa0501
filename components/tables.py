"""
Table components for data display.
"""
import streamlit as st
import pandas as pd
from typing import Optional, List, Dict, Any

from services.models import CallRecord
from utils.formatters import format_duration, format_phone, format_timestamp, truncate_text


def render_dataframe(
    df: pd.DataFrame,
    height: Optional[int] = None,
    hide_index: bool = True,
    column_config: Optional[Dict[str, Any]] = None
):
    """
    Render a styled pandas DataFrame.

    Args:
        df: DataFrame to display
        height: Optional fixed height in pixels
        hide_index: Hide DataFrame index
        column_config: Streamlit column configuration
    """
    kwargs = {}
    if height is not None:
        kwargs["height"] = height

    st.dataframe(
        df,
        hide_index=hide_index,
        column_config=column_config,
        use_container_width=True,
        **kwargs
    )


def recent_calls_frame(records: List[CallRecord], timezone: str = "UTC") -> pd.DataFrame:
    """
    Build the recent calls table.

    Args:
        records: Records to show, already ordered
        timezone: Display timezone for timestamps

    Returns:
        DataFrame with Phone Number, Date & Time, Duration, Notes and Status columns
    """
    rows = [
        {
            "Phone Number": format_phone(rec.phone_number),
            "Date & Time": format_timestamp(rec.timestamp, timezone),
            "Duration": format_duration(rec.duration_seconds),
            "Notes": truncate_text(rec.notes),
            "Status": "Completed" if rec.transcript.strip() else "Notes only",
        }
        for rec in records
    ]
    return pd.DataFrame(rows, columns=["Phone Number", "Date & Time", "Duration", "Notes", "Status"])
