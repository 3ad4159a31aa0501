"""
Dashboard service: statistics derived from stored call records.
All functions are pure; pass `now` to pin the current time.
"""
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
import logging

import pandas as pd

from services.models import CallRecord, utc_now

logger = logging.getLogger(__name__)

Records = Union[Mapping[str, CallRecord], Iterable[CallRecord]]

DURATION_BUCKETS = ["<1 min", "1-3 min", "3-5 min", "5-10 min", ">10 min"]


def _as_list(records: Records) -> List[CallRecord]:
    if isinstance(records, Mapping):
        return list(records.values())
    return list(records)


def _timestamp_or_none(rec: CallRecord) -> Optional[datetime]:
    try:
        return rec.timestamp_dt
    except ValueError:
        logger.warning(f"Skipping record {rec.id} with unparseable timestamp {rec.timestamp!r}")
        return None


def duration_bucket(seconds: int) -> str:
    """Map a call duration to its dashboard bucket label."""
    if seconds < 60:
        return "<1 min"
    if seconds < 180:
        return "1-3 min"
    if seconds < 300:
        return "3-5 min"
    if seconds <= 600:
        return "5-10 min"
    return ">10 min"


def get_call_stats(records: Records, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Get call statistics for the dashboard.

    Args:
        records: Store snapshot (mapping or iterable of CallRecord)
        now: Current time (defaults to UTC now)

    Returns:
        Dict with call metrics:
        - total_calls: Number of stored records
        - calls_today: Records whose timestamp date equals today's UTC date
        - completion_rate: % of records with a transcript (None if no records)
        - avg_duration_seconds: Mean duration of timed calls (None if none)
        - avg_note_length: Mean notes length in characters
        - calls_7d / calls_prev_7d: Records in the trailing week and the week before
        - weekly_change_pct: Week-over-week change in % (None if previous week empty)
    """
    items = _as_list(records)
    now = now or utc_now()
    today = now.date().isoformat()

    total_calls = len(items)
    calls_today = sum(1 for rec in items if rec.timestamp.startswith(today))

    completed = sum(1 for rec in items if rec.transcript.strip())
    completion_rate = round(completed / total_calls * 100, 1) if total_calls else None

    durations = [rec.duration_seconds for rec in items if rec.duration_seconds is not None]
    avg_duration = sum(durations) / len(durations) if durations else None

    avg_note_length = sum(len(rec.notes or "") for rec in items) / (total_calls or 1)

    week_start = now - timedelta(days=7)
    prev_week_start = now - timedelta(days=14)
    calls_7d = 0
    calls_prev_7d = 0
    for rec in items:
        ts = _timestamp_or_none(rec)
        if ts is None:
            continue
        if week_start < ts <= now:
            calls_7d += 1
        elif prev_week_start < ts <= week_start:
            calls_prev_7d += 1

    weekly_change = None
    if calls_prev_7d:
        weekly_change = round((calls_7d - calls_prev_7d) / calls_prev_7d * 100, 1)

    return {
        "total_calls": total_calls,
        "calls_today": calls_today,
        "completion_rate": completion_rate,
        "avg_duration_seconds": avg_duration,
        "avg_note_length": avg_note_length,
        "calls_7d": calls_7d,
        "calls_prev_7d": calls_prev_7d,
        "weekly_change_pct": weekly_change,
    }


def get_calls_by_day(records: Records, days: int = 7) -> pd.DataFrame:
    """
    Count calls per date for the trend chart.

    Args:
        records: Store snapshot
        days: Number of most recent distinct dates to keep

    Returns:
        DataFrame with columns: date, calls (ascending by date)
    """
    counts = Counter(rec.date for rec in _as_list(records))
    rows = sorted(counts.items())[-days:] if days > 0 else []
    return pd.DataFrame(rows, columns=["date", "calls"])


def get_duration_distribution(records: Records) -> pd.DataFrame:
    """
    Count timed calls per duration bucket.

    Returns:
        DataFrame with columns: bucket, calls (one row per bucket, in bucket order)
    """
    counts = Counter(
        duration_bucket(rec.duration_seconds)
        for rec in _as_list(records)
        if rec.duration_seconds is not None
    )
    return pd.DataFrame(
        [(bucket, counts.get(bucket, 0)) for bucket in DURATION_BUCKETS],
        columns=["bucket", "calls"],
    )


def get_recent_calls(records: Records, limit: int = 5) -> List[CallRecord]:
    """Most recent records, newest first. Records with unparseable timestamps are left out."""
    dated = []
    for rec in _as_list(records):
        ts = _timestamp_or_none(rec)
        if ts is not None:
            dated.append((ts, rec))
    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [rec for _, rec in dated[:limit]]
