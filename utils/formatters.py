"""
Formatting utilities for consistent data display across the call manager and dashboard.
"""
from datetime import datetime
import pytz
import phonenumbers
import humanize
from typing import Optional

from services.models import parse_iso_timestamp


def format_timestamp(
    timestamp: Optional[str],
    timezone: str = "UTC",
    format_str: str = "%Y-%m-%d %H:%M %Z"
) -> str:
    """
    Format a stored ISO-8601 timestamp in the given timezone.

    Args:
        timestamp: ISO-8601 string (can be None)
        timezone: IANA timezone name
        format_str: strftime format string

    Returns:
        Formatted datetime string, "N/A" if None, or the input if it cannot be parsed

    Examples:
        format_timestamp("2024-10-22T21:30:00.000Z", "America/Los_Angeles") -> "2024-10-22 14:30 PDT"
    """
    if not timestamp:
        return "N/A"

    try:
        dt = parse_iso_timestamp(timestamp)
    except ValueError:
        return timestamp

    tz = pytz.timezone(timezone)
    return dt.astimezone(tz).strftime(format_str)


def format_phone(phone: Optional[str], country: str = "US") -> str:
    """
    Format phone number for display.

    Args:
        phone: Phone number in any format
        country: Country code for parsing

    Returns:
        Formatted phone like "+1 555-123-4567" or original if parse fails

    Examples:
        format_phone("+15551234567") -> "+1 555-123-4567"
        format_phone("555-0100") -> "555-0100"
    """
    if not phone:
        return "N/A"

    try:
        parsed = phonenumbers.parse(phone, country)
        if not phonenumbers.is_valid_number(parsed):
            return phone
        return phonenumbers.format_number(
            parsed, phonenumbers.PhoneNumberFormat.INTERNATIONAL
        )
    except phonenumbers.NumberParseException:
        return phone  # Return original if parsing fails


def format_duration(seconds: Optional[int | float]) -> str:
    """
    Format duration in seconds to M:SS (or H:MM:SS past an hour).

    Examples:
        format_duration(45) -> "0:45"
        format_duration(3665) -> "1:01:05"
        format_duration(None) -> "N/A"
    """
    if seconds is None:
        return "N/A"

    seconds = int(seconds)
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60

    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def humanize_timestamp(timestamp: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Convert a stored timestamp to human-readable relative time.

    Examples:
        humanize_timestamp(<two hours ago>) -> "2 hours ago"
    """
    if not timestamp:
        return "N/A"

    try:
        dt = parse_iso_timestamp(timestamp)
    except ValueError:
        return timestamp

    now = now or datetime.now(pytz.utc)
    return humanize.naturaltime(now - dt)


def format_percentage(value: Optional[float], decimals: int = 0) -> str:
    """
    Format a percentage value.

    Args:
        value: Percentage (25.0 = 25%)
        decimals: Number of decimal places

    Returns:
        Formatted percentage like "25%", or "N/A" if None
    """
    if value is None:
        return "N/A"

    return f"{value:.{decimals}f}%"


def format_change(value: Optional[float]) -> Optional[str]:
    """
    Format a week-over-week change for st.metric's delta.

    Examples:
        format_change(12.5) -> "+12.5% from last week"
        format_change(-4.0) -> "-4.0% from last week"
        format_change(None) -> None
    """
    if value is None:
        return None
    return f"{value:+.1f}% from last week"


def truncate_text(text: Optional[str], limit: int = 50, placeholder: str = "No notes") -> str:
    """
    Shorten text for table cells.

    Examples:
        truncate_text("short") -> "short"
        truncate_text("x" * 60) -> first 50 characters followed by "..."
        truncate_text(None) -> "No notes"
    """
    if not text:
        return placeholder
    if len(text) > limit:
        return f"{text[:limit]}..."
    return text
