"""
Data structures shared by the call manager, response store and dashboard.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Dict, Any


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso_timestamp(dt: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision and a Z suffix.

    Examples:
        to_iso_timestamp(datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc))
        -> "2024-05-01T09:30:00.000Z"
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (with or without Z suffix) into an aware datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class CallTarget:
    """A phone number to call, as read from an uploaded list."""
    id: str
    number: str
    name: Optional[str] = None
    notes: Optional[str] = None

    @property
    def label(self) -> str:
        """Number with the contact name when one is known."""
        if self.name:
            return f"{self.number} ({self.name})"
        return self.number


@dataclass
class CallRecord:
    """Outcome of a call to one target. One record per target id."""
    id: str
    phone_number: str
    timestamp: str
    transcript: str = ""
    notes: Optional[str] = None
    duration_seconds: Optional[int] = None

    @property
    def date(self) -> str:
        """Date prefix (YYYY-MM-DD) of the timestamp."""
        return self.timestamp.split("T")[0]

    @property
    def timestamp_dt(self) -> datetime:
        return parse_iso_timestamp(self.timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the persisted camelCase field names."""
        data = {
            "id": self.id,
            "phoneNumber": self.phone_number,
            "timestamp": self.timestamp,
            "transcript": self.transcript,
            "notes": self.notes,
        }
        if self.duration_seconds is not None:
            data["durationSeconds"] = self.duration_seconds
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CallRecord":
        """Build a record from its persisted form.

        Raises:
            KeyError: If id, phoneNumber or timestamp is missing
        """
        duration = data.get("durationSeconds")
        return cls(
            id=str(data["id"]),
            phone_number=str(data["phoneNumber"]),
            timestamp=str(data["timestamp"]),
            transcript=data.get("transcript") or "",
            notes=data.get("notes"),
            duration_seconds=int(duration) if duration is not None else None,
        )
