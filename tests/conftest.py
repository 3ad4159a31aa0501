"""Shared fixtures."""
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List

import pytest

from services.call_session import CallSession
from services.models import CallRecord, CallTarget
from services.response_store import FileResponseStorage, ResponseStore
from services.voice_transport import SimulatedVoiceTransport

FIXED_NOW = datetime(2024, 5, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock returning a fixed time that tests can advance."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def responses_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "call_responses.json"


@pytest.fixture
def store(responses_path: Path) -> ResponseStore:
    return ResponseStore(FileResponseStorage(responses_path))


@pytest.fixture
def transport() -> SimulatedVoiceTransport:
    return SimulatedVoiceTransport(greeting="Hi there")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def targets() -> List[CallTarget]:
    return [
        CallTarget(id="1", number="555-0100", name="Alice"),
        CallTarget(id="2", number="555-0200", notes="Call after 5pm"),
        CallTarget(id="3", number="555-0300"),
    ]


@pytest.fixture
def session(store, transport, clock, targets) -> CallSession:
    call_session = CallSession(store, transport, clock=clock)
    call_session.load_targets(targets)
    return call_session


def make_record(
    record_id: str,
    timestamp: str,
    transcript: str = "assistant: Hello",
    notes=None,
    duration_seconds=None,
) -> CallRecord:
    return CallRecord(
        id=record_id,
        phone_number=f"555-{record_id.zfill(4)}",
        timestamp=timestamp,
        transcript=transcript,
        notes=notes,
        duration_seconds=duration_seconds,
    )
