"""
Call session controller.

Tracks which target is selected, drives the voice transport through a call
and turns each finished call into a CallRecord in the response store.

States:
    NO_SELECTION -> SELECTED -> DIALING -> CONNECTED -> SELECTED
"""
import logging
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Sequence

from services.models import CallRecord, CallTarget, to_iso_timestamp, utc_now
from services.response_store import ResponseStore
from services.voice_transport import ConnectionStatus, VoiceTransport

logger = logging.getLogger(__name__)


class CallState(str, Enum):
    """Controller states."""
    NO_SELECTION = "no_selection"
    SELECTED = "selected"
    DIALING = "dialing"
    CONNECTED = "connected"


class CallStateError(ValueError):
    """Raised when an operation is not allowed in the current call state."""


def build_transcript(transport: VoiceTransport) -> str:
    """Join the session's user and assistant turns as ``role: content`` lines."""
    return "\n".join(
        f"{msg.role}: {msg.content}" for msg in transport.transcript_turns()
    )


class CallSession:
    """Operator call session over one imported phone list."""

    def __init__(
        self,
        store: ResponseStore,
        transport: VoiceTransport,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the session.

        Args:
            store: Response store receiving finished calls
            transport: Voice transport used to place calls
            clock: Returns the current time (defaults to UTC now)
        """
        self.store = store
        self.transport = transport
        self.clock = clock or utc_now

        self.targets: List[CallTarget] = []
        self.index = -1
        self.state = CallState.NO_SELECTION
        self.notes = ""
        self.connected_at: Optional[datetime] = None

    # ====================
    # Selection
    # ====================
    @property
    def current_target(self) -> Optional[CallTarget]:
        if 0 <= self.index < len(self.targets):
            return self.targets[self.index]
        return None

    @property
    def in_call(self) -> bool:
        return self.state in (CallState.DIALING, CallState.CONNECTED)

    def _set_state(self, state: CallState) -> None:
        if state != self.state:
            logger.info(f"[CALL STATE] {self.state.value} -> {state.value}")
        self.state = state

    def load_targets(self, targets: Sequence[CallTarget]) -> None:
        """Replace the phone list and clear the selection.

        Raises:
            CallStateError: If a call is dialing or connected
        """
        if self.in_call:
            raise CallStateError("Cannot load a new list while a call is in progress")

        self.targets = list(targets)
        self.index = -1
        self.notes = ""
        self._set_state(CallState.NO_SELECTION)
        logger.info(f"Loaded {len(self.targets)} call targets")

    def _prefill_notes(self) -> None:
        target = self.current_target
        if target is None:
            self.notes = ""
            return

        record = self.store.get(target.id)
        if record and record.notes:
            self.notes = record.notes
        elif target.notes:
            self.notes = target.notes
        else:
            self.notes = ""

    def select(self, index: int) -> bool:
        """Select the target at index.

        Returns:
            True if the selection changed to index, False if ignored
        """
        if self.in_call or not 0 <= index < len(self.targets):
            return False

        self.index = index
        self._set_state(CallState.SELECTED)
        self._prefill_notes()
        return True

    def next(self) -> bool:
        """Move to the next target. No-op at the end of the list or during a call."""
        if self.index >= len(self.targets) - 1:
            return False
        return self.select(self.index + 1)

    def previous(self) -> bool:
        """Move to the previous target. No-op at the start of the list or during a call."""
        if self.index <= 0:
            return False
        return self.select(self.index - 1)

    def has_record(self, target_id: str) -> bool:
        return target_id in self.store

    def previous_record(self) -> Optional[CallRecord]:
        """Stored record for the current target, if it was called before."""
        target = self.current_target
        if target is None:
            return None
        return self.store.get(target.id)

    # ====================
    # Calling
    # ====================
    async def start_call(self) -> bool:
        """Dial the current target.

        Returns:
            True if the transport connected, False if connecting failed

        Raises:
            CallStateError: If nothing is selected or a call is already pending/active
        """
        if self.state == CallState.DIALING:
            raise CallStateError("A call is already being dialed")
        if self.state == CallState.CONNECTED:
            raise CallStateError("A call is already connected")

        target = self.current_target
        if target is None:
            raise CallStateError("Select a phone number before starting a call")

        self._set_state(CallState.DIALING)
        logger.info(f"Dialing {target.number} (target {target.id})...")

        try:
            await self.transport.connect()
        except Exception as e:
            logger.error(f"Failed to connect call to {target.number}: {e}", exc_info=True)
            self._set_state(CallState.SELECTED)
            return False

        self.refresh_status()
        return True

    def refresh_status(self) -> CallState:
        """Follow the transport status while dialing."""
        if self.state == CallState.DIALING:
            status = self.transport.status
            if status == ConnectionStatus.CONNECTED:
                self.connected_at = self.clock()
                self._set_state(CallState.CONNECTED)
            elif status in (ConnectionStatus.ERROR, ConnectionStatus.DISCONNECTED):
                logger.warning(f"Transport reported {status.value} while dialing")
                self._set_state(CallState.SELECTED)
        return self.state

    async def end_call(self) -> CallRecord:
        """Hang up, save the transcript and notes, and return the stored record.

        Raises:
            CallStateError: If no call is connected
            ResponseStoreError: If the record cannot be saved. The call is
                still hung up and the notes field is left as typed.
        """
        target = self.current_target
        if self.state != CallState.CONNECTED or target is None:
            raise CallStateError("No connected call to end")

        ended_at = self.clock()
        duration = None
        if self.connected_at is not None:
            duration = max(0, int((ended_at - self.connected_at).total_seconds()))

        record = CallRecord(
            id=target.id,
            phone_number=target.number,
            timestamp=to_iso_timestamp(ended_at),
            transcript=build_transcript(self.transport),
            notes=self.notes,
            duration_seconds=duration,
        )
        try:
            self.store.upsert(record)
        finally:
            await self.transport.disconnect()
            self.connected_at = None
            self._set_state(CallState.SELECTED)

        self._prefill_notes()
        return record

    def save_notes(self) -> CallRecord:
        """Save the notes field for the current target without a call.

        Keeps the transcript of an existing record; otherwise creates a record
        with an empty transcript.

        Raises:
            CallStateError: If nothing is selected
            ResponseStoreError: If the record cannot be saved
        """
        target = self.current_target
        if target is None:
            raise CallStateError("Select a phone number before saving notes")

        existing = self.store.get(target.id)
        if existing:
            record = CallRecord(
                id=existing.id,
                phone_number=existing.phone_number,
                timestamp=existing.timestamp,
                transcript=existing.transcript,
                notes=self.notes,
                duration_seconds=existing.duration_seconds,
            )
        else:
            record = CallRecord(
                id=target.id,
                phone_number=target.number,
                timestamp=to_iso_timestamp(self.clock()),
                transcript="",
                notes=self.notes,
            )

        self.store.upsert(record)
        return record
