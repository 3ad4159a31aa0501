"""
Voice transport contract and the simulated transport used for practice calls.

The transport owns the live voice session. The call manager only needs to
connect, disconnect, read the connection status and read the ordered list
of messages exchanged during the session.
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)


class ConnectionStatus(str, Enum):
    """Connection states reported by a voice transport."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class MessageKind(str, Enum):
    """Kinds of session messages. Only user and assistant turns make a transcript."""
    USER = "user_message"
    ASSISTANT = "assistant_message"
    OTHER = "other"


class VoiceTransportError(Exception):
    """Raised when a voice session cannot be opened."""


@dataclass(frozen=True)
class VoiceMessage:
    """One message from the voice session stream."""
    kind: MessageKind
    role: str = ""
    content: str = ""
    event_type: str = ""

    @property
    def is_turn(self) -> bool:
        """True for spoken user or assistant turns."""
        return self.kind in (MessageKind.USER, MessageKind.ASSISTANT)

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> "VoiceMessage":
        """Build a message from a raw provider event.

        Events look like ``{"type": "user_message", "message": {"role": "user",
        "content": "..."}}``. Unknown types and events without a message body
        become ``MessageKind.OTHER``.
        """
        event_type = str(event.get("type") or "")
        body = event.get("message") or {}
        if not isinstance(body, dict):
            body = {}

        try:
            kind = MessageKind(event_type)
        except ValueError:
            kind = MessageKind.OTHER

        return cls(
            kind=kind,
            role=str(body.get("role") or ""),
            content=str(body.get("content") or ""),
            event_type=event_type,
        )


class VoiceTransport(ABC):
    """Abstract voice session."""

    @property
    @abstractmethod
    def status(self) -> ConnectionStatus:
        """Current connection status."""

    @property
    @abstractmethod
    def messages(self) -> List[VoiceMessage]:
        """Messages accumulated for the active (or last) session, in order."""

    @abstractmethod
    async def connect(self) -> None:
        """Open a session.

        Raises:
            VoiceTransportError: If the session cannot be opened
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the session. Safe to call when already disconnected."""

    def transcript_turns(self) -> List[VoiceMessage]:
        """User and assistant turns of the current session."""
        return [msg for msg in self.messages if msg.is_turn]


DEFAULT_REPLIES = (
    "Thanks, I've noted that.",
    "Understood. Is there anything else you'd like to add?",
    "Great, that's really helpful.",
)


class SimulatedVoiceTransport(VoiceTransport):
    """In-process transport that plays a scripted assistant.

    The operator types what the caller says with ``say()``; the assistant
    answers from ``replies`` in order, cycling when the script runs out.
    """

    def __init__(
        self,
        greeting: str = "Hello, thanks for taking our call.",
        replies: Sequence[str] = DEFAULT_REPLIES,
        connect_delay: float = 0.0,
        fail_with: Optional[str] = None,
    ):
        """Initialize the simulated transport.

        Args:
            greeting: First assistant turn after connecting
            replies: Assistant answers to caller turns
            connect_delay: Seconds to wait before reporting connected
            fail_with: If set, connect() raises VoiceTransportError with this message
        """
        self.greeting = greeting
        self.replies = list(replies)
        self.connect_delay = connect_delay
        self.fail_with = fail_with
        self._status = ConnectionStatus.DISCONNECTED
        self._messages: List[VoiceMessage] = []
        self._reply_index = 0
        self.connect_count = 0

    @property
    def status(self) -> ConnectionStatus:
        return self._status

    @property
    def messages(self) -> List[VoiceMessage]:
        return list(self._messages)

    def _emit(self, event: Dict[str, Any]) -> None:
        self._messages.append(VoiceMessage.from_event(event))

    async def connect(self) -> None:
        self.connect_count += 1
        self._messages = []
        self._reply_index = 0
        self._status = ConnectionStatus.CONNECTING
        logger.info("[SIMULATED VOICE] Connecting...")

        if self.connect_delay > 0:
            await asyncio.sleep(self.connect_delay)

        if self.fail_with:
            self._status = ConnectionStatus.ERROR
            raise VoiceTransportError(self.fail_with)

        self._status = ConnectionStatus.CONNECTED
        self._emit({"type": "chat_metadata", "chat_id": f"simulated-{self.connect_count}"})
        if self.greeting:
            self._emit({
                "type": MessageKind.ASSISTANT.value,
                "message": {"role": "assistant", "content": self.greeting},
            })
        logger.info("[SIMULATED VOICE] Connected")

    def say(self, text: str) -> Optional[VoiceMessage]:
        """Add a caller turn and the scripted assistant reply.

        Args:
            text: What the caller said

        Returns:
            The assistant reply, or None if not connected or text is blank
        """
        text = text.strip()
        if self._status != ConnectionStatus.CONNECTED or not text:
            return None

        self._emit({"type": MessageKind.USER.value, "message": {"role": "user", "content": text}})

        if not self.replies:
            return None

        reply = self.replies[self._reply_index % len(self.replies)]
        self._reply_index += 1
        self._emit({"type": MessageKind.ASSISTANT.value, "message": {"role": "assistant", "content": reply}})
        return self._messages[-1]

    async def disconnect(self) -> None:
        if self._status != ConnectionStatus.DISCONNECTED:
            logger.info("[SIMULATED VOICE] Disconnected")
        self._status = ConnectionStatus.DISCONNECTED
