"""
Response store: one CallRecord per call target, persisted as a single JSON
mapping of record id -> record fields.

Two storage backends are available:
- FileResponseStorage: local JSON file (default)
- RedisResponseStorage: one Redis string key
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional

import redis

from services.models import CallRecord

logger = logging.getLogger(__name__)


class ResponseStoreError(Exception):
    """Raised when the response mapping cannot be persisted."""


class ResponseStorage(ABC):
    """Where the serialized mapping lives."""

    @abstractmethod
    def read(self) -> Optional[str]:
        """Return the stored payload, or None if nothing has been saved yet."""

    @abstractmethod
    def write(self, payload: str) -> None:
        """Replace the stored payload."""


class FileResponseStorage(ResponseStorage):
    """JSON file on local disk."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def write(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Temp file must share the target's directory for os.replace
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".responses-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except Exception:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def __repr__(self) -> str:
        return f"FileResponseStorage({str(self.path)!r})"


class RedisResponseStorage(ResponseStorage):
    """Single Redis string key."""

    def __init__(self, client, key: str = "callResponses"):
        """Initialize Redis storage.

        Args:
            client: Synchronous redis.Redis client
            key: Key holding the JSON mapping
        """
        self.client = client
        self.key = key

    def read(self) -> Optional[str]:
        value = self.client.get(self.key)
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def write(self, payload: str) -> None:
        self.client.set(self.key, payload)

    def __repr__(self) -> str:
        return f"RedisResponseStorage(key={self.key!r})"


class ResponseStore:
    """In-memory mapping of call records backed by a ResponseStorage.

    Construct once per operator session and pass it to whoever needs it.
    """

    def __init__(self, storage: ResponseStorage):
        self.storage = storage
        self._records: Dict[str, CallRecord] = {}

    def load(self) -> Dict[str, CallRecord]:
        """Reload the mapping from storage.

        Returns:
            Copy of the loaded mapping (empty if nothing is stored)

        Raises:
            json.JSONDecodeError: If the stored payload is not valid JSON
        """
        payload = self.storage.read()
        if not payload:
            self._records = {}
            return {}

        try:
            raw = json.loads(payload)
        except json.JSONDecodeError as e:
            logger.error(f"Stored call responses in {self.storage!r} are not valid JSON: {e}")
            raise

        self._records = {
            str(record_id): CallRecord.from_dict(data)
            for record_id, data in raw.items()
        }
        logger.info(f"Loaded {len(self._records)} call responses from {self.storage!r}")
        return dict(self._records)

    def upsert(self, record: CallRecord) -> None:
        """Insert or replace the record for record.id and persist the whole mapping.

        The in-memory mapping only changes once the write succeeds.

        Raises:
            ResponseStoreError: If the storage write fails
        """
        replaced = record.id in self._records
        records = dict(self._records)
        records[record.id] = record

        payload = json.dumps({record_id: rec.to_dict() for record_id, rec in records.items()})
        try:
            self.storage.write(payload)
        except (OSError, redis.RedisError) as e:
            logger.error(f"Failed to save call response {record.id} to {self.storage!r}: {e}")
            raise ResponseStoreError(f"Could not save call response {record.id}: {e}") from e

        self._records = records
        logger.info(f"{'Updated' if replaced else 'Saved'} call response {record.id} ({record.phone_number})")

    def get(self, record_id: str) -> Optional[CallRecord]:
        return self._records.get(record_id)

    def records(self) -> List[CallRecord]:
        return list(self._records.values())

    def snapshot(self) -> Dict[str, CallRecord]:
        return dict(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __len__(self) -> int:
        return len(self._records)


def create_response_store(settings) -> ResponseStore:
    """Build the configured store and load it.

    Args:
        settings: Settings instance (see config.settings)

    Returns:
        Loaded ResponseStore
    """
    if settings.RESPONSE_STORE_BACKEND == "redis":
        client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True)
        storage: ResponseStorage = RedisResponseStorage(client, settings.RESPONSES_STORAGE_KEY)
    else:
        storage = FileResponseStorage(settings.RESPONSES_FILE_PATH)

    store = ResponseStore(storage)
    store.load()
    return store


def describe_store_location(settings) -> str:
    """Where the configured backend keeps the response mapping, for operator messages."""
    if settings.RESPONSE_STORE_BACKEND == "redis":
        return f"Redis key `{settings.RESPONSES_STORAGE_KEY}`"
    return f"`{settings.RESPONSES_FILE_PATH}`"
