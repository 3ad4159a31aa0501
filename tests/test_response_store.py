"""Tests for the response store and its storage backends."""
import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from services import response_store as response_store_module
from services.models import CallRecord
from services.response_store import (
    FileResponseStorage,
    RedisResponseStorage,
    ResponseStorage,
    ResponseStore,
    ResponseStoreError,
    create_response_store,
    describe_store_location,
)


@pytest.fixture
def record() -> CallRecord:
    return CallRecord(
        id="1",
        phone_number="555-0100",
        timestamp="2024-05-15T12:00:00.000Z",
        transcript="assistant: Hi there",
        notes="Interested",
        duration_seconds=42,
    )


class TestFileResponseStore:
    def test_load_without_file_is_empty(self, store: ResponseStore) -> None:
        assert store.load() == {}
        assert len(store) == 0

    def test_upsert_persists_mapping(self, store: ResponseStore, record: CallRecord, responses_path) -> None:
        store.upsert(record)

        saved = json.loads(responses_path.read_text())
        assert saved == {
            "1": {
                "id": "1",
                "phoneNumber": "555-0100",
                "timestamp": "2024-05-15T12:00:00.000Z",
                "transcript": "assistant: Hi there",
                "notes": "Interested",
                "durationSeconds": 42,
            }
        }

    def test_upsert_same_id_keeps_single_record(self, store: ResponseStore, record: CallRecord) -> None:
        store.upsert(record)
        store.upsert(CallRecord(
            id="1",
            phone_number="555-0100",
            timestamp="2024-05-16T08:00:00.000Z",
            transcript="",
            notes="Call back",
        ))

        assert len(store) == 1
        assert store.get("1").notes == "Call back"
        assert store.get("1").timestamp == "2024-05-16T08:00:00.000Z"

    def test_reload_from_disk(self, store: ResponseStore, record: CallRecord, responses_path) -> None:
        store.upsert(record)

        reloaded = ResponseStore(FileResponseStorage(responses_path))
        records = reloaded.load()

        assert records == {"1": record}
        assert "1" in reloaded

    def test_missing_optional_fields_load(self, responses_path) -> None:
        responses_path.parent.mkdir(parents=True)
        responses_path.write_text(json.dumps({
            "7": {"id": "7", "phoneNumber": "555-0700", "timestamp": "2024-05-15T12:00:00.000Z"}
        }))

        records = ResponseStore(FileResponseStorage(responses_path)).load()

        assert records["7"].transcript == ""
        assert records["7"].notes is None
        assert records["7"].duration_seconds is None

    def test_malformed_payload_raises(self, responses_path) -> None:
        responses_path.parent.mkdir(parents=True)
        responses_path.write_text("{not json")

        with pytest.raises(json.JSONDecodeError):
            ResponseStore(FileResponseStorage(responses_path)).load()

    def test_write_leaves_no_temp_files(self, store: ResponseStore, record: CallRecord, responses_path) -> None:
        store.upsert(record)
        store.upsert(record)

        assert [p.name for p in responses_path.parent.iterdir()] == [responses_path.name]

    def test_snapshot_is_a_copy(self, store: ResponseStore, record: CallRecord) -> None:
        store.upsert(record)

        snapshot = store.snapshot()
        snapshot.clear()

        assert len(store) == 1


class TestRedisResponseStorage:
    def test_read_decodes_bytes(self) -> None:
        client = MagicMock()
        client.get.return_value = b'{"a": 1}'

        storage = RedisResponseStorage(client, key="responses")

        assert storage.read() == '{"a": 1}'
        client.get.assert_called_once_with("responses")

    def test_read_missing_key(self) -> None:
        client = MagicMock()
        client.get.return_value = None

        assert RedisResponseStorage(client).read() is None

    def test_store_round_trip_through_client(self, record: CallRecord) -> None:
        data = {}
        client = MagicMock()
        client.set.side_effect = lambda key, value: data.__setitem__(key, value)
        client.get.side_effect = lambda key: data.get(key)

        ResponseStore(RedisResponseStorage(client)).upsert(record)
        reloaded = ResponseStore(RedisResponseStorage(client)).load()

        assert "callResponses" in data
        assert reloaded == {"1": record}


class TestCreateResponseStore:
    def test_file_backend(self, responses_path) -> None:
        settings = SimpleNamespace(
            RESPONSE_STORE_BACKEND="file",
            RESPONSES_FILE_PATH=str(responses_path),
            RESPONSES_STORAGE_KEY="callResponses",
            REDIS_URL="redis://localhost:6379/0",
        )

        store = create_response_store(settings)

        assert isinstance(store.storage, FileResponseStorage)
        assert len(store) == 0

    def test_redis_backend(self, monkeypatch) -> None:
        client = MagicMock()
        client.get.return_value = None
        from_url = MagicMock(return_value=client)
        monkeypatch.setattr(response_store_module.redis.Redis, "from_url", from_url)
        settings = SimpleNamespace(
            RESPONSE_STORE_BACKEND="redis",
            RESPONSES_FILE_PATH="unused.json",
            RESPONSES_STORAGE_KEY="responses",
            REDIS_URL="redis://cache:6379/1",
        )

        store = create_response_store(settings)

        from_url.assert_called_once_with("redis://cache:6379/1", decode_responses=True)
        assert isinstance(store.storage, RedisResponseStorage)
        assert store.storage.key == "responses"


class FailingStorage(ResponseStorage):
    """Reads fine, refuses every write."""

    def __init__(self, error: Exception):
        self.error = error

    def read(self):
        return None

    def write(self, payload: str) -> None:
        raise self.error


class TestFailedWrites:
    @pytest.mark.parametrize("error", [ConnectionError("redis down"), OSError("disk full")])
    def test_record_not_kept_in_memory(self, record: CallRecord, error) -> None:
        store = ResponseStore(FailingStorage(error))

        with pytest.raises(ResponseStoreError):
            store.upsert(record)

        assert "1" not in store
        assert len(store) == 0

    def test_redis_error_is_wrapped(self, record: CallRecord) -> None:
        client = MagicMock()
        client.set.side_effect = response_store_module.redis.ConnectionError("refused")

        with pytest.raises(ResponseStoreError):
            ResponseStore(RedisResponseStorage(client)).upsert(record)

    def test_previous_record_survives_failed_overwrite(self, store: ResponseStore, record: CallRecord) -> None:
        store.upsert(record)
        store.storage = FailingStorage(OSError("read-only file system"))

        with pytest.raises(ResponseStoreError):
            store.upsert(CallRecord(id="1", phone_number="555-0100", timestamp="2024-05-16T08:00:00.000Z"))

        assert store.get("1") == record


class TestDescribeStoreLocation:
    def test_file_backend(self) -> None:
        settings = SimpleNamespace(RESPONSE_STORE_BACKEND="file", RESPONSES_FILE_PATH="data/responses.json")

        assert describe_store_location(settings) == "`data/responses.json`"

    def test_redis_backend_names_key(self) -> None:
        settings = SimpleNamespace(
            RESPONSE_STORE_BACKEND="redis",
            RESPONSES_FILE_PATH="data/responses.json",
            RESPONSES_STORAGE_KEY="callResponses",
        )

        location = describe_store_location(settings)

        assert "callResponses" in location
        assert "responses.json" not in location
