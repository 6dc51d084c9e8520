"""Tests for the Redis document store (Redis client mocked)."""

from unittest.mock import MagicMock

import redis

from letterdesk.app.db.redis_store import (
    KEY_PREFIX,
    RedisDocumentStore,
    deserialize_record,
    serialize_record,
)
from letterdesk.app.models.common import ErrorCode
from letterdesk.app.models.document import DocumentRecord


def test_serialized_record_keeps_form_and_sections(sample_record: DocumentRecord) -> None:
    """Stored JSON rebuilds into an equivalent record."""
    restored = deserialize_record(serialize_record(sample_record))

    assert restored.raw_text == sample_record.raw_text
    assert restored.sections == sample_record.sections
    assert restored.form_data == sample_record.form_data
    assert restored.generated_at == sample_record.generated_at
    assert restored.is_paid is False


def test_create_sets_key_with_ttl(sample_record: DocumentRecord, clock) -> None:
    """Create writes the prefixed key with an expiry."""
    client = MagicMock()
    store = RedisDocumentStore(client, ttl_seconds=60, clock=clock)

    result = store.create("doc_1", sample_record)

    assert result.ok
    args, kwargs = client.set.call_args
    assert args[0] == f"{KEY_PREFIX}doc_1"
    assert kwargs["ex"] == 60
    assert deserialize_record(args[1]).generated_at == clock.now


def test_read_missing_key_is_not_found() -> None:
    """Expired keys read as not-found."""
    client = MagicMock()
    client.get.return_value = None
    store = RedisDocumentStore(client)

    result = store.read("doc_1")

    assert not result.ok
    assert result.error == ErrorCode.DOCUMENT_NOT_FOUND


def test_mark_paid_keeps_ttl_and_never_creates(sample_record: DocumentRecord) -> None:
    """Mark-paid rewrites only an existing key and keeps its TTL."""
    client = MagicMock()
    client.get.return_value = serialize_record(sample_record)
    client.set.return_value = True
    store = RedisDocumentStore(client)

    result = store.mark_paid("doc_1")

    assert result.ok
    args, kwargs = client.set.call_args
    assert kwargs == {"xx": True, "keepttl": True}
    assert deserialize_record(args[1]).is_paid is True


def test_mark_paid_already_paid_skips_write(sample_record: DocumentRecord) -> None:
    """A second payment confirmation is a no-op."""
    sample_record.is_paid = True
    client = MagicMock()
    client.get.return_value = serialize_record(sample_record)
    store = RedisDocumentStore(client)

    assert store.mark_paid("doc_1").ok
    client.set.assert_not_called()


def test_mark_paid_missing_key_is_not_found() -> None:
    """Mark-paid on an expired key fails without writing."""
    client = MagicMock()
    client.get.return_value = None
    store = RedisDocumentStore(client)

    result = store.mark_paid("doc_nonexistent")

    assert result.error == ErrorCode.DOCUMENT_NOT_FOUND
    client.set.assert_not_called()


def test_mark_paid_key_vanishes_before_write(sample_record: DocumentRecord) -> None:
    """An xx write that matches nothing reports not-found."""
    client = MagicMock()
    client.get.return_value = serialize_record(sample_record)
    client.set.return_value = None
    store = RedisDocumentStore(client)

    assert store.mark_paid("doc_1").error == ErrorCode.DOCUMENT_NOT_FOUND


def test_delete_reports_not_found_when_nothing_removed() -> None:
    """Deleting a missing key is not-found."""
    client = MagicMock()
    client.delete.side_effect = [1, 0]
    store = RedisDocumentStore(client)

    assert store.delete("doc_1").ok
    assert store.delete("doc_1").error == ErrorCode.DOCUMENT_NOT_FOUND


def test_redis_errors_become_storage_errors(sample_record: DocumentRecord) -> None:
    """Connection failures are reported, never raised."""
    client = MagicMock()
    client.set.side_effect = redis.ConnectionError("down")
    client.get.side_effect = redis.ConnectionError("down")
    store = RedisDocumentStore(client)

    assert store.create("doc_1", sample_record).error == ErrorCode.STORAGE_ERROR
    assert store.read("doc_1").error == ErrorCode.STORAGE_ERROR
    assert store.mark_paid("doc_1").error == ErrorCode.STORAGE_ERROR


def test_ping_reports_failure() -> None:
    """Ping surfaces the error type."""
    client = MagicMock()
    client.ping.side_effect = redis.ConnectionError("down")
    store = RedisDocumentStore(client)

    assert store.ping() == (False, "error: ConnectionError")


def test_undecodable_value_becomes_storage_error() -> None:
    """Stored values missing fields or not JSON are reported, never raised."""
    client = MagicMock()
    store = RedisDocumentStore(client)

    for raw in ('{"raw_text": "x"}', "not json"):
        client.get.return_value = raw

        assert store.read("doc_1").error == ErrorCode.STORAGE_ERROR
        assert store.mark_paid("doc_1").error == ErrorCode.STORAGE_ERROR

    client.set.assert_not_called()
