"""Redis-backed implementation of the document store.

Keeps the DocumentStore contract while making documents visible across
processes. Expiry is delegated to Redis key TTLs.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Any

import redis
from pydantic import ValidationError

from letterdesk.app.models.common import ErrorCode, Result
from letterdesk.app.models.document import DocumentRecord, DocumentSection
from letterdesk.app.models.form import FormData
from letterdesk.app.utils.metrics import documents_created_total

logger = logging.getLogger(__name__)

KEY_PREFIX = "letterdesk:document:"
DECODE_ERRORS = (KeyError, TypeError, ValueError, ValidationError)


def serialize_record(record: DocumentRecord) -> str:
    """Serialize a record to a JSON string."""
    payload: dict[str, Any] = {
        "sections": [s.model_dump(mode="json") for s in record.sections],
        "raw_text": record.raw_text,
        "generated_at": record.generated_at.isoformat(),
        "form_data": record.form_data.model_dump(mode="json", by_alias=True),
        "is_paid": record.is_paid,
    }
    return json.dumps(payload)


def deserialize_record(raw: str | bytes) -> DocumentRecord:
    """Rebuild a record from its JSON string."""
    payload = json.loads(raw)
    return DocumentRecord(
        sections=[DocumentSection.model_validate(s) for s in payload["sections"]],
        raw_text=payload["raw_text"],
        generated_at=datetime.fromisoformat(payload["generated_at"]),
        form_data=FormData.model_validate(payload["form_data"]),
        is_paid=bool(payload["is_paid"]),
    )


class RedisDocumentStore:
    """Redis implementation of DocumentStore."""

    def __init__(
        self,
        client: "redis.Redis",
        ttl_seconds: int = 24 * 3600,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize store.

        Args:
            client: Redis client
            ttl_seconds: Lifetime of each record from creation (default 24h)
            clock: Time source for generated_at stamping (for testing)
        """
        self._client = client
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @classmethod
    def from_url(cls, url: str, ttl_seconds: int = 24 * 3600) -> "RedisDocumentStore":
        """Create store from a Redis connection URL."""
        client = redis.from_url(url, decode_responses=True)  # type: ignore[no-untyped-call]
        return cls(client, ttl_seconds=ttl_seconds)

    def create(self, document_id: str, record: DocumentRecord) -> Result[str]:
        """Store a record with a Redis TTL."""
        stored = replace(record, generated_at=self._clock())
        try:
            self._client.set(_key(document_id), serialize_record(stored), ex=self._ttl_seconds)
        except redis.RedisError as e:
            logger.exception(
                "Failed to store document", extra={"structured": {"document_id": document_id}}
            )
            return Result.failure(ErrorCode.STORAGE_ERROR, f"Failed to store document: {e}")

        documents_created_total.inc()
        logger.info(f"Document stored: {document_id}")
        return Result.success(document_id)

    def read(self, document_id: str) -> Result[DocumentRecord]:
        """Get a record by ID."""
        try:
            raw = self._client.get(_key(document_id))
        except redis.RedisError as e:
            logger.exception(
                "Failed to read document", extra={"structured": {"document_id": document_id}}
            )
            return Result.failure(ErrorCode.STORAGE_ERROR, f"Failed to read document: {e}")

        if raw is None:
            logger.warning(f"Document not found: {document_id}")
            return Result.not_found()

        try:
            record = deserialize_record(raw)
        except DECODE_ERRORS as e:
            return _undecodable(document_id, e)

        return Result.success(record)

    def mark_paid(self, document_id: str) -> Result[None]:
        """Set the paid flag without touching the remaining TTL."""
        key = _key(document_id)
        try:
            raw = self._client.get(key)
            if raw is None:
                return Result.not_found()

            record = deserialize_record(raw)
            if not record.is_paid:
                record.is_paid = True
                # xx: never resurrect a key that expired between GET and SET
                written = self._client.set(key, serialize_record(record), xx=True, keepttl=True)
                if not written:
                    return Result.not_found()
        except redis.RedisError as e:
            logger.exception(
                "Failed to mark document as paid",
                extra={"structured": {"document_id": document_id}},
            )
            return Result.failure(ErrorCode.STORAGE_ERROR, f"Failed to update document: {e}")
        except DECODE_ERRORS as e:
            return _undecodable(document_id, e)

        logger.info(f"Document marked as paid: {document_id}")
        return Result.success()

    def delete(self, document_id: str) -> Result[None]:
        """Remove a record."""
        try:
            removed = self._client.delete(_key(document_id))
        except redis.RedisError as e:
            logger.exception(
                "Failed to delete document", extra={"structured": {"document_id": document_id}}
            )
            return Result.failure(ErrorCode.STORAGE_ERROR, f"Failed to delete document: {e}")

        if not removed:
            return Result.not_found()

        logger.info(f"Document deleted: {document_id}")
        return Result.success()

    def purge_expired(self) -> int:
        """Redis expires keys itself; nothing to sweep."""
        return 0

    def ping(self) -> tuple[bool, str]:
        """Check Redis connectivity."""
        try:
            self._client.ping()
            return (True, "ok")
        except Exception as e:
            return (False, f"error: {type(e).__name__}")


def _key(document_id: str) -> str:
    return f"{KEY_PREFIX}{document_id}"


def _undecodable(document_id: str, error: Exception) -> Result[Any]:
    logger.error(
        "Stored document could not be decoded",
        extra={"structured": {"document_id": document_id, "error": repr(error)}},
    )
    return Result.failure(ErrorCode.STORAGE_ERROR, "Stored document is unreadable")
