"""In-memory implementation of the document store."""

import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta

from letterdesk.app.models.common import ErrorCode, Result
from letterdesk.app.models.document import DocumentRecord
from letterdesk.app.utils.metrics import documents_created_total, documents_expired_total

logger = logging.getLogger(__name__)


class InMemoryDocumentStore:
    """Process-local implementation of DocumentStore.

    Each instance holds its own map, so separate processes never see each
    other's documents. Expired records are dropped lazily on access and in
    bulk by purge_expired().
    """

    def __init__(
        self,
        ttl_seconds: int = 24 * 3600,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize store.

        Args:
            ttl_seconds: Lifetime of each record from creation (default 24h)
            clock: Time source (for testing)
        """
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._documents: dict[str, DocumentRecord] = {}
        self._lock = threading.Lock()

    def create(self, document_id: str, record: DocumentRecord) -> Result[str]:
        """Store a record and start its TTL."""
        try:
            now = self._clock()
            stored = replace(
                record,
                sections=list(record.sections),
                generated_at=now,
                expires_at=now + self._ttl,
            )
            with self._lock:
                self._documents[document_id] = stored
        except Exception as e:
            logger.exception(
                "Failed to store document", extra={"structured": {"document_id": document_id}}
            )
            return Result.failure(ErrorCode.STORAGE_ERROR, f"Failed to store document: {e}")

        documents_created_total.inc()
        logger.info(f"Document stored: {document_id}")
        return Result.success(document_id)

    def read(self, document_id: str) -> Result[DocumentRecord]:
        """Get a record by ID."""
        with self._lock:
            record = self._get_live(document_id)
            if record is None:
                logger.warning(f"Document not found: {document_id}")
                return Result.not_found()
            return Result.success(replace(record, sections=list(record.sections)))

    def mark_paid(self, document_id: str) -> Result[None]:
        """Set the paid flag in place."""
        with self._lock:
            record = self._get_live(document_id)
            if record is None:
                return Result.not_found()
            record.is_paid = True

        logger.info(f"Document marked as paid: {document_id}")
        return Result.success()

    def delete(self, document_id: str) -> Result[None]:
        """Remove a record."""
        with self._lock:
            record = self._get_live(document_id)
            if record is None:
                return Result.not_found()
            del self._documents[document_id]

        logger.info(f"Document deleted: {document_id}")
        return Result.success()

    def purge_expired(self) -> int:
        """Remove all expired records."""
        now = self._clock()
        with self._lock:
            expired = [
                doc_id
                for doc_id, record in self._documents.items()
                if record.expires_at is not None and now >= record.expires_at
            ]
            for doc_id in expired:
                del self._documents[doc_id]

        if expired:
            documents_expired_total.inc(len(expired))
            logger.info(f"Purged {len(expired)} expired document(s)")
        return len(expired)

    def ping(self) -> tuple[bool, str]:
        """In-memory backend is always reachable."""
        return (True, "ok")

    def _get_live(self, document_id: str) -> DocumentRecord | None:
        """Get record if present and unexpired. Caller must hold the lock."""
        record = self._documents.get(document_id)

        if record is None:
            return None

        # Check if expired
        if record.expires_at is not None and self._clock() >= record.expires_at:
            del self._documents[document_id]
            documents_expired_total.inc()
            logger.info(f"Document expired and removed: {document_id}")
            return None

        return record
