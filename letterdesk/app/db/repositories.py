"""Document store protocol and identifier generation."""

import secrets
import time
from typing import Protocol

from letterdesk.app.models.common import Result
from letterdesk.app.models.document import DocumentRecord

DOCUMENT_ID_PREFIX = "doc_"


def generate_document_id() -> str:
    """Generate an unguessable document identifier.

    Format: ``doc_<unix millis>_<16 hex chars>``. The id is the only access
    control on an unpaid document, so the suffix must come from ``secrets``.
    """
    return f"{DOCUMENT_ID_PREFIX}{int(time.time() * 1000)}_{secrets.token_hex(8)}"


class DocumentStore(Protocol):
    """Store for generated documents with per-record TTL and a paid flag.

    Absence is uniform: never-created, expired and deleted ids all yield the
    same not-found failure. No operation raises to its caller.
    """

    def create(self, document_id: str, record: DocumentRecord) -> Result[str]:
        """Store a record, stamping ``generated_at`` and starting its TTL.

        Args:
            document_id: Identifier from generate_document_id()
            record: Record to store (is_paid is normally False)

        Returns:
            Result carrying the document id, or a storage failure
        """
        ...

    def read(self, document_id: str) -> Result[DocumentRecord]:
        """Get the full record. Does not filter on ``is_paid``.

        Args:
            document_id: Document identifier

        Returns:
            Result carrying the record, or not-found
        """
        ...

    def mark_paid(self, document_id: str) -> Result[None]:
        """Flip ``is_paid`` to True. Idempotent.

        Args:
            document_id: Document identifier

        Returns:
            Success, or not-found
        """
        ...

    def delete(self, document_id: str) -> Result[None]:
        """Remove a record.

        Args:
            document_id: Document identifier

        Returns:
            Success, or not-found if nothing was removed
        """
        ...

    def purge_expired(self) -> int:
        """Remove every expired record.

        Returns:
            Number of records removed
        """
        ...

    def ping(self) -> tuple[bool, str]:
        """Report backend health as (healthy, detail)."""
        ...
