"""Document endpoints - verify, mark-paid, delete."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from pydantic import Field

from letterdesk.app.api.envelope import api_error, api_success, result_error
from letterdesk.app.db.repositories import DocumentStore
from letterdesk.app.db.store import get_document_store
from letterdesk.app.models.common import CamelModel, ErrorCode
from letterdesk.app.models.document import GeneratedDocument

router = APIRouter(prefix="/api/document", tags=["documents"])
logger = logging.getLogger(__name__)


class MarkPaidRequest(CamelModel):
    """Request body for POST /api/document/mark-paid."""

    document_id: str = Field(..., min_length=1)


class VerifyResponse(CamelModel):
    """Response data for GET /api/document/verify."""

    is_paid: bool
    document: GeneratedDocument | None


@router.get("/verify")
async def verify_document(
    store: Annotated[DocumentStore, Depends(get_document_store)],
    document_id: Annotated[str | None, Query(alias="documentId")] = None,
) -> JSONResponse:
    """Report payment status, releasing content only for paid documents.

    Args:
        store: Document store
        document_id: Document identifier

    Returns:
        Envelope with isPaid and the document (null while unpaid)
    """
    if not document_id:
        return api_error("Document ID required", ErrorCode.VALIDATION_ERROR)

    result = store.read(document_id)
    if not result.ok or result.value is None:
        return result_error(result)

    record = result.value
    logger.info(f"Document verification complete: {document_id}, is_paid={record.is_paid}")

    # Visibility gate: unpaid content never leaves the server
    response = VerifyResponse(
        is_paid=record.is_paid,
        document=record.to_document() if record.is_paid else None,
    )
    return api_success(response.model_dump(mode="json", by_alias=True))


@router.post("/mark-paid")
async def mark_paid(
    request: MarkPaidRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> JSONResponse:
    """Mark a document as paid (redirect-completion step and test flows).

    Args:
        request: Document identifier
        store: Document store

    Returns:
        Envelope with documentId and isPaid, or 404
    """
    logger.info(f"Marking document as paid: {request.document_id}")

    result = store.mark_paid(request.document_id)
    if not result.ok:
        return result_error(result)

    return api_success({"documentId": request.document_id, "isPaid": True})


@router.delete("/{document_id}")
async def delete_document(
    document_id: str,
    store: Annotated[DocumentStore, Depends(get_document_store)],
) -> JSONResponse:
    """Delete a document before its TTL runs out.

    Args:
        document_id: Document identifier
        store: Document store

    Returns:
        Envelope with documentId, or 404
    """
    result = store.delete(document_id)
    if not result.ok:
        return result_error(result)

    return api_success({"documentId": document_id})
