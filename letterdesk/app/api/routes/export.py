"""Export endpoints - PDF download and email delivery."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import Field

from letterdesk.app.api.envelope import api_error, api_success, result_error
from letterdesk.app.config import Settings, get_settings
from letterdesk.app.db.repositories import DocumentStore
from letterdesk.app.db.store import get_document_store
from letterdesk.app.models.common import CamelModel, ErrorCode
from letterdesk.app.services.email import LetterMailer, get_letter_mailer
from letterdesk.app.services.pdf import export_letter_pdf, pdf_filename

router = APIRouter(prefix="/api", tags=["export"])
logger = logging.getLogger(__name__)

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PAYMENT_REQUIRED_MESSAGE = "Payment required to export this document"


class DownloadRequest(CamelModel):
    """Request body for POST /api/download."""

    document_text: str = Field(..., min_length=1)
    applicant_name: str | None = None
    document_id: str | None = None


class SendEmailRequest(CamelModel):
    """Request body for POST /api/send-email."""

    email: str = Field(..., pattern=EMAIL_PATTERN)
    document_text: str = Field(..., min_length=1)
    applicant_name: str = "Applicant"
    document_id: str | None = None


def export_gate(store: DocumentStore, document_id: str | None) -> JSONResponse | None:
    """Error response when the referenced document may not be exported.

    Unpaid documents get 402. A store failure is reported as-is rather than
    letting the export through. Requests without a document id, or whose
    document has expired, pass.
    """
    if not document_id:
        return None
    result = store.read(document_id)
    if result.ok:
        if result.value is not None and not result.value.is_paid:
            return api_error(PAYMENT_REQUIRED_MESSAGE, ErrorCode.PAYMENT_REQUIRED)
        return None
    if result.error == ErrorCode.STORAGE_ERROR:
        logger.error(f"Export refused, payment status unavailable for {document_id}")
        return result_error(result)
    return None


@router.post("/download", response_model=None)
async def download_pdf(
    request: DownloadRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> Response:
    """Render the (possibly edited) letter text as a PDF attachment."""
    blocked = export_gate(store, request.document_id)
    if blocked is not None:
        return blocked

    result = export_letter_pdf(request.document_text, request.applicant_name)
    if not result.ok or result.value is None:
        return result_error(result)

    filename = pdf_filename(request.applicant_name, prefix=settings.pdf_filename_prefix)
    return Response(
        content=result.value,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/send-email")
async def send_email(
    request: SendEmailRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
    mailer: Annotated[LetterMailer, Depends(get_letter_mailer)],
) -> JSONResponse:
    """Email the letter with a PDF attachment."""
    blocked = export_gate(store, request.document_id)
    if blocked is not None:
        return blocked

    result = await mailer.send_letter(
        request.email, request.document_text, request.applicant_name
    )
    if not result.ok:
        return result_error(result)

    return api_success({"message": "Email sent successfully", "emailId": result.value})
