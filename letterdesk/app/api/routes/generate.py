"""Letter generation endpoint - POST /api/generate."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from letterdesk.app.api.envelope import api_success, result_error
from letterdesk.app.config import Settings, get_settings
from letterdesk.app.db.repositories import DocumentStore, generate_document_id
from letterdesk.app.db.store import get_document_store
from letterdesk.app.llm.client import TextGenerator, get_text_generators
from letterdesk.app.models.common import CamelModel
from letterdesk.app.models.document import DocumentRecord, GeneratedDocument
from letterdesk.app.models.form import FormData
from letterdesk.app.services.letters import generate_letter

router = APIRouter(prefix="/api", tags=["generate"])
logger = logging.getLogger(__name__)


class GenerateLetterRequest(CamelModel):
    """Request body for POST /api/generate."""

    form_data: FormData


class GenerateLetterResponse(CamelModel):
    """Response data for POST /api/generate."""

    document_id: str
    document: GeneratedDocument


@router.post("/generate")
async def generate(
    request: GenerateLetterRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
    generators: Annotated[list[TextGenerator], Depends(get_text_generators)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    """Generate a letter from form answers and store it unpaid.

    Args:
        request: Validated form answers
        store: Document store
        generators: Text-generation providers in priority order
        settings: Application settings

    Returns:
        Envelope with the new document id and the generated document
    """
    form = request.form_data

    result = await generate_letter(
        form,
        generators,
        date.today(),
        max_tokens=settings.generation_max_tokens,
        temperature=settings.generation_temperature,
    )
    if not result.ok or result.value is None:
        return result_error(result)

    document = result.value
    document_id = generate_document_id()
    stored = store.create(document_id, DocumentRecord.from_generated(document, form))
    if not stored.ok:
        return result_error(stored)

    # Respond with the stored record so generatedAt matches later reads
    saved = store.read(document_id)
    if saved.ok and saved.value is not None:
        document = saved.value.to_document()

    logger.info(f"[POST /api/generate] document_id={document_id} generated and stored")

    response = GenerateLetterResponse(document_id=document_id, document=document)
    return api_success(response.model_dump(mode="json", by_alias=True))
