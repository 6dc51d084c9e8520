"""Letter generation: instruction assembly, provider chain, section parsing."""

import logging
from collections.abc import Sequence
from datetime import date, datetime

from letterdesk.app.llm.client import (
    GenerationError,
    GenerationRequest,
    TextGenerator,
    generate_with_fallback,
)
from letterdesk.app.llm.prompts import build_instructions
from letterdesk.app.llm.sections import parse_sections
from letterdesk.app.models.common import ErrorCode, Result
from letterdesk.app.models.document import GeneratedDocument
from letterdesk.app.models.form import FormData
from letterdesk.app.utils.logging import preview

logger = logging.getLogger(__name__)


async def generate_letter(
    form: FormData,
    generators: Sequence[TextGenerator],
    letter_date: date,
    *,
    max_tokens: int = 1500,
    temperature: float = 0.7,
) -> Result[GeneratedDocument]:
    """Generate a letter of explanation from form answers.

    Nothing is persisted here; the caller stores the document only after a
    successful result.

    Args:
        form: Validated applicant answers
        generators: Providers in priority order
        letter_date: Date printed on the letter
        max_tokens: Output length cap per provider call
        temperature: Sampling temperature

    Returns:
        Result carrying the generated document, or a GENERATION_ERROR failure
    """
    instruction = build_instructions(form, letter_date)
    logger.info(
        f"Built letter instruction ({len(instruction)} chars), "
        f"tone={form.tone.value}, template={form.template.value}"
    )

    request = GenerationRequest(
        instruction=instruction,
        max_tokens=max_tokens,
        temperature=temperature,
    )

    try:
        result = await generate_with_fallback(generators, request)
    except GenerationError as e:
        logger.error(f"Letter generation failed: {e}")
        return Result.failure(ErrorCode.GENERATION_ERROR, "Failed to generate letter")

    sections = parse_sections(result.text)
    document = GeneratedDocument(
        sections=sections,
        raw_text=result.text,
        generated_at=datetime.now(),
    )

    logger.info(
        "Letter generation successful",
        extra={
            "structured": {
                "provider": result.provider,
                "word_count": len(result.text.split()),
                "section_count": len(sections),
                "raw_text_preview": preview(result.text),
            }
        },
    )

    return Result.success(document)
