"""Tests for the letter generation service."""

from datetime import date

import pytest

from letterdesk.app.llm.client import GenerationError, GenerationRequest
from letterdesk.app.models.common import ErrorCode
from letterdesk.app.models.form import FormData
from letterdesk.app.services.letters import generate_letter

LETTER_TEXT = (
    "To Whom It May Concern:\n\n"
    "I am writing to explain a gap in my employment history.\n\n"
    "BACKGROUND\n"
    "I cared for my mother after her surgery.\n\n"
    "Sincerely,\nJane Doe\n"
)


class RecordingGenerator:
    """Generator that records requests and returns fixed text."""

    name = "recording"

    def __init__(self, text: str = LETTER_TEXT) -> None:
        self.requests: list[GenerationRequest] = []
        self._text = text

    async def generate(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        return self._text


class BrokenGenerator:
    name = "broken"

    async def generate(self, request: GenerationRequest) -> str:
        raise GenerationError("provider down")


@pytest.mark.asyncio
async def test_generate_letter_returns_sections_and_raw_text(sample_form: FormData) -> None:
    generator = RecordingGenerator()

    result = await generate_letter(sample_form, [generator], date(2025, 6, 5))

    assert result.ok
    document = result.value
    assert document is not None
    assert document.raw_text == LETTER_TEXT
    assert [s.heading for s in document.sections] == ["To Whom It May Concern", "BACKGROUND"]
    assert "Jane Doe" in generator.requests[0].instruction


@pytest.mark.asyncio
async def test_generate_letter_passes_sampling_parameters(sample_form: FormData) -> None:
    generator = RecordingGenerator()

    await generate_letter(
        sample_form, [generator], date(2025, 6, 5), max_tokens=800, temperature=0.2
    )

    request = generator.requests[0]
    assert request.max_tokens == 800
    assert request.temperature == 0.2


@pytest.mark.asyncio
async def test_generate_letter_all_providers_fail(sample_form: FormData) -> None:
    """Provider failures become a GENERATION_ERROR result, not an exception."""
    result = await generate_letter(sample_form, [BrokenGenerator()], date(2025, 6, 5))

    assert not result.ok
    assert result.error == ErrorCode.GENERATION_ERROR
    assert result.message == "Failed to generate letter"
