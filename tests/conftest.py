"""Shared pytest fixtures for all test suites."""

from collections.abc import Iterator
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from letterdesk.app.config import Settings, get_settings
from letterdesk.app.db.inmemory import InMemoryDocumentStore
from letterdesk.app.db.store import get_document_store
from letterdesk.app.llm.client import get_text_generators
from letterdesk.app.main import app
from letterdesk.app.models.common import Result
from letterdesk.app.models.document import DocumentRecord, DocumentSection
from letterdesk.app.models.form import FormData
from letterdesk.app.services.email import get_letter_mailer

SAMPLE_LETTER = (
    "June 5, 2025\n"
    "\n"
    "To Whom It May Concern:\n"
    "\n"
    "I am writing to explain the gap in my employment history between 2021 and 2022.\n"
    "\n"
    "BACKGROUND\n"
    "During this period I cared for my mother while she recovered from surgery.\n"
    "\n"
    "Sincerely,\n"
    "Jane Doe\n"
)


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 6, 5, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def form_payload() -> dict:
    """Camel-cased form answers as the browser sends them."""
    return {
        "aboutYou": {
            "fullName": "Jane Doe",
            "citizenshipCountry": "Canada",
            "currentCountry": "United States",
        },
        "applicationContext": {
            "applicationType": "visa",
            "targetCountry": "United Kingdom",
        },
        "explanation": {
            "mainExplanation": (
                "I had a twelve month gap in employment because I was caring for a "
                "family member after surgery."
            ),
        },
        "tone": "formal",
    }


@pytest.fixture
def sample_form(form_payload: dict) -> FormData:
    """Validated form answers."""
    return FormData.model_validate(form_payload)


@pytest.fixture
def sample_record(sample_form: FormData) -> DocumentRecord:
    """Unpaid record holding a short letter."""
    return DocumentRecord(
        sections=[DocumentSection(heading="Letter", content=SAMPLE_LETTER)],
        raw_text=SAMPLE_LETTER,
        generated_at=datetime(2025, 6, 5, 12, 0, 0),
        form_data=sample_form,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at a fixed instant."""
    return FakeClock()


class FixedTextGenerator:
    """Generator that always returns the sample letter."""

    name = "fixed"

    async def generate(self, request) -> str:
        return SAMPLE_LETTER


@pytest.fixture
def memory_store(clock: FakeClock) -> InMemoryDocumentStore:
    """Empty in-memory store on the fake clock."""
    return InMemoryDocumentStore(clock=clock)


@pytest.fixture
def api_settings() -> Settings:
    """Settings with payments configured and no outside credentials."""
    return Settings(
        _env_file=None,
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret="whsec_test_secret",
        stripe_price_id="price_123",
        app_url="https://letters.example.com",
    )


@pytest.fixture
def mock_mailer() -> MagicMock:
    """Mailer whose sends always succeed."""
    mailer = MagicMock()
    mailer.send_letter = AsyncMock(return_value=Result.success("email_123"))
    return mailer


@pytest.fixture
def client(
    memory_store: InMemoryDocumentStore, api_settings: Settings, mock_mailer: MagicMock
) -> Iterator[TestClient]:
    """Test client with store, providers, settings and mailer overridden."""
    app.dependency_overrides[get_document_store] = lambda: memory_store
    app.dependency_overrides[get_text_generators] = lambda: [FixedTextGenerator()]
    app.dependency_overrides[get_settings] = lambda: api_settings
    app.dependency_overrides[get_letter_mailer] = lambda: mock_mailer

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()
