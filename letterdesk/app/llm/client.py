"""Text-generation providers and the primary/fallback chain.

Security: Reads API keys from settings only, never hardcoded.
Two providers share one call shape so either can stand in for the other.
"""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

import httpx
from openai import AsyncOpenAI

from letterdesk.app.config import Settings, get_settings
from letterdesk.app.llm.prompts import SYSTEM_PROMPT
from letterdesk.app.utils.logging import StructuredGenerationLogger
from letterdesk.app.utils.metrics import PrometheusGenerationMetrics

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class GenerationError(Exception):
    """Text generation failed."""

    pass


@dataclass(frozen=True)
class GenerationRequest:
    """Provider-agnostic text-generation request."""

    instruction: str
    system_prompt: str = SYSTEM_PROMPT
    max_tokens: int = 1500
    temperature: float = 0.7


@dataclass(frozen=True)
class GenerationResult:
    """Generated text and the provider that produced it."""

    text: str
    provider: str


class TextGenerator(Protocol):
    """Protocol for text-generation provider implementations."""

    name: str

    async def generate(self, request: GenerationRequest) -> str:
        """Generate text for a request.

        Args:
            request: Instruction plus sampling parameters

        Returns:
            Generated text (stripped, non-empty)

        Raises:
            GenerationError: On missing credentials, transport or API errors,
                or an empty completion
        """
        ...


class OpenAIGenerator:
    """OpenAI-backed generator (primary provider)."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        timeout: float = 60.0,
        client: AsyncOpenAI | None = None,
    ):
        """Initialize OpenAI generator.

        Args:
            api_key: OpenAI API key (None when not configured)
            model: Model name to use (default: gpt-4o-mini for cost efficiency)
            timeout: Request timeout in seconds
            client: Optional preconfigured client (for testing)
        """
        self.model = model
        self._api_key = api_key
        self._client = client
        if self._client is None and api_key:
            self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def generate(self, request: GenerationRequest) -> str:
        """Generate text using the Chat Completions API."""
        if self._client is None:
            raise GenerationError("OpenAI API key not configured")

        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": request.system_prompt},
                    {"role": "user", "content": request.instruction},
                ],
                temperature=request.temperature,
                max_tokens=request.max_tokens,
            )
        except Exception as e:
            raise GenerationError(f"OpenAI API error: {e}") from e

        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise GenerationError("OpenAI returned empty response")
        return text


class AnthropicGenerator:
    """Anthropic Messages API generator (fallback provider)."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None,
        model: str = "claude-3-5-sonnet-20241022",
        base_url: str = "https://api.anthropic.com/v1",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize Anthropic generator.

        Args:
            api_key: Anthropic API key (None when not configured)
            model: Model name to use
            base_url: Messages API base URL
            timeout: Request timeout in seconds
            client: Optional httpx client (for testing with mocks)
        """
        self.model = model
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    async def generate(self, request: GenerationRequest) -> str:
        """Generate text using the Messages API."""
        if not self._api_key:
            raise GenerationError("Anthropic API key not configured")

        payload = {
            "model": self.model,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "system": request.system_prompt,
            "messages": [{"role": "user", "content": request.instruction}],
        }
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        try:
            response = await client.post(
                f"{self._base_url}/messages", json=payload, headers=headers
            )
            response.raise_for_status()
            data = response.json()
            # Response structure: {content: [{type: "text", text: "..."}], ...}
            text = "".join(
                block.get("text", "")
                for block in data.get("content", [])
                if block.get("type") == "text"
            ).strip()
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            raise GenerationError(f"Anthropic API error: {e}") from e
        finally:
            if close_client:
                await client.aclose()

        if not text:
            raise GenerationError("Anthropic returned empty response")
        return text


class DeterministicStubGenerator:
    """Deterministic stub generator for local development (no API key required)."""

    name = "stub"

    async def generate(self, request: GenerationRequest) -> str:
        """Return a fixed placeholder letter."""
        return (
            "To Whom It May Concern:\n\n"
            "This is a placeholder letter of explanation generated without a language model.\n\n"
            f"The instruction contained {len(request.instruction)} characters.\n\n"
            "Sincerely,"
        )


async def generate_with_fallback(
    generators: Sequence[TextGenerator],
    request: GenerationRequest,
) -> GenerationResult:
    """Try each generator once, in order, and return the first success.

    No retries or backoff beyond moving to the next provider.

    Args:
        generators: Providers in priority order
        request: Generation request

    Returns:
        GenerationResult with text and provider name

    Raises:
        GenerationError: If every provider failed (or none were given)
    """
    structured_logger = StructuredGenerationLogger()
    metrics = PrometheusGenerationMetrics()
    errors: list[str] = []

    for attempt, generator in enumerate(generators, start=1):
        start = time.perf_counter()
        try:
            text = await generator.generate(request)
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            structured_logger.log_attempt(generator.name, attempt, "error", latency_ms, str(e))
            metrics.record_latency(generator.name, "error", latency_ms)
            metrics.inc_error(generator.name)
            errors.append(f"{generator.name}: {e}")
            continue

        latency_ms = (time.perf_counter() - start) * 1000
        structured_logger.log_attempt(generator.name, attempt, "success", latency_ms)
        metrics.record_latency(generator.name, "success", latency_ms)
        return GenerationResult(text=text, provider=generator.name)

    if not errors:
        raise GenerationError("No text generation provider configured")
    raise GenerationError("All text generation providers failed: " + "; ".join(errors))


def build_generators(settings: Settings) -> list[TextGenerator]:
    """Build the provider chain from settings: OpenAI first, Anthropic second."""
    if settings.use_stub_generator:
        logger.warning("USE_STUB_GENERATOR is set, using deterministic stub generator")
        return [DeterministicStubGenerator()]

    openai_key = settings.openai_api_key.get_secret_value() if settings.openai_api_key else None
    anthropic_key = (
        settings.anthropic_api_key.get_secret_value() if settings.anthropic_api_key else None
    )

    return [
        OpenAIGenerator(
            api_key=openai_key,
            model=settings.openai_model,
            timeout=settings.provider_timeout_seconds,
        ),
        AnthropicGenerator(
            api_key=anthropic_key,
            model=settings.anthropic_model,
            base_url=settings.anthropic_base_url,
            timeout=settings.provider_timeout_seconds,
        ),
    ]


@lru_cache
def get_text_generators() -> list[TextGenerator]:
    """FastAPI dependency returning the configured provider chain."""
    return build_generators(get_settings())
