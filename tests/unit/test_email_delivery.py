"""Tests for email delivery (Resend API mocked with httpx.MockTransport)."""

import base64
import json

import httpx
import pytest

from letterdesk.app.config import Settings
from letterdesk.app.models.common import ErrorCode
from letterdesk.app.services.email import LetterMailer, render_email_html

LETTER = "To Whom It May Concern:\n\nLetter body.\n\nSincerely,\nJane Doe"


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.mark.asyncio
async def test_send_letter_posts_email_with_pdf_attachment() -> None:
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email_123"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    mailer = LetterMailer(make_settings(resend_api_key="re_test"), client=client)

    result = await mailer.send_letter("jane@example.com", LETTER, "Jane Doe")

    assert result.ok
    assert result.value == "email_123"
    assert captured["url"] == "https://api.resend.com/emails"
    assert captured["auth"] == "Bearer re_test"

    body = captured["body"]
    assert body["to"] == ["jane@example.com"]
    assert "Letter body." in body["text"]
    attachment = body["attachments"][0]
    assert attachment["filename"].startswith("immigration_letter_jane_doe_")
    assert attachment["filename"].endswith(".pdf")
    assert base64.b64decode(attachment["content"]).startswith(b"%PDF")

    await client.aclose()


@pytest.mark.asyncio
async def test_send_letter_without_key_is_not_configured() -> None:
    mailer = LetterMailer(make_settings())

    result = await mailer.send_letter("jane@example.com", LETTER, "Jane Doe")

    assert result.error == ErrorCode.EMAIL_NOT_CONFIGURED


@pytest.mark.asyncio
async def test_send_letter_rejects_invalid_address() -> None:
    mailer = LetterMailer(make_settings(resend_api_key="re_test"))

    result = await mailer.send_letter("not-an-email", LETTER, "Jane Doe")

    assert result.error == ErrorCode.VALIDATION_ERROR


@pytest.mark.asyncio
async def test_send_letter_provider_error_is_reported() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"message": "invalid from address"})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    mailer = LetterMailer(make_settings(resend_api_key="re_test"), client=client)

    result = await mailer.send_letter("jane@example.com", LETTER, "Jane Doe")

    assert not result.ok
    assert result.error == ErrorCode.EMAIL_SEND_ERROR

    await client.aclose()


def test_render_email_html_escapes_letter_text() -> None:
    html = render_email_html("Jane <Doe>", "Salary > $500 & bonus", 2025)

    assert "Jane &lt;Doe&gt;" in html
    assert "Salary &gt; $500 &amp; bonus" in html
