"""Email delivery of finished letters via the Resend REST API."""

import base64
import logging
from datetime import date
from html import escape

import httpx

from letterdesk.app.config import Settings, get_settings
from letterdesk.app.models.common import ErrorCode, Result
from letterdesk.app.services.pdf import export_letter_pdf, pdf_filename

logger = logging.getLogger(__name__)

SUBJECT = "Your Immigration Explanation Letter"
SUPPORT_ADDRESS = "immigrationexplanationletter@gmail.com"
DISCLAIMER = (
    "This letter is for informational purposes only and does not constitute legal advice. "
    "For legal guidance, please consult with a qualified immigration attorney."
)


def render_email_html(display_name: str, document_text: str, year: int) -> str:
    """Build the HTML body."""
    return f"""<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <h1 style="background: #6366f1; color: white; padding: 20px; text-align: center;">
      Your Immigration Letter is Ready
    </h1>
    <p>Hello {escape(display_name)},</p>
    <p>Thank you for your purchase! Your personalized immigration explanation letter is
    attached as a PDF and included below.</p>
    <div style="white-space: pre-wrap; font-family: Georgia, serif; border: 1px solid #d1d5db;
    padding: 30px;">{escape(document_text)}</div>
    <p><strong>Next Steps:</strong></p>
    <ol>
      <li>Review the letter carefully</li>
      <li>Make any final edits as needed</li>
      <li>Submit with your immigration application</li>
    </ol>
    <p style="font-size: 14px; color: #6b7280;"><strong>Important:</strong> {DISCLAIMER}</p>
    <p style="font-size: 12px; color: #6b7280; text-align: center;">
      Need help? Contact us at <a href="mailto:{SUPPORT_ADDRESS}">{SUPPORT_ADDRESS}</a><br>
      &copy; {year} Immigration Explanation Letter. All rights reserved.
    </p>
  </div>
</body>
</html>"""


def render_email_text(display_name: str, document_text: str, year: int) -> str:
    """Build the plain-text body."""
    return (
        "Your Immigration Letter is Ready\n\n"
        f"Hello {display_name},\n\n"
        "Thank you for your purchase! Your personalized immigration explanation letter "
        "is attached as a PDF and included below.\n\n"
        "----- YOUR LETTER -----\n\n"
        f"{document_text}\n\n"
        "----- END OF LETTER -----\n\n"
        "Next Steps:\n"
        "1. Review the letter carefully\n"
        "2. Make any final edits as needed\n"
        "3. Submit with your immigration application\n\n"
        f"IMPORTANT: {DISCLAIMER}\n\n"
        f"Need help? Contact us at {SUPPORT_ADDRESS}\n\n"
        f"(c) {year} Immigration Explanation Letter"
    )


class LetterMailer:
    """Sends finished letters with a PDF attachment."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        """Initialize mailer.

        Args:
            settings: Application settings (Resend key, sender, filename prefix)
            client: Optional httpx client (for testing with mocks)
        """
        self._settings = settings
        self._client = client

    async def send_letter(
        self, to: str, document_text: str, display_name: str
    ) -> Result[str]:
        """Email a letter to the applicant.

        Args:
            to: Recipient address
            document_text: Final letter text
            display_name: Applicant name for greeting and filename

        Returns:
            Result carrying the provider message id
        """
        if not to or "@" not in to:
            return Result.failure(ErrorCode.VALIDATION_ERROR, "Invalid email address")

        api_key = self._settings.resend_api_key
        if api_key is None or not api_key.get_secret_value():
            logger.error("Resend API key not configured")
            return Result.failure(ErrorCode.EMAIL_NOT_CONFIGURED, "Email service not configured")

        pdf = export_letter_pdf(document_text, display_name)
        if not pdf.ok or pdf.value is None:
            return Result.failure(ErrorCode.EMAIL_SEND_ERROR, "Failed to build PDF attachment")

        today = date.today()
        payload = {
            "from": self._settings.email_from,
            "to": [to],
            "subject": SUBJECT,
            "html": render_email_html(display_name, document_text, today.year),
            "text": render_email_text(display_name, document_text, today.year),
            "attachments": [
                {
                    "filename": pdf_filename(
                        display_name, today, prefix=self._settings.pdf_filename_prefix
                    ),
                    "content": base64.b64encode(pdf.value).decode("ascii"),
                }
            ],
        }
        headers = {"Authorization": f"Bearer {api_key.get_secret_value()}"}

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=15.0)
            close_client = True

        logger.info(f"Sending letter email to {to}")
        try:
            response = await client.post(
                f"{self._settings.resend_base_url.rstrip('/')}/emails",
                json=payload,
                headers=headers,
            )
            response.raise_for_status()
            email_id = response.json().get("id") or "unknown"
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to send email via Resend: {e}")
            return Result.failure(ErrorCode.EMAIL_SEND_ERROR, "Failed to send email")
        finally:
            if close_client:
                await client.aclose()

        logger.info(f"Email sent successfully: {email_id}")
        return Result.success(email_id)


def get_letter_mailer() -> LetterMailer:
    """FastAPI dependency returning a mailer bound to current settings."""
    return LetterMailer(get_settings())
