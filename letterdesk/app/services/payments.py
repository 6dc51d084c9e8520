"""Stripe checkout sessions and payment confirmation handling."""

import json
import logging
from dataclasses import dataclass
from typing import Any

import stripe

from letterdesk.app.config import Settings
from letterdesk.app.db.repositories import DocumentStore
from letterdesk.app.models.common import ErrorCode, Result
from letterdesk.app.services.email import LetterMailer
from letterdesk.app.utils.metrics import payment_confirmations_total

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
SIGNATURE_TOLERANCE_SECONDS = 300


class InvalidSignatureError(Exception):
    """Webhook payload failed signature verification."""

    pass


class WebhookNotConfiguredError(Exception):
    """Webhook secret is not configured."""

    pass


@dataclass(frozen=True)
class CheckoutSession:
    """Created checkout session."""

    session_id: str
    url: str | None


def create_checkout_session(document_id: str, settings: Settings) -> Result[CheckoutSession]:
    """Create a one-item payment session for a document.

    Args:
        document_id: Document being purchased (carried in session metadata)
        settings: Application settings (Stripe key, price, app URL)

    Returns:
        Result carrying the session, or PAYMENT_NOT_CONFIGURED / PAYMENT_ERROR
    """
    secret_key = (
        settings.stripe_secret_key.get_secret_value() if settings.stripe_secret_key else ""
    )
    missing = [
        name
        for name, value in (
            ("STRIPE_SECRET_KEY", secret_key),
            ("STRIPE_PRICE_ID", settings.stripe_price_id),
            ("APP_URL", settings.app_url),
        )
        if not value
    ]
    if missing:
        logger.error(f"Payment system not configured, missing: {', '.join(missing)}")
        return Result.failure(ErrorCode.PAYMENT_NOT_CONFIGURED, "Payment system not configured")

    app_url = settings.app_url.rstrip("/")
    logger.info(f"Creating Stripe checkout session for {document_id}")

    try:
        session = stripe.checkout.Session.create(
            api_key=secret_key.strip(),
            payment_method_types=["card"],
            line_items=[{"price": settings.stripe_price_id, "quantity": 1}],
            mode="payment",
            success_url=(
                f"{app_url}/editor?session_id={{CHECKOUT_SESSION_ID}}&documentId={document_id}"
            ),
            cancel_url=f"{app_url}/preview?documentId={document_id}",
            metadata={"documentId": document_id},
        )
    except stripe.StripeError as e:
        logger.error(f"Stripe API error during checkout creation: {e}")
        return Result.failure(ErrorCode.PAYMENT_ERROR, "Failed to create checkout session")

    logger.info(f"Stripe checkout session created: {session.id} for {document_id}")
    return Result.success(CheckoutSession(session_id=session.id, url=session.url))


def verify_webhook_event(
    payload: bytes, signature: str | None, settings: Settings
) -> dict[str, Any]:
    """Verify a webhook signature and decode the event.

    Args:
        payload: Raw request body
        signature: Stripe-Signature header value
        settings: Application settings (webhook secret)

    Returns:
        Decoded event dict

    Raises:
        WebhookNotConfiguredError: If no webhook secret is configured
        InvalidSignatureError: If the signature is missing or invalid
    """
    if not signature:
        raise InvalidSignatureError("No signature provided")

    secret = settings.stripe_webhook_secret
    if secret is None or not secret.get_secret_value():
        raise WebhookNotConfiguredError("Webhook not configured")

    body = payload.decode("utf-8", errors="replace")
    try:
        stripe.WebhookSignature.verify_header(
            body, signature, secret.get_secret_value(), SIGNATURE_TOLERANCE_SECONDS
        )
        event = json.loads(body)
    except (stripe.SignatureVerificationError, ValueError) as e:
        raise InvalidSignatureError(str(e)) from e

    if not isinstance(event, dict):
        raise InvalidSignatureError("Event payload is not an object")
    return event


async def handle_payment_confirmation(
    event: dict[str, Any],
    store: DocumentStore,
    mailer: LetterMailer | None = None,
) -> str:
    """Apply a verified payment event to the document store.

    Never raises and never recreates a record: storage misses are logged and
    reported through the returned outcome so the event can still be
    acknowledged.

    Args:
        event: Verified webhook event
        store: Document store
        mailer: Optional mailer for best-effort delivery to the payer

    Returns:
        Outcome label: unlocked, already_unlocked, missing_document_id,
        document_not_found, storage_error, ignored
    """
    event_type = event.get("type")
    logger.info(f"Webhook received: type={event_type}, id={event.get('id')}")

    if event_type != CHECKOUT_COMPLETED:
        payment_confirmations_total.labels(outcome="ignored").inc()
        return "ignored"

    session = (event.get("data") or {}).get("object") or {}
    document_id = (session.get("metadata") or {}).get("documentId")

    if not document_id:
        logger.warning(f"Webhook missing documentId in metadata (session={session.get('id')})")
        payment_confirmations_total.labels(outcome="missing_document_id").inc()
        return "missing_document_id"

    # Only the unpaid-to-paid transition emails the payer; redeliveries do not
    previous = store.read(document_id)
    was_paid = previous.ok and previous.value is not None and previous.value.is_paid

    result = store.mark_paid(document_id)
    if not result.ok:
        logger.error(
            "Failed to mark document as paid",
            extra={
                "structured": {
                    "document_id": document_id,
                    "session_id": session.get("id"),
                    "error": result.message,
                }
            },
        )
        outcome = (
            "document_not_found"
            if result.error == ErrorCode.DOCUMENT_NOT_FOUND
            else "storage_error"
        )
        payment_confirmations_total.labels(outcome=outcome).inc()
        return outcome

    if was_paid:
        logger.info(
            f"Duplicate payment confirmation for {document_id} (event={event.get('id')})"
        )
        payment_confirmations_total.labels(outcome="already_unlocked").inc()
        return "already_unlocked"

    logger.info(
        "Payment confirmed, document unlocked",
        extra={
            "structured": {
                "document_id": document_id,
                "session_id": session.get("id"),
                "amount": session.get("amount_total"),
                "currency": session.get("currency"),
            }
        },
    )
    payment_confirmations_total.labels(outcome="unlocked").inc()

    email = (session.get("customer_details") or {}).get("email")
    if email and mailer is not None:
        await _send_purchased_letter(document_id, email, store, mailer)

    return "unlocked"


async def _send_purchased_letter(
    document_id: str, email: str, store: DocumentStore, mailer: LetterMailer
) -> None:
    """Best-effort delivery; failures are logged only."""
    try:
        doc = store.read(document_id)
        if not doc.ok or doc.value is None:
            logger.warning(f"Document {document_id} vanished before email delivery")
            return

        sent = await mailer.send_letter(email, doc.value.raw_text, doc.value.display_name)
        if not sent.ok:
            logger.warning(f"Post-payment email not sent for {document_id}: {sent.message}")
    except Exception:
        logger.exception(f"Post-payment email failed for {document_id}")
