"""Payment endpoints - checkout session creation and Stripe webhook."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import Field

from letterdesk.app.api.envelope import api_error, api_success, result_error
from letterdesk.app.config import Settings, get_settings
from letterdesk.app.db.repositories import DOCUMENT_ID_PREFIX, DocumentStore
from letterdesk.app.db.store import get_document_store
from letterdesk.app.models.common import CamelModel, ErrorCode
from letterdesk.app.services.email import LetterMailer, get_letter_mailer
from letterdesk.app.services.payments import (
    InvalidSignatureError,
    WebhookNotConfiguredError,
    create_checkout_session,
    handle_payment_confirmation,
    verify_webhook_event,
)

router = APIRouter(prefix="/api/stripe", tags=["payments"])
logger = logging.getLogger(__name__)


class CreateCheckoutRequest(CamelModel):
    """Request body for POST /api/stripe/create-checkout."""

    document_id: str = Field(..., min_length=20, pattern=f"^{DOCUMENT_ID_PREFIX}")


@router.post("/create-checkout")
def create_checkout(
    request: CreateCheckoutRequest,
    store: Annotated[DocumentStore, Depends(get_document_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    """Start a payment for an unpaid document.

    Runs in the threadpool because the Stripe SDK call is blocking.

    Returns:
        Envelope with sessionId and url, 404 for unknown documents,
        400 ALREADY_PAID for documents that are already unlocked
    """
    existing = store.read(request.document_id)
    if not existing.ok or existing.value is None:
        return result_error(existing)
    if existing.value.is_paid:
        return api_error("Document has already been paid for", ErrorCode.ALREADY_PAID)

    result = create_checkout_session(request.document_id, settings)
    if not result.ok or result.value is None:
        return result_error(result)

    return api_success({"sessionId": result.value.session_id, "url": result.value.url})


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    store: Annotated[DocumentStore, Depends(get_document_store)],
    settings: Annotated[Settings, Depends(get_settings)],
    mailer: Annotated[LetterMailer, Depends(get_letter_mailer)],
    stripe_signature: Annotated[str | None, Header(alias="stripe-signature")] = None,
) -> JSONResponse:
    """Receive payment notifications.

    Signature failures are rejected with 400. Once verified, every event is
    acknowledged with 200 regardless of its processing outcome so the
    provider does not retry.
    """
    payload = await request.body()

    try:
        event = verify_webhook_event(payload, stripe_signature, settings)
    except InvalidSignatureError as e:
        logger.warning(f"Webhook signature verification failed: {e}")
        return api_error("Invalid signature", ErrorCode.INVALID_SIGNATURE)
    except WebhookNotConfiguredError:
        logger.error("STRIPE_WEBHOOK_SECRET is not configured")
        return api_error("Webhook not configured", ErrorCode.PAYMENT_NOT_CONFIGURED)

    outcome = await handle_payment_confirmation(event, store, mailer)
    logger.info(f"Webhook event {event.get('id')} processed: {outcome}")
    return api_success({"received": True})
