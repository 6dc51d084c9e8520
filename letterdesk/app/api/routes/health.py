"""Health check endpoints.

- Checks document store connectivity
- Reports which text-generation providers have keys configured
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from letterdesk.app.config import Settings, get_settings
from letterdesk.app.db.repositories import DocumentStore
from letterdesk.app.db.store import get_document_store

router = APIRouter()


def check_providers(settings: Settings) -> dict[str, str]:
    """Report provider configuration without calling out."""
    if settings.use_stub_generator:
        return {"stub": "ok"}

    def configured(key: Any) -> str:
        return "configured" if key is not None and key.get_secret_value() else "not_configured"

    return {
        "openai": configured(settings.openai_api_key),
        "anthropic": configured(settings.anthropic_api_key),
    }


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple liveness check.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    store: Annotated[DocumentStore, Depends(get_document_store)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any] | JSONResponse:
    """Readiness check.

    Returns:
        200 with component status if the store is reachable
        503 if the store is down
    """
    store_ok, store_status = store.ping()

    response_body = {
        "status": "ok" if store_ok else "degraded",
        "components": {
            "store": store_status,
            "providers": check_providers(settings),
        },
    }

    if not store_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
