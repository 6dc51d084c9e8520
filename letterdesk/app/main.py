"""FastAPI application."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from letterdesk.app.api.envelope import register_exception_handlers
from letterdesk.app.api.routes.checkout import router as checkout_router
from letterdesk.app.api.routes.documents import router as documents_router
from letterdesk.app.api.routes.export import router as export_router
from letterdesk.app.api.routes.generate import router as generate_router
from letterdesk.app.api.routes.health import router as health_router
from letterdesk.app.api.routes.metrics import router as metrics_router
from letterdesk.app.config import get_settings
from letterdesk.app.db.repositories import DocumentStore
from letterdesk.app.db.store import get_document_store
from letterdesk.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)

API_TITLE = "Letter of Explanation API"
API_VERSION = "0.1.0"


async def sweep_expired_documents(store: DocumentStore, interval_seconds: float) -> None:
    """Periodically drop expired documents until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = store.purge_expired()
        except Exception:
            logger.exception("Expired document sweep failed")
            continue
        if removed:
            logger.info(f"Expired document sweep removed {removed} document(s)")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    configure_logging(settings.log_level)

    store = get_document_store()
    sweeper = asyncio.create_task(
        sweep_expired_documents(store, settings.document_sweep_interval_seconds)
    )
    logger.info(f"{API_TITLE} started")
    try:
        yield
    finally:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper


app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(generate_router)
app.include_router(documents_router)
app.include_router(checkout_router)
app.include_router(export_router)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": API_TITLE, "version": API_VERSION}
