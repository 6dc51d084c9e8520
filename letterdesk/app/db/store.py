"""Document store factory and FastAPI dependency."""

import logging
from functools import lru_cache

from letterdesk.app.config import Settings, get_settings
from letterdesk.app.db.inmemory import InMemoryDocumentStore
from letterdesk.app.db.redis_store import RedisDocumentStore
from letterdesk.app.db.repositories import DocumentStore

logger = logging.getLogger(__name__)


def create_store_from_settings(settings: Settings) -> DocumentStore:
    """Create the document store selected by settings.

    Uses Redis when REDIS_URL is set, the process-local map otherwise.
    """
    if settings.redis_url:
        logger.info("Using Redis document store")
        return RedisDocumentStore.from_url(
            settings.redis_url, ttl_seconds=settings.document_ttl_seconds
        )

    logger.info("Using in-memory document store (single-instance only)")
    return InMemoryDocumentStore(ttl_seconds=settings.document_ttl_seconds)


@lru_cache
def get_document_store() -> DocumentStore:
    """Get the process-wide document store."""
    return create_store_from_settings(get_settings())
