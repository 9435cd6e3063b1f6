from contextlib import asynccontextmanager
import logging

from app.cache.store import CacheStore
from app.core.config import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = CacheStore.from_settings(settings)
    app.state.cache_store = store
    logger.info("cache_store_ready ttl_hours=%s op_timeout_s=%s", settings.cache_ttl_hours, settings.cache_op_timeout_s)
    try:
        yield
    finally:
        await store.close()
        app.state.cache_store = None
