from __future__ import annotations

from fastapi import Request

from app.cache.store import CacheStore
from app.core.config import settings


def get_cache_store(request: Request) -> CacheStore:
    store = getattr(request.app.state, "cache_store", None)
    if store is None:
        # Lifespan did not run (e.g. a bare TestClient); build the store once on the app.
        store = CacheStore.from_settings(settings)
        request.app.state.cache_store = store
    return store
