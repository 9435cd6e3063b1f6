from .connection import CacheConnectionError, CacheError, RedisConnector
from .keys import derive_insights_key, derive_key
from .models import CacheStats, StoredInsightsRecord, StoredJobRecord
from .store import CacheOperationError, CacheResult, CacheStore

__all__ = [
    "CacheConnectionError",
    "CacheError",
    "CacheOperationError",
    "CacheResult",
    "CacheStats",
    "CacheStore",
    "RedisConnector",
    "StoredInsightsRecord",
    "StoredJobRecord",
    "derive_insights_key",
    "derive_key",
]
