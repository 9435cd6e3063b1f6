from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Generic, Mapping, TypeVar

from pydantic import BaseModel, ValidationError
from redis.asyncio import Redis

from app.cache.connection import CacheConnectionError, CacheError, RedisConnector
from app.cache.keys import (
    INSIGHTS_NAMESPACE,
    JOB_NAMESPACE,
    derive_key,
    insights_cache_key,
    job_cache_key,
)
from app.cache.models import CacheStats, StoredInsightsRecord, StoredJobRecord

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")
RecordT = TypeVar("RecordT", bound=BaseModel)

DEFAULT_TTL_HOURS = 720.0
_MEMORY_HUMAN_RE = re.compile(r"used_memory_human:([^\r\n]+)")


class CacheOperationError(CacheError):
    """A get/set/scan failed after a client was obtained."""


@dataclass(frozen=True)
class CacheResult(Generic[T]):
    value: T | None = None
    error: CacheError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _log_key(key: str) -> str:
    namespace, _, digest = key.partition(":")
    return f"{namespace}:{digest[:12]}"


def _parse_memory_usage(info: Any) -> str | None:
    if isinstance(info, Mapping):
        value = info.get("used_memory_human")
        return str(value).strip() if value not in (None, "") else None
    if isinstance(info, bytes):
        info = info.decode("utf-8", errors="replace")
    if isinstance(info, str):
        match = _MEMORY_HUMAN_RE.search(info)
        return match.group(1).strip() if match else None
    return None


class CacheStore:
    """Job-posting and insights cache on top of a shared :class:`RedisConnector`.

    Every public method is fail-open: a store that is down, slow, or holding a
    record it cannot parse behaves like an empty cache. Raw store calls return a
    :class:`CacheResult`; only the public layer turns errors into misses, so the
    logs keep ``cache_miss`` and ``cache_degraded`` apart.
    """

    def __init__(
        self,
        connector: RedisConnector,
        *,
        default_ttl_hours: float = DEFAULT_TTL_HOURS,
        op_timeout_s: float = 2.0,
        stats_timeout_s: float = 10.0,
        scan_count: int = 500,
    ):
        self._connector = connector
        self._default_ttl_hours = default_ttl_hours
        self._op_timeout_s = op_timeout_s
        self._stats_timeout_s = stats_timeout_s
        self._scan_count = scan_count

    @classmethod
    def from_settings(cls, settings: Settings) -> CacheStore:
        connector = RedisConnector(
            settings.resolved_redis_url(),
            max_retries=settings.cache_connect_retries,
            retry_delay_s=settings.cache_retry_delay_s,
            socket_timeout_s=settings.cache_op_timeout_s,
        )
        return cls(
            connector,
            default_ttl_hours=settings.cache_ttl_hours,
            op_timeout_s=settings.cache_op_timeout_s,
            stats_timeout_s=settings.cache_stats_timeout_s,
            scan_count=settings.cache_stats_scan_count,
        )

    @property
    def connector(self) -> RedisConnector:
        return self._connector

    async def _run(
        self,
        op: str,
        action: Callable[[Redis], Awaitable[T]],
        *,
        timeout_s: float | None = None,
    ) -> CacheResult[T]:
        # The deadline covers both waiting for the client and the command.
        # A connect that outlives it keeps running for the next caller.
        timeout = self._op_timeout_s if timeout_s is None else timeout_s
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        try:
            client = await asyncio.wait_for(self._connector.get_client(), timeout=timeout)
        except asyncio.TimeoutError:
            return CacheResult(error=CacheConnectionError(f"client not ready after {timeout}s"))
        except CacheError as exc:
            return CacheResult(error=exc)
        except Exception as exc:  # noqa: BLE001 - cache must never break the request
            return CacheResult(error=CacheError(f"client unavailable: {exc}"))

        remaining = deadline - loop.time()
        if remaining <= 0:
            return CacheResult(error=CacheOperationError(f"{op} timed out after {timeout}s"))
        try:
            value = await asyncio.wait_for(action(client), timeout=remaining)
        except asyncio.TimeoutError:
            return CacheResult(error=CacheOperationError(f"{op} timed out after {timeout}s"))
        except Exception as exc:  # noqa: BLE001 - cache must never break the request
            return CacheResult(error=CacheOperationError(f"{op} failed: {exc}"))
        return CacheResult(value=value)

    async def _read(self, key: str, model: type[RecordT]) -> RecordT | None:
        result = await self._run("get", lambda client: client.get(key))
        if not result.ok:
            logger.warning("cache_degraded op=get key=%s: %s", _log_key(key), result.error)
            return None
        if result.value is None:
            logger.info("cache_miss key=%s", _log_key(key))
            return None
        try:
            record = model.model_validate_json(result.value)
        except ValidationError as exc:
            logger.warning(
                "cache_record_invalid key=%s errors=%s", _log_key(key), exc.error_count()
            )
            return None
        logger.info("cache_hit key=%s", _log_key(key))
        return record

    async def _write(self, key: str, build_record: Callable[[], BaseModel], ttl_hours: float | None) -> None:
        hours = self._default_ttl_hours if ttl_hours is None else ttl_hours
        ttl_seconds = round(hours * 3600)
        if ttl_seconds <= 0:
            logger.info("cache_write_skipped key=%s reason=expired ttl_hours=%s", _log_key(key), hours)
            return

        try:
            serialized = build_record().model_dump_json(by_alias=True)
        except (TypeError, ValueError) as exc:
            logger.warning("cache_degraded op=serialize key=%s: %s", _log_key(key), exc)
            return

        result = await self._run("set", lambda client: client.set(key, serialized, ex=ttl_seconds))
        if not result.ok:
            logger.warning("cache_degraded op=set key=%s: %s", _log_key(key), result.error)
            return
        logger.info("cache_stored key=%s ttl_hours=%s", _log_key(key), hours)

    async def get_job_posting(self, url: str) -> StoredJobRecord | None:
        return await self._read(job_cache_key(url), StoredJobRecord)

    async def set_job_posting(self, url: str, payload: str, ttl_hours: float | None = None) -> None:
        await self._write(
            job_cache_key(url),
            lambda: StoredJobRecord(payload=payload, recorded_at=_utc_now(), source_hash=derive_key(url)),
            ttl_hours,
        )

    async def get_insights(self, analysis_hash: str) -> StoredInsightsRecord | None:
        return await self._read(insights_cache_key(analysis_hash), StoredInsightsRecord)

    async def set_insights(self, analysis_hash: str, payload: Any, ttl_hours: float | None = None) -> None:
        await self._write(
            insights_cache_key(analysis_hash),
            lambda: StoredInsightsRecord(payload=payload, generated_at=_utc_now()),
            ttl_hours,
        )

    async def get_stats(self) -> CacheStats:
        """Count cached records per namespace.

        This walks every key in the store (SCAN, not KEYS, so the server is
        never blocked), which is O(total keys). Fine for a monitoring endpoint
        over 30-day job postings; do not poll it at high frequency.
        """

        async def count_keys(client: Redis) -> tuple[int, int, int]:
            total = jobs = insights = 0
            async for key in client.scan_iter(count=self._scan_count):
                if isinstance(key, bytes):
                    key = key.decode("utf-8", errors="replace")
                total += 1
                if key.startswith(f"{JOB_NAMESPACE}:"):
                    jobs += 1
                elif key.startswith(f"{INSIGHTS_NAMESPACE}:"):
                    insights += 1
            return total, jobs, insights

        counts = await self._run("scan", count_keys, timeout_s=self._stats_timeout_s)
        if not counts.ok or counts.value is None:
            logger.warning("cache_degraded op=stats: %s", counts.error)
            return CacheStats()

        total, jobs, insights = counts.value
        memory = await self._run("info", lambda client: client.info("memory"))
        memory_usage = None
        if memory.ok:
            memory_usage = _parse_memory_usage(memory.value)
        else:
            logger.debug("cache_memory_info_unavailable: %s", memory.error)

        return CacheStats(
            total_entries=total,
            job_postings=jobs,
            insights=insights,
            memory_usage=memory_usage,
        )

    async def ping(self) -> bool:
        result = await self._run("ping", lambda client: client.ping())
        if not result.ok:
            logger.debug("cache_ping_failed: %s", result.error)
            return False
        return bool(result.value)

    async def close(self) -> None:
        await self._connector.close()
