from __future__ import annotations

import asyncio
import logging
from typing import Callable
from urllib.parse import urlparse

from redis.asyncio import Redis
from redis.asyncio.retry import Retry
from redis.backoff import ConstantBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError

logger = logging.getLogger(__name__)


class CacheError(Exception):
    pass


class CacheConnectionError(CacheError):
    """The store could not be reached (or refused auth) within the retry ceiling."""


def _describe_url(url: str) -> tuple[str, bool]:
    parsed = urlparse(url)
    host = parsed.hostname or "localhost"
    port = parsed.port or 6379
    return f"{host}:{port}", bool(parsed.password)


def _consume_connect_result(task: asyncio.Task) -> None:
    # Failures are logged by _connect; mark them retrieved.
    if not task.cancelled():
        task.exception()


class RedisConnector:
    """Owns the single process-wide connection to the key-value store.

    The client is created lazily on first use. Concurrent first callers share
    one in-flight connection task, so at most one client is ever live. When
    connecting fails the connector drops back to its uninitialized state and
    the next call starts over.

    Transport reconnects use a constant 1 second backoff with a ceiling of
    ``max_retries`` attempts; past the ceiling the command raises and callers
    see the failure instead of waiting.
    """

    def __init__(
        self,
        url: str,
        *,
        max_retries: int = 3,
        retry_delay_s: float = 1.0,
        socket_timeout_s: float = 2.0,
        client_factory: Callable[[], Redis] | None = None,
    ):
        self._url = url
        self._max_retries = max_retries
        self._retry_delay_s = retry_delay_s
        self._socket_timeout_s = socket_timeout_s
        self._client_factory = client_factory or self._build_client
        self._client: Redis | None = None
        self._pending: asyncio.Task[Redis] | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _build_client(self) -> Redis:
        retry = Retry(ConstantBackoff(self._retry_delay_s), retries=self._max_retries)
        return Redis.from_url(
            self._url,
            decode_responses=True,
            socket_timeout=self._socket_timeout_s,
            socket_connect_timeout=self._socket_timeout_s,
            retry=retry,
            retry_on_error=[RedisConnectionError, RedisTimeoutError],
        )

    async def get_client(self) -> Redis:
        if self._client is not None:
            return self._client

        if self._pending is None:
            self._pending = asyncio.get_running_loop().create_task(self._connect())
            self._pending.add_done_callback(_consume_connect_result)
        pending = self._pending

        try:
            return await asyncio.shield(pending)
        finally:
            if pending.done() and self._pending is pending:
                self._pending = None

    async def _connect(self) -> Redis:
        address, auth = _describe_url(self._url)
        logger.info("cache_connecting address=%s auth=%s", address, "enabled" if auth else "disabled")
        client = self._client_factory()
        try:
            await client.ping()
        except asyncio.CancelledError:
            await self._discard(client)
            raise
        except (RedisError, OSError) as exc:
            self._release_pending()
            logger.error("cache_connect_failed address=%s: %s", address, exc)
            logger.error(
                "cache_connect_gave_up address=%s retries=%s delay_s=%s",
                address,
                self._max_retries,
                self._retry_delay_s,
            )
            await self._discard(client)
            raise CacheConnectionError(f"Unable to connect to cache at {address}") from exc

        self._release_pending()
        self._client = client
        logger.info("cache_connected address=%s", address)
        return client

    def _release_pending(self) -> None:
        if self._pending is asyncio.current_task():
            self._pending = None

    async def _discard(self, client: Redis) -> None:
        try:
            await client.aclose()
        except (RedisError, OSError):
            logger.debug("cache_close_after_failure_failed", exc_info=True)

    async def close(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None and not pending.done():
            pending.cancel()

        client = self._client
        self._client = None
        if client is None:
            return
        try:
            await client.aclose()
            logger.info("cache_connection_closed")
        except (RedisError, OSError) as exc:
            logger.warning("cache_connection_close_failed: %s", exc)
