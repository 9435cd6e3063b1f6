from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import quote

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    redis_url: str | None
    redis_host: str
    redis_port: int
    redis_password: str | None
    cache_ttl_hours: float
    cache_op_timeout_s: float
    cache_connect_retries: int
    cache_retry_delay_s: float
    cache_stats_scan_count: int
    cache_stats_timeout_s: float
    jina_reader_base_url: str
    jina_api_key: str | None
    scrape_timeout_s: float

    def resolved_redis_url(self) -> str:
        if self.redis_url:
            return self.redis_url
        if self.redis_password:
            return f"redis://:{quote(self.redis_password, safe='')}@{self.redis_host}:{self.redis_port}"
        return f"redis://{self.redis_host}:{self.redis_port}"


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "https://www.alignmyresume.com",
            "https://alignmyresume.com",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX", r"^https:\/\/[a-z0-9-]+-.*\.vercel\.app$"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    redis_url=_get_env("REDIS_URL"),
    redis_host=_get_env("REDIS_HOST", "localhost") or "localhost",
    redis_port=_get_env_int("REDIS_PORT", 6379),
    redis_password=_get_env("REDIS_PASSWORD"),
    cache_ttl_hours=_get_env_float("CACHE_TTL_HOURS", 720.0),
    cache_op_timeout_s=_get_env_float("CACHE_OP_TIMEOUT_S", 2.0),
    cache_connect_retries=_get_env_int("CACHE_CONNECT_RETRIES", 3),
    cache_retry_delay_s=_get_env_float("CACHE_RETRY_DELAY_S", 1.0),
    cache_stats_scan_count=_get_env_int("CACHE_STATS_SCAN_COUNT", 500),
    cache_stats_timeout_s=_get_env_float("CACHE_STATS_TIMEOUT_S", 10.0),
    jina_reader_base_url=(_get_env("JINA_READER_BASE_URL", "https://r.jina.ai") or "https://r.jina.ai").rstrip("/"),
    jina_api_key=_get_env("JINA_API_KEY"),
    scrape_timeout_s=_get_env_float("SCRAPE_TIMEOUT_S", 30.0),
)

if settings.cache_connect_retries < 0:
    raise RuntimeError("CACHE_CONNECT_RETRIES must be zero or greater.")

if settings.cache_op_timeout_s <= 0:
    raise RuntimeError("CACHE_OP_TIMEOUT_S must be greater than zero.")

if settings.cache_stats_timeout_s <= 0:
    raise RuntimeError("CACHE_STATS_TIMEOUT_S must be greater than zero.")
