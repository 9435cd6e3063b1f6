from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping

JOB_NAMESPACE = "job"
INSIGHTS_NAMESPACE = "insights"


def derive_key(value: str) -> str:
    """Content-address a string: lower-case, trim, SHA-256 hex (64 chars)."""
    normalized = value.lower().strip()
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


def _canonical_field(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        items = [item.strip() if isinstance(item, str) else item for item in value]
        return sorted(items, key=lambda item: str(item).lower())
    return value


def derive_insights_key(attributes: Mapping[str, Any]) -> str:
    """Hash a set of job-analysis attributes independently of list and key order."""
    canonical = {str(name): _canonical_field(value) for name, value in attributes.items()}
    serialized = json.dumps(canonical, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return derive_key(serialized)


def job_cache_key(url: str) -> str:
    return f"{JOB_NAMESPACE}:{derive_key(url)}"


def insights_cache_key(analysis_hash: str) -> str:
    return f"{INSIGHTS_NAMESPACE}:{analysis_hash}"
