from __future__ import annotations

import asyncio
import socket
from typing import Any


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    """In-memory stand-in for the subset of ``redis.asyncio.Redis`` the cache uses."""

    def __init__(self, clock: FakeClock | None = None, *, ping_delay_s: float = 0.0):
        self.clock = clock or FakeClock()
        self.ping_delay_s = ping_delay_s
        self.fail_with: Exception | None = None
        self.memory_info: Any = {"used_memory_human": "1.05M", "used_memory": 1101008}
        self.closed = False
        self.set_calls: list[tuple[str, int | None]] = []
        self._data: dict[str, tuple[str, float | None]] = {}

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _live_items(self) -> dict[str, str]:
        now = self.clock()
        expired = [key for key, (_, expires_at) in self._data.items() if expires_at is not None and expires_at <= now]
        for key in expired:
            del self._data[key]
        return {key: value for key, (value, _) in self._data.items()}

    def put_raw(self, key: str, value: str) -> None:
        self._data[key] = (value, None)

    async def ping(self) -> bool:
        if self.ping_delay_s:
            await asyncio.sleep(self.ping_delay_s)
        self._check()
        return True

    async def get(self, key: str) -> str | None:
        self._check()
        return self._live_items().get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        if ex is not None and ex <= 0:
            raise ValueError("invalid expire time in 'set' command")
        self.set_calls.append((key, ex))
        expires_at = self.clock() + ex if ex is not None else None
        self._data[key] = (value, expires_at)
        return True

    async def scan_iter(self, match: str | None = None, count: int | None = None):
        self._check()
        for key in list(self._live_items()):
            yield key

    async def info(self, section: str | None = None) -> Any:
        self._check()
        return self.memory_info

    async def aclose(self) -> None:
        self.closed = True


def closed_local_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def sample_analysis_payload() -> dict[str, Any]:
    return {
        "overallScore": "Good",
        "categoryScores": {
            "skillsMatch": "Great",
            "experienceLevel": "Good",
            "keywordOptimization": "Fair",
            "qualificationsAlignment": "Good",
        },
        "executiveSummary": "Solid backend profile with a few keyword gaps.",
        "jobAnalysis": {
            "requiredSkills": ["Python", "FastAPI", "Redis", "SQL", "Docker"],
            "keyExperiences": [
                "5+ years backend development",
                "Production API ownership",
                "Caching strategy design",
                "Cloud deployments",
                "Mentoring engineers",
            ],
            "primaryResponsibilities": [
                "Design REST APIs",
                "Operate Redis caches",
                "Review code",
                "Improve latency",
                "Collaborate with product",
            ],
        },
        "recommendations": [
            {
                "id": index,
                "title": f"Recommendation {index}",
                "description": f"Do improvement number {index}.",
                "impact": impact,
                "category": category,
            }
            for index, (impact, category) in enumerate(
                [
                    ("High", "Skills"),
                    ("High", "Keywords"),
                    ("Medium", "Experience"),
                    ("Medium", "Qualifications"),
                    ("Low", "Keywords"),
                ],
                start=1,
            )
        ],
    }
