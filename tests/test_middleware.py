from fastapi import FastAPI
from fastapi.testclient import TestClient

from booking_service.middleware import RateLimitMiddleware


class CountingRedis:
    """Just enough of redis.asyncio for the fixed-window counter."""

    def __init__(self):
        self.counts = {}
        self.ttls = {}

    async def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key, seconds):
        self.ttls[key] = seconds


def limited_app(redis, limit):
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, redis_client=redis, max_per_minute=limit)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get("/rooms")
    async def rooms():
        return []

    return app


def test_rate_limit_blocks_after_limit():
    redis = CountingRedis()
    client = TestClient(limited_app(redis, limit=2))

    assert client.get("/rooms").status_code == 200
    assert client.get("/rooms").status_code == 200
    blocked = client.get("/rooms")
    assert blocked.status_code == 429
    assert blocked.json() == {"detail": "Too many requests"}

    assert list(redis.ttls.values()) == [70]


def test_rate_limit_skips_health():
    redis = CountingRedis()
    client = TestClient(limited_app(redis, limit=1))

    for _ in range(3):
        assert client.get("/health").status_code == 200
    assert redis.counts == {}

