import pytest
import redis.asyncio as redis
from starlette.requests import Request

from app.core.exceptions import AuthenticationError, RateLimitExceeded
from app.core.middleware import RateLimiter
from app.core.security import create_tokens, get_password_hash, verify_password, verify_token


def test_password_hashing():
    hashed = get_password_hash("secret123")

    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_token_types_are_checked():
    tokens = create_tokens("user-1", "katniss")

    assert verify_token(tokens["access_token"], token_type="access")["sub"] == "user-1"
    with pytest.raises(AuthenticationError):
        verify_token(tokens["access_token"], token_type="refresh")


def make_request() -> Request:
    return Request({"type": "http", "method": "POST", "path": "/", "headers": [], "client": ("10.0.0.1", 1234)})


class FakePipeline:
    def __init__(self, count: int) -> None:
        self.count = count

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def zremrangebyscore(self, *args):
        pass

    async def zcard(self, *args):
        pass

    async def zadd(self, *args):
        pass

    async def expire(self, *args):
        pass

    async def execute(self):
        return [0, self.count, 1, True]


class FakeRedis:
    def __init__(self, count: int = 0, fail: bool = False) -> None:
        self.count = count
        self.fail = fail

    def pipeline(self, transaction=True):
        if self.fail:
            raise redis.ConnectionError("redis down")
        return FakePipeline(self.count)


async def test_rate_limiter_allows_under_limit():
    limiter = RateLimiter(requests_per_minute=3, key_prefix="test")
    limiter._redis = FakeRedis(count=2)

    await limiter(make_request())


async def test_rate_limiter_blocks_over_limit():
    limiter = RateLimiter(requests_per_minute=3, key_prefix="test")
    limiter._redis = FakeRedis(count=3)

    with pytest.raises(RateLimitExceeded):
        await limiter(make_request())


async def test_rate_limiter_lets_requests_through_when_redis_is_down():
    limiter = RateLimiter(requests_per_minute=3, key_prefix="test")
    limiter._redis = FakeRedis(fail=True)

    await limiter(make_request())
