import pytest

from preco_facil.stores import redis as redis_store


class FakeRedis:
    """Minimal async stand-in for redis.asyncio.Redis."""

    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.data.get(key)

    async def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl


@pytest.fixture
def fake_redis(monkeypatch: pytest.MonkeyPatch) -> FakeRedis:
    fake = FakeRedis()
    monkeypatch.setattr(redis_store, "_redis", fake)
    return fake


def test_not_ready_without_init():
    assert redis_store.is_ready() is False
    with pytest.raises(RuntimeError):
        redis_store._get_redis()


@pytest.mark.asyncio
async def test_trending_terms_cache_roundtrip(fake_redis: FakeRedis):
    assert redis_store.is_ready() is True
    assert await redis_store.get_trending_terms_cache(5) is None

    await redis_store.set_trending_terms_cache(5, [{"term": "arroz", "count": 3}], 60)

    assert fake_redis.ttls == {"trending:terms:5": 60}
    assert await redis_store.get_trending_terms_cache(5) == [{"term": "arroz", "count": 3}]
    assert await redis_store.get_trending_terms_cache(10) is None
