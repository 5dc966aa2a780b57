import unittest
from unittest.mock import patch

from redis.exceptions import ConnectionError as RedisConnectionError

from app import resources
from app.cache_store import InMemoryWeatherCache, RedisWeatherCache
from app.config import Settings
from app.data_sources import VisualCrossingClient


class FakeRedisClient:
    def __init__(self, healthy=True):
        self.healthy = healthy
        self.closed = False

    def ping(self):
        if not self.healthy:
            raise RedisConnectionError("Connection refused")
        return True

    def close(self):
        self.closed = True


class TestResources(unittest.TestCase):
    def test_in_memory_store_without_redis_url(self):
        store = resources.build_cache_store(Settings(cache_redis_url=None))
        self.assertIsInstance(store, InMemoryWeatherCache)

    def test_redis_store_when_reachable(self):
        client = FakeRedisClient()
        with patch("app.resources.redis.Redis.from_url", return_value=client) as from_url:
            store = resources.build_cache_store(Settings(cache_redis_url="redis://:pw@cache:6379/0"))
        self.assertIsInstance(store, RedisWeatherCache)
        self.assertIs(store.client, client)
        self.assertEqual(from_url.call_args.kwargs["socket_timeout"], 2.0)

    def test_falls_back_when_redis_unreachable(self):
        client = FakeRedisClient(healthy=False)
        with patch("app.resources.redis.Redis.from_url", return_value=client):
            store = resources.build_cache_store(Settings(cache_redis_url="redis://cache:6379/0"))
        self.assertIsInstance(store, InMemoryWeatherCache)
        self.assertTrue(client.closed)

    def test_build_resources_wires_service(self):
        settings = Settings(cache_redis_url=None, api_key="k", cache_ttl_seconds=120)
        built = resources.build_resources(settings)
        try:
            self.assertIsInstance(built.data_source, VisualCrossingClient)
            self.assertIs(built.lookup_service.cache, built.cache)
            self.assertIs(built.lookup_service.data_source, built.data_source)
            self.assertEqual(built.lookup_service.ttl_seconds, 120)
        finally:
            built.close()


if __name__ == "__main__":
    unittest.main()
