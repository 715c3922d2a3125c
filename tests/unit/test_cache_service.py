"""
Unit tests for the Redis cache wrapper, against an in-memory client stand-in.
"""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from salon_pos.services.cache_service import CacheService


class InMemoryRedis:
    """Implements the handful of Redis commands the cache uses."""

    def __init__(self):
        self.data = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError('down')

    def get(self, key):
        self._check()
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self._check()
        self.data[key] = value

    def incr(self, key):
        self._check()
        self.data[key] = str(int(self.data.get(key, 0)) + 1)
        return int(self.data[key])


@pytest.fixture
def cache(app):
    service = CacheService()
    service.client = InMemoryRedis()
    with app.app_context():
        yield service


def test_disabled_cache_always_loads(app):
    service = CacheService(app)  # TestConfig disables the cache
    calls = []

    with app.app_context():
        service.memoize('u1', 'catalog', 'all', lambda: calls.append(1) or ['x'])
        service.memoize('u1', 'catalog', 'all', lambda: calls.append(1) or ['x'])

    assert not service.available
    assert len(calls) == 2


def test_memoize_serves_second_read_from_cache(cache):
    calls = []

    def loader():
        calls.append(1)
        return [{'name': 'Shampoo', 'price': '10.00'}]

    first = cache.memoize('u1', 'catalog', 'all', loader)
    second = cache.memoize('u1', 'catalog', 'all', loader)

    assert first == second
    assert len(calls) == 1


def test_invalidate_module_forces_reload(cache):
    cache.set('u1', 'catalog', 'all', ['old'])
    cache.invalidate_module('u1', 'catalog')

    assert cache.get('u1', 'catalog', 'all') is None
    assert cache.memoize('u1', 'catalog', 'all', lambda: ['new']) == ['new']


def test_accounts_do_not_share_entries(cache):
    cache.set('u1', 'catalog', 'all', ['mine'])

    assert cache.get('u2', 'catalog', 'all') is None
    cache.invalidate_module('u2', 'catalog')
    assert cache.get('u1', 'catalog', 'all') == ['mine']


def test_redis_errors_degrade_to_loader(cache):
    cache.client.fail = True

    assert cache.set('u1', 'catalog', 'all', ['x']) is False
    assert cache.memoize('u1', 'catalog', 'all', lambda: ['fresh']) == ['fresh']
    cache.invalidate_module('u1', 'catalog')
