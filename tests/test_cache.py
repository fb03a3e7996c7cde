"""Unit tests for src/cache.py"""

from src.cache import ExpiringCache
from tests.fakes import FakeClock


def test_get_right_after_set(clock: FakeClock) -> None:
    cache = ExpiringCache(clock=clock)
    cache.set("key", "value", ttl=30)
    assert cache.get("key") == "value"


def test_value_available_until_expiry(clock: FakeClock) -> None:
    """Expiry is inclusive: still readable at exactly now == expires_at."""
    cache = ExpiringCache(clock=clock)
    cache.set("key", "value", ttl=30)
    clock.advance(30)
    assert cache.get("key") == "value"


def test_expired_entry_is_evicted(clock: FakeClock) -> None:
    """After the TTL the entry reports absence and is actually removed, not just skipped."""
    cache = ExpiringCache(clock=clock)
    cache.set("key", "value", ttl=30)
    clock.advance(30.5)

    assert cache.get("key") is None
    assert "key" not in cache
    assert cache.get("key") is None


def test_never_set_and_expired_look_the_same(clock: FakeClock) -> None:
    sentinel = object()
    cache = ExpiringCache(clock=clock)
    cache.set("expired", 1, ttl=1)
    clock.advance(2)
    assert cache.get("expired", sentinel) is sentinel
    assert cache.get("never set", sentinel) is sentinel


def test_cached_none_is_not_absence(clock: FakeClock) -> None:
    """Storing None is allowed: a sentinel default tells it apart from a missing entry."""
    sentinel = object()
    cache = ExpiringCache(clock=clock)
    cache.set("game-3", None, ttl=30)
    assert cache.get("game-3", sentinel) is None


def test_set_overwrites_and_resets_expiry(clock: FakeClock) -> None:
    cache = ExpiringCache(clock=clock)
    cache.set("key", "old", ttl=10)
    clock.advance(8)
    cache.set("key", "new", ttl=10)
    clock.advance(8)
    assert cache.get("key") == "new"


def test_default_ttl(clock: FakeClock) -> None:
    cache = ExpiringCache(default_ttl=5, clock=clock)
    cache.set("key", "value")
    clock.advance(6)
    assert cache.get("key") is None


def test_clear_evicts_everything(clock: FakeClock) -> None:
    """clear() ignores remaining TTL."""
    cache = ExpiringCache(clock=clock)
    cache.set("a", 1, ttl=1000)
    cache.set("b", 2, ttl=1000)
    cache.clear()

    assert cache.get("a") is None
    assert cache.get("b") is None
    assert len(cache) == 0


def test_no_eviction_without_reads(clock: FakeClock) -> None:
    """Eviction is lazy: nothing is removed until the key is read."""
    cache = ExpiringCache(clock=clock)
    cache.set("key", "value", ttl=1)
    clock.advance(100)
    assert len(cache) == 1
    cache.get("key")
    assert len(cache) == 0
