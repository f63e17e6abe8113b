from app.services.cache_service import CategoryCache


class _Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_empty_cache_misses():
    cache = CategoryCache(ttl_seconds=600, clock=_Clock())
    assert cache.get() is None
    assert cache.age is None


def test_set_then_get_returns_same_snapshot():
    clock = _Clock()
    cache = CategoryCache(ttl_seconds=600, clock=clock)
    snapshot = [{"id": 1, "images": []}]
    cache.set(snapshot)
    clock.now = 599.0
    assert cache.get() is snapshot


def test_snapshot_expires_after_ttl():
    clock = _Clock()
    cache = CategoryCache(ttl_seconds=600, clock=clock)
    cache.set(["x"])
    clock.now = 600.0
    assert cache.get() is None


def test_empty_list_is_a_cache_hit():
    cache = CategoryCache(ttl_seconds=600, clock=_Clock())
    cache.set([])
    assert cache.get() == []


def test_set_replaces_and_restamps():
    clock = _Clock()
    cache = CategoryCache(ttl_seconds=600, clock=clock)
    cache.set(["old"])
    clock.now = 500.0
    cache.set(["new"])
    clock.now = 900.0
    assert cache.get() == ["new"]
    assert cache.age == 400.0


def test_clear_is_idempotent():
    cache = CategoryCache(ttl_seconds=600, clock=_Clock())
    cache.set(["x"])
    cache.clear()
    assert cache.get() is None and cache.age is None
    cache.clear()
    assert cache.get() is None and cache.age is None


def test_clear_discards_fresh_snapshot():
    cache = CategoryCache(ttl_seconds=600, clock=_Clock())
    cache.set(["x"])
    cache.clear()
    assert cache.get() is None


def test_set_without_generation_always_stores():
    cache = CategoryCache(ttl_seconds=600, clock=_Clock())
    cache.clear()
    assert cache.set(["x"]) is True
    assert cache.get() == ["x"]


def test_snapshot_from_before_a_clear_is_discarded():
    cache = CategoryCache(ttl_seconds=600, clock=_Clock())
    generation = cache.generation
    cache.clear()
    assert cache.set(["stale"], generation) is False
    assert cache.get() is None

    assert cache.set(["fresh"], cache.generation) is True
    assert cache.get() == ["fresh"]
