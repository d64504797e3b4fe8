import pytest

from talentdesk.core.generations import GenerationCounter, ProjectionCache

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_generation_counter():
    counter = GenerationCounter()

    assert counter.current("job") == 0
    first = counter.advance("job")
    second = counter.advance("job")

    assert (first, second) == (1, 2)
    assert counter.is_latest("job", second)
    assert not counter.is_latest("job", first)
    assert counter.current("other") == 0


def test_commit_and_get():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())

    token = cache.begin("job")
    assert cache.commit("job", token, ["a"])

    assert cache.get("job") == ["a"]
    assert len(cache) == 1


def test_older_request_cannot_overwrite_newer():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())

    slow = cache.begin("job")
    fast = cache.begin("job")
    assert cache.commit("job", fast, "fresh")

    assert not cache.commit("job", slow, "stale")
    assert cache.get("job") == "fresh"


def test_invalidate_drops_in_flight_result():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())

    token = cache.begin("job")
    cache.invalidate("job")

    assert not cache.commit("job", token, "before write")
    assert cache.get("job") is None


def test_entries_expire():
    clock = FakeClock()
    cache = ProjectionCache(ttl_seconds=5, clock=clock)
    cache.commit("job", cache.begin("job"), "value")

    clock.now = 4.0
    assert cache.get("job") == "value"
    clock.now = 5.5
    assert cache.get("job") is None


def test_zero_ttl_disables_storage_but_keeps_ordering():
    cache = ProjectionCache(ttl_seconds=0)

    old = cache.begin("job")
    new = cache.begin("job")

    assert not cache.enabled
    assert cache.commit("job", new, "value")
    assert not cache.commit("job", old, "value")
    assert cache.get("job") is None
    assert len(cache) == 0


def test_keys_are_independent():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())
    a = cache.begin("a")
    cache.invalidate("b")

    assert cache.commit("a", a, 1)
    assert cache.get("a") == 1


def test_clear():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())
    cache.commit("a", cache.begin("a"), 1)

    cache.clear()

    assert cache.get("a") is None


def test_expired_entries_are_pruned_on_commit():
    clock = FakeClock()
    cache = ProjectionCache(ttl_seconds=5, clock=clock)
    for key in ("a", "b", "c"):
        cache.commit(key, cache.begin(key), key)

    clock.now = 10.0
    cache.commit("d", cache.begin("d"), "d")

    assert len(cache) == 1
    assert cache.tracked_keys == 1
    assert cache.get("d") == "d"


def test_idle_keys_do_not_accumulate():
    cache = ProjectionCache(ttl_seconds=0)

    for n in range(100):
        cache.commit(n, cache.begin(n), n)
        cache.invalidate(("job", n))

    assert cache.tracked_keys == 0


def test_generation_kept_while_a_read_is_in_flight():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())
    token = cache.begin("job")

    cache.invalidate("job")

    assert cache.tracked_keys == 1
    assert not cache.commit("job", token, "stale")
    assert cache.tracked_keys == 0


def test_abandon_releases_the_token():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())

    cache.abandon("job", cache.begin("job"))

    assert cache.tracked_keys == 0
    assert cache.commit("job", cache.begin("job"), "value")
    assert cache.get("job") == "value"


def test_invalidate_matching():
    cache = ProjectionCache(ttl_seconds=10, clock=FakeClock())
    for key in (("org-1", "a"), ("org-1", "b"), ("org-2", "a")):
        cache.commit(key, cache.begin(key), key)
    in_flight = cache.begin(("org-1", "c"))

    dropped = cache.invalidate_matching(lambda key: key[0] == "org-1")

    assert dropped == 3
    assert len(cache) == 1
    assert cache.get(("org-2", "a")) == ("org-2", "a")
    assert not cache.commit(("org-1", "c"), in_flight, "stale")
