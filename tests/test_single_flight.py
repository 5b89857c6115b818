"""Cross-thread behaviour of SingleFlightCache."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from pricing_cache.cache import SingleFlightCache
from pricing_cache.exceptions import ReentrantLookupError

TIMEOUT = 10.0


class BlockingGenerator:
    """Generator that signals when it starts and blocks until released."""

    def __init__(self, fn):
        self.fn = fn
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, key):
        with self._lock:
            self.calls += 1
        self.started.set()
        if not self.release.wait(TIMEOUT):
            raise TimeoutError("generator was never released")
        return self.fn(key)


def test_concurrent_misses_share_one_computation():
    gen = BlockingGenerator(lambda x: x * x)
    cache = SingleFlightCache(gen)

    with ThreadPoolExecutor(max_workers=8) as pool:
        leader = pool.submit(cache.lookup, 12)
        assert gen.started.wait(TIMEOUT)
        followers = [pool.submit(cache.lookup, 12) for _ in range(7)]
        gen.release.set()
        results = [leader.result(TIMEOUT)] + [f.result(TIMEOUT) for f in followers]

    assert results == [144] * 8
    assert gen.calls == 1
    assert cache.lookup(12) == 144
    assert gen.calls == 1


def test_distinct_keys_compute_independently():
    gen = BlockingGenerator(lambda x: -x)
    gen.release.set()
    cache = SingleFlightCache(gen)

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(cache.lookup, range(20)))

    assert results == [-x for x in range(20)]
    assert gen.calls == 20
    assert len(cache) == 20


def test_concurrent_failure_is_propagated_and_not_cached():
    def fail(key):
        raise ValueError(f"cannot price {key}")

    gen = BlockingGenerator(fail)
    cache = SingleFlightCache(gen)

    with ThreadPoolExecutor(max_workers=4) as pool:
        leader = pool.submit(cache.lookup, "k")
        assert gen.started.wait(TIMEOUT)
        followers = [pool.submit(cache.lookup, "k") for _ in range(3)]
        gen.release.set()
        for future in [leader, *followers]:
            with pytest.raises(ValueError, match="cannot price k"):
                future.result(TIMEOUT)

    assert "k" not in cache
    assert len(cache) == 0


def test_waiters_receive_the_leaders_exception_object():
    def fail(key):
        raise ValueError(f"cannot price {key}")

    gen = BlockingGenerator(fail)
    cache = SingleFlightCache(gen)
    caught = []

    def lookup_and_catch():
        try:
            cache.lookup("k")
        except ValueError as exc:
            caught.append(exc)

    with ThreadPoolExecutor(max_workers=3) as pool:
        leader = pool.submit(lookup_and_catch)
        assert gen.started.wait(TIMEOUT)
        followers = [pool.submit(lookup_and_catch) for _ in range(2)]
        gen.release.set()
        for future in [leader, *followers]:
            future.result(TIMEOUT)

    assert gen.calls == 1
    assert len(caught) == 3
    assert all(exc is caught[0] for exc in caught)


def test_retry_after_failure_succeeds():
    outcomes = iter([RuntimeError("transient"), 42])

    def gen(_key):
        outcome = next(outcomes)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    cache = SingleFlightCache(gen)
    with pytest.raises(RuntimeError, match="transient"):
        cache.lookup("x")
    assert cache.lookup("x") == 42


def test_erase_during_computation_discards_result():
    gen = BlockingGenerator(lambda x: x + 1)
    cache = SingleFlightCache(gen)

    with ThreadPoolExecutor(max_workers=1) as pool:
        leader = pool.submit(cache.lookup, 1)
        assert gen.started.wait(TIMEOUT)
        cache.erase(1)
        gen.release.set()
        assert leader.result(TIMEOUT) == 2

    assert 1 not in cache
    assert cache.lookup(1) == 2
    assert gen.calls == 2


def test_clear_during_computation_discards_result():
    gen = BlockingGenerator(lambda x: x + 1)
    cache = SingleFlightCache(gen)
    gen.release.set()
    cache.lookup(0)
    gen.release.clear()
    gen.started.clear()

    with ThreadPoolExecutor(max_workers=1) as pool:
        leader = pool.submit(cache.lookup, 5)
        assert gen.started.wait(TIMEOUT)
        cache.clear()
        gen.release.set()
        assert leader.result(TIMEOUT) == 6

    assert len(cache) == 0


def test_generator_reentering_its_own_key_raises():
    cache: SingleFlightCache[int, int] = SingleFlightCache()

    def recursive(key):
        return cache.lookup(key) + 1

    cache.set_generator(recursive)

    with pytest.raises(ReentrantLookupError):
        cache.lookup(3)
    assert 3 not in cache


def test_generator_may_look_up_other_keys():
    cache: SingleFlightCache[int, int] = SingleFlightCache()

    def factorial(n):
        return 1 if n <= 1 else n * cache.lookup(n - 1)

    cache.set_generator(factorial)

    assert cache.lookup(6) == 720
    assert len(cache) == 6
