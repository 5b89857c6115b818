"""Memoizing caches.

A cache maps a key to the value its *generator* computed for that key. The
generator runs on the first lookup of a key (a miss); later lookups return the
stored value. Failed generator calls are never stored, so a later lookup of the
same key retries the generator.

Two flavours are provided:

- :class:`Cache` for single-threaded (or externally synchronised) use.
- :class:`SingleFlightCache`, safe to share between threads: concurrent misses
  on one key wait for a single in-flight computation.

Neither cache evicts entries; they grow until :meth:`Cache.erase` or
:meth:`Cache.clear` is called.

Examples
--------
>>> square = Cache(lambda x: x * x)
>>> square.lookup(4)
16
>>> @Cache
... def double(x):
...     return 2 * x
>>> double(21)
42
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Generic, TypeVar

from .exceptions import ReentrantLookupError, UnboundGeneratorError

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class Cache(Generic[K, V]):
    """Memoize ``generator(key)`` per key.

    Parameters
    ----------
    generator : Callable[[K], V] | None, default None
        Function computing the value of a missing key. It is assumed to be a
        deterministic, side-effect-free function of its key; memoization is
        only correct under that assumption. May be bound later with
        :meth:`set_generator`.

    Notes
    -----
    - At most one entry exists per key. A stored value is only replaced after
      an explicit :meth:`erase` or :meth:`clear` followed by a new lookup.
    - The generator is consulted on misses only. Rebinding it never changes
      values that are already stored.
    - ``None`` is a valid value and is cached like any other.
    - Not thread-safe. Concurrent misses on the same key may call the
      generator more than once; use :class:`SingleFlightCache` instead.
    """

    def __init__(self, generator: Callable[[K], V] | None = None) -> None:
        self._generator = generator
        self._entries: dict[K, V] = {}

    @property
    def generator(self) -> Callable[[K], V] | None:
        return self._generator

    def set_generator(self, generator: Callable[[K], V]) -> None:
        """Bind ``generator`` for future misses; stored entries are kept."""
        logger.debug("rebinding cache generator to %r", generator)
        self._generator = generator

    def lookup(self, key: K) -> V:
        """Return the value for ``key``, computing and storing it on a miss.

        Raises
        ------
        UnboundGeneratorError
            If ``key`` is missing and no generator is bound.
        Exception
            Whatever the generator raises, unchanged. Nothing is stored for
            ``key`` in that case.
        """
        value = self._entries.get(key, _MISSING)
        if value is not _MISSING:
            return value  # type: ignore[return-value]

        generator = self._require_generator(key)
        logger.debug("cache miss for %r", key)
        value = generator(key)
        self._entries[key] = value
        return value

    __call__ = lookup

    def erase(self, key: K) -> None:
        """Drop the entry for ``key``; a missing key is not an error."""
        if self._entries.pop(key, _MISSING) is not _MISSING:
            logger.debug("erased cache entry for %r", key)

    def clear(self) -> None:
        """Drop every entry. The generator binding is kept."""
        logger.debug("clearing %d cache entries", len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __repr__(self) -> str:
        return f"{type(self).__name__}(generator={self._generator!r}, size={len(self)})"

    def _require_generator(self, key: K) -> Callable[[K], V]:
        if self._generator is None:
            raise UnboundGeneratorError(
                f"No generator bound; cannot compute a value for {key!r}"
            )
        return self._generator


@dataclass(slots=True)
class _Flight:
    future: Future
    owner: int  # thread ident of the leader


class SingleFlightCache(Cache[K, V]):
    """Thread-safe :class:`Cache` with one in-flight computation per key.

    The first thread to miss a key (the *leader*) runs the generator outside
    the lock. Threads missing the same key meanwhile wait for the leader and
    receive its value, or the exception it raised. The generator therefore runs
    at most once per key across all threads between :meth:`erase` /
    :meth:`clear` calls.

    Notes
    -----
    - A failure is handed to every waiter and is not stored; the next lookup
      starts a new computation.
    - :meth:`erase` and :meth:`clear` also forget in-flight computations for
      the affected keys. Threads already waiting still get the leader's
      result, but it is not stored.
    - A generator that looks up its own in-flight key raises
      :class:`~pricing_cache.exceptions.ReentrantLookupError`.
    - Waiters re-raise the leader's exception object itself. Each raise
      rewrites its shared ``__traceback__``, so a waiter's traceback may show
      frames from the leader or from other waiters.
    """

    def __init__(self, generator: Callable[[K], V] | None = None) -> None:
        super().__init__(generator)
        self._lock = threading.Lock()
        self._inflight: dict[K, _Flight] = {}

    def set_generator(self, generator: Callable[[K], V]) -> None:
        with self._lock:
            super().set_generator(generator)

    def lookup(self, key: K) -> V:
        with self._lock:
            value = self._entries.get(key, _MISSING)
            if value is not _MISSING:
                return value  # type: ignore[return-value]

            flight = self._inflight.get(key)
            if flight is None:
                generator = self._require_generator(key)
                flight = _Flight(future=Future(), owner=threading.get_ident())
                self._inflight[key] = flight
                leader = True
            else:
                leader = False

        if not leader:
            if flight.owner == threading.get_ident():
                raise ReentrantLookupError(
                    f"Generator re-entered the lookup of its own key {key!r}"
                )
            logger.debug("waiting for in-flight computation of %r", key)
            return flight.future.result()

        logger.debug("cache miss for %r", key)
        try:
            value = generator(key)
        except BaseException as exc:
            with self._lock:
                if self._inflight.get(key) is flight:
                    del self._inflight[key]
            flight.future.set_exception(exc)
            raise

        with self._lock:
            if self._inflight.get(key) is flight:
                del self._inflight[key]
                self._entries[key] = value
        flight.future.set_result(value)
        return value

    __call__ = lookup

    def erase(self, key: K) -> None:
        with self._lock:
            self._inflight.pop(key, None)
            super().erase(key)

    def clear(self) -> None:
        with self._lock:
            self._inflight.clear()
            super().clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
