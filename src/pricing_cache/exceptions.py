class CacheError(Exception):
    """Base class for errors raised by the cache itself.

    Errors raised by a cache's generator are never wrapped in this type; they
    reach the caller unchanged.
    """


class UnboundGeneratorError(CacheError, RuntimeError):
    """Raised when :meth:`Cache.lookup` misses while no generator is bound.

    Notes
    -----
    The cache is left untouched, so binding a generator with
    :meth:`Cache.set_generator` and retrying the lookup is valid.
    """


class ReentrantLookupError(CacheError, RuntimeError):
    """Raised when a generator looks up the key it is currently computing.

    Only :class:`SingleFlightCache` detects this; waiting on its own in-flight
    computation would block the thread forever.
    """
