"""Pricers wrapped in memoizing caches.

A pricer is a function ``PricingInputs -> float``. Because
:class:`~pricing_cache.types.PricingInputs` is frozen and hashable, it can key a
:class:`~pricing_cache.cache.Cache` directly: repeated requests for identical
market and contract parameters are served without revaluation.

Example
-------
>>> from pricing_cache import MarketData, OptionSpec, OptionType, PricingInputs
>>> from pricing_cache import TreeConfig
>>> spec = OptionSpec(kind=OptionType.PUT, strike=40.0, expiry=1.0)
>>> p = PricingInputs(spec=spec, market=MarketData(spot=36.0, rate=0.06), sigma=0.2)
>>> prices = cached_pricer(tree_pricer(TreeConfig(n_steps=500)))
>>> first = prices.lookup(p)  # computed
>>> prices.lookup(p) == first  # served from the cache
True
"""

from __future__ import annotations

from collections.abc import Callable
from functools import partial

from .cache import Cache, SingleFlightCache
from .config import MCConfig, TreeConfig, TreeType
from .pricers import binom_price, bs_price, mc_price
from .types import PricingInputs

Pricer = Callable[[PricingInputs], float]

# Label -> lattice, in the order the comparison table lists them.
METHODS: dict[str, TreeType] = {
    "Binomial Jarrow-Rudd": "jarrow_rudd",
    "Binomial Cox-Ross-Rubinstein": "crr_drift",
    "Additive equiprobabilities": "additive_eqp",
    "Binomial Trigeorgis": "trigeorgis",
    "Binomial Tian": "tian",
    "Binomial Leisen-Reimer": "leisen_reimer",
    "Binomial Joshi": "joshi4",
}


def tree_pricer(cfg: TreeConfig) -> Pricer:
    return partial(binom_price, cfg=cfg)


def bs_pricer() -> Pricer:
    return bs_price


def _mc_value(p: PricingInputs, *, cfg: MCConfig) -> float:
    price, _ = mc_price(p, cfg=cfg)
    return price


def mc_pricer(cfg: MCConfig) -> Pricer:
    """Monte Carlo price (standard error dropped); deterministic for a fixed seed."""
    return partial(_mc_value, cfg=cfg)


def cached_pricer(
    pricer: Pricer, *, thread_safe: bool = False
) -> Cache[PricingInputs, float]:
    """Memoize ``pricer`` keyed by :class:`PricingInputs`.

    Parameters
    ----------
    pricer : Callable[[PricingInputs], float]
        Valuation routine used on cache misses.
    thread_safe : bool, default False
        Return a :class:`SingleFlightCache`, so concurrent requests for the same
        inputs trigger a single valuation.
    """
    if thread_safe:
        return SingleFlightCache(pricer)
    return Cache(pricer)
