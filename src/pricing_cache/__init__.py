"""
pricing_cache

Memoizing caches, plus the option pricers they are meant to wrap.

The main user-facing names are re-exported at the top level, so you can write,
for example:

    from pricing_cache import Cache, cached_pricer, binom_price
"""

from .cache import Cache, SingleFlightCache
from .config import MCConfig, RandomConfig, TreeConfig
from .exceptions import CacheError, ReentrantLookupError, UnboundGeneratorError
from .pricers import binom_price, bs_price, mc_price
from .types import ExerciseStyle, MarketData, OptionSpec, OptionType, PricingInputs
from .valuation import cached_pricer

__all__ = [
    # Caches
    "Cache",
    "SingleFlightCache",
    "cached_pricer",
    # Errors
    "CacheError",
    "UnboundGeneratorError",
    "ReentrantLookupError",
    # Types
    "OptionType",
    "ExerciseStyle",
    "OptionSpec",
    "MarketData",
    "PricingInputs",
    # Config
    "RandomConfig",
    "MCConfig",
    "TreeConfig",
    # Pricers
    "bs_price",
    "mc_price",
    "binom_price",
]
