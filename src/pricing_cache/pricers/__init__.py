from .black_scholes import bs_price
from .mc import mc_price
from .tree import binom_price

__all__ = ["bs_price", "mc_price", "binom_price"]
