from __future__ import annotations

import math

from scipy.stats import norm


def _validate_scalar_inputs(
    *, spot: float, strike: float, sigma: float, tau: float
) -> None:
    if spot <= 0.0:
        raise ValueError("spot must be positive")
    if strike <= 0.0:
        raise ValueError("strike must be positive")
    if sigma <= 0.0:
        raise ValueError("sigma must be positive")
    if tau <= 0.0:
        raise ValueError("tau must be positive")


def discount_factor(rate: float, tau: float) -> float:
    return math.exp(-rate * tau)


def d1_d2(
    *, spot: float, strike: float, r: float, q: float, sigma: float, tau: float
) -> tuple[float, float]:
    _validate_scalar_inputs(spot=spot, strike=strike, sigma=sigma, tau=tau)
    vol_sqrt_t = sigma * math.sqrt(tau)
    d1 = (math.log(spot / strike) + (r - q + 0.5 * sigma * sigma) * tau) / vol_sqrt_t
    return d1, d1 - vol_sqrt_t


def call_price(
    *, spot: float, strike: float, r: float, q: float, sigma: float, tau: float
) -> float:
    """
    Black–Scholes European call with continuous dividend yield q.
    """
    d1, d2 = d1_d2(spot=spot, strike=strike, r=r, q=q, sigma=sigma, tau=tau)
    return float(
        spot * discount_factor(q, tau) * norm.cdf(d1)
        - strike * discount_factor(r, tau) * norm.cdf(d2)
    )


def put_price(
    *, spot: float, strike: float, r: float, q: float, sigma: float, tau: float
) -> float:
    """
    Black–Scholes European put with continuous dividend yield q.
    """
    d1, d2 = d1_d2(spot=spot, strike=strike, r=r, q=q, sigma=sigma, tau=tau)
    return float(
        strike * discount_factor(r, tau) * norm.cdf(-d2)
        - spot * discount_factor(q, tau) * norm.cdf(-d1)
    )
