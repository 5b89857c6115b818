from __future__ import annotations

from ..models import bs as bs_model
from ..types import ExerciseStyle, OptionType, PricingInputs


def _require_european(p: PricingInputs) -> None:
    if p.spec.exercise != ExerciseStyle.EUROPEAN:
        raise ValueError(
            f"Black-Scholes prices European options only, got {p.spec.exercise.value}"
        )


def bs_price(p: PricingInputs) -> float:
    """Closed-form Black-Scholes price of a European call or put."""
    _require_european(p)
    kwargs = dict(spot=p.S, strike=p.K, r=p.r, q=p.q, sigma=p.sigma, tau=p.tau)
    if p.spec.kind == OptionType.CALL:
        return bs_model.call_price(**kwargs)
    if p.spec.kind == OptionType.PUT:
        return bs_model.put_price(**kwargs)
    raise ValueError(f"Unsupported option kind: {p.spec.kind}")
