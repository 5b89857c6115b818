"""Pytest helpers for the pricing_cache library."""

from __future__ import annotations

import pytest

from pricing_cache.types import (
    ExerciseStyle,
    MarketData,
    OptionSpec,
    OptionType,
    PricingInputs,
)


class CallCounter:
    """Wrap a function and record every argument it is called with."""

    def __init__(self, fn):
        self.fn = fn
        self.calls: list = []

    def __call__(self, key):
        self.calls.append(key)
        return self.fn(key)

    @property
    def count(self) -> int:
        return len(self.calls)

    def count_for(self, key) -> int:
        return self.calls.count(key)


@pytest.fixture
def counted():
    """Factory wrapping a function in a :class:`CallCounter`."""
    return CallCounter


@pytest.fixture
def square(counted):
    return counted(lambda x: x * x)


@pytest.fixture
def make_inputs():
    """Factory fixture for constructing the library's PricingInputs."""

    def _make(
        *,
        S: float,
        K: float,
        r: float,
        sigma: float,
        T: float,
        q: float = 0.0,
        t: float = 0.0,
        kind: OptionType = OptionType.CALL,
        exercise: ExerciseStyle = ExerciseStyle.EUROPEAN,
        exercise_times: tuple[float, ...] = (),
    ) -> PricingInputs:
        spec = OptionSpec(
            kind=kind,
            strike=K,
            expiry=T,
            exercise=exercise,
            exercise_times=exercise_times,
        )
        market = MarketData(spot=S, rate=r, dividend_yield=q)
        return PricingInputs(spec=spec, market=market, sigma=sigma, t=t)

    return _make
