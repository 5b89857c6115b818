from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class OptionType(str, Enum):
    """Option contract type.

    Attributes
    ----------
    CALL : str
        Call option ("call").
    PUT : str
        Put option ("put").
    """

    CALL = "call"
    PUT = "put"


class ExerciseStyle(str, Enum):
    """When the holder may exercise.

    Attributes
    ----------
    EUROPEAN : str
        At expiry only.
    BERMUDAN : str
        On a discrete set of dates (see :attr:`OptionSpec.exercise_times`).
    AMERICAN : str
        At any time up to expiry.
    """

    EUROPEAN = "european"
    BERMUDAN = "bermudan"
    AMERICAN = "american"


@dataclass(frozen=True, slots=True)
class MarketData:
    """Market observables needed for option pricing.

    Parameters
    ----------
    spot : float
        Current spot price of the underlying, typically denoted :math:`S`.
    rate : float
        Continuously-compounded risk-free interest rate, typically denoted :math:`r`
        (annualized).
    dividend_yield : float, default 0.0
        Continuously-compounded dividend yield, typically denoted :math:`q`
        (annualized).
    """

    spot: float
    rate: float
    dividend_yield: float = 0.0


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Specification of a plain-vanilla option.

    Parameters
    ----------
    kind : OptionType
        Option type (call or put).
    strike : float
        Strike price of the option, typically denoted :math:`K`.
    expiry : float
        Option expiry time in the same time units as `t` in :class:`PricingInputs`
        (commonly years).
    exercise : ExerciseStyle, default ExerciseStyle.EUROPEAN
        Exercise style.
    exercise_times : tuple of float, default ()
        Bermudan exercise times, in the same units as `expiry`. Stored sorted.
        Required (non-empty) for Bermudan options, forbidden otherwise.

    Raises
    ------
    ValueError
        If the exercise schedule does not match `exercise`, or a time lies
        after `expiry`.

    Notes
    -----
    Instances are hashable, which makes them usable inside cache keys.
    """

    kind: OptionType
    strike: float
    expiry: float
    exercise: ExerciseStyle = ExerciseStyle.EUROPEAN
    exercise_times: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        times = tuple(sorted(float(x) for x in self.exercise_times))
        object.__setattr__(self, "exercise_times", times)

        if self.exercise == ExerciseStyle.BERMUDAN:
            if not times:
                raise ValueError("Bermudan options need at least one exercise time")
            if times[-1] > self.expiry:
                raise ValueError("exercise_times must not exceed expiry")
        elif times:
            raise ValueError(
                f"exercise_times only apply to Bermudan options, got {self.exercise}"
            )


@dataclass(frozen=True, slots=True)
class PricingInputs:
    """Inputs for an option pricing routine.

    Bundles an option specification, market data, and volatility into a single
    immutable, hashable object, so a :class:`~pricing_cache.cache.Cache` can key
    valuations by it.

    Parameters
    ----------
    spec : OptionSpec
        Option contract specification.
    market : MarketData
        Market observables (spot, rates, yields).
    sigma : float
        Black-Scholes volatility (annualized).
    t : float, default 0.0
        Current valuation time in the same units as `spec.expiry`.

    Attributes
    ----------
    S, K, r, q, T : float
        Aliases for spot, strike, rate, dividend yield and expiry.
    tau : float
        Time to expiry, computed as ``T - t``.

    Raises
    ------
    ValueError
        If ``T - t <= 0`` when accessing :attr:`tau`.
    """

    spec: OptionSpec
    market: MarketData
    sigma: float
    t: float = 0.0

    @property
    def S(self) -> float:
        return self.market.spot

    @property
    def K(self) -> float:
        return self.spec.strike

    @property
    def r(self) -> float:
        return self.market.rate

    @property
    def q(self) -> float:
        return self.market.dividend_yield

    @property
    def T(self) -> float:
        return self.spec.expiry

    @property
    def tau(self) -> float:
        tau = self.T - self.t
        if tau <= 0.0:
            raise ValueError("Need expiry > t")
        return tau
