"""Recombining binomial lattices for a GBM underlying.

Every lattice is described by the same handful of numbers: the up/down
factors ``u``/``d`` applied per step, the risk-neutral up probability ``p``,
the step size ``dt`` and the number of steps. The node at ``(step, j)`` (``j``
up moves) carries ``S0 * u**j * d**(step - j)``. The parametrisations differ
only in how they choose ``u``, ``d`` and ``p``:

- ``jarrow_rudd``: equal probabilities, log moves ``nu*dt +/- sigma*sqrt(dt)``.
- ``crr``: Cox-Ross-Rubinstein, ``u = 1/d = exp(sigma*sqrt(dt))``.
- ``crr_drift``: the same jumps with ``p = 1/2 + nu*dt / (2*sigma*sqrt(dt))``,
  matching the drift of ``log S`` instead of the price martingale.
- ``additive_eqp``: equal probabilities matching the first two moments of the
  log return exactly.
- ``trigeorgis``: equal log jumps ``+/- sqrt(sigma**2 dt + (nu dt)**2)``.
- ``tian``: matches the first three moments of the price.
- ``leisen_reimer`` / ``joshi4``: strike-centred trees built by inverting a
  normal CDF approximation; they need an odd number of steps.

Here ``nu = r - q - sigma**2/2`` is the drift of ``log S``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from math import exp, log, sqrt

from ..config import TreeType


@dataclass(frozen=True, slots=True)
class BinomialModel:
    S0: float  # initial stock price
    u: float  # up factor
    d: float  # down factor
    p: float  # up probability
    r: float  # risk-free rate (cc, per unit time)
    dt: float  # time step
    n_steps: int

    def __post_init__(self) -> None:
        if self.n_steps <= 0:
            raise ValueError("n_steps must be positive")
        if not (0.0 < self.d < self.u):
            raise ValueError("Need 0 < d < u")
        if self.dt <= 0.0:
            raise ValueError("dt must be positive")
        if not (0.0 <= self.p <= 1.0):
            raise ValueError(
                f"Up probability out of bounds: p={self.p:.6g}. "
                "Try increasing n_steps or check r/q/sigma."
            )

    @property
    def T(self) -> float:
        return self.dt * self.n_steps

    @property
    def disc_step(self) -> float:
        return exp(-self.r * self.dt)

    # ----------------------------
    # Parametrisations
    # ----------------------------

    @classmethod
    def from_jarrow_rudd(
        cls, *, S0: float, r: float, q: float, sigma: float, T: float, n_steps: int
    ) -> BinomialModel:
        dt = _step(T, sigma, n_steps)
        drift = (r - q - 0.5 * sigma * sigma) * dt
        dx = sigma * sqrt(dt)
        return cls(
            S0=S0, u=exp(drift + dx), d=exp(drift - dx), p=0.5, r=r, dt=dt,
            n_steps=n_steps,
        )

    @classmethod
    def from_crr(
        cls, *, S0: float, r: float, q: float, sigma: float, T: float, n_steps: int
    ) -> BinomialModel:
        dt = _step(T, sigma, n_steps)
        u = exp(sigma * sqrt(dt))
        d = 1.0 / u
        # Under continuous dividend yield q: E[S_{t+dt}/S_t] = exp((r-q)dt)
        p = (exp((r - q) * dt) - d) / (u - d)
        return cls(S0=S0, u=u, d=d, p=p, r=r, dt=dt, n_steps=n_steps)

    @classmethod
    def from_crr_drift(
        cls, *, S0: float, r: float, q: float, sigma: float, T: float, n_steps: int
    ) -> BinomialModel:
        dt = _step(T, sigma, n_steps)
        dx = sigma * sqrt(dt)
        drift = (r - q - 0.5 * sigma * sigma) * dt
        return cls(
            S0=S0, u=exp(dx), d=exp(-dx), p=0.5 + 0.5 * drift / dx, r=r, dt=dt,
            n_steps=n_steps,
        )

    @classmethod
    def from_additive_eqp(
        cls, *, S0: float, r: float, q: float, sigma: float, T: float, n_steps: int
    ) -> BinomialModel:
        dt = _step(T, sigma, n_steps)
        drift = (r - q - 0.5 * sigma * sigma) * dt
        disc = 4.0 * sigma * sigma * dt - 3.0 * drift * drift
        if disc <= 0.0:
            raise ValueError("additive_eqp tree needs more steps for this drift")
        up = -0.5 * drift + 0.5 * sqrt(disc)
        return cls(
            S0=S0, u=exp(drift + up), d=exp(drift - up), p=0.5, r=r, dt=dt,
            n_steps=n_steps,
        )

    @classmethod
    def from_trigeorgis(
        cls, *, S0: float, r: float, q: float, sigma: float, T: float, n_steps: int
    ) -> BinomialModel:
        dt = _step(T, sigma, n_steps)
        drift = (r - q - 0.5 * sigma * sigma) * dt
        dx = sqrt(sigma * sigma * dt + drift * drift)
        return cls(
            S0=S0, u=exp(dx), d=exp(-dx), p=0.5 + 0.5 * drift / dx, r=r, dt=dt,
            n_steps=n_steps,
        )

    @classmethod
    def from_tian(
        cls, *, S0: float, r: float, q: float, sigma: float, T: float, n_steps: int
    ) -> BinomialModel:
        dt = _step(T, sigma, n_steps)
        v = exp(sigma * sigma * dt)
        growth = exp((r - q) * dt)
        root = sqrt(v * v + 2.0 * v - 3.0)
        u = 0.5 * growth * v * (v + 1.0 + root)
        d = 0.5 * growth * v * (v + 1.0 - root)
        p = (growth - d) / (u - d)
        return cls(S0=S0, u=u, d=d, p=p, r=r, dt=dt, n_steps=n_steps)

    @classmethod
    def from_leisen_reimer(
        cls,
        *,
        S0: float,
        K: float,
        r: float,
        q: float,
        sigma: float,
        T: float,
        n_steps: int,
    ) -> BinomialModel:
        return cls._strike_centred(
            S0=S0, K=K, r=r, q=q, sigma=sigma, T=T, n_steps=n_steps,
            up_probability=_peizer_pratt_inversion,
        )

    @classmethod
    def from_joshi4(
        cls,
        *,
        S0: float,
        K: float,
        r: float,
        q: float,
        sigma: float,
        T: float,
        n_steps: int,
    ) -> BinomialModel:
        return cls._strike_centred(
            S0=S0, K=K, r=r, q=q, sigma=sigma, T=T, n_steps=n_steps,
            up_probability=_joshi_up_probability,
        )

    @classmethod
    def _strike_centred(
        cls,
        *,
        S0: float,
        K: float,
        r: float,
        q: float,
        sigma: float,
        T: float,
        n_steps: int,
        up_probability: Callable[[float, int], float],
    ) -> BinomialModel:
        if K <= 0.0 or S0 <= 0.0:
            raise ValueError("spot and strike must be positive")
        n_odd = n_steps if n_steps % 2 else n_steps + 1
        dt = _step(T, sigma, n_odd)
        vol = sigma * sqrt(T)
        d2 = (log(S0 / K) + (r - q - 0.5 * sigma * sigma) * T) / vol
        p = up_probability(d2, n_odd)
        p_dash = up_probability(d2 + vol, n_odd)
        growth = exp((r - q) * dt)
        u = growth * p_dash / p
        d = (growth - p * u) / (1.0 - p)
        return cls(S0=S0, u=u, d=d, p=p, r=r, dt=dt, n_steps=n_odd)


def _step(T: float, sigma: float, n_steps: int) -> float:
    if n_steps <= 0:
        raise ValueError("n_steps must be positive")
    if T <= 0.0:
        raise ValueError("T must be positive")
    if sigma <= 0.0:
        raise ValueError("sigma must be positive")
    return T / n_steps


def _peizer_pratt_inversion(z: float, n: int) -> float:
    # Peizer-Pratt method 2 inversion of the normal CDF
    x = z / (n + 1.0 / 3.0 + 0.1 / (n + 1.0))
    x = exp(-x * x * (n + 1.0 / 6.0))
    sign = 1.0 if z > 0.0 else -1.0
    return 0.5 + sign * sqrt(0.25 * (1.0 - x))


def _joshi_up_probability(z: float, n: int) -> float:
    if n < 3:
        raise ValueError("joshi4 tree needs at least 3 steps")
    k = (n - 1.0) / 2.0
    a = z / sqrt(8.0)
    a2 = a * a
    a3 = a * a2
    a5 = a3 * a2
    a7 = a5 * a2
    beta = -0.375 * a - a3
    gamma = (5.0 / 6.0) * a5 + (13.0 / 12.0) * a3 + (25.0 / 128.0) * a
    delta = -0.1025 * a - 0.9285 * a3 - 1.43 * a5 - 0.5 * a7
    root_k = sqrt(k)
    return (
        0.5
        + a / root_k
        + beta / (k * root_k)
        + gamma / (k * k * root_k)
        + delta / (k * k * k * root_k)
    )


def build_model(
    tree: TreeType,
    *,
    S0: float,
    K: float,
    r: float,
    q: float,
    sigma: float,
    T: float,
    n_steps: int,
) -> BinomialModel:
    """Build the lattice named ``tree`` for the given market and contract.

    ``K`` is only used by the strike-centred trees (``leisen_reimer``,
    ``joshi4``), which also round ``n_steps`` up to the next odd number.
    """
    common = dict(S0=S0, r=r, q=q, sigma=sigma, T=T, n_steps=n_steps)
    if tree == "jarrow_rudd":
        return BinomialModel.from_jarrow_rudd(**common)
    if tree == "crr":
        return BinomialModel.from_crr(**common)
    if tree == "crr_drift":
        return BinomialModel.from_crr_drift(**common)
    if tree == "additive_eqp":
        return BinomialModel.from_additive_eqp(**common)
    if tree == "trigeorgis":
        return BinomialModel.from_trigeorgis(**common)
    if tree == "tian":
        return BinomialModel.from_tian(**common)
    if tree == "leisen_reimer":
        return BinomialModel.from_leisen_reimer(K=K, **common)
    if tree == "joshi4":
        return BinomialModel.from_joshi4(K=K, **common)
    raise ValueError(f"Unknown tree type: {tree!r}")
