from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from ..config import MCConfig, RandomConfig
from ..types import ExerciseStyle, PricingInputs
from ..vanilla import Payoff, make_vanilla_payoff


def make_rng(cfg: RandomConfig) -> np.random.Generator:
    if cfg.rng_type == "mt19937":
        return np.random.Generator(np.random.MT19937(cfg.seed))
    return np.random.Generator(np.random.PCG64(cfg.seed))


@dataclass(frozen=True, slots=True)
class McGBMModel:
    """
    Monte Carlo pricer for European payoffs under risk-neutral GBM.

        dS_t = (r - q) S_t dt + sigma S_t dW_t

    Only terminal prices are simulated, so the model suits European payoffs.
    """

    S0: float
    r: float
    q: float
    sigma: float
    tau: float

    def __post_init__(self) -> None:
        if self.S0 <= 0.0:
            raise ValueError("S0 must be positive")
        if self.sigma <= 0.0:
            raise ValueError("sigma must be positive")
        if self.tau <= 0.0:
            raise ValueError("tau must be positive")

    def _terminal(self, Z: np.ndarray) -> np.ndarray:
        drift = (self.r - self.q - 0.5 * self.sigma**2) * self.tau
        vol = self.sigma * np.sqrt(self.tau)
        return self.S0 * np.exp(drift + vol * Z)

    def price_european(
        self,
        payoff: Payoff,
        *,
        n_paths: int,
        antithetic: bool,
        rng: np.random.Generator,
    ) -> tuple[float, float]:
        """
        Discounted Monte Carlo estimate of ``E[payoff(S_T)]`` and its standard error.

        With ``antithetic=True`` the samples are formed from ``Z``/``-Z`` pairs and
        the standard error uses the ``n_paths/2`` pair averages as observations.
        """
        disc = float(np.exp(-self.r * self.tau))

        if antithetic:
            Z = rng.standard_normal(n_paths // 2)
            X = 0.5 * (payoff(self._terminal(Z)) + payoff(self._terminal(-Z)))
        else:
            X = payoff(self._terminal(rng.standard_normal(n_paths)))

        n = X.size
        std = float(X.std(ddof=1)) if n > 1 else 0.0
        return disc * float(X.mean()), disc * std / float(np.sqrt(n))


def mc_price(p: PricingInputs, *, cfg: MCConfig | None = None) -> tuple[float, float]:
    """
    Price a European vanilla option by Monte Carlo simulation under GBM.

    Parameters
    ----------
    p : PricingInputs
        Pricing inputs; ``p.spec.exercise`` must be European.
    cfg : MCConfig, optional
        Path count, antithetic pairing and RNG seed. Equal configs give equal
        results, so the function is deterministic for a fixed ``cfg``.

    Returns
    -------
    (price, stderr) : tuple[float, float]
    """
    if p.spec.exercise != ExerciseStyle.EUROPEAN:
        raise ValueError(
            f"Monte Carlo prices European options only, got {p.spec.exercise.value}"
        )
    cfg = cfg or MCConfig()
    model = McGBMModel(S0=p.S, r=p.r, q=p.q, sigma=p.sigma, tau=p.tau)
    return model.price_european(
        make_vanilla_payoff(p.spec.kind, K=p.K),
        n_paths=cfg.n_paths,
        antithetic=cfg.antithetic,
        rng=make_rng(cfg.random),
    )
