from __future__ import annotations

import numpy as np

from ..config import TreeConfig
from ..models.binomial import BinomialModel, build_model
from ..types import ExerciseStyle, PricingInputs
from ..vanilla import Payoff, make_vanilla_payoff


def _node_prices(model: BinomialModel, step: int) -> np.ndarray:
    j = np.arange(step + 1, dtype=np.float64)
    # log space keeps u**j finite for long trees
    return model.S0 * np.exp(j * np.log(model.u) + (step - j) * np.log(model.d))


def exercise_steps(p: PricingInputs, model: BinomialModel) -> frozenset[int]:
    """Tree steps (before expiry) at which early exercise is allowed.

    Bermudan exercise times are mapped to the nearest step; times before the
    valuation time ``p.t`` are dropped.
    """
    style = p.spec.exercise
    if style == ExerciseStyle.EUROPEAN:
        return frozenset()
    if style == ExerciseStyle.AMERICAN:
        return frozenset(range(model.n_steps))

    steps = set()
    for time in p.spec.exercise_times:
        if time < p.t:
            continue
        step = int(round((time - p.t) / model.dt))
        steps.add(min(step, model.n_steps))
    steps.discard(model.n_steps)  # expiry is always exercised
    return frozenset(steps)


def price_on_tree(
    model: BinomialModel,
    payoff: Payoff,
    *,
    early_exercise: frozenset[int] = frozenset(),
) -> float:
    """
    Backward induction on a recombining binomial tree.

    At each step listed in ``early_exercise`` the continuation value is floored
    at the intrinsic value ``payoff(S)``.
    """
    values = payoff(_node_prices(model, model.n_steps))

    p = model.p
    disc = model.disc_step

    for step in range(model.n_steps - 1, -1, -1):
        values = disc * (p * values[1:] + (1.0 - p) * values[:-1])
        if step in early_exercise:
            values = np.maximum(values, payoff(_node_prices(model, step)))

    return float(values[0])


def binom_price(p: PricingInputs, *, cfg: TreeConfig | None = None) -> float:
    """
    Binomial price of a vanilla option with European, Bermudan or American exercise.

    Parameters
    ----------
    p : PricingInputs
        Contract, market and volatility. ``p.spec.exercise`` selects the
        exercise style.
    cfg : TreeConfig, optional
        Lattice parametrisation and number of steps. Defaults to
        ``TreeConfig()`` (Cox-Ross-Rubinstein).

    Returns
    -------
    float
        Present value at time ``p.t``.
    """
    cfg = cfg or TreeConfig()
    model = build_model(
        cfg.tree,
        S0=p.S,
        K=p.K,
        r=p.r,
        q=p.q,
        sigma=p.sigma,
        T=p.tau,
        n_steps=cfg.n_steps,
    )
    payoff = make_vanilla_payoff(p.spec.kind, K=p.K)
    return price_on_tree(model, payoff, early_exercise=exercise_steps(p, model))
