from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, get_args

RngType = Literal["pcg64", "mt19937"]

TreeType = Literal[
    "jarrow_rudd",
    "crr",
    "crr_drift",
    "additive_eqp",
    "trigeorgis",
    "tian",
    "leisen_reimer",
    "joshi4",
]


@dataclass(frozen=True, slots=True)
class RandomConfig:
    seed: int = 0
    rng_type: RngType = "pcg64"

    def __post_init__(self) -> None:
        if self.rng_type not in get_args(RngType):
            raise ValueError(f"Unknown rng_type: {self.rng_type!r}")


@dataclass(frozen=True, slots=True)
class MCConfig:
    n_paths: int = 100_000
    antithetic: bool = True
    random: RandomConfig = field(default_factory=RandomConfig)

    def __post_init__(self) -> None:
        if self.n_paths <= 0:
            raise ValueError("n_paths must be > 0")
        if self.antithetic and self.n_paths % 2 != 0:
            raise ValueError("antithetic=True requires an even n_paths")


@dataclass(frozen=True, slots=True)
class TreeConfig:
    n_steps: int = 801
    tree: TreeType = "crr"

    def __post_init__(self) -> None:
        if self.n_steps <= 0:
            raise ValueError("n_steps must be > 0")
        if self.tree not in get_args(TreeType):
            raise ValueError(f"Unknown tree type: {self.tree!r}")
