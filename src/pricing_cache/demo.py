"""Compare binomial engines on European, Bermudan and American puts.

Every valuation goes through a per-method :class:`~pricing_cache.cache.Cache`;
the table is printed twice, the second time entirely from the warm caches.

Run:

    python -m pricing_cache.demo
    python -m pricing_cache.demo --steps 801 --bs --mc -v
"""

from __future__ import annotations

import argparse
import calendar
import datetime as dt
import logging
import math
import sys
import time
from collections.abc import Sequence
from dataclasses import dataclass

import pandas as pd

from .cache import Cache
from .config import MCConfig, RandomConfig, TreeConfig
from .types import ExerciseStyle, MarketData, OptionSpec, OptionType, PricingInputs
from .valuation import METHODS, bs_pricer, cached_pricer, mc_pricer, tree_pricer

logger = logging.getLogger(__name__)

STYLES = (ExerciseStyle.EUROPEAN, ExerciseStyle.BERMUDAN, ExerciseStyle.AMERICAN)


def add_months(date: dt.date, months: int) -> dt.date:
    """Shift ``date`` by whole months, clamping the day to the month's end."""
    index = date.month - 1 + months
    year, month = date.year + index // 12, index % 12 + 1
    day = min(date.day, calendar.monthrange(year, month)[1])
    return dt.date(year, month, day)


def year_fraction(start: dt.date, end: dt.date) -> float:
    """Actual/365 Fixed."""
    return (end - start).days / 365.0


@dataclass(frozen=True, slots=True)
class DemoCase:
    kind: OptionType = OptionType.PUT
    spot: float = 36.0
    strike: float = 40.0
    dividend_yield: float = 0.0
    rate: float = 0.06
    sigma: float = 0.20
    valuation_date: dt.date = dt.date(1998, 5, 15)
    settlement_date: dt.date = dt.date(1998, 5, 17)
    maturity: dt.date = dt.date(1999, 5, 17)
    bermudan_months: tuple[int, ...] = (3, 6, 9, 12)

    def exercise_dates(self) -> list[dt.date]:
        return [add_months(self.settlement_date, m) for m in self.bermudan_months]

    def inputs(self, style: ExerciseStyle) -> PricingInputs:
        """Pricing inputs with times measured from settlement (t = 0)."""
        times: tuple[float, ...] = ()
        if style == ExerciseStyle.BERMUDAN:
            times = tuple(
                year_fraction(self.settlement_date, d) for d in self.exercise_dates()
            )
        spec = OptionSpec(
            kind=self.kind,
            strike=self.strike,
            expiry=year_fraction(self.settlement_date, self.maturity),
            exercise=style,
            exercise_times=times,
        )
        market = MarketData(
            spot=self.spot, rate=self.rate, dividend_yield=self.dividend_yield
        )
        return PricingInputs(spec=spec, market=market, sigma=self.sigma)


def describe(case: DemoCase) -> str:
    return "\n".join(
        [
            f"Option type = {case.kind.value.capitalize()}",
            f"Maturity = {case.maturity:%B %d, %Y}",
            f"Underlying price = {case.spot:g}",
            f"Strike = {case.strike:g}",
            f"Risk-free interest rate = {case.rate:.6%}",
            f"Dividend yield = {case.dividend_yield:.6%}",
            f"Volatility = {case.sigma:.6%}",
        ]
    )


def build_caches(
    n_steps: int, *, with_bs: bool = False, mc_cfg: MCConfig | None = None
) -> dict[str, Cache[PricingInputs, float]]:
    """One cache per comparison method, in table order."""
    caches: dict[str, Cache[PricingInputs, float]] = {}
    if with_bs:
        caches["Black-Scholes"] = cached_pricer(bs_pricer())
    for label, tree in METHODS.items():
        cfg = TreeConfig(n_steps=n_steps, tree=tree)
        caches[label] = cached_pricer(tree_pricer(cfg))
    if mc_cfg is not None:
        caches["MC (crude)"] = cached_pricer(mc_pricer(mc_cfg))
    return caches


def comparison_table(
    case: DemoCase, caches: dict[str, Cache[PricingInputs, float]]
) -> pd.DataFrame:
    """Method x exercise-style NPVs; styles a method cannot price are NaN."""
    european_only = {"Black-Scholes", "MC (crude)"}
    rows: list[dict[str, object]] = []
    for label, cache in caches.items():
        row: dict[str, object] = {"Method": label}
        for style in STYLES:
            if label in european_only and style != ExerciseStyle.EUROPEAN:
                row[style.value.capitalize()] = math.nan
                continue
            row[style.value.capitalize()] = cache.lookup(case.inputs(style))
        rows.append(row)
    return pd.DataFrame(rows, columns=["Method", "European", "Bermudan", "American"])


def format_table(df: pd.DataFrame) -> str:
    return df.to_string(index=False, na_rep="N/A", float_format=lambda x: f"{x:.6f}")


def format_elapsed(seconds: float) -> str:
    hours = int(seconds / 3600)
    seconds -= hours * 3600
    minutes = int(seconds / 60)
    seconds -= minutes * 60
    out = "Run completed in "
    if hours > 0:
        out += f"{hours} h "
    if hours > 0 or minutes > 0:
        out += f"{minutes} m "
    return out + f"{seconds:.0f} s"


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--steps", type=int, default=5000, help="binomial time steps")
    parser.add_argument("--bs", action="store_true", help="add a Black-Scholes row")
    parser.add_argument(
        "--mc",
        type=int,
        nargs="?",
        const=100_000,
        default=None,
        metavar="N_PATHS",
        help="add a Monte Carlo row (default 100000 paths)",
    )
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        start = time.perf_counter()
        case = DemoCase()
        mc_cfg = None
        if args.mc is not None:
            mc_cfg = MCConfig(n_paths=args.mc, random=RandomConfig(seed=args.seed))
        caches = build_caches(args.steps, with_bs=args.bs, mc_cfg=mc_cfg)

        print()
        print(describe(case))
        print()
        print(format_table(comparison_table(case, caches)))

        warm = time.perf_counter()
        table = comparison_table(case, caches)
        logger.info(
            "second pass served %d cached values in %.3f s",
            sum(len(c) for c in caches.values()),
            time.perf_counter() - warm,
        )
        print()
        print("From cache:")
        print(format_table(table))

        print(f"\n{format_elapsed(time.perf_counter() - start)}\n")
        return 0
    except Exception as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
