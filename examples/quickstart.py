from __future__ import annotations


def main() -> None:
    # [START README_QUICKSTART]
    from pricing_cache import (
        Cache,
        ExerciseStyle,
        MarketData,
        OptionSpec,
        OptionType,
        PricingInputs,
        TreeConfig,
        cached_pricer,
    )
    from pricing_cache.valuation import tree_pricer

    square = Cache(lambda x: x * x)
    print("square(4):", square.lookup(4), "entries:", len(square))

    market = MarketData(spot=36.0, rate=0.06, dividend_yield=0.0)
    spec = OptionSpec(
        kind=OptionType.PUT, strike=40.0, expiry=1.0, exercise=ExerciseStyle.AMERICAN
    )
    p = PricingInputs(spec=spec, market=market, sigma=0.20, t=0.0)

    prices = cached_pricer(tree_pricer(TreeConfig(n_steps=2000, tree="leisen_reimer")))
    print("American put (computed):", prices.lookup(p))
    print("American put (cached):  ", prices.lookup(p))
    # [END README_QUICKSTART]


if __name__ == "__main__":
    main()
