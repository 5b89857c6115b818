import datetime as dt
import math

import pytest

from pricing_cache.demo import (
    DemoCase,
    add_months,
    build_caches,
    comparison_table,
    format_elapsed,
    main,
    year_fraction,
)
from pricing_cache.types import ExerciseStyle


def test_add_months_clamps_to_month_end():
    assert add_months(dt.date(1998, 5, 17), 3) == dt.date(1998, 8, 17)
    assert add_months(dt.date(1998, 11, 30), 3) == dt.date(1999, 2, 28)
    assert add_months(dt.date(1999, 1, 31), 1) == dt.date(1999, 2, 28)


def test_year_fraction_actual_365():
    assert year_fraction(dt.date(1998, 5, 15), dt.date(1999, 5, 17)) == 367 / 365
    assert year_fraction(dt.date(1998, 5, 17), dt.date(1999, 5, 17)) == 1.0


def test_demo_case_bermudan_schedule():
    case = DemoCase()
    p = case.inputs(ExerciseStyle.BERMUDAN)

    assert case.exercise_dates()[-1] == case.maturity
    assert len(p.spec.exercise_times) == 4
    assert p.T == 1.0
    assert p.t == 0.0
    expected = (92 / 365, 184 / 365, 276 / 365, 1.0)
    assert p.spec.exercise_times == pytest.approx(expected)
    assert case.inputs(ExerciseStyle.EUROPEAN).spec.exercise_times == ()


def test_comparison_table_shape_and_ordering():
    case = DemoCase()
    caches = build_caches(101)

    df = comparison_table(case, caches)

    assert list(df.columns) == ["Method", "European", "Bermudan", "American"]
    assert len(df) == 7
    assert (df["European"] < df["Bermudan"]).all()
    assert (df["Bermudan"] < df["American"]).all()


def test_second_table_is_served_from_cache():
    case = DemoCase()
    caches = build_caches(51, with_bs=True)
    first = comparison_table(case, caches)
    sizes = {label: len(c) for label, c in caches.items()}

    for cache in caches.values():
        cache.set_generator(_fail)
    second = comparison_table(case, caches)

    assert second.equals(first)
    assert {label: len(c) for label, c in caches.items()} == sizes
    assert sizes["Black-Scholes"] == 1
    assert sizes["Binomial Cox-Ross-Rubinstein"] == 3


def _fail(_key):
    raise AssertionError("cache miss on a warm cache")


def test_european_only_rows_show_nan():
    case = DemoCase()
    df = comparison_table(case, build_caches(21, with_bs=True)).set_index("Method")

    assert math.isnan(df.loc["Black-Scholes", "American"])
    assert df.loc["Black-Scholes", "European"] == pytest.approx(3.844308, abs=1e-6)


@pytest.mark.parametrize(
    "seconds, expected",
    [
        (4.2, "Run completed in 4 s"),
        (65.0, "Run completed in 1 m 5 s"),
        (3725.0, "Run completed in 1 h 2 m 5 s"),
    ],
)
def test_format_elapsed(seconds, expected):
    assert format_elapsed(seconds) == expected


def test_main_prints_table(capsys):
    assert main(["--steps", "51", "--bs", "--mc", "2000"]) == 0

    out = capsys.readouterr().out
    assert "Option type = Put" in out
    assert "Binomial Leisen-Reimer" in out
    assert "MC (crude)" in out
    assert "N/A" in out
    assert "From cache:" in out
    assert "Run completed in" in out


def test_main_reports_errors(capsys):
    # antithetic sampling needs an even path count
    assert main(["--steps", "11", "--mc", "2001"]) == 1
    assert "even" in capsys.readouterr().err


def test_leisen_reimer_american_reference_value():
    """Times run from settlement, so T = 1 exactly for the demo put."""
    caches = build_caches(801)
    cache = caches["Binomial Leisen-Reimer"]

    price = cache.lookup(DemoCase().inputs(ExerciseStyle.AMERICAN))

    assert price == pytest.approx(4.486076, abs=1e-5)
