import pytest

from pricing_cache.types import ExerciseStyle, OptionSpec, OptionType


def test_pricing_inputs_are_hashable_value_objects(make_inputs):
    a = make_inputs(S=100.0, K=100.0, r=0.05, sigma=0.2, T=1.0)
    b = make_inputs(S=100.0, K=100.0, r=0.05, sigma=0.2, T=1.0)
    c = make_inputs(S=100.0, K=100.0, r=0.05, sigma=0.21, T=1.0)

    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert len({a, b, c}) == 2


def test_exercise_times_are_normalised_to_sorted_tuple():
    spec = OptionSpec(
        kind=OptionType.PUT,
        strike=40.0,
        expiry=1.0,
        exercise=ExerciseStyle.BERMUDAN,
        exercise_times=[0.75, 0.25, 0.5],  # type: ignore[arg-type]
    )
    assert spec.exercise_times == (0.25, 0.5, 0.75)
    hash(spec)


def test_bermudan_requires_exercise_times():
    with pytest.raises(ValueError, match="at least one"):
        OptionSpec(
            kind=OptionType.PUT,
            strike=40.0,
            expiry=1.0,
            exercise=ExerciseStyle.BERMUDAN,
        )


def test_exercise_times_must_not_exceed_expiry():
    with pytest.raises(ValueError, match="expiry"):
        OptionSpec(
            kind=OptionType.PUT,
            strike=40.0,
            expiry=1.0,
            exercise=ExerciseStyle.BERMUDAN,
            exercise_times=(0.5, 1.5),
        )


def test_exercise_times_only_for_bermudan():
    with pytest.raises(ValueError, match="Bermudan"):
        OptionSpec(
            kind=OptionType.CALL, strike=40.0, expiry=1.0, exercise_times=(0.5,)
        )


def test_tau_requires_expiry_after_valuation_time(make_inputs):
    p = make_inputs(S=100.0, K=100.0, r=0.05, sigma=0.2, T=1.0, t=1.0)
    with pytest.raises(ValueError, match="expiry > t"):
        p.tau
