import pytest

from compensatr.config import CompensatrConfig
from compensatr.models import Term


def test_defaults():
    config = CompensatrConfig(money=20)
    assert config.min_continents == 1
    assert config.target_years == 1
    assert config.min_short_term_percent == 0.0
    assert config.min_medium_term_percent == 0.0
    assert config.min_long_term_percent == 0.0
    assert config.iterations == 200000
    assert config.workers == 1
    assert config.seed is None
    assert config.timeout is None


def test_min_percents_and_constraints():
    config = CompensatrConfig(
        money=20,
        min_continents=3,
        min_short_term_percent=2,
        min_medium_term_percent=5,
        min_long_term_percent=10,
    )
    assert config.min_percents == {Term.SHORT: 2, Term.MEDIUM: 5, Term.LONG: 10}
    assert config.constraints.min_continents == 3
    assert config.constraints.min_percents[Term.LONG] == 10


@pytest.mark.parametrize(
    "overrides",
    [
        {"money": 0},
        {"money": -5},
        {"min_continents": -1},
        {"min_short_term_percent": 101},
        {"min_long_term_percent": -1},
        {"iterations": 0},
        {"workers": 0},
        {"timeout": 0},
    ],
)
def test_invalid_values_are_rejected(overrides):
    params = {"money": 20, **overrides}
    with pytest.raises(ValueError):
        CompensatrConfig(**params)
