import pytest

from stepsort.algorithms import Algorithm
from stepsort.progress import ProgressEstimator, estimate_total


@pytest.mark.parametrize("algorithm, n, expected", [
    (Algorithm.BUBBLE, 10, 45),
    (Algorithm.BUBBLE, 5, 10),
    (Algorithm.MERGE, 8, 48),
    (Algorithm.MERGE, 5, 24),
    (Algorithm.MERGE, 1, 0),
    (Algorithm.BOGO, 50, 0),
    ("bubble", 3, 3),
])
def test_estimate_total(algorithm, n, expected):
    assert estimate_total(algorithm, n) == expected


def test_estimate_total_unknown():
    with pytest.raises(ValueError):
        estimate_total("heap", 10)


def test_tick_clamps_at_total():
    p = ProgressEstimator(Algorithm.BUBBLE, 4)
    assert p.total == 6
    for _ in range(10):
        p.tick()
    assert p.done == 6
    assert p.percent == 100.0


def test_percent_and_reset():
    p = ProgressEstimator(Algorithm.MERGE, 8)
    p.tick(12)
    assert p.percent == pytest.approx(25.0)
    p.reset()
    assert p.done == 0
    assert p.percent == 0.0
    p.complete()
    assert p.done == p.total


def test_bogo_is_indeterminate():
    p = ProgressEstimator(Algorithm.BOGO, 20)
    p.tick()
    assert p.indeterminate
    assert p.total == 0
    assert p.done == 0
    assert p.percent is None
