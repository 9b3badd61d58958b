import numpy as np
import pytest

from stepsort.progress import ProgressEstimator
from stepsort.run import RunContext


@pytest.fixture
def make_ctx():
    def _make(algorithm, n, delay_ms=0):
        return RunContext(algorithm=algorithm, delay_ms=delay_ms,
                          progress=ProgressEstimator(algorithm, n))
    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
