"""
Run orchestration: the array, the single active run, and the commands
the front end issues against them.

The driver never sleeps. Whoever owns the frame loop calls `step()`
once the configured delay has elapsed, renders `snapshot()`, and
repeats until `step()` returns False.
"""

import enum
import logging
import time
from dataclasses import dataclass, field

import numpy as np

from . import settings
from .algorithms import Algorithm, get_generator
from .progress import ProgressEstimator

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    SORTED  = "sorted"
    STOPPED = "stopped"
    CAPPED  = "capped"


def generate_array(n, rng):
    """n values drawn uniformly from [VALUE_MIN, VALUE_MAX]."""
    values = rng.integers(settings.VALUE_MIN, settings.VALUE_MAX + 1, size=n)
    return [int(v) for v in values]


def _check_range(name, value, lo, hi):
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if not lo <= value <= hi:
        raise ValueError(f"{name} must be in [{lo}, {hi}], got {value}")
    return value


@dataclass
class RunContext:
    """Everything that lives exactly as long as one run."""
    algorithm: Algorithm
    delay_ms: int
    progress: ProgressEstimator
    cancelled: bool = False
    aborted: bool = False
    capped: bool = False
    attempts: int = 0
    done: set = field(default_factory=set)
    active: list = field(default_factory=list)
    started_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    outcome: Outcome | None = None

    def cancel(self):
        self.cancelled = True

    @property
    def running(self) -> bool:
        return self.outcome is None

    def elapsed(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at


@dataclass(frozen=True)
class Snapshot:
    array: tuple
    active: frozenset
    done: frozenset
    percent: float | None
    indeterminate: bool
    elapsed: float
    status: str
    busy: bool


class Driver:
    def __init__(self, size=settings.SIZE_DEFAULT, delay_ms=settings.DELAY_DEFAULT,
                 algorithm=settings.DEFAULT_ALGORITHM, seed=None):
        self.size      = _check_range("size", size, settings.SIZE_MIN, settings.SIZE_MAX)
        self.delay_ms  = _check_range("delay_ms", delay_ms, settings.DELAY_MIN, settings.DELAY_MAX)
        self.algorithm = Algorithm(getattr(algorithm, "value", algorithm))
        self.rng       = np.random.default_rng(seed)
        self.array     = generate_array(self.size, self.rng)
        self.run: RunContext | None = None
        self.last_run: RunContext | None = None
        self._gen = None

    @property
    def busy(self) -> bool:
        return self.run is not None

    # ---- configuration ----

    def resize(self, n):
        if self.busy:
            logger.info("Resize to %s ignored: a run is active", n)
            return False
        self.size = _check_range("size", n, settings.SIZE_MIN, settings.SIZE_MAX)
        self.array = generate_array(self.size, self.rng)
        self.last_run = None
        return True

    def set_delay(self, ms):
        # Read by the scheduler every step, so it may change mid-run
        self.delay_ms = _check_range("delay_ms", ms, settings.DELAY_MIN, settings.DELAY_MAX)
        if self.run is not None:
            self.run.delay_ms = self.delay_ms

    def set_algorithm(self, algorithm):
        algorithm = Algorithm(getattr(algorithm, "value", algorithm))
        if self.busy:
            logger.info("Algorithm change to %s ignored: a run is active", algorithm.value)
            return False
        self.algorithm = algorithm
        return True

    # ---- commands ----

    def randomize(self):
        if self.busy:
            logger.info("Randomize ignored: a run is active")
            return False
        self.array = generate_array(self.size, self.rng)
        self.last_run = None
        return True

    def start(self):
        """Begin a run over the current array; None if one is already active."""
        if self.busy:
            logger.info("Start ignored: a run is already active")
            return None
        ctx = RunContext(
            algorithm=self.algorithm,
            delay_ms=self.delay_ms,
            progress=ProgressEstimator(self.algorithm, len(self.array)),
        )
        self.run = ctx
        self._gen = get_generator(self.algorithm, self.array, ctx, self.rng)
        logger.info("Started %s over %d bars (%d ms/step)",
                    self.algorithm.value, len(self.array), self.delay_ms)
        return ctx

    def stop(self):
        if self.run is not None:
            self.run.cancel()

    def step(self):
        """Advance the active run by one unit. False once there is nothing left to run."""
        ctx = self.run
        if ctx is None:
            return False
        try:
            _, active = next(self._gen)
        except StopIteration:
            self._finish(ctx)
            return False
        ctx.active = list(active)
        ctx.progress.tick()
        return True

    def _finish(self, ctx):
        ctx.finished_at = time.monotonic()
        ctx.active = []
        # A stop that lands on the final step still leaves a finished sort
        if ctx.aborted:
            ctx.outcome = Outcome.STOPPED
        elif ctx.capped:
            ctx.outcome = Outcome.CAPPED
        else:
            ctx.outcome = Outcome.SORTED
            ctx.progress.complete()
            ctx.done = set(range(len(self.array)))
        logger.info("Run %s after %.2fs", ctx.outcome.value, ctx.elapsed())
        self.run = None
        self.last_run = ctx
        self._gen = None

    def run_to_end(self, sleep=None):
        """Drive the active run headlessly, optionally sleeping delay_ms between steps."""
        while self.step():
            if sleep is not None and self.delay_ms:
                sleep(self.delay_ms / 1000.0)
        return self.last_run

    # ---- view ----

    def snapshot(self):
        ctx = self.run or self.last_run
        if ctx is None:
            return Snapshot(tuple(self.array), frozenset(), frozenset(), None,
                            False, 0.0, "ready", False)
        if ctx.running:
            status = "running"
        elif ctx.outcome is Outcome.CAPPED:
            status = f"gave up after {ctx.attempts} shuffles"
        else:
            status = ctx.outcome.value
        return Snapshot(
            array=tuple(self.array),
            active=frozenset(ctx.active),
            done=frozenset(ctx.done),
            percent=ctx.progress.percent,
            indeterminate=ctx.progress.indeterminate,
            elapsed=ctx.elapsed(),
            status=status,
            busy=ctx.running,
        )
