import math


def estimate_total(algorithm, n: int) -> int:
    """
    Closed-form tick estimate for a run of `algorithm` over `n` bars.

      bubble : n(n-1)/2          (every comparison of a full run)
      merge  : ceil(2 n log2 n)  (comparisons + copy-back placements)
      rng    : 0                 (indeterminate, no useful estimate)
    """
    key = getattr(algorithm, "value", algorithm)
    if key == "bubble":
        return n * (n - 1) // 2
    if key == "merge":
        if n < 2:
            return 0
        return math.ceil(2 * n * math.log2(n))
    if key == "rng":
        return 0
    raise ValueError(f"Unknown algorithm: {algorithm!r}")


class ProgressEstimator:
    """Done/total tick counter with a clamped percentage."""

    def __init__(self, algorithm, n: int):
        self.algorithm = getattr(algorithm, "value", algorithm)
        self.total = estimate_total(algorithm, n)
        self.done = 0

    @property
    def indeterminate(self) -> bool:
        return self.algorithm == "rng"

    def tick(self, count: int = 1):
        self.done = min(self.total, self.done + count)

    def complete(self):
        self.done = self.total

    def reset(self):
        self.done = 0

    @property
    def percent(self):
        if self.indeterminate:
            return None
        if self.total == 0:
            return 100.0
        return 100.0 * self.done / self.total
