from .algorithms import ALGORITHMS, Algorithm, bogo_sort, bubble_sort, merge_sort
from .progress import ProgressEstimator, estimate_total
from .run import Driver, Outcome, RunContext, Snapshot, generate_array

__version__ = "0.1.0"
