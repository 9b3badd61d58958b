import enum
import logging
import math

logger = logging.getLogger(__name__)


class Algorithm(enum.Enum):
    MERGE  = "merge"
    BUBBLE = "bubble"
    BOGO   = "rng"


ALGORITHMS = [
    ("Merge Sort",  Algorithm.MERGE),
    ("Bubble Sort", Algorithm.BUBBLE),
    ("RNG (Bogo)",  Algorithm.BOGO),
]

# ============================================================
# ===================== SORTING ALGORITHMS ===================
# ============================================================
#
# Every sorter is a generator taking the array and the run context.
# It mutates `arr` in place and yields (arr, [active_indices]) after
# each unit of work; the caller decides how long to wait before the
# next next(). `ctx.cancelled` is polled before every unit, and once
# it is set the generator marks `ctx.aborted` and returns. A generator
# that runs off its own end leaves `ctx.aborted` False even when a stop
# arrived during its final step.


def bubble_sort(arr, ctx):
    n = len(arr)
    for i in range(n - 1):
        swapped = False
        for j in range(n - i - 1):
            if ctx.cancelled:
                ctx.aborted = True
                return
            yield arr, [j, j + 1]
            if arr[j] > arr[j + 1]:
                arr[j], arr[j + 1] = arr[j + 1], arr[j]
                swapped = True
        ctx.done.update(range(n - i - 1, n))
        if not swapped:
            break


def merge_sort(arr, ctx):
    aux = list(arr)

    def _merge(l, m, r):
        i, j, k = l, m + 1, l
        while i <= m and j <= r:
            if ctx.cancelled:
                ctx.aborted = True
                return
            yield arr, [i, j]
            # <= keeps equal keys in their original order
            if arr[i] <= arr[j]:
                aux[k] = arr[i]; i += 1
            else:
                aux[k] = arr[j]; j += 1
            k += 1
        while i <= m: aux[k] = arr[i]; i += 1; k += 1
        while j <= r: aux[k] = arr[j]; j += 1; k += 1
        for t in range(l, r + 1):
            if ctx.cancelled:
                # flush the rest of the slice so arr stays a permutation
                arr[t:r + 1] = aux[t:r + 1]
                ctx.aborted = True
                return
            arr[t] = aux[t]
            yield arr, [t]

    def _ms(l, r):
        if ctx.cancelled:
            ctx.aborted = True
            return
        if l >= r:
            return
        m = (l + r) // 2
        yield from _ms(l, m)
        yield from _ms(m + 1, r)
        yield from _merge(l, m, r)

    yield from _ms(0, len(arr) - 1)


def is_sorted(arr):
    return all(arr[i - 1] <= arr[i] for i in range(1, len(arr)))


def shuffle_in_place(arr, rng):
    """Fisher-Yates: walk down from the end, swapping with a random earlier slot."""
    for i in range(len(arr) - 1, 0, -1):
        j = int(rng.integers(0, i + 1))
        arr[i], arr[j] = arr[j], arr[i]
    return arr


def bogo_attempt_cap(n, delay_ms):
    """
    Upper bound on shuffle attempts for a bogo run.

    The base cap grows like 50 * n * ln(n); a soft ceiling of
    5000 + max(0, 2000 - 5 * delay_ms) keeps fast runs from churning
    the frame loop forever.
    """
    base_cap = max(200, math.floor(50 * n * math.log(max(2, n))))
    return min(base_cap, 5000 + max(0, 2000 - delay_ms * 5))


def bogo_sort(arr, ctx, rng):
    cap = bogo_attempt_cap(len(arr), ctx.delay_ms)
    while not is_sorted(arr):
        if ctx.cancelled:
            ctx.aborted = True
            return
        # at most `cap` shuffles in total, one fewer than a post-increment check allows
        if ctx.attempts >= cap:
            logger.warning("Bogo sort gave up after %d shuffles (n=%d)", ctx.attempts, len(arr))
            ctx.capped = True
            return
        shuffle_in_place(arr, rng)
        ctx.attempts += 1
        yield arr, []


def get_generator(algorithm, arr, ctx, rng):
    key = Algorithm(getattr(algorithm, "value", algorithm))
    builtins = {
        Algorithm.BUBBLE: lambda: bubble_sort(arr, ctx),
        Algorithm.MERGE:  lambda: merge_sort(arr, ctx),
        Algorithm.BOGO:   lambda: bogo_sort(arr, ctx, rng),
    }
    return builtins[key]()
