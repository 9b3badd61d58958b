from collections import Counter

import numpy as np
import pytest

from stepsort.algorithms import (
    Algorithm, bogo_attempt_cap, bogo_sort, bubble_sort, get_generator,
    is_sorted, merge_sort, shuffle_in_place,
)


def _random_values(seed, n):
    rng = np.random.default_rng(seed)
    return [int(v) for v in rng.integers(5, 101, size=n)]


@pytest.mark.parametrize("seed", range(8))
@pytest.mark.parametrize("algorithm", [Algorithm.BUBBLE, Algorithm.MERGE])
def test_completed_run_is_sorted_permutation(make_ctx, rng, algorithm, seed):
    values = _random_values(seed, 5 + seed * 13)
    arr = list(values)
    ctx = make_ctx(algorithm, len(arr))
    for _ in get_generator(algorithm, arr, ctx, rng):
        pass
    assert arr == sorted(values)
    assert Counter(arr) == Counter(values)


def test_bubble_fixed_ten_values(make_ctx):
    arr = [5, 3, 9, 1, 7, 2, 8, 6, 4, 10]
    ctx = make_ctx(Algorithm.BUBBLE, len(arr))
    comparisons = sum(1 for _ in bubble_sort(arr, ctx))
    assert arr == [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
    assert comparisons <= 45
    assert ctx.progress.total == 45


def test_bubble_stops_after_pass_without_swaps(make_ctx):
    arr = list(range(1, 21))
    ctx = make_ctx(Algorithm.BUBBLE, len(arr))
    steps = list(bubble_sort(arr, ctx))
    # one full pass of n-1 comparisons, nothing more
    assert len(steps) == 19
    assert [active for _, active in steps] == [[j, j + 1] for j in range(19)]


def test_bubble_reversed_uses_every_pass(make_ctx):
    arr = list(range(12, 0, -1))
    ctx = make_ctx(Algorithm.BUBBLE, len(arr))
    assert sum(1 for _ in bubble_sort(arr, ctx)) == 12 * 11 // 2
    assert ctx.done == set(range(1, 12))


def test_bubble_marks_sorted_tail(make_ctx):
    arr = [4, 3, 2, 1, 5]
    ctx = make_ctx(Algorithm.BUBBLE, len(arr))
    gen = bubble_sort(arr, ctx)
    for _ in range(5):  # first pass (4) + first comparison of second pass
        next(gen)
    assert {4} <= ctx.done
    assert 0 not in ctx.done


def test_merge_two_elements(make_ctx):
    arr = [50, 10]
    ctx = make_ctx(Algorithm.MERGE, 2)
    gen = merge_sort(arr, ctx)
    _, active = next(gen)
    assert active == [0, 1]
    # comparisons only fill the auxiliary buffer
    assert arr == [50, 10]
    rest = [active for _, active in gen]
    assert rest == [[0], [1]]
    assert arr == [10, 50]


def test_merge_stays_inside_bounds(make_ctx):
    arr = _random_values(99, 37)
    ctx = make_ctx(Algorithm.MERGE, len(arr))
    for _, active in merge_sort(arr, ctx):
        assert all(0 <= i < 37 for i in active)


def test_merge_is_stable():
    class Key:
        def __init__(self, value, tag):
            self.value, self.tag = value, tag
        def __le__(self, other):
            return self.value <= other.value

    class Ctx:
        cancelled = False

    arr = [Key(1, "a"), Key(0, "b"), Key(1, "c"), Key(0, "d"), Key(1, "e")]
    for _ in merge_sort(arr, Ctx()):
        pass
    assert [k.tag for k in arr] == ["b", "d", "a", "c", "e"]


def test_bubble_cancel_stops_at_next_poll(make_ctx):
    arr = list(range(30, 0, -1))
    ctx = make_ctx(Algorithm.BUBBLE, len(arr))
    gen = bubble_sort(arr, ctx)
    for _ in range(10):
        next(gen)
    ctx.cancel()
    with pytest.raises(StopIteration):
        next(gen)
    frozen = list(arr)
    with pytest.raises(StopIteration):
        next(gen)
    assert arr == frozen
    assert Counter(arr) == Counter(range(1, 31))


def test_merge_cancel_during_placement_keeps_permutation(make_ctx):
    arr = [50, 10, 40, 20]
    ctx = make_ctx(Algorithm.MERGE, len(arr))
    gen = merge_sort(arr, ctx)
    next(gen)          # compare 0,1
    next(gen)          # place index 0
    assert arr == [10, 10, 40, 20]
    ctx.cancel()
    with pytest.raises(StopIteration):
        next(gen)
    # the slice in flight is finished, the second half is never merged
    assert arr == [10, 50, 40, 20]
    assert ctx.aborted
    with pytest.raises(StopIteration):
        next(gen)
    assert arr == [10, 50, 40, 20]


def test_is_sorted():
    assert is_sorted([])
    assert is_sorted([7])
    assert is_sorted([5, 5, 6])
    assert not is_sorted([6, 5])


def test_shuffle_keeps_multiset(rng):
    arr = [5, 5, 9, 12, 40, 40, 100]
    shuffle_in_place(arr, rng)
    assert Counter(arr) == Counter([5, 5, 9, 12, 40, 40, 100])


def test_bogo_already_sorted_does_no_shuffles(make_ctx, rng):
    arr = [5, 10, 20, 30]
    ctx = make_ctx(Algorithm.BOGO, len(arr))
    assert list(bogo_sort(arr, ctx, rng)) == []
    assert ctx.attempts == 0
    assert not ctx.capped


def test_bogo_small_array_sorts(make_ctx, rng):
    arr = [30, 10, 20]
    ctx = make_ctx(Algorithm.BOGO, len(arr))
    for _ in bogo_sort(arr, ctx, rng):
        pass
    assert arr == [10, 20, 30]
    assert ctx.attempts >= 1
    assert not ctx.capped


def test_bogo_gives_up_at_cap(make_ctx, rng, caplog):
    arr = list(range(12, 0, -1))
    ctx = make_ctx(Algorithm.BOGO, len(arr), delay_ms=200)
    with caplog.at_level("WARNING", logger="stepsort.algorithms"):
        steps = sum(1 for _ in bogo_sort(arr, ctx, rng))
    assert ctx.capped
    assert ctx.attempts == steps == bogo_attempt_cap(12, 200) == 1490
    assert Counter(arr) == Counter(range(1, 13))
    assert "gave up" in caplog.text


def test_bogo_cancel(make_ctx, rng):
    arr = list(range(20, 0, -1))
    ctx = make_ctx(Algorithm.BOGO, len(arr))
    gen = bogo_sort(arr, ctx, rng)
    next(gen)
    ctx.cancel()
    frozen = list(arr)
    with pytest.raises(StopIteration):
        next(gen)
    assert arr == frozen
    assert ctx.attempts == 1
    assert ctx.aborted
    assert not ctx.capped


@pytest.mark.parametrize("n, delay, expected", [
    (2, 0, 200),
    (5, 0, 402),
    (12, 200, 1490),
    (100, 0, 7000),
    (100, 200, 6000),
    (100, 400, 5000),
])
def test_bogo_attempt_cap(n, delay, expected):
    assert bogo_attempt_cap(n, delay) == expected


def test_get_generator_accepts_selector_strings(make_ctx, rng):
    arr = [3, 1, 2]
    ctx = make_ctx(Algorithm.MERGE, 3)
    for _ in get_generator("merge", arr, ctx, rng):
        pass
    assert arr == [1, 2, 3]
    with pytest.raises(ValueError):
        get_generator("quick", arr, ctx, rng)


@pytest.mark.parametrize("stop_after", [1, 7, 20, 41, 80])
def test_merge_cancel_anywhere_keeps_permutation(make_ctx, stop_after):
    values = _random_values(stop_after, 33)
    arr = list(values)
    ctx = make_ctx(Algorithm.MERGE, len(arr))
    gen = merge_sort(arr, ctx)
    for _ in range(stop_after):
        next(gen)
    ctx.cancel()
    assert list(gen) == []
    assert ctx.aborted
    assert Counter(arr) == Counter(values)


def test_generator_finishing_on_its_own_is_not_aborted(make_ctx):
    arr = [2, 1]
    ctx = make_ctx(Algorithm.BUBBLE, 2)
    gen = bubble_sort(arr, ctx)
    next(gen)
    ctx.cancel()
    assert list(gen) == []
    assert arr == [1, 2]
    assert not ctx.aborted
