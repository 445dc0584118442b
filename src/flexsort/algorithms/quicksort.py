"""
Configurable quicksort.

Iterative three-way (Dutch national flag) quicksort driven by an explicit
work-list of inclusive [lo, hi] ranges, with:
- pivot selection: "random" (default), "median3", "first", "last"
- insertion sort for ranges with hi - lo <= insertion_threshold
- optional stability: elements are tagged with their original index and
  ties under the comparator are broken by that index
- optional in-place operation on mutable sequences

Public API (stable):
    quick_sort(data, config=None) -> list | MutableSequence
    sort(a, *, config=None) -> list | MutableSequence   # benchmark harness adapter

`config` may be a `SortConfig`, a plain mapping (see `flexsort.config`) or None.

Conventions:
- With in_place=False (default) the input is never mutated and the result
  is always a new list, even for empty or single-element inputs.
- With in_place=True and a `MutableSequence` input (list, bytearray, ...)
  the input itself is sorted and returned. Other inputs (tuple, str,
  generators, sets, numpy arrays) are materialized and a new list is returned.
- Comparator errors propagate unchanged. The sequence being sorted only
  ever sees whole-element swaps and shifts, so after a failure it still
  holds a permutation of its elements (except for a stable in-place sort,
  where the caller's sequence is untouched until the final copy-back).
"""

from __future__ import annotations

import logging
import random
from collections.abc import MutableSequence, Sequence
from typing import Any, Callable, List, Mapping, Tuple

from flexsort.config import PivotStrategy, SortConfig, resolve_config
from flexsort.errors import InvalidArgument

logger = logging.getLogger(__name__)

__all__ = ["quick_sort", "sort", "default_comparator"]


def default_comparator(a: Any, b: Any) -> int:
    """Natural ordering via `<` and `>`."""
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def quick_sort(data: Any, config: "SortConfig | Mapping[str, Any] | None" = None) -> Any:
    """
    Sort `data` according to `config`.

    Parameters
    ----------
    data : iterable
        Elements to sort. Must not be None.
    config : SortConfig | mapping | None
        Comparator, in-place, stability and pivot options.

    Returns
    -------
    list | MutableSequence
        The sorted elements. The same object as `data` when sorting in place
        on a mutable sequence, otherwise a new list.

    Raises
    ------
    InvalidArgument
        If `data` is None or not iterable, or `config` is invalid.
    """
    if data is None:
        raise InvalidArgument("input must be a sequence or iterable, not None")
    cfg = resolve_config(config)
    owned = cfg.in_place and isinstance(data, MutableSequence)
    if not owned and not isinstance(data, Sequence):
        try:
            iter(data)
        except TypeError as e:
            raise InvalidArgument(
                f"input must be a sequence or iterable; got {type(data).__name__}"
            ) from e

    user_cmp = cfg.comparator if cfg.comparator is not None else default_comparator

    if cfg.stable:
        working: Any = [(v, i) for i, v in enumerate(data)]
        cmp = _stable_comparator(user_cmp)
    else:
        working = data if owned else list(data)
        cmp = user_cmp

    n = len(working)
    ranges = peak = 0
    if n > 1:
        choose = _pivot_chooser(cfg, cmp)
        ranges, peak = _sort_ranges(working, cmp, choose, cfg.insertion_threshold)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "quick_sort n=%d pivot=%s stable=%s in_place=%s ranges=%d peak_worklist=%d",
            n, cfg.pivot_strategy, cfg.stable, owned, ranges, peak,
        )
    return _shape_result(data, working, stable=cfg.stable, owned=owned)


def sort(a: Any, *, config: "SortConfig | Mapping[str, Any] | None" = None) -> Any:
    """Harness entry point: same as `quick_sort(a, config)`."""
    return quick_sort(a, config)


# ------------------------- phases ------------------------- #


def _stable_comparator(user_cmp: Callable[[Any, Any], int]) -> Callable[[Tuple[Any, int], Tuple[Any, int]], int]:
    def cmp(x: Tuple[Any, int], y: Tuple[Any, int]) -> int:
        r = user_cmp(x[0], y[0])
        if r:
            return r
        return x[1] - y[1]

    return cmp


def _pivot_chooser(cfg: SortConfig, cmp: Callable[[Any, Any], int]) -> Callable[[List[Any], int, int], int]:
    strategy = cfg.pivot_strategy
    if strategy == PivotStrategy.FIRST:
        return lambda arr, lo, hi: lo
    if strategy == PivotStrategy.LAST:
        return lambda arr, lo, hi: hi
    if strategy == PivotStrategy.MEDIAN3:
        return lambda arr, lo, hi: _median_of_three(arr, lo, hi, cmp)
    rand = random.Random(cfg.seed).randint
    return lambda arr, lo, hi: rand(lo, hi)


def _median_of_three(arr: List[Any], lo: int, hi: int, cmp: Callable[[Any, Any], int]) -> int:
    """
    Index of the median of arr[lo], arr[mid], arr[hi] using at most three
    comparisons. On ties the middle position wins.
    """
    mid = lo + (hi - lo) // 2
    a, b, c = arr[lo], arr[mid], arr[hi]
    ab = cmp(a, b)
    if ab <= 0:
        if cmp(b, c) <= 0:
            return mid  # a <= b <= c
        if cmp(a, c) <= 0:
            return hi  # a <= c < b
        return mid if ab == 0 else lo  # c < a <= b
    if cmp(a, c) <= 0:
        return lo  # b < a <= c
    bc = cmp(b, c)
    if bc < 0:
        return hi  # b < c < a
    return mid  # c <= b < a


def _insertion_sort(arr: List[Any], lo: int, hi: int, cmp: Callable[[Any, Any], int]) -> None:
    # Shifting only on strict greater-than keeps equal elements in order.
    for i in range(lo + 1, hi + 1):
        tmp = arr[i]
        j = i
        try:
            while j > lo and cmp(arr[j - 1], tmp) > 0:
                arr[j] = arr[j - 1]
                j -= 1
        finally:
            # arr[j] is the hole left by shifting; refill it even if cmp raised
            arr[j] = tmp


def _partition3(arr: List[Any], lo: int, hi: int, pivot: Any, cmp: Callable[[Any, Any], int]) -> Tuple[int, int]:
    """
    Rearrange arr[lo..hi] into < pivot, == pivot, > pivot and return (lt, gt)
    such that arr[lt..gt] holds exactly the elements equal to the pivot.
    """
    i = lt = lo
    gt = hi
    while i <= gt:
        r = cmp(arr[i], pivot)
        if r < 0:
            arr[lt], arr[i] = arr[i], arr[lt]
            lt += 1
            i += 1
        elif r > 0:
            arr[i], arr[gt] = arr[gt], arr[i]
            gt -= 1
        else:
            i += 1
    return lt, gt


def _sort_ranges(
    arr: List[Any],
    cmp: Callable[[Any, Any], int],
    choose: Callable[[List[Any], int, int], int],
    threshold: int,
) -> Tuple[int, int]:
    """
    Work-list driver. Returns (ranges processed, peak work-list length).

    Everything outside a pending [lo, hi] range is already in its final
    position. The larger side of each split is pushed first so the smaller
    one is popped next, which keeps the work-list at O(log n).
    """
    stack: List[Tuple[int, int]] = [(0, len(arr) - 1)]
    processed = 0
    peak = 1
    while stack:
        lo, hi = stack.pop()
        processed += 1
        if hi - lo <= threshold:
            _insertion_sort(arr, lo, hi, cmp)
            continue

        pivot = arr[choose(arr, lo, hi)]
        lt, gt = _partition3(arr, lo, hi, pivot, cmp)

        larger, smaller = (lo, lt - 1), (gt + 1, hi)
        if lt - lo < hi - gt:
            larger, smaller = smaller, larger
        if larger[0] < larger[1]:
            stack.append(larger)
        if smaller[0] < smaller[1]:
            stack.append(smaller)
        if len(stack) > peak:
            peak = len(stack)
    return processed, peak


def _shape_result(data: Any, working: List[Any], *, stable: bool, owned: bool) -> Any:
    if stable:
        values = [pair[0] for pair in working]
        if not owned:
            return values
        for k, v in enumerate(values):
            data[k] = v
        return data
    # `working` is `data` itself when owned, otherwise a private list
    return working
