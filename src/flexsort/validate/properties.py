"""
Property helpers for validating sorting results.

Public API (stable):
    is_nondecreasing(xs, comparator=None) -> bool
    first_nondecreasing_violation_index(xs, comparator=None) -> int | None
    is_permutation(a, b, by_identity=False) -> bool
    permutation_counter_diff(a, b) -> dict
    is_stable(before, after, comparator) -> bool
    assert_no_mutation(before, after) -> None

Notes
-----
- Every order check takes an optional comparator; without one the natural
  `<`/`>` ordering is used.
- Stability cannot be inferred from values alone when equal keys are
  indistinguishable. `is_stable` therefore works on distinct record objects
  (dicts, dataclasses, ...) and tracks them by identity.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Callable, Dict, Optional, Sequence

__all__ = [
    "is_nondecreasing",
    "first_nondecreasing_violation_index",
    "is_permutation",
    "permutation_counter_diff",
    "is_stable",
    "assert_no_mutation",
]

Comparator = Callable[[Any, Any], int]


def _natural_order(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def is_nondecreasing(xs: Sequence[Any], comparator: Optional[Comparator] = None) -> bool:
    """Return True iff comparator(xs[i], xs[i+1]) <= 0 for all i."""
    return first_nondecreasing_violation_index(xs, comparator) is None


def first_nondecreasing_violation_index(
    xs: Sequence[Any], comparator: Optional[Comparator] = None
) -> int | None:
    """
    Return the first index i where xs[i] sorts after xs[i+1], or None.

    Useful for precise error messages:
        i = first_nondecreasing_violation_index(out)
        assert i is None, f"not nondecreasing at i={i}: {out[i]} > {out[i+1]}"
    """
    cmp = comparator or _natural_order
    for i in range(len(xs) - 1):
        if cmp(xs[i], xs[i + 1]) > 0:
            return i
    return None


def is_permutation(a: Sequence[Any], b: Sequence[Any], by_identity: bool = False) -> bool:
    """
    Return True iff `a` and `b` hold the same multiset of elements.

    With `by_identity=True` elements are matched by object identity, which
    also works for unhashable records.
    """
    if len(a) != len(b):
        return False
    if by_identity:
        return Counter(map(id, a)) == Counter(map(id, b))
    return Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Any], b: Sequence[Any]) -> Dict[Any, int]:
    """
    Return a dict of value -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities.
    """
    diff = Counter(a)
    diff.subtract(Counter(b))
    return {k: d for k, d in diff.items() if d != 0}


def is_stable(before: Sequence[Any], after: Sequence[Any], comparator: Comparator) -> bool:
    """
    True iff every pair of neighbours in `after` that compare equal keeps
    the relative order it had in `before`.

    `after` is expected to be sorted; elements of `before` must be distinct
    objects.
    """
    position = {id(x): i for i, x in enumerate(before)}
    if len(position) != len(before):
        raise ValueError("is_stable needs distinct objects in `before`")
    for i in range(len(after) - 1):
        x, y = after[i], after[i + 1]
        if comparator(x, y) == 0 and position[id(x)] > position[id(y)]:
            return False
    return True


def assert_no_mutation(before: Sequence[Any], after: Sequence[Any]) -> None:
    """
    Assert that two sequences are exactly equal (element-wise), used to ensure
    an algorithm did not mutate its input.

    Raises AssertionError with a concise message if they differ.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(f"Input mutated at index {i}: before={x!r}, after={y!r}")
