"""
Oracle for sorting correctness.

Python's built-in `sorted()` is the ground truth:
- Correct total order for any orderable element type
- Stable, so it doubles as the reference for `stable=True` runs
- Accepts comparators through `functools.cmp_to_key`

Public API (stable):
    oracle_sort(a, comparator=None) -> list
    equals_oracle(a, out, comparator=None) -> bool

Conventions:
- The oracle never mutates its input and always returns a **new** list.
- For non-stable sorts, compare with `equals_oracle` only when equal elements
  are indistinguishable (e.g. plain integers); otherwise check order and
  permutation separately (see `flexsort.validate.properties`).
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Iterable, List, Optional

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "oracle_sort", "equals_oracle"]


def oracle_sort(
    a: Iterable[Any], comparator: Optional[Callable[[Any, Any], int]] = None
) -> List[Any]:
    """Return a new stably sorted list of `a`'s elements."""
    if comparator is None:
        return sorted(a)
    return sorted(a, key=cmp_to_key(comparator))


def equals_oracle(
    a: Iterable[Any],
    out: Iterable[Any],
    comparator: Optional[Callable[[Any, Any], int]] = None,
) -> bool:
    """True iff `out` equals `oracle_sort(a, comparator)` element-wise."""
    return list(out) == oracle_sort(a, comparator)
