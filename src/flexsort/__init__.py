"""
flexsort: configurable iterative quicksort plus a small benchmarking kit.

    from flexsort import quick_sort, SortConfig
    quick_sort([3, 1, 2])                                  # -> [1, 2, 3]
    quick_sort(records, {"comparator": by_key, "stable": True})
"""

from .algorithms.quicksort import default_comparator, quick_sort
from .config import PIVOT_STRATEGIES, PivotStrategy, SortConfig
from .errors import InvalidArgument

__version__ = "0.1.0"

__all__ = [
    "quick_sort",
    "default_comparator",
    "SortConfig",
    "PivotStrategy",
    "PIVOT_STRATEGIES",
    "InvalidArgument",
]
