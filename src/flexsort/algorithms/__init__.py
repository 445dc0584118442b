"""
Sorting algorithms.

Every module in this package exposes `sort(a, *, config=None)` so the
benchmark runner can load it by name (`flexsort.algorithms.<name>`).
"""
