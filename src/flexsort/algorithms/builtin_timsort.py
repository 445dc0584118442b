"""
Reference baseline: Python's built-in `sorted` / `list.sort` (Timsort).

Honours the same config surface as `flexsort.algorithms.quicksort` so both can
be benchmarked side by side with identical YAML `config:` blocks. Timsort is
always stable, so `stable` and `pivot_strategy` have no effect here.
"""

from __future__ import annotations

from collections.abc import MutableSequence
from functools import cmp_to_key
from typing import Any, Mapping

from flexsort.config import SortConfig, resolve_config
from flexsort.errors import InvalidArgument

__all__ = ["sort"]


def sort(a: Any, *, config: "SortConfig | Mapping[str, Any] | None" = None) -> Any:
    if a is None:
        raise InvalidArgument("input must be a sequence or iterable, not None")
    cfg = resolve_config(config)
    key = cmp_to_key(cfg.comparator) if cfg.comparator is not None else None

    if cfg.in_place and isinstance(a, list):
        a.sort(key=key)
        return a
    out = sorted(a, key=key)
    if cfg.in_place and isinstance(a, MutableSequence):
        a[:] = out
        return a
    return out
