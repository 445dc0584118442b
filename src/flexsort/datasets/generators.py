"""
Dataset generators for sorting benchmarks and large-input tests.

Implemented distributions:
- "random":        integers drawn uniformly from an inclusive range
                   (default [-500000, 499999]).
- "sorted":        "random" values, sorted ascending.
- "reversed":      "random" values, sorted descending.
- "nearly_sorted": [0, 1, ..., n-1] with ceil(swap_frac * n) random swaps.
- "few_uniques":   the cyclic pattern i % unique (default 5), shuffled.
                   Stresses duplicate handling in partitioning.

Public API (stable):
    make_dataset(n: int, spec: dict, rng: numpy.random.Generator) -> list[int]

Spec shape:
    {"dist": "<name>", "params": {...}}

    random / sorted / reversed:  {"range": [min_int, max_int]}    # optional, inclusive
    nearly_sorted:               {"swap_frac": 0.05}              # in [0.0, 1.0]
    few_uniques:                 {"unique": 5}                    # int >= 1

Returns a Python `list[int]`; the caller owns and seeds the RNG.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Tuple

import numpy as np

DEFAULT_RANGE: Tuple[int, int] = (-500_000, 499_999)

__all__ = ["SUPPORTED_DISTS", "make_dataset"]


def make_dataset(n: int, spec: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    """
    Generate an integer dataset of length `n` according to `spec`.

    Raises
    ------
    ValueError
        If `n`, the distribution name or its params are invalid.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 0:
        raise ValueError(f"n must be a nonnegative int; got {n!r}")
    if not isinstance(spec, dict):
        raise ValueError("spec must be a dict")

    dist = spec.get("dist")
    gen = _GENERATORS.get(dist)  # type: ignore[arg-type]
    if gen is None:
        raise ValueError(
            f"Unsupported dataset dist: {dist!r}. Supported: {sorted(SUPPORTED_DISTS)}"
        )
    params = spec.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"{dist}.params must be a dict")
    return gen(int(n), params, rng)


# ------------------------- distributions ------------------------- #


def _random(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    lo, hi = _parse_range(params)
    # integers() is half-open; +1 makes `hi` inclusive
    return rng.integers(lo, hi + 1, size=n, dtype=np.int64).tolist()


def _sorted(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    return sorted(_random(n, params, rng))


def _reversed(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    return sorted(_random(n, params, rng), reverse=True)


def _nearly_sorted(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    swap_frac = params.get("swap_frac", 0.05)
    if isinstance(swap_frac, bool) or not isinstance(swap_frac, (int, float)):
        raise ValueError(f"nearly_sorted.params.swap_frac must be a number; got {swap_frac!r}")
    if not 0.0 <= swap_frac <= 1.0:
        raise ValueError(f"nearly_sorted.params.swap_frac must be in [0.0, 1.0]; got {swap_frac}")

    out = list(range(n))
    swaps = int(np.ceil(swap_frac * n)) if n else 0
    if swaps:
        idx = rng.integers(0, n, size=(swaps, 2))
        for i, j in idx.tolist():
            out[i], out[j] = out[j], out[i]
    return out


def _few_uniques(n: int, params: Dict[str, Any], rng: np.random.Generator) -> List[int]:
    unique = params.get("unique", 5)
    if isinstance(unique, bool) or not isinstance(unique, (int, np.integer)) or unique < 1:
        raise ValueError(f"few_uniques.params.unique must be an integer >= 1; got {unique!r}")
    values = np.arange(n, dtype=np.int64) % int(unique)
    rng.shuffle(values)
    return values.tolist()


_GENERATORS: Dict[str, Callable[[int, Dict[str, Any], np.random.Generator], List[int]]] = {
    "random": _random,
    "sorted": _sorted,
    "reversed": _reversed,
    "nearly_sorted": _nearly_sorted,
    "few_uniques": _few_uniques,
}

SUPPORTED_DISTS = frozenset(_GENERATORS)


# ------------------------- helpers ------------------------- #


def _parse_range(params: Dict[str, Any]) -> Tuple[int, int]:
    """Optional inclusive `range: [min, max]`, defaulting to DEFAULT_RANGE."""
    spec = params.get("range", DEFAULT_RANGE)
    if not isinstance(spec, (list, tuple)) or len(spec) != 2:
        raise ValueError("params.range must be a 2-element list/tuple [min, max]")
    lo_raw, hi_raw = spec
    if not _is_int_like(lo_raw) or not _is_int_like(hi_raw):
        raise ValueError("params.range values must be integers")
    lo, hi = int(lo_raw), int(hi_raw)
    if lo > hi:
        raise ValueError(f"params.range invalid: min > max ({lo} > {hi})")
    return lo, hi


def _is_int_like(x: Any) -> bool:
    # Accept Python ints and NumPy integer types
    return isinstance(x, (int, np.integer)) and not isinstance(x, bool)
