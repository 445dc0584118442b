"""
Timing harness for sorting algorithms.

We measure exactly one call to an algorithm's `sort(a, config=...)` per sample,
using a monotonic high-resolution clock. Copying, GC, warmup and verification
happen outside the timed block.

Public API (stable):
    time_sort_call(...) -> dict
    summarize_ns(samples_ns) -> dict

`time_sort_call` result schema:
    {
        "algo": str,
        "repeats": int,
        "samples_ns": list[int],            # elapsed ns for each successful sample
        "status": "ok" | "timeout" | "error" | "incorrect",
        "error": str | None,                # populated unless status == "ok"/"timeout"
        "timed_out_on_repeat": int | None,  # 0-based repeat index if timeout occurred
    }
"""

from __future__ import annotations

import gc
import logging
import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import numpy as np

from flexsort.config import SortConfig
from flexsort.validate import equals_oracle

logger = logging.getLogger(__name__)

__all__ = ["time_sort_call", "summarize_ns"]


def time_sort_call(
    *,
    algo_name: str,
    algo_fn: Callable[..., Any],
    a: List[Any],
    config: "SortConfig | Mapping[str, Any] | None",
    repeats: int,
    warmup: bool,
    disable_gc: bool,
    timeout_seconds: float,
    defensive_copy: bool,
    verify: bool = True,
) -> Dict[str, Any]:
    """
    Time repeated calls to `algo_fn(a, config=config)`.

    Parameters
    ----------
    algo_name : str
        Label of the algorithm (for logs/records).
    algo_fn : Callable
        Callable implementing sort(a, *, config: dict | None).
    a : list
        Input array.
    config : SortConfig | dict | None
        Algorithm configuration passed through unchanged.
    repeats : int
        Number of timed samples to collect.
    warmup : bool
        If True, make one untimed call before timing.
    disable_gc : bool
        If True, collect and disable Python GC during the timed loop; restore afterward.
    timeout_seconds : float
        Per-sample threshold. A sample above it sets status="timeout" and
        stops further sampling.
    defensive_copy : bool
        If True, pass a fresh copy of `a` to every call. Needed for in-place
        configs so each sample sorts the same unsorted input.
    verify : bool
        If True, check one untimed result against the oracle first and
        return status="incorrect" without timing if it does not match.
    """
    if repeats < 0:
        raise ValueError("repeats must be nonnegative")
    if timeout_seconds <= 0:
        raise ValueError("timeout_seconds must be positive")

    result: Dict[str, Any] = {
        "algo": algo_name,
        "repeats": repeats,
        "samples_ns": [],
        "status": "ok",
        "error": None,
        "timed_out_on_repeat": None,
    }

    # ---- Verification / warmup (outside GC disable & timed block) ----
    if (verify or warmup) and repeats > 0:
        before = list(a)
        try:
            out = algo_fn(list(a) if defensive_copy else a, config=config)
        except Exception as e:
            logger.warning("%s: untimed call failed: %r", algo_name, e)
            result["status"] = "error"
            result["error"] = f"warmup failed: {e!r}"
            return result
        comparator = _config_comparator(config)
        if verify and not equals_oracle(before, out, comparator):
            logger.warning("%s: output does not match oracle for n=%d", algo_name, len(a))
            result["status"] = "incorrect"
            result["error"] = "output does not match oracle"
            return result

    prev_gc_enabled = gc.isenabled()
    try:
        if disable_gc:
            gc.collect()
            gc.disable()

        threshold_ns = int(timeout_seconds * 1e9)
        for r in range(repeats):
            arg = list(a) if defensive_copy else a
            try:
                t0 = time.perf_counter_ns()
                algo_fn(arg, config=config)
                t1 = time.perf_counter_ns()
            except Exception as e:
                logger.warning("%s: repeat %d failed: %r", algo_name, r, e)
                result["status"] = "error"
                result["error"] = f"run failed at repeat {r}: {e!r}"
                break

            elapsed = t1 - t0
            result["samples_ns"].append(int(elapsed))
            if elapsed > threshold_ns:
                logger.info("%s: timed out on repeat %d (%d ns)", algo_name, r, elapsed)
                result["status"] = "timeout"
                result["timed_out_on_repeat"] = r
                break
    finally:
        # Leave GC disabled if the caller had it disabled
        if disable_gc and prev_gc_enabled:
            gc.enable()

    return result


def _config_comparator(config: Any) -> Optional[Callable[[Any, Any], int]]:
    """Comparator carried by a SortConfig or a config mapping, if any."""
    if isinstance(config, SortConfig):
        return config.comparator
    if isinstance(config, Mapping):
        return config.get("comparator")
    return None


def summarize_ns(samples_ns: Sequence[int]) -> Dict[str, Optional[float]]:
    """
    Mean, median, min, max and IQR (all in ns) of timing samples.

    All values are None for an empty sample list. The runner logs one such
    summary per (algorithm, n) at INFO level.
    """
    if len(samples_ns) == 0:
        return {"runs": 0, "mean": None, "median": None, "min": None, "max": None, "iqr": None}
    arr = np.asarray(samples_ns, dtype=np.float64)
    q1, q3 = np.percentile(arr, [25, 75])
    return {
        "runs": int(arr.size),
        "mean": float(arr.mean()),
        "median": float(np.median(arr)),
        "min": float(arr.min()),
        "max": float(arr.max()),
        "iqr": float(q3 - q1),
    }
