"""
Correctness tests for the sorting algorithms against the oracle (Python's built-in sorted).

These tests target every module under `flexsort.algorithms`, and the quicksort
once per pivot strategy.

What we check:
- Output exactly matches the oracle (strongest guarantee)
- Nondecreasing order (diagnostic)
- Permutation preservation (no lost/duplicated elements)
- No input mutation and a fresh result object (default, non in-place)
- Determinism for a given config (same input -> same output)
"""

from __future__ import annotations

from typing import Any, Dict, List

import pytest
from hypothesis import given, settings, strategies as st

from flexsort.algorithms import builtin_timsort, quicksort
from flexsort.validate import is_nondecreasing, is_permutation, oracle_sort

ALGO_CONFIGS = [
    pytest.param(builtin_timsort.sort, {}, id="builtin_timsort"),
    pytest.param(quicksort.sort, {"pivot": "random"}, id="quick_random"),
    pytest.param(quicksort.sort, {"pivot": "median3"}, id="quick_median3"),
    pytest.param(quicksort.sort, {"pivot": "first"}, id="quick_first"),
    pytest.param(quicksort.sort, {"pivot": "last"}, id="quick_last"),
    pytest.param(quicksort.sort, {"pivot": "median3", "stable": True}, id="quick_stable"),
    pytest.param(quicksort.sort, {"insertion_threshold": 0}, id="quick_no_insertion"),
]


def _check_one(sort, a: List[int], *, config: Dict[str, Any]) -> None:
    """Common assertion bundle for one input."""
    a_before = list(a)
    out = sort(a, config=config)

    assert a == a_before, "Algorithm must not mutate its input"
    assert out is not a, "Result must be a new sequence"

    assert out == oracle_sort(a), "Output must exactly match the oracle"
    assert is_nondecreasing(out), "Output is not nondecreasing"
    assert is_permutation(a, out), "Output is not a permutation of input"

    out2 = sort(a, config=config)
    assert out2 == out, "Algorithm must be deterministic for a given config"


# ------------------------- unit tests (deterministic) ------------------------- #

@pytest.mark.parametrize("sort, config", ALGO_CONFIGS)
@pytest.mark.parametrize(
    "a",
    [
        [],
        [5],
        [2, 1],
        [1, 2, 3, 4],
        [4, 3, 2, 1],
        [7, 7, 7, 7],
        [1, 3, 2, 3, 1, 2],
        list(range(20)),
        list(range(20))[::-1],
        list(range(100))[::-1],
        [0, -1, 5, -10, 3, 3, 2],
        [i % 3 for i in range(64)],
    ],
)
def test_unit_cases(sort, config: Dict[str, Any], a: List[int]) -> None:
    _check_one(sort, a, config=config)


# ------------------------- property-based tests (randomized) ------------------------- #

small_ints = st.integers(min_value=-10_000, max_value=10_000)


@pytest.mark.parametrize("sort, config", ALGO_CONFIGS)
@settings(deadline=None, max_examples=60)
@given(a=st.lists(small_ints, min_size=0, max_size=400))
def test_property_random_small_range(sort, config: Dict[str, Any], a: List[int]) -> None:
    _check_one(sort, a, config=config)


@pytest.mark.parametrize("sort, config", ALGO_CONFIGS)
@settings(deadline=None, max_examples=40)
@given(a=st.lists(st.integers(min_value=0, max_value=2**31 - 1), min_size=0, max_size=200))
def test_property_random_full_range(sort, config: Dict[str, Any], a: List[int]) -> None:
    _check_one(sort, a, config=config)


@pytest.mark.parametrize("sort, config", ALGO_CONFIGS)
@settings(deadline=None, max_examples=40)
@given(
    a=st.lists(
        st.integers(min_value=0, max_value=7),  # few uniques stress the equal band
        min_size=0,
        max_size=600,
    )
)
def test_property_many_duplicates(sort, config: Dict[str, Any], a: List[int]) -> None:
    _check_one(sort, a, config=config)
