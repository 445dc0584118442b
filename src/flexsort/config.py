"""
Sorter configuration.

`SortConfig` is an immutable record. It can be built directly, or from a
plain mapping (e.g. the per-algorithm `config:` block of a YAML experiment):

    SortConfig.from_mapping({"in_place": True, "pivot": "median3"})

Accepted mapping keys:
    comparator                      callable(a, b) -> negative/zero/positive
    in_place | inPlace              bool, default False
    stable                          bool, default False
    pivot_strategy | pivotStrategy | pivot
                                    "random" | "median3" | "first" | "last"
    insertion_threshold             int >= 0, default 16
    seed                            int | None, seeds the random pivot RNG
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from flexsort.errors import InvalidArgument

Comparator = Callable[[Any, Any], int]


class PivotStrategy:
    RANDOM = "random"
    MEDIAN3 = "median3"
    FIRST = "first"
    LAST = "last"


PIVOT_STRATEGIES = frozenset(
    {PivotStrategy.RANDOM, PivotStrategy.MEDIAN3, PivotStrategy.FIRST, PivotStrategy.LAST}
)

DEFAULT_INSERTION_THRESHOLD = 16

# mapping key -> dataclass field
_KEY_ALIASES: Dict[str, str] = {
    "comparator": "comparator",
    "in_place": "in_place",
    "inPlace": "in_place",
    "stable": "stable",
    "pivot_strategy": "pivot_strategy",
    "pivotStrategy": "pivot_strategy",
    "pivot": "pivot_strategy",
    "insertion_threshold": "insertion_threshold",
    "seed": "seed",
}

__all__ = [
    "Comparator",
    "PivotStrategy",
    "PIVOT_STRATEGIES",
    "DEFAULT_INSERTION_THRESHOLD",
    "SortConfig",
    "resolve_config",
]


@dataclass(frozen=True)
class SortConfig:
    comparator: Optional[Comparator] = None
    in_place: bool = False
    stable: bool = False
    pivot_strategy: str = PivotStrategy.RANDOM
    insertion_threshold: int = DEFAULT_INSERTION_THRESHOLD
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.comparator is not None and not callable(self.comparator):
            raise InvalidArgument(f"comparator must be callable; got {self.comparator!r}")
        if not isinstance(self.in_place, bool):
            raise InvalidArgument(f"in_place must be a bool; got {self.in_place!r}")
        if not isinstance(self.stable, bool):
            raise InvalidArgument(f"stable must be a bool; got {self.stable!r}")
        if not isinstance(self.pivot_strategy, str) or self.pivot_strategy not in PIVOT_STRATEGIES:
            raise InvalidArgument(
                f"Unsupported pivot strategy: {self.pivot_strategy!r}. "
                f"Supported: {sorted(PIVOT_STRATEGIES)}"
            )
        threshold = self.insertion_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 0:
            raise InvalidArgument(
                f"insertion_threshold must be an integer >= 0; got {threshold!r}"
            )
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidArgument(f"seed must be an int or None; got {self.seed!r}")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "SortConfig":
        if not isinstance(mapping, Mapping):
            raise InvalidArgument(f"config must be a mapping; got {type(mapping).__name__}")
        fields: Dict[str, Any] = {}
        for key, value in mapping.items():
            field = _KEY_ALIASES.get(key)
            if field is None:
                raise InvalidArgument(
                    f"Unknown config key: {key!r}. Supported: {sorted(_KEY_ALIASES)}"
                )
            if field in fields:
                raise InvalidArgument(f"Config key {key!r} duplicates {field!r}")
            fields[field] = value
        return cls(**fields)


def resolve_config(config: "SortConfig | Mapping[str, Any] | None") -> SortConfig:
    """Normalize whatever a caller passed as `config` into a SortConfig."""
    if config is None:
        return SortConfig()
    if isinstance(config, SortConfig):
        return config
    return SortConfig.from_mapping(config)
