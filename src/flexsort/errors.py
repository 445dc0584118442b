"""
Error types raised by flexsort.

Only one error kind is raised by the library itself. Anything raised by a
caller-supplied comparator (or by the default `<`/`>` ordering on elements
that do not support it) propagates unchanged.
"""

from __future__ import annotations

__all__ = ["InvalidArgument"]


class InvalidArgument(TypeError, ValueError):
    """
    Input or configuration cannot be used for sorting.

    Raised before any element is read or moved, e.g. for a `None` input,
    a non-iterable input, a non-callable comparator or an unknown pivot
    strategy. Subclasses both TypeError and ValueError so callers written
    against either continue to work.
    """
