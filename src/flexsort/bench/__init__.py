"""
Benchmarking: timing harness and YAML-driven experiment runner.
"""

from .measure import summarize_ns, time_sort_call

__all__ = ["time_sort_call", "summarize_ns"]
