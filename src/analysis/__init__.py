"""
Analysis module for majority element detection.

This module provides the Boyer-Moore majority vote and its instrumentation:
- BoyerMooreMajorityVote: Two-phase finder, early-terminating variant and
  position collection
- PerformanceTracker: Per-call counters for comparisons, assignments and
  element accesses, with timing and memory delta
- BenchmarkRunner: Repeated measurement over synthetic inputs
"""

from .benchmark import BenchmarkResult, BenchmarkRunner
from .majority import (
    BoyerMooreMajorityVote,
    Found,
    InvalidInputError,
    MajorityResult,
    NotFound,
)
from .metrics import MetricsSnapshot, PerformanceTracker

__all__ = [
    "BoyerMooreMajorityVote",  # Algorithm facade
    "Found",  # Outcome: majority exists
    "NotFound",  # Outcome: no majority
    "MajorityResult",  # Element with occurrence positions
    "InvalidInputError",  # Raised for None or empty input
    "MetricsSnapshot",  # Immutable per-call metrics
    "PerformanceTracker",  # Per-call counters
    "BenchmarkRunner",  # Benchmark driver
    "BenchmarkResult",  # Aggregated benchmark row
]
