"""
Boyer-Moore majority vote.

Finds the element occurring in more than half of a sequence using a
single voting pass followed by a verification pass: O(n) time, O(1) space.

Every public call builds its own PerformanceTracker, so operation counts never
leak between calls. `detect()` returns the outcome together with the metrics
snapshot; the `find_*` helpers return plain values and remember the snapshot
for `get_metrics()`.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Union

try:
    from .metrics import MetricsSnapshot, PerformanceTracker
except ImportError:
    from analysis.metrics import MetricsSnapshot, PerformanceTracker

logger = logging.getLogger(__name__)

# Marks "no candidate adopted yet"; None can be a legitimate element.
NO_CANDIDATE = object()


class InvalidInputError(ValueError):
    """Raised when a sequence is None or empty."""


@dataclass(frozen=True)
class Found:
    """
    A verified majority element.

    `count` is the verified number of occurrences, or None when the
    early-terminating scan proved majority before a full tally existed.
    """
    element: Any
    count: Optional[int] = None


@dataclass(frozen=True)
class NotFound:
    """No element occurs more than n/2 times."""


Outcome = Union[Found, NotFound]


@dataclass(frozen=True)
class MajorityResult:
    """Majority element together with every index where it occurs."""
    element: Any
    count: int
    positions: Tuple[int, ...]

    def __str__(self) -> str:
        return f"Majority Element: {self.element} (appears {self.count} times)"


def validate_sequence(sequence: Optional[Sequence]) -> None:
    """
    Reject input the algorithm cannot scan.

    Raises:
        InvalidInputError: if the sequence is None, unsized, or empty
    """
    if sequence is None:
        raise InvalidInputError("Sequence cannot be None")
    if not hasattr(sequence, "__len__") or not hasattr(sequence, "__getitem__"):
        raise InvalidInputError(
            f"Sequence must be sized and indexable, got {type(sequence).__name__}"
        )
    if len(sequence) == 0:
        raise InvalidInputError("Sequence cannot be empty")


def find_candidate(sequence: Sequence, tracker: PerformanceTracker) -> Any:
    """
    Phase 1: voting pass producing the only possible majority candidate.

    Args:
        sequence: Non-empty input sequence
        tracker: Receives one access per element, one assignment per adoption
            and one comparison per non-adopting step

    Returns:
        The final candidate (NO_CANDIDATE only for an empty sequence)
    """
    candidate = NO_CANDIDATE
    count = 0

    for current in sequence:
        tracker.increment_array_accesses()

        if count == 0:
            candidate = current
            tracker.increment_assignments()
            count = 1
        else:
            tracker.increment_comparisons()
            if current == candidate:
                count += 1
            else:
                count -= 1

    return candidate


def count_occurrences(
    sequence: Sequence, candidate: Any, tracker: PerformanceTracker
) -> int:
    """Count occurrences of candidate, recording one access and comparison per element."""
    occurrences = 0
    for current in sequence:
        tracker.increment_array_accesses()
        tracker.increment_comparisons()
        if current == candidate:
            occurrences += 1
    return occurrences


def verified_count(
    sequence: Sequence, candidate: Any, tracker: PerformanceTracker
) -> Optional[int]:
    """
    Phase 2: occurrence count of candidate if it is a strict majority.

    Returns:
        The occurrence count when it exceeds len(sequence) // 2, else None
    """
    if candidate is NO_CANDIDATE:
        return None

    occurrences = count_occurrences(sequence, candidate, tracker)

    # Final comparison against n/2
    tracker.increment_comparisons()
    if occurrences > len(sequence) // 2:
        return occurrences
    return None


def verify_candidate(
    sequence: Sequence, candidate: Any, tracker: PerformanceTracker
) -> bool:
    """Phase 2: True iff candidate occurs strictly more than n/2 times."""
    return verified_count(sequence, candidate, tracker) is not None


def find_candidate_with_early_exit(
    sequence: Sequence, tracker: PerformanceTracker
) -> Tuple[Any, bool]:
    """
    Voting pass that stops as soon as a running tally exceeds n/2.

    A tally above n // 2 means the candidate already matched more than half
    of the sequence, so no verification pass is needed.

    Returns:
        (candidate, proven) where proven is True if the scan stopped early
    """
    candidate = NO_CANDIDATE
    count = 0
    threshold = len(sequence) // 2

    for current in sequence:
        tracker.increment_array_accesses()

        if count == 0:
            candidate = current
            tracker.increment_assignments()
            count = 1
        else:
            tracker.increment_comparisons()
            if current == candidate:
                count += 1
                if count > threshold:
                    return candidate, True
            else:
                count -= 1

    return candidate, False


def collect_positions(sequence: Sequence, element: Any) -> Tuple[int, ...]:
    """Every index where element occurs, ascending."""
    return tuple(i for i, current in enumerate(sequence) if current == element)


class BoyerMooreMajorityVote:
    """
    Majority element finder with per-call instrumentation.

    Sequential reuse of one instance is safe; each call gets a fresh tracker.
    Concurrent callers should rely on the (outcome, metrics) pair returned by
    `detect()` rather than `get_metrics()`.
    """

    name = "Boyer-Moore Majority Vote"

    def __init__(
        self,
        measure_memory: bool = True,
        collect_garbage: bool = False,
        memory_probe: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize the algorithm.

        Args:
            measure_memory: Record process memory delta around each call
            collect_garbage: Run gc.collect() before each measurement
            memory_probe: Override for the memory reading (bytes)
        """
        self.measure_memory = measure_memory
        self.collect_garbage = collect_garbage
        self.memory_probe = memory_probe
        self._last_metrics: Optional[MetricsSnapshot] = None

    def _new_tracker(self) -> PerformanceTracker:
        return PerformanceTracker(
            self.name,
            measure_memory=self.measure_memory,
            collect_garbage=self.collect_garbage,
            memory_probe=self.memory_probe,
        )

    def detect(
        self, sequence: Sequence, optimized: bool = False
    ) -> Tuple[Outcome, MetricsSnapshot]:
        """
        Run majority detection and return the outcome with its metrics.

        Args:
            sequence: Input sequence (not modified)
            optimized: Use the early-terminating voting pass

        Returns:
            (Found or NotFound, MetricsSnapshot for this call)

        Raises:
            InvalidInputError: if the sequence is None or empty
        """
        validate_sequence(sequence)

        tracker = self._new_tracker()
        tracker.start_measurement(len(sequence))

        if optimized:
            candidate, proven = find_candidate_with_early_exit(sequence, tracker)
            if proven:
                outcome: Outcome = Found(candidate)
            else:
                outcome = self._verify(sequence, candidate, tracker)
        else:
            candidate = find_candidate(sequence, tracker)
            outcome = self._verify(sequence, candidate, tracker)

        tracker.stop_measurement()

        metrics = tracker.snapshot()
        self._last_metrics = metrics
        mode = "optimized" if optimized else "two-phase"
        logger.debug(f"{self.name} ({mode}): {tracker.metrics_string()}")
        return outcome, metrics

    @staticmethod
    def _verify(
        sequence: Sequence, candidate: Any, tracker: PerformanceTracker
    ) -> Outcome:
        occurrences = verified_count(sequence, candidate, tracker)
        if occurrences is None:
            return NotFound()
        return Found(candidate, occurrences)

    def find_majority(self, sequence: Sequence) -> Any:
        """
        Find the element appearing more than n/2 times.

        Returns:
            The majority element, or None if there is none
        """
        outcome, _ = self.detect(sequence)
        return outcome.element if isinstance(outcome, Found) else None

    def find_majority_optimized(self, sequence: Sequence) -> Any:
        """Same result as find_majority, with early termination on dominant input."""
        outcome, _ = self.detect(sequence, optimized=True)
        return outcome.element if isinstance(outcome, Found) else None

    def find_majority_with_positions(
        self, sequence: Sequence
    ) -> Optional[MajorityResult]:
        """
        Find the majority element and every index where it occurs.

        The position pass runs only after verification succeeds and is not
        included in the recorded metrics.
        """
        outcome, _ = self.detect(sequence)
        if not isinstance(outcome, Found):
            return None

        positions = collect_positions(sequence, outcome.element)
        return MajorityResult(outcome.element, len(positions), positions)

    def get_metrics(self) -> Optional[MetricsSnapshot]:
        """Metrics of the most recent successful call, or None."""
        return self._last_metrics
