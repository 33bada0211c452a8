import gc
import logging
import os
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Union

import pandas as pd
import psutil

logger = logging.getLogger(__name__)

TRACKER_CSV_COLUMNS = [
    "Algorithm",
    "InputSize",
    "TimeMs",
    "Comparisons",
    "Assignments",
    "ArrayAccesses",
    "MemoryBytes",
]


def current_process_memory() -> int:
    """Resident set size of the current process in bytes."""
    return psutil.Process(os.getpid()).memory_info().rss


@dataclass(frozen=True)
class MetricsSnapshot:
    """Operation counts and timing for a single algorithm invocation."""
    comparisons: int
    assignments: int
    accesses: int
    elapsed_ns: int
    memory_delta: int

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000.0

    def to_dict(self) -> Dict[str, float]:
        data = asdict(self)
        data["elapsed_ms"] = self.elapsed_ms
        return data


class PerformanceTracker:
    """
    Collects primitive operation counts, wall-clock time and memory delta.

    A tracker belongs to exactly one invocation: the algorithm creates a new
    one per call and hands back an immutable snapshot when it finishes.
    """

    def __init__(
        self,
        algorithm_name: str,
        measure_memory: bool = True,
        collect_garbage: bool = False,
        memory_probe: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize tracker.

        Args:
            algorithm_name: Label used in log output
            measure_memory: Whether to read process memory around the run
            collect_garbage: Run a full collection before the first reading
            memory_probe: Callable returning current memory in bytes
        """
        self.algorithm_name = algorithm_name
        self.measure_memory = measure_memory
        self.collect_garbage = collect_garbage
        self.memory_probe = memory_probe or current_process_memory
        self.input_size = 0
        self.reset()

    def reset(self):
        """Reset all counters to zero."""
        self.comparisons = 0
        self.assignments = 0
        self.array_accesses = 0
        self.start_time = 0
        self.end_time = 0
        self.memory_before = 0
        self.memory_after = 0

    def start_measurement(self, input_size: int):
        """Start timing and memory measurement."""
        self.input_size = input_size
        if self.collect_garbage:
            gc.collect()
        if self.measure_memory:
            self.memory_before = self.memory_probe()
        self.start_time = time.perf_counter_ns()

    def stop_measurement(self):
        """Stop timing and memory measurement."""
        self.end_time = time.perf_counter_ns()
        if self.measure_memory:
            self.memory_after = self.memory_probe()

    def increment_comparisons(self, count: int = 1):
        self.comparisons += count

    def increment_assignments(self, count: int = 1):
        self.assignments += count

    def increment_array_accesses(self, count: int = 1):
        self.array_accesses += count

    @property
    def elapsed_ns(self) -> int:
        return self.end_time - self.start_time

    @property
    def memory_used(self) -> int:
        return self.memory_after - self.memory_before

    def snapshot(self) -> MetricsSnapshot:
        """Freeze the current counters into an immutable snapshot."""
        return MetricsSnapshot(
            comparisons=self.comparisons,
            assignments=self.assignments,
            accesses=self.array_accesses,
            elapsed_ns=self.elapsed_ns,
            memory_delta=self.memory_used,
        )

    def metrics_string(self) -> str:
        return (
            f"n={self.input_size}, time={self.elapsed_ns / 1_000_000.0:.3f}ms, "
            f"cmp={self.comparisons}, assign={self.assignments}, "
            f"access={self.array_accesses}, mem={self.memory_used}B"
        )

    def log_summary(self):
        """Log a summary of collected metrics."""
        logger.info(f"=== Performance Metrics for {self.algorithm_name} ===")
        logger.info(f"Input Size: {self.input_size}")
        logger.info(f"Execution Time: {self.elapsed_ns / 1_000_000.0:.4f} ms")
        logger.info(f"Comparisons: {self.comparisons}")
        logger.info(f"Assignments: {self.assignments}")
        logger.info(f"Array Accesses: {self.array_accesses}")
        logger.info(f"Memory Used: {self.memory_used} bytes")

    def export_to_csv(self, csv_path: Union[str, Path]) -> Path:
        """
        Append this invocation's metrics as one CSV row.

        The header is written only when the file does not exist yet, so
        repeated exports accumulate into a single table.

        Args:
            csv_path: Destination file

        Returns:
            Path of the written file
        """
        csv_path = Path(csv_path)
        write_header = not csv_path.exists()
        csv_path.parent.mkdir(parents=True, exist_ok=True)

        row = pd.DataFrame(
            [
                [
                    self.algorithm_name,
                    self.input_size,
                    self.elapsed_ns / 1_000_000.0,
                    self.comparisons,
                    self.assignments,
                    self.array_accesses,
                    self.memory_used,
                ]
            ],
            columns=TRACKER_CSV_COLUMNS,
        )
        row.to_csv(csv_path, mode="a", header=write_header, index=False)
        logger.debug(f"Appended {self.algorithm_name} metrics to {csv_path}")
        return csv_path
