import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

try:
    from ..data.generators import DEFAULT_SEED, InputType, generate_input
    from .majority import BoyerMooreMajorityVote, Found, InvalidInputError
except ImportError:
    from analysis.majority import BoyerMooreMajorityVote, Found, InvalidInputError
    from data.generators import DEFAULT_SEED, InputType, generate_input

logger = logging.getLogger(__name__)

DEFAULT_SIZES = (100, 1000, 10000, 100000)
WARMUP_ITERATIONS = 5
MEASUREMENT_ITERATIONS = 10

CSV_COLUMNS = [
    "InputSize",
    "InputType",
    "AvgTimeMs",
    "StdDevMs",
    "Comparisons",
    "Assignments",
    "ArrayAccesses",
    "MemoryBytes",
    "Result",
]


@dataclass
class BenchmarkResult:
    """Aggregated measurements for one input size and shape."""
    input_size: int
    input_type: str
    avg_time_ms: float
    std_dev_ms: float
    comparisons: int
    assignments: int
    array_accesses: int
    memory_bytes: int
    result: str

    def to_record(self) -> Dict[str, Union[int, float, str]]:
        return dict(
            zip(
                CSV_COLUMNS,
                [
                    self.input_size,
                    self.input_type,
                    self.avg_time_ms,
                    self.std_dev_ms,
                    self.comparisons,
                    self.assignments,
                    self.array_accesses,
                    self.memory_bytes,
                    self.result,
                ],
            )
        )


class BenchmarkRunner:
    """
    Repeatedly runs majority detection over synthetic inputs.

    Each size gets `warmup_iterations` untimed runs followed by
    `measurement_iterations` measured runs, every run on a fresh copy of the
    input.
    """

    def __init__(
        self,
        sizes: Sequence[int] = DEFAULT_SIZES,
        warmup_iterations: int = WARMUP_ITERATIONS,
        measurement_iterations: int = MEASUREMENT_ITERATIONS,
        optimized: bool = False,
        seed: int = DEFAULT_SEED,
        algorithm: Optional[BoyerMooreMajorityVote] = None,
    ):
        """
        Initialize benchmark runner.

        Args:
            sizes: Input sizes to benchmark
            warmup_iterations: Untimed runs per size
            measurement_iterations: Measured runs per size (must be positive)
            optimized: Benchmark the early-terminating variant
            seed: Seed passed to the input generator
            algorithm: Algorithm instance (default: a new one)
        """
        if measurement_iterations < 1:
            raise ValueError("measurement_iterations must be at least 1")

        self.sizes = list(sizes)
        self.warmup_iterations = warmup_iterations
        self.measurement_iterations = measurement_iterations
        self.optimized = optimized
        self.seed = seed
        self.algorithm = algorithm or BoyerMooreMajorityVote()

    @property
    def algorithm_label(self) -> str:
        suffix = " (optimized)" if self.optimized else ""
        return f"{self.algorithm.name}{suffix}"

    def benchmark(self, sequence: Sequence, input_type_label: str) -> BenchmarkResult:
        """
        Measure one input.

        Raises:
            InvalidInputError: if the sequence is None or empty
        """
        for _ in range(self.warmup_iterations):
            self.algorithm.detect(list(sequence), optimized=self.optimized)

        times = np.empty(self.measurement_iterations, dtype=np.float64)
        comparisons = np.empty(self.measurement_iterations, dtype=np.int64)
        assignments = np.empty(self.measurement_iterations, dtype=np.int64)
        accesses = np.empty(self.measurement_iterations, dtype=np.int64)
        memory = np.empty(self.measurement_iterations, dtype=np.int64)
        outcome = None

        for i in range(self.measurement_iterations):
            outcome, metrics = self.algorithm.detect(
                list(sequence), optimized=self.optimized
            )
            times[i] = metrics.elapsed_ms
            comparisons[i] = metrics.comparisons
            assignments[i] = metrics.assignments
            accesses[i] = metrics.accesses
            memory[i] = metrics.memory_delta

        result = str(outcome.element) if isinstance(outcome, Found) else "null"

        return BenchmarkResult(
            input_size=len(sequence),
            input_type=input_type_label,
            avg_time_ms=float(times.mean()),
            std_dev_ms=float(times.std()),
            comparisons=int(comparisons.mean()),
            assignments=int(assignments.mean()),
            array_accesses=int(accesses.mean()),
            memory_bytes=int(memory.mean()),
            result=result,
        )

    def run(self, input_type: InputType) -> pd.DataFrame:
        """
        Benchmark every configured size for one input type.

        Returns:
            DataFrame with one row per size and CSV_COLUMNS as columns
        """
        logger.info(
            f"Running {self.algorithm_label} on {input_type.label} for sizes {self.sizes}"
        )
        logger.info(
            f"Warmup iterations: {self.warmup_iterations}, "
            f"measurement iterations: {self.measurement_iterations}"
        )

        records = []
        for size in self.sizes:
            sequence = generate_input(size, input_type, seed=self.seed)
            try:
                result = self.benchmark(sequence, input_type.label)
            except InvalidInputError as e:
                logger.warning(f"Skipping size {size}: {e}")
                continue

            logger.info(
                f"Size: {size:6d} | Time: {result.avg_time_ms:8.4f} ms | "
                f"Comparisons: {result.comparisons:10d} | Result: {result.result}"
            )
            records.append(result.to_record())

        return pd.DataFrame(records, columns=CSV_COLUMNS)

    def run_all(self, input_types: Optional[Iterable[InputType]] = None) -> pd.DataFrame:
        """Benchmark several input types and concatenate the rows."""
        frames: List[pd.DataFrame] = [
            self.run(input_type) for input_type in (input_types or list(InputType))
        ]
        frames = [frame for frame in frames if not frame.empty]
        if not frames:
            return pd.DataFrame(columns=CSV_COLUMNS)
        return pd.concat(frames, ignore_index=True)


def write_csv(results: pd.DataFrame, csv_path: Union[str, Path]) -> Path:
    """
    Write benchmark rows to CSV with 4-decimal timings.

    Returns:
        Path of the written file
    """
    csv_path = Path(csv_path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    results[CSV_COLUMNS].to_csv(csv_path, index=False, float_format="%.4f")
    logger.info(f"Results saved to {csv_path}")
    return csv_path


def read_csv(csv_path: Union[str, Path]) -> pd.DataFrame:
    """Read benchmark rows written by write_csv."""
    results = pd.read_csv(csv_path, dtype={"Result": str}, keep_default_na=False)
    missing = [column for column in CSV_COLUMNS if column not in results.columns]
    if missing:
        raise ValueError(f"Benchmark CSV is missing columns: {missing}")
    return results
