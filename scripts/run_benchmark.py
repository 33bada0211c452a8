#!/usr/bin/env python3
"""
Benchmark the Boyer-Moore majority vote on synthetic inputs.

Without --input-type an interactive menu asks for the input shape.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analysis.benchmark import (  # noqa: E402
    DEFAULT_SIZES,
    MEASUREMENT_ITERATIONS,
    WARMUP_ITERATIONS,
    BenchmarkRunner,
    write_csv,
)
from data.database import BenchmarkDatabase  # noqa: E402
from data.generators import DEFAULT_SEED, InputType  # noqa: E402

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def prompt_input_type() -> InputType:
    """Ask for the input shape on stdin."""
    print("=== Boyer-Moore Majority Vote Benchmark ===\n")
    print("Select input type:")
    for input_type in InputType:
        print(f"{input_type.value}. {input_type.description}")

    choice = input("\nEnter choice: ").strip()
    try:
        return InputType.from_choice(int(choice))
    except ValueError:
        logger.error(f"Invalid choice: {choice!r}")
        sys.exit(1)


def main():
    parser = argparse.ArgumentParser(description="Benchmark majority element detection")
    parser.add_argument(
        "--input-type",
        type=int,
        choices=[t.value for t in InputType],
        help="Input shape: "
        + ", ".join(f"{t.value}={t.label}" for t in InputType),
    )
    parser.add_argument(
        "--all", action="store_true", help="Benchmark every input type"
    )
    parser.add_argument(
        "--sizes",
        type=int,
        nargs="+",
        default=list(DEFAULT_SIZES),
        help=f"Input sizes (default: {' '.join(map(str, DEFAULT_SIZES))})",
    )
    parser.add_argument(
        "--warmup",
        type=int,
        default=WARMUP_ITERATIONS,
        help=f"Warmup iterations (default: {WARMUP_ITERATIONS})",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=MEASUREMENT_ITERATIONS,
        help=f"Measurement iterations (default: {MEASUREMENT_ITERATIONS})",
    )
    parser.add_argument(
        "--optimized",
        action="store_true",
        help="Benchmark the early-terminating variant",
    )
    parser.add_argument(
        "--seed", type=int, default=DEFAULT_SEED, help="Input generator seed"
    )
    parser.add_argument(
        "--output",
        default="boyer_moore_results.csv",
        help="CSV output path (default: boyer_moore_results.csv)",
    )
    parser.add_argument("--db", help="Also store results in this DuckDB database")

    args = parser.parse_args()

    if args.all:
        input_types = list(InputType)
    elif args.input_type:
        input_types = [InputType.from_choice(args.input_type)]
    else:
        input_types = [prompt_input_type()]

    try:
        runner = BenchmarkRunner(
            sizes=args.sizes,
            warmup_iterations=args.warmup,
            measurement_iterations=args.iterations,
            optimized=args.optimized,
            seed=args.seed,
        )

        print(f"\nRunning benchmarks on sizes: {args.sizes}")
        print(f"Warmup iterations: {args.warmup}")
        print(f"Measurement iterations: {args.iterations}")
        print("\nProcessing...\n")

        results = runner.run_all(input_types)

        for _, row in results.iterrows():
            print(
                f"{row['InputType']:18s} Size: {row['InputSize']:6d} | "
                f"Time: {row['AvgTimeMs']:8.4f} ms | "
                f"Comparisons: {row['Comparisons']:10d} | Result: {row['Result']}"
            )

        csv_path = write_csv(results, args.output)
        print(f"\n✓ Results saved to {csv_path}")

        if args.db:
            with BenchmarkDatabase(args.db) as db:
                run_id = db.save_results(results, runner.algorithm_label)
            print(f"✓ Stored run {run_id} in {args.db}")

    except Exception as e:
        logger.error(f"Error running benchmark: {e}")
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
