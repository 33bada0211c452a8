#!/usr/bin/env python3
"""
Find the majority element of a sequence given on the command line or in a file.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path so we can import our modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analysis.majority import (  # noqa: E402
    BoyerMooreMajorityVote,
    Found,
    InvalidInputError,
    collect_positions,
)

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def read_sequence(path: Path):
    """Read whitespace or comma separated integers from a file."""
    text = path.read_text().replace(",", " ")
    return [int(token) for token in text.split()]


def main():
    parser = argparse.ArgumentParser(description="Find the majority element")
    parser.add_argument("values", nargs="*", type=int, help="Sequence elements")
    parser.add_argument("--file", help="Read integers from this file instead")
    parser.add_argument(
        "--optimized", action="store_true", help="Use early termination"
    )
    parser.add_argument(
        "--positions", action="store_true", help="Also print occurrence indices"
    )

    args = parser.parse_args()

    if args.file:
        file_path = Path(args.file)
        if not file_path.exists():
            logger.error(f"Input file not found: {file_path}")
            sys.exit(1)
        try:
            sequence = read_sequence(file_path)
        except ValueError as e:
            logger.error(f"Could not parse {file_path}: {e}")
            sys.exit(1)
    else:
        sequence = args.values

    algorithm = BoyerMooreMajorityVote()
    try:
        outcome, metrics = algorithm.detect(sequence, optimized=args.optimized)
    except InvalidInputError as e:
        logger.error(f"Invalid input: {e}")
        sys.exit(1)

    if isinstance(outcome, Found):
        print(f"✓ Majority element: {outcome.element}")
        if args.positions:
            positions = collect_positions(sequence, outcome.element)
            print(f"  Appears {len(positions)} times at {list(positions)}")
    else:
        print("✗ No majority element")

    print(
        f"  Comparisons: {metrics.comparisons}, Assignments: {metrics.assignments}, "
        f"Accesses: {metrics.accesses}, Time: {metrics.elapsed_ms:.4f} ms"
    )


if __name__ == "__main__":
    main()
