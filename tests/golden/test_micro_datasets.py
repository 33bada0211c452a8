"""
Golden dataset validation tests.

These tests run the majority vote against hand-computed micro datasets,
checking both the answer and the exact operation counts.
"""

import json
from pathlib import Path

import pytest

GOLDEN_DIR = Path(__file__).parent / "micro"
DATASET_NAMES = sorted(path.stem for path in GOLDEN_DIR.glob("*.json"))


def load_golden_dataset(name):
    """Load a golden dataset from JSON file."""
    with open(GOLDEN_DIR / f"{name}.json") as f:
        return json.load(f)


def assert_counts(metrics, expected, dataset_name):
    actual = {
        "comparisons": metrics.comparisons,
        "assignments": metrics.assignments,
        "accesses": metrics.accesses,
    }
    assert actual == expected, f"Operation count mismatch in {dataset_name}"


@pytest.mark.golden
def test_datasets_present():
    assert len(DATASET_NAMES) >= 5


@pytest.mark.golden
@pytest.mark.parametrize("dataset_name", DATASET_NAMES)
def test_two_phase(algorithm, dataset_name):
    dataset = load_golden_dataset(dataset_name)
    expected = dataset["hand_computed_results"]

    assert algorithm.find_majority(dataset["sequence"]) == expected["majority"]
    assert_counts(algorithm.get_metrics(), expected["two_phase"], dataset_name)


@pytest.mark.golden
@pytest.mark.parametrize("dataset_name", DATASET_NAMES)
def test_optimized(algorithm, dataset_name):
    dataset = load_golden_dataset(dataset_name)
    expected = dataset["hand_computed_results"]

    assert algorithm.find_majority_optimized(dataset["sequence"]) == expected["majority"]
    assert_counts(algorithm.get_metrics(), expected["optimized"], dataset_name)


@pytest.mark.golden
@pytest.mark.parametrize("dataset_name", DATASET_NAMES)
def test_positions(algorithm, dataset_name):
    dataset = load_golden_dataset(dataset_name)
    expected = dataset["hand_computed_results"]

    result = algorithm.find_majority_with_positions(dataset["sequence"])

    if expected["positions"] is None:
        assert result is None
    else:
        assert result.element == expected["majority"]
        assert list(result.positions) == expected["positions"]
        assert result.count == len(expected["positions"])


@pytest.mark.golden
@pytest.mark.parametrize("dataset_name", DATASET_NAMES)
def test_hand_computed_counts_are_consistent(dataset_name):
    """Each element is adopted or compared once in phase 1; verification adds n + 1."""
    dataset = load_golden_dataset(dataset_name)
    n = len(dataset["sequence"])
    two_phase = dataset["hand_computed_results"]["two_phase"]

    assert two_phase["accesses"] == 2 * n
    assert two_phase["comparisons"] + two_phase["assignments"] == 2 * n + 1
