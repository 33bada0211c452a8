"""
Shared pytest configuration and fixtures for majority-vote-analyzer.

This module provides common test fixtures and utilities used across
all test modules.
"""

import sys
from pathlib import Path

import pandas as pd
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from analysis.majority import BoyerMooreMajorityVote  # noqa: E402
from data.database import BenchmarkDatabase  # noqa: E402


@pytest.fixture
def algorithm():
    """Algorithm instance without memory readings (keeps tests deterministic)."""
    return BoyerMooreMajorityVote(measure_memory=False)


@pytest.fixture
def temp_db():
    """Provide a temporary in-memory database for testing."""
    db = BenchmarkDatabase(":memory:")
    yield db
    db.close()


@pytest.fixture
def temp_db_file(tmp_path):
    """Provide a path for a database file that does not exist yet."""
    return str(tmp_path / "benchmarks.db")


@pytest.fixture
def sample_results():
    """Provide benchmark rows in CSV column layout."""
    return pd.DataFrame(
        [
            {
                "InputSize": 100,
                "InputType": "ClearMajority60%",
                "AvgTimeMs": 0.0412,
                "StdDevMs": 0.0031,
                "Comparisons": 199,
                "Assignments": 12,
                "ArrayAccesses": 200,
                "MemoryBytes": 0,
                "Result": "1",
            },
            {
                "InputSize": 1000,
                "InputType": "ClearMajority60%",
                "AvgTimeMs": 0.3821,
                "StdDevMs": 0.0120,
                "Comparisons": 1990,
                "Assignments": 97,
                "ArrayAccesses": 2000,
                "MemoryBytes": 4096,
                "Result": "1",
            },
            {
                "InputSize": 100,
                "InputType": "NoMajority",
                "AvgTimeMs": 0.0398,
                "StdDevMs": 0.0027,
                "Comparisons": 170,
                "Assignments": 31,
                "ArrayAccesses": 200,
                "MemoryBytes": 0,
                "Result": "null",
            },
        ]
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (medium speed, database required)",
    )
    config.addinivalue_line(
        "markers",
        "golden: marks tests as golden dataset validation (hand-computed counts)",
    )
    config.addinivalue_line(
        "markers", "invariant: marks tests as mathematical invariant validation"
    )
    config.addinivalue_line(
        "markers", "smoke: marks tests as smoke tests (basic functionality check)"
    )
