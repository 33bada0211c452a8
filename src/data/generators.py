import logging
from enum import Enum
from typing import List

import numpy as np

logger = logging.getLogger(__name__)

DEFAULT_SEED = 42

# Filler values for the majority shapes never collide with the majority value 1
FILLER_LOW = 2
FILLER_HIGH = 102


class InputType(Enum):
    """Synthetic input shapes used by the benchmark."""
    CLEAR_MAJORITY = 1
    SLIM_MAJORITY = 2
    NO_MAJORITY = 3
    UNANIMOUS = 4
    CUSTOM = 5

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def from_choice(cls, choice: int) -> "InputType":
        """Map a 1-based menu choice onto an input type."""
        try:
            return cls(choice)
        except ValueError:
            raise ValueError(f"Invalid input type choice: {choice}") from None

    @classmethod
    def from_label(cls, label: str) -> "InputType":
        wanted = label.lower()
        for input_type in cls:
            if wanted in (input_type.label.lower(), input_type.name.lower()):
                return input_type
        raise ValueError(f"Unknown input type: {label}")


_LABELS = {
    InputType.CLEAR_MAJORITY: "ClearMajority60%",
    InputType.SLIM_MAJORITY: "SlimMajority51%",
    InputType.NO_MAJORITY: "NoMajority",
    InputType.UNANIMOUS: "Unanimous100%",
    InputType.CUSTOM: "Custom",
}

_DESCRIPTIONS = {
    InputType.CLEAR_MAJORITY: "Clear Majority (60%)",
    InputType.SLIM_MAJORITY: "Slim Majority (51%)",
    InputType.NO_MAJORITY: "No Majority (uniform distribution)",
    InputType.UNANIMOUS: "Unanimous (100%)",
    InputType.CUSTOM: "Custom test",
}


def generate_input(
    size: int, input_type: InputType, seed: int = DEFAULT_SEED
) -> List[int]:
    """
    Generate a shuffled benchmark input.

    Args:
        size: Number of elements
        input_type: Shape of the input
        seed: Seed for the random generator (same seed, same sequence)

    Returns:
        List of integers of the requested size

    Notes:
        CLEAR_MAJORITY and SLIM_MAJORITY use 1 as the majority value,
        UNANIMOUS uses 42. NO_MAJORITY cycles i % (size // 3 + 1), which has
        no majority once size >= 6.
    """
    if size < 0:
        raise ValueError(f"Size must be non-negative, got {size}")

    rng = np.random.default_rng(seed)

    if input_type is InputType.CLEAR_MAJORITY:
        arr = _with_majority(size, int(size * 0.6), rng)
    elif input_type is InputType.SLIM_MAJORITY:
        arr = _with_majority(size, size // 2 + 1, rng)
    elif input_type is InputType.NO_MAJORITY:
        arr = np.arange(size, dtype=np.int64) % (size // 3 + 1)
    elif input_type is InputType.UNANIMOUS:
        arr = np.full(size, 42, dtype=np.int64)
    elif input_type is InputType.CUSTOM:
        arr = rng.integers(0, 10, size=size, dtype=np.int64)
    else:
        raise ValueError(f"Unsupported input type: {input_type}")

    rng.shuffle(arr)
    logger.debug(f"Generated {input_type.label} input of size {size}")
    return arr.tolist()


def _with_majority(size: int, majority_count: int, rng: np.random.Generator) -> np.ndarray:
    """Array of `majority_count` ones followed by random fillers."""
    majority_count = min(majority_count, size)
    arr = np.empty(size, dtype=np.int64)
    arr[:majority_count] = 1
    arr[majority_count:] = rng.integers(
        FILLER_LOW, FILLER_HIGH, size=size - majority_count, dtype=np.int64
    )
    return arr
