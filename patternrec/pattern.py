# patternrec/pattern.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import numpy as np


def _fresh_vector(vector) -> np.ndarray:
    v = np.array(vector, dtype=np.float64)  # always a copy
    if v.ndim != 1:
        raise ValueError("vector must be 1D.")
    if v.size == 0:
        raise ValueError("vector cannot be empty.")
    return v


@dataclass(eq=False)
class Pattern:
    """
    A fixed-length feature vector tagged with a class label.

    The label is None for patterns waiting to be classified. Assigning
    `vector` always stores a fresh float64 array, never the caller's.
    """
    label: Optional[str]
    vector: np.ndarray

    def __setattr__(self, name, value):
        if name == "vector":
            value = _fresh_vector(value)
        super().__setattr__(name, value)

    def __len__(self) -> int:
        return int(self.vector.shape[0])

    def clone(self) -> "Pattern":
        return Pattern(self.label, self.vector)

    def __repr__(self) -> str:
        return f"Pattern(label={self.label!r}, vector={self.vector.tolist()})"


class TestPattern(Pattern):
    """
    Pattern with a known expected label, used to evaluate a classifier.
    Starts unlabeled so the classifier's answer can be compared afterwards.
    """
    __test__ = False  # keep pytest from collecting it

    def __init__(self, vector, expected_label: str):
        super().__init__(None, vector)
        self.expected_label = expected_label

    @classmethod
    def from_pattern(cls, pattern: Pattern) -> "TestPattern":
        if pattern.label is None:
            raise ValueError("Cannot build a test pattern from an unlabeled pattern.")
        return cls(pattern.vector, pattern.label)

    def is_success(self) -> bool:
        return self.label == self.expected_label

    def clone(self) -> "TestPattern":
        copy = TestPattern(self.vector, self.expected_label)
        copy.label = self.label
        return copy

    def __repr__(self) -> str:
        return (
            f"TestPattern(label={self.label!r}, vector={self.vector.tolist()}, "
            f"expected={self.expected_label!r}, success={self.is_success()})"
        )


@dataclass(eq=False)
class Centroid:
    """
    Cluster representative. Ordered and hashed by id; equal when both the
    id and every vector component match.
    """
    id: int = 0
    vector: np.ndarray = field(default_factory=lambda: np.zeros(1))

    def __setattr__(self, name, value):
        if name == "vector":
            value = _fresh_vector(value)
        super().__setattr__(name, value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Centroid):
            return NotImplemented
        return self.id == other.id and np.array_equal(self.vector, other.vector)

    def __hash__(self) -> int:
        return hash(self.id)

    def __lt__(self, other: "Centroid") -> bool:
        return self.id < other.id

    def clone(self) -> "Centroid":
        copy = type(self)()
        copy.id = self.id
        copy.vector = self.vector
        return copy

    def __repr__(self) -> str:
        return f"Centroid(id={self.id}, vector={self.vector.tolist()})"


def check_same_length(patterns: Sequence[Pattern]) -> int:
    """Return the vector length shared by all patterns."""
    if not patterns:
        raise ValueError("Need at least one pattern.")
    length = len(patterns[0])
    for i, p in enumerate(patterns):
        if len(p) != length:
            raise ValueError(f"Pattern {i} has {len(p)} features, expected {length}.")
    return length


def stack_vectors(patterns: Sequence[Pattern]) -> np.ndarray:
    check_same_length(patterns)
    return np.stack([p.vector for p in patterns], axis=0)


def clone_all(patterns: Sequence[Pattern]) -> List[Pattern]:
    return [p.clone() for p in patterns]
