# patternrec/representative.py
from __future__ import annotations
from enum import Enum
import numpy as np

from .errors import AccumulatorClosedError, DegenerateComputationError, EmptyClusterError, StateError
from .pattern import Pattern
from .vector_math import square


class AccumulatorState(Enum):
    OPEN = "open"
    CLOSED = "closed"


class Representative:
    """
    Running-mean builder with a one-way OPEN -> CLOSED lifecycle.

      - accumulate(): adds a vector while OPEN
      - close(): divides the sum by the count once and moves to CLOSED

    Closing with no members raises EmptyClusterError and stays OPEN.
    """
    def __init__(self, length: int):
        if length <= 0:
            raise ValueError("length must be > 0.")
        self.vector = np.zeros(length, dtype=np.float64)
        self.count = 0
        self.state = AccumulatorState.OPEN

    @property
    def closed(self) -> bool:
        return self.state is AccumulatorState.CLOSED

    def __len__(self) -> int:
        return int(self.vector.shape[0])

    def accumulate(self, pattern: Pattern) -> None:
        self._check_open()
        self._validate(pattern)
        self.vector += pattern.vector
        self.count += 1

    def close(self) -> None:
        self._check_open()
        if self.count == 0:
            raise EmptyClusterError(f"{self._describe()} has no members to average.")
        self.vector = self.vector / self.count
        self.state = AccumulatorState.CLOSED

    def _validate(self, pattern: Pattern) -> None:
        if len(pattern) != len(self):
            raise ValueError(
                f"{self._describe()} expects {len(self)} features, got {len(pattern)}."
            )

    def _check_open(self) -> None:
        if self.closed:
            raise AccumulatorClosedError(f"{self._describe()} is already closed.")

    def _describe(self) -> str:
        return type(self).__name__


class RepresentativePattern(Representative):
    """Mean of every training pattern sharing one label."""
    def __init__(self, label: str, length: int):
        super().__init__(length)
        self.label = label

    def _validate(self, pattern: Pattern) -> None:
        if pattern.label != self.label:
            raise ValueError(
                f"Pattern of class {pattern.label!r} cannot join representative of {self.label!r}."
            )
        super()._validate(pattern)

    def _describe(self) -> str:
        return f"Representative of {self.label!r}"

    def __repr__(self) -> str:
        return (
            f"RepresentativePattern(label={self.label!r}, vector={self.vector.tolist()}, "
            f"count={self.count}, state={self.state.value})"
        )


class RepresentativeCentroid(Representative):
    """Mean of the patterns assigned to one centroid during relocation."""
    def __init__(self, id: int, length: int):
        super().__init__(length)
        self.id = id

    def _describe(self) -> str:
        return f"Centroid {self.id}"

    def __repr__(self) -> str:
        return (
            f"RepresentativeCentroid(id={self.id}, vector={self.vector.tolist()}, "
            f"count={self.count}, state={self.state.value})"
        )


class Naive:
    """
    Per-class model of the naive Bayes classifier.

    Lifecycle:
      1) representative.accumulate() for every pattern of the class
      2) close()                      -> mean ready
      3) calculate_prior(total)       -> needs the final count
      4) append_variance() per pattern -> sample variance (divides by count - 1)
    """
    def __init__(self, label: str, length: int):
        self.name = label
        self.representative = RepresentativePattern(label, length)
        self.variance = np.zeros(length, dtype=np.float64)
        self.prior: float = 0.0
        self.state = AccumulatorState.OPEN

    @classmethod
    def for_pattern(cls, pattern: Pattern) -> "Naive":
        if pattern.label is None:
            raise ValueError("Training pattern has no label.")
        return cls(pattern.label, len(pattern))

    @property
    def closed(self) -> bool:
        return self.state is AccumulatorState.CLOSED

    @property
    def mean(self) -> np.ndarray:
        return self.representative.vector

    @property
    def count(self) -> int:
        return self.representative.count

    def close(self) -> None:
        if self.closed:
            raise AccumulatorClosedError(f"Naive of {self.name!r} is already closed.")
        self.representative.close()
        self.state = AccumulatorState.CLOSED

    def calculate_prior(self, total: int) -> None:
        self._check_closed()
        if total <= 0:
            raise ValueError("total must be > 0.")
        self.prior = self.count / total

    def append_variance(self, pattern: Pattern) -> None:
        self._check_closed()
        if pattern.label != self.name:
            raise ValueError(
                f"Pattern of class {pattern.label!r} cannot join naive of {self.name!r}."
            )
        if len(pattern) != self.variance.shape[0]:
            raise ValueError(
                f"Naive of {self.name!r} expects {self.variance.shape[0]} features, got {len(pattern)}."
            )
        if self.count <= 1:
            raise DegenerateComputationError(
                f"Class {self.name!r} needs at least 2 patterns to estimate a variance, has {self.count}."
            )
        self.variance += square(pattern.vector - self.mean) / (self.count - 1)

    def _check_closed(self) -> None:
        if not self.closed:
            raise StateError(f"Naive of {self.name!r} is not closed yet.")

    def __repr__(self) -> str:
        return (
            f"Naive(name={self.name!r}, mean={self.mean.tolist()}, "
            f"variance={self.variance.tolist()}, prior={self.prior})"
        )
