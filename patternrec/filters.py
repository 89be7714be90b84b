# patternrec/filters.py
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence
import math
import numpy as np

from .pattern import Pattern


def _check_n(n: int) -> None:
    if n <= 0:
        raise ValueError(f"n must be > 0, got {n}.")


def _check_x(x: float) -> None:
    if not 0.0 < x < 1.0:
        raise ValueError(f"x must be in (0, 1), got {x}.")


def _fraction_amount(length: int, x: float) -> int:
    return max(int(math.floor(length * x)), 1)


class PatternFilter(ABC):
    """
    Feature selection over pattern vectors.

    filter() replaces the pattern's vector in place (always with a new
    array); the *_copy variants leave the input untouched.
    """
    @abstractmethod
    def filter(self, pattern: Pattern) -> None:
        ...

    def filter_copy(self, pattern: Pattern) -> Pattern:
        clone = pattern.clone()
        self.filter(clone)
        return clone

    def filter_all(self, patterns: Sequence[Pattern]) -> None:
        for p in patterns:
            self.filter(p)

    def filter_copy_all(self, patterns: Sequence[Pattern]) -> List[Pattern]:
        return [self.filter_copy(p) for p in patterns]


class FirstNFilter(PatternFilter):
    def __init__(self, n: int):
        _check_n(n)
        self.n = n

    def filter(self, pattern: Pattern) -> None:
        pattern.vector = pattern.vector[: self.n]


class LastNFilter(PatternFilter):
    def __init__(self, n: int):
        _check_n(n)
        self.n = n

    def filter(self, pattern: Pattern) -> None:
        pattern.vector = pattern.vector[-self.n:]


class FirstXFilter(PatternFilter):
    """Keeps the leading fraction x of the features (at least one)."""
    def __init__(self, x: float):
        _check_x(x)
        self.x = x

    def filter(self, pattern: Pattern) -> None:
        amount = _fraction_amount(len(pattern), self.x)
        pattern.vector = pattern.vector[:amount]


class LastXFilter(PatternFilter):
    """Keeps the trailing fraction x of the features (at least one)."""
    def __init__(self, x: float):
        _check_x(x)
        self.x = x

    def filter(self, pattern: Pattern) -> None:
        amount = _fraction_amount(len(pattern), self.x)
        pattern.vector = pattern.vector[-amount:]


class _RandomFilter(PatternFilter):
    """
    Keeps a random subset of feature positions, in their original order.

    A single pattern gets its own draw; a list is filtered with one draw
    shared by every pattern so the features stay comparable.
    """
    def __init__(self, rng: Optional[np.random.RandomState] = None):
        self.rng = rng if rng is not None else np.random.RandomState()

    @abstractmethod
    def _amount(self, length: int) -> int:
        ...

    def _indexes(self, length: int) -> np.ndarray:
        amount = self._amount(length)
        if amount >= length:
            return np.arange(length)
        return np.sort(self.rng.choice(length, size=amount, replace=False))

    def filter(self, pattern: Pattern) -> None:
        pattern.vector = pattern.vector[self._indexes(len(pattern))]

    def filter_all(self, patterns: Sequence[Pattern]) -> None:
        if not patterns:
            return
        idx = self._indexes(len(patterns[0]))
        for p in patterns:
            p.vector = p.vector[idx]

    def filter_copy_all(self, patterns: Sequence[Pattern]) -> List[Pattern]:
        copies = [p.clone() for p in patterns]
        self.filter_all(copies)
        return copies


class RandomNFilter(_RandomFilter):
    def __init__(self, n: int, rng: Optional[np.random.RandomState] = None):
        _check_n(n)
        super().__init__(rng)
        self.n = n

    def _amount(self, length: int) -> int:
        return self.n


class RandomXFilter(_RandomFilter):
    def __init__(self, x: float, rng: Optional[np.random.RandomState] = None):
        _check_x(x)
        super().__init__(rng)
        self.x = x

    def _amount(self, length: int) -> int:
        return _fraction_amount(length, self.x)


class ComposedPatternFilter(PatternFilter):
    """Applies its filters one after the other."""
    def __init__(self, filters: Sequence[PatternFilter]):
        self.filters = tuple(filters)

    def filter(self, pattern: Pattern) -> None:
        for f in self.filters:
            f.filter(pattern)

    def filter_copy(self, pattern: Pattern) -> Pattern:
        result = pattern.clone()
        for f in self.filters:
            result = f.filter_copy(result)
        return result

    def filter_all(self, patterns: Sequence[Pattern]) -> None:
        for f in self.filters:
            f.filter_all(patterns)

    def filter_copy_all(self, patterns: Sequence[Pattern]) -> List[Pattern]:
        result = [p.clone() for p in patterns]
        for f in self.filters:
            result = f.filter_copy_all(result)
        return result


class PatternFilterBuilder:
    """
    Fluent builder:

        PatternFilterBuilder().last_n(2).build()
    """
    def __init__(self):
        self._filters: List[PatternFilter] = []

    def first_n(self, n: int) -> "PatternFilterBuilder":
        self._filters.append(FirstNFilter(n))
        return self

    def first_x(self, x: float) -> "PatternFilterBuilder":
        self._filters.append(FirstXFilter(x))
        return self

    def last_n(self, n: int) -> "PatternFilterBuilder":
        self._filters.append(LastNFilter(n))
        return self

    def last_x(self, x: float) -> "PatternFilterBuilder":
        self._filters.append(LastXFilter(x))
        return self

    def random_n(self, n: int, rng: Optional[np.random.RandomState] = None) -> "PatternFilterBuilder":
        self._filters.append(RandomNFilter(n, rng))
        return self

    def random_x(self, x: float, rng: Optional[np.random.RandomState] = None) -> "PatternFilterBuilder":
        self._filters.append(RandomXFilter(x, rng))
        return self

    def build(self) -> ComposedPatternFilter:
        return ComposedPatternFilter(self._filters)
