# patternrec/confusion.py
from __future__ import annotations
from typing import Dict, List, Optional, Sequence
import numpy as np

from .pattern import TestPattern


class ConfusionMatrix:
    """
    Expected-vs-classified counts over evaluated test patterns.

      rows    = expected class
      columns = classified class

    Classes are indexed in first-seen order (expected labels first, then any
    classified label never expected). Patterns the classifier left unlabeled
    are counted in `unclassified` only.
    """
    def __init__(self, patterns: Sequence[TestPattern]):
        self.patterns = list(patterns)
        self.unclassified = 0
        self._classes: Dict[str, int] = {}
        self._matrix: Optional[np.ndarray] = None

    @property
    def computed(self) -> bool:
        return self._matrix is not None

    def compute(self) -> np.ndarray:
        if self.computed:
            raise RuntimeError("Confusion matrix was computed already.")

        classes: Dict[str, int] = {}
        for p in self.patterns:
            classes.setdefault(p.expected_label, len(classes))
        for p in self.patterns:
            if p.label is not None:
                classes.setdefault(p.label, len(classes))

        matrix = np.zeros((len(classes), len(classes)), dtype=np.int64)
        unclassified = 0
        for p in self.patterns:
            if p.label is None:
                unclassified += 1
                continue
            matrix[classes[p.expected_label], classes[p.label]] += 1

        self._classes = classes
        self.unclassified = unclassified
        self._matrix = matrix
        return matrix.copy()

    @property
    def classes(self) -> List[str]:
        self._check_computed()
        return list(self._classes)

    @property
    def matrix(self) -> np.ndarray:
        self._check_computed()
        return self._matrix.copy()

    def accuracy(self) -> float:
        self._check_computed()
        if not self.patterns:
            return 0.0
        return float(np.trace(self._matrix)) / len(self.patterns)

    def display(self) -> str:
        self._check_computed()
        lines = []
        for row in self._matrix:
            lines.append("| " + ", ".join(format(int(v), "02,d") for v in row))
        return "\n".join(lines) + "\n"

    def _check_computed(self) -> None:
        if not self.computed:
            raise RuntimeError("Confusion matrix is not computed yet.")
