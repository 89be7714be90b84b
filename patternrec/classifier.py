# patternrec/classifier.py
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
import threading
import numpy as np

from .errors import AlreadyTrainedError, DegenerateComputationError, NotTrainedError
from .pattern import Pattern, check_same_length, clone_all, stack_vectors
from .representative import Naive, RepresentativePattern
from .vector_math import euclidean_distance, gaussian_density, mean


@dataclass
class ClassifyResults:
    """
    Per-class compatibility scores (percent) of one classify() call,
    ordered from most to least compatible.
    """
    compatibilities: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def sorted_from(cls, scores: Dict[str, float]) -> "ClassifyResults":
        ordered = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)
        return cls(compatibilities=dict(ordered))


class Classifier(ABC):
    """
    Train once on labeled patterns, then write a label onto new patterns.

    Trained state is built aside and committed only when the whole
    training pass succeeded, so a failed or repeated train() never
    touches an existing model.
    """
    def __init__(self):
        self._trained = False

    @property
    def trained(self) -> bool:
        return self._trained

    def train(self, patterns: Sequence[Pattern]) -> "Classifier":
        if self._trained:
            raise AlreadyTrainedError(f"{type(self).__name__} is already trained.")
        check_same_length(patterns)
        for i, p in enumerate(patterns):
            if p.label is None:
                raise ValueError(f"Training pattern {i} has no label.")
        self._fit(patterns)
        self._trained = True
        return self

    @abstractmethod
    def _fit(self, patterns: Sequence[Pattern]) -> None:
        ...

    @abstractmethod
    def classify(self, pattern: Pattern) -> ClassifyResults:
        ...

    def classify_all(self, patterns: Sequence[Pattern]) -> List[ClassifyResults]:
        return [self.classify(p) for p in patterns]

    def _check_trained(self) -> None:
        if not self._trained:
            raise NotTrainedError(f"{type(self).__name__} not trained yet.")


class MinimalDistanceClassifier(Classifier):
    """
    Distance-to-mean classifier:
      - compute mean feature vector for each class
      - assign by smallest Euclidean distance to a mean

    Means are kept in first-seen label order; on equal distances the class
    seen first in training wins. classify() before train() leaves the
    pattern untouched.
    """
    def __init__(self):
        super().__init__()
        self._representatives: Dict[str, RepresentativePattern] = {}

    def _fit(self, patterns: Sequence[Pattern]) -> None:
        representatives: Dict[str, RepresentativePattern] = {}
        for p in patterns:
            rep = representatives.get(p.label)
            if rep is None:
                rep = representatives[p.label] = RepresentativePattern(p.label, len(p))
            rep.accumulate(p)
        for rep in representatives.values():
            rep.close()
        self._representatives = representatives

    def means(self) -> Dict[str, np.ndarray]:
        return {label: rep.vector.copy() for label, rep in self._representatives.items()}

    def classify(self, pattern: Pattern) -> ClassifyResults:
        best_label: Optional[str] = None
        best_distance = float("inf")
        scores: Dict[str, float] = {}
        avg = mean(pattern.vector)

        for label, rep in self._representatives.items():
            d = euclidean_distance(pattern.vector, rep.vector)
            if best_label is None or d < best_distance:
                best_label = label
                best_distance = d
            scores[label] = _average_ratio(avg, mean(rep.vector))

        if best_label is not None:
            pattern.label = best_label
        return ClassifyResults.sorted_from(scores)


def _average_ratio(a: float, b: float) -> float:
    lo, hi = min(a, b), max(a, b)
    if hi == 0.0:
        return 100.0 if lo == 0.0 else 0.0
    return lo / hi * 100.0


class KNearestNeighborsClassifier(Classifier):
    """
    k-NN with a "first class to collect k hits" vote.

    Training keeps a private deep copy of the patterns. classify() orders
    the training set by distance (stable, so ties keep training order) and
    walks it counting hits per class; the first class reaching k wins. If
    no class ever reaches k, the label is left as it was.

    The sort and the scan of one classify() call run under a single lock,
    so one trained instance may be shared between threads.
    """
    def __init__(self, k: int):
        super().__init__()
        if k <= 0:
            raise ValueError("k must be > 0.")
        self.k = k
        self._lock = threading.Lock()
        self._patterns: List[Pattern] = []
        self._matrix: Optional[np.ndarray] = None
        self._ordinals: Dict[str, int] = {}
        self._pattern_ordinals: Optional[np.ndarray] = None

    def _fit(self, patterns: Sequence[Pattern]) -> None:
        copies = clone_all(patterns)
        ordinals: Dict[str, int] = {}
        for p in copies:
            ordinals.setdefault(p.label, len(ordinals))

        with self._lock:
            self._patterns = copies
            self._matrix = stack_vectors(copies)
            self._ordinals = ordinals
            self._pattern_ordinals = np.array([ordinals[p.label] for p in copies], dtype=np.int64)

    @property
    def classes(self) -> List[str]:
        return list(self._ordinals)

    def classify(self, pattern: Pattern) -> ClassifyResults:
        with self._lock:
            self._check_trained()
            x = pattern.vector
            if x.shape[0] != self._matrix.shape[1]:
                raise ValueError(
                    f"Pattern has {x.shape[0]} features, classifier was trained on {self._matrix.shape[1]}."
                )

            distances = np.sqrt(np.sum((self._matrix - x) ** 2, axis=1))
            order = np.argsort(distances, kind="stable")

            counters = np.zeros(len(self._ordinals), dtype=np.int64)
            winner: Optional[str] = None
            for i in order:
                ordinal = self._pattern_ordinals[i]
                counters[ordinal] += 1
                if counters[ordinal] == self.k:
                    winner = self._patterns[i].label
                    break

        if winner is not None:
            pattern.label = winner
        scores = {label: float(counters[o]) / self.k * 100.0 for label, o in self._ordinals.items()}
        return ClassifyResults.sorted_from(scores)


class NaiveBayesClassifier(Classifier):
    """
    Gaussian naive Bayes.

    Training:
      1) accumulate every pattern into its class mean, close the means
      2) prior = class count / total patterns
      3) second pass over the patterns for the per-feature sample variance

    classify() picks the class with the largest posterior / evidence.
    An evidence that underflows to zero (or any non-finite posterior)
    raises DegenerateComputationError instead of comparing NaNs.
    """
    def __init__(self):
        super().__init__()
        self._naives: List[Naive] = []

    def _fit(self, patterns: Sequence[Pattern]) -> None:
        naives: Dict[str, Naive] = {}
        for p in patterns:
            naive = naives.get(p.label)
            if naive is None:
                naive = naives[p.label] = Naive.for_pattern(p)
            naive.representative.accumulate(p)

        for naive in naives.values():
            naive.close()
            naive.calculate_prior(len(patterns))  # needs the closed count

        for p in patterns:
            naives[p.label].append_variance(p)

        self._naives = list(naives.values())

    @property
    def naives(self) -> List[Naive]:
        return list(self._naives)

    def priors(self) -> Dict[str, float]:
        return {n.name: n.prior for n in self._naives}

    def classify(self, pattern: Pattern) -> ClassifyResults:
        self._check_trained()
        x = pattern.vector
        length = self._naives[0].variance.shape[0]
        if x.shape[0] != length:
            raise ValueError(f"Pattern has {x.shape[0]} features, classifier was trained on {length}.")

        posteriors = np.array([
            n.prior * np.prod(gaussian_density(x, n.mean, n.variance))
            for n in self._naives
        ], dtype=np.float64)
        if not np.all(np.isfinite(posteriors)):
            raise DegenerateComputationError("Non-finite class posterior (zero variance?).")

        evidence = float(posteriors.sum())
        if evidence <= 0.0 or not np.isfinite(evidence):
            raise DegenerateComputationError("Evidence underflowed to zero for every class.")

        best = -1.0
        found: Optional[str] = None
        scores: Dict[str, float] = {}
        for n, posterior in zip(self._naives, posteriors):
            ratio = float(posterior / evidence)
            scores[n.name] = ratio * 100.0
            if ratio > best:
                best = ratio
                found = n.name

        pattern.label = found
        return ClassifyResults.sorted_from(scores)


CLASSIFIERS = ("minimal_distance", "knn", "naive_bayes")


def make_classifier(method: str, k: int = 3) -> Classifier:
    if method == "minimal_distance":
        return MinimalDistanceClassifier()
    if method == "knn":
        return KNearestNeighborsClassifier(k)
    if method == "naive_bayes":
        return NaiveBayesClassifier()
    raise ValueError(f"Unknown classifier {method!r}; choose one of {', '.join(CLASSIFIERS)}.")
