# patternrec/kmeans.py
from __future__ import annotations
from typing import Callable, Dict, List, Optional, Sequence
import numpy as np

from .errors import ConvergenceError, NotTrainedError
from .pattern import Centroid, Pattern, check_same_length, stack_vectors
from .representative import RepresentativeCentroid

MAX_CENTROIDS = 150

CentroidFactory = Callable[[], Centroid]
Clusters = Dict[Centroid, List[Pattern]]


class KMeans:
    """
    Lloyd's k-means over Pattern vectors.

      - train(): k distinct patterns picked at random become centroids 0..k-1
      - classify(): assign -> relocate -> compare, until the relocated
        centroids match the previous ones

    With tolerance == 0 convergence needs exact vector equality; a positive
    tolerance accepts a largest per-component move <= tolerance. The loop
    stops with ConvergenceError after max_iterations rounds.
    """
    def __init__(self, max_iterations: int = 300, tolerance: float = 0.0, seed: Optional[int] = None):
        if max_iterations <= 0:
            raise ValueError("max_iterations must be > 0.")
        if tolerance < 0.0:
            raise ValueError("tolerance must be >= 0.")
        self.max_iterations = max_iterations
        self.tolerance = tolerance
        self.rng = np.random.RandomState(seed)

        self.n_iterations: int = 0
        self._centroids: List[Centroid] = []
        self._factory: CentroidFactory = Centroid

    @property
    def centroids(self) -> List[Centroid]:
        return [c.clone() for c in self._centroids]

    @property
    def trained(self) -> bool:
        return bool(self._centroids)

    def train(self, patterns: Sequence[Pattern], k: int, centroid_factory: CentroidFactory = Centroid) -> List[Centroid]:
        if k <= 0:
            raise ValueError("k must be > 0.")
        check_same_length(patterns)
        k = min(MAX_CENTROIDS, k)

        # dump previous run
        self._centroids = []
        self._factory = centroid_factory
        self.n_iterations = 0

        chosen: List[Centroid] = []
        for idx in self.rng.permutation(len(patterns)):
            vector = patterns[idx].vector
            if any(np.array_equal(c.vector, vector) for c in chosen):
                continue
            chosen.append(self._make_centroid(len(chosen), vector))
            if len(chosen) == k:
                break

        if len(chosen) < k:
            raise ValueError(f"Only {len(chosen)} distinct vectors available for {k} centroids.")

        self._centroids = chosen
        return self.centroids

    def assign(self, patterns: Sequence[Pattern]) -> Clusters:
        """
        Group patterns under their nearest centroid. On equal distances
        the centroid with the lowest id wins. Only centroids with members
        appear in the result, in id order.
        """
        if not self.trained:
            raise NotTrainedError("KMeans not trained yet.")
        check_same_length(patterns)

        X = stack_vectors(patterns)
        C = np.stack([c.vector for c in self._centroids], axis=0)
        if X.shape[1] != C.shape[1]:
            raise ValueError(f"Patterns have {X.shape[1]} features, centroids have {C.shape[1]}.")

        distances = np.sqrt(((X[:, None, :] - C[None, :, :]) ** 2).sum(axis=2))  # (n, k)
        nearest = np.argmin(distances, axis=1)  # first minimum -> lowest id

        clusters: Clusters = {}
        for j, c in enumerate(self._centroids):
            members = [patterns[i] for i in np.flatnonzero(nearest == j)]
            if members:
                clusters[c] = members
        return clusters

    def classify(self, patterns: Sequence[Pattern]) -> Clusters:
        if not self.trained:
            raise NotTrainedError("KMeans not trained yet.")

        for iteration in range(1, self.max_iterations + 1):
            self.n_iterations = iteration
            clusters = self.assign(patterns)
            relocated = self._relocate(clusters)
            if not self._discrepancy(relocated):
                return clusters
            self._centroids = relocated

        raise ConvergenceError(self.max_iterations)

    def _relocate(self, clusters: Clusters) -> List[Centroid]:
        length = self._centroids[0].vector.shape[0]
        representatives = [RepresentativeCentroid(c.id, length) for c in self._centroids]
        by_id = {r.id: r for r in representatives}
        for centroid, members in clusters.items():
            rep = by_id[centroid.id]
            for p in members:
                rep.accumulate(p)

        relocated: List[Centroid] = []
        for rep in representatives:
            rep.close()  # EmptyClusterError when the centroid lost every member
            relocated.append(self._make_centroid(rep.id, rep.vector))
        return relocated

    def _discrepancy(self, other: List[Centroid]) -> bool:
        if len(other) != len(self._centroids):
            raise ValueError("Relocated centroid set has a different size.")
        for old, new in zip(self._centroids, other):
            if old.id != new.id:
                return True
            if self.tolerance == 0.0:
                if not np.array_equal(old.vector, new.vector):
                    return True
            elif np.max(np.abs(old.vector - new.vector)) > self.tolerance:
                return True
        return False

    def _make_centroid(self, id: int, vector: np.ndarray) -> Centroid:
        centroid = self._factory()
        centroid.id = id
        centroid.vector = vector
        return centroid
