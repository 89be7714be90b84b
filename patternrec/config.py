# patternrec/config.py
from dataclasses import dataclass, asdict, field
from typing import Dict, Optional
import numpy as np

from .filters import ComposedPatternFilter, PatternFilterBuilder


@dataclass
class FilterConfig:
    # feature selection, applied in this order; None = skip
    first_n: Optional[int] = None
    first_x: Optional[float] = None
    last_n: Optional[int] = None
    last_x: Optional[float] = None
    random_n: Optional[int] = None
    random_x: Optional[float] = None

    def is_empty(self) -> bool:
        return all(v is None for v in asdict(self).values())

    def build(self, seed: Optional[int] = None) -> Optional[ComposedPatternFilter]:
        """Composed filter for the configured steps, or None if none are set."""
        if self.is_empty():
            return None
        rng = np.random.RandomState(seed)
        b = PatternFilterBuilder()
        if self.first_n is not None:
            b.first_n(self.first_n)
        if self.first_x is not None:
            b.first_x(self.first_x)
        if self.last_n is not None:
            b.last_n(self.last_n)
        if self.last_x is not None:
            b.last_x(self.last_x)
        if self.random_n is not None:
            b.random_n(self.random_n, rng)
        if self.random_x is not None:
            b.random_x(self.random_x, rng)
        return b.build()


@dataclass
class ClassifyConfig:
    data_path: str = "iris.csv"
    # evaluation set; None = classify the training set again
    test_path: Optional[str] = None

    # minimal_distance | knn | naive_bayes
    method: str = "minimal_distance"
    k: int = 3

    seed: int = 0
    filters: FilterConfig = field(default_factory=FilterConfig)

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class KMeansConfig:
    data_path: str = "iris.csv"

    n_centroids: int = 3
    max_iterations: int = 300
    # 0.0 = exact equality between rounds
    tolerance: float = 0.0

    seed: int = 0
    # two features by default so the clusters can be plotted
    filters: FilterConfig = field(default_factory=lambda: FilterConfig(last_n=2))

    def to_dict(self) -> Dict:
        return asdict(self)
