# patternrec/vector_math.py
from __future__ import annotations
import math
import numpy as np


def _as_vector(v) -> np.ndarray:
    return np.asarray(v, dtype=np.float64)


def euclidean_distance(a, b) -> float:
    a = _as_vector(a)
    b = _as_vector(b)
    if a.shape != b.shape:
        raise ValueError(f"Vectors have different sizes: {a.shape[0]} != {b.shape[0]}.")
    return float(np.linalg.norm(a - b))


def square(x):
    return x * x


def mean(vector) -> float:
    v = _as_vector(vector)
    if v.size == 0:
        raise ValueError("Cannot average an empty vector.")
    return float(v.sum() / v.size)


def gaussian_density(x, mean, variance):
    """
    Normal density as used by the naive Bayes classifier:

        (1 / (sqrt(2*pi) * variance)) * exp(-(x - mean)^2 / (2 * variance^2))

    `variance` is used where the textbook formula has the standard deviation,
    both in the normalising constant and in the exponent. Existing expected
    outputs depend on this form, so it is kept as is.

    Works element-wise on numpy arrays. A zero variance yields inf/nan;
    callers check the result.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        exponent = np.exp(-(square(np.subtract(x, mean)) / (2 * square(variance))))
        return (1 / (math.sqrt(2 * math.pi) * np.asarray(variance, dtype=np.float64))) * exponent
