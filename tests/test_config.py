"""
Tests for config module.
"""
import numpy as np

from patternrec.config import ClassifyConfig, FilterConfig, KMeansConfig
from patternrec.pattern import Pattern


def test_defaults():
    c = ClassifyConfig()
    assert c.method == "minimal_distance"
    assert c.filters.is_empty()

    k = KMeansConfig()
    assert k.n_centroids == 3
    assert k.tolerance == 0.0
    assert k.filters.last_n == 2


def test_to_dict_nested():
    d = KMeansConfig().to_dict()
    assert d["filters"]["last_n"] == 2
    assert d["max_iterations"] == 300


def test_empty_filter_builds_nothing():
    assert FilterConfig().build() is None


def test_filter_build_order():
    flt = FilterConfig(first_n=4, last_n=2).build(seed=0)
    p = Pattern("A", np.arange(6.0))
    flt.filter(p)
    np.testing.assert_array_equal(p.vector, [2.0, 3.0])


def test_random_filter_seeded():
    a = FilterConfig(random_n=3).build(seed=7).filter_copy(Pattern("A", np.arange(10.0)))
    b = FilterConfig(random_n=3).build(seed=7).filter_copy(Pattern("A", np.arange(10.0)))
    np.testing.assert_array_equal(a.vector, b.vector)
