"""
Tests for filters module.
"""
import numpy as np
import pytest

from patternrec.filters import (
    ComposedPatternFilter,
    FirstNFilter,
    FirstXFilter,
    LastNFilter,
    LastXFilter,
    PatternFilterBuilder,
    RandomNFilter,
    RandomXFilter,
)
from patternrec.pattern import Pattern, TestPattern


def _p(n=5, label="A"):
    return Pattern(label, np.arange(float(n)))


def test_first_and_last_n():
    p = _p()
    FirstNFilter(2).filter(p)
    np.testing.assert_array_equal(p.vector, [0.0, 1.0])

    q = _p()
    LastNFilter(2).filter(q)
    np.testing.assert_array_equal(q.vector, [3.0, 4.0])


def test_n_larger_than_vector_keeps_a_fresh_copy():
    p = _p(3)
    before = p.vector
    LastNFilter(10).filter(p)
    np.testing.assert_array_equal(p.vector, [0.0, 1.0, 2.0])
    assert p.vector is not before


def test_fraction_filters():
    p = _p(10)
    FirstXFilter(0.35).filter(p)
    np.testing.assert_array_equal(p.vector, [0.0, 1.0, 2.0])

    q = _p(10)
    LastXFilter(0.2).filter(q)
    np.testing.assert_array_equal(q.vector, [8.0, 9.0])


def test_fraction_keeps_at_least_one():
    p = _p(3)
    FirstXFilter(0.1).filter(p)
    np.testing.assert_array_equal(p.vector, [0.0])


@pytest.mark.parametrize("make", [
    lambda: FirstNFilter(0),
    lambda: LastNFilter(-1),
    lambda: RandomNFilter(0),
    lambda: FirstXFilter(0.0),
    lambda: LastXFilter(1.0),
    lambda: RandomXFilter(1.5),
])
def test_invalid_parameters(make):
    with pytest.raises(ValueError):
        make()


def test_filter_copy_leaves_original():
    p = _p()
    c = FirstNFilter(2).filter_copy(p)
    assert len(p) == 5
    assert len(c) == 2
    assert c.label == "A"


def test_filter_copy_keeps_test_pattern_type():
    t = TestPattern(np.arange(4.0), "A")
    c = LastNFilter(1).filter_copy(t)
    assert isinstance(c, TestPattern)
    assert c.expected_label == "A"


def test_random_n_keeps_order_and_values():
    p = _p(10)
    RandomNFilter(4, np.random.RandomState(0)).filter(p)
    assert len(p) == 4
    assert list(p.vector) == sorted(p.vector)
    assert set(p.vector) <= set(range(10))


def test_random_list_uses_same_indexes():
    patterns = [Pattern("A", np.arange(10.0) + 100 * i) for i in range(5)]
    out = RandomXFilter(0.5, np.random.RandomState(1)).filter_copy_all(patterns)
    idx = out[0].vector.astype(int)
    for i, p in enumerate(out):
        np.testing.assert_array_equal(p.vector, idx + 100 * i)
    assert all(len(p) == 10 for p in patterns)


def test_composed_applies_in_order():
    flt = PatternFilterBuilder().first_n(4).last_n(2).build()
    assert isinstance(flt, ComposedPatternFilter)
    p = _p(6)
    flt.filter(p)
    np.testing.assert_array_equal(p.vector, [2.0, 3.0])


def test_composed_copy_all_leaves_originals():
    patterns = [_p(6), _p(6)]
    flt = PatternFilterBuilder().last_n(3).first_x(0.5).build()
    out = flt.filter_copy_all(patterns)
    for p in out:
        np.testing.assert_array_equal(p.vector, [3.0])
    for p in patterns:
        assert len(p) == 6
        assert not any(p.vector is q.vector for q in out)


def test_empty_builder_is_identity():
    p = _p(3)
    PatternFilterBuilder().build().filter(p)
    assert len(p) == 3
