"""
Tests for pattern module.
"""
import numpy as np
import pytest

from patternrec.pattern import (
    Centroid,
    Pattern,
    TestPattern,
    check_same_length,
    stack_vectors,
)


def test_pattern_copies_vector():
    """The pattern never aliases the caller's array."""
    src = np.array([1.0, 2.0])
    p = Pattern("A", src)
    src[0] = 99.0
    assert p.vector[0] == 1.0
    assert p.vector.dtype == np.float64


def test_pattern_assignment_is_fresh():
    p = Pattern("A", [1.0, 2.0])
    new = np.array([3.0])
    p.vector = new
    assert p.vector is not new
    np.testing.assert_array_equal(p.vector, [3.0])


def test_pattern_empty_vector_rejected():
    with pytest.raises(ValueError, match="empty"):
        Pattern("A", [])


def test_pattern_clone_is_deep():
    p = Pattern("A", [1.0, 2.0])
    c = p.clone()
    assert c.label == "A"
    assert c.vector is not p.vector
    c.vector[0] = 5.0
    assert p.vector[0] == 1.0


def test_test_pattern_success():
    t = TestPattern.from_pattern(Pattern("A", [1.0]))
    assert t.label is None
    assert t.expected_label == "A"
    assert not t.is_success()
    t.label = "A"
    assert t.is_success()


def test_test_pattern_from_unlabeled():
    with pytest.raises(ValueError):
        TestPattern.from_pattern(Pattern(None, [1.0]))


def test_test_pattern_clone_keeps_expected():
    t = TestPattern([1.0, 2.0], "B")
    t.label = "A"
    c = t.clone()
    assert isinstance(c, TestPattern)
    assert c.expected_label == "B"
    assert c.label == "A"


def test_centroid_equality_and_order():
    a = Centroid(0, [1.0, 2.0])
    b = Centroid(0, [1.0, 2.0])
    c = Centroid(0, [1.0, 2.5])
    d = Centroid(1, [1.0, 2.0])

    assert a == b
    assert a != c  # same id, different vector
    assert a != d
    assert hash(a) == hash(c)
    assert sorted([d, a]) == [a, d]


def test_centroid_factory_default():
    """A no-argument centroid can be filled in afterwards."""
    c = Centroid()
    c.id = 4
    c.vector = [1.0, 1.0]
    assert c.clone() == c


def test_check_same_length():
    assert check_same_length([Pattern("A", [1.0, 2.0]), Pattern("B", [3.0, 4.0])]) == 2
    with pytest.raises(ValueError, match="expected 2"):
        check_same_length([Pattern("A", [1.0, 2.0]), Pattern("B", [3.0])])
    with pytest.raises(ValueError):
        check_same_length([])


def test_stack_vectors():
    X = stack_vectors([Pattern("A", [1.0, 2.0]), Pattern("B", [3.0, 4.0])])
    assert X.shape == (2, 2)
