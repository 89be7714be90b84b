import matplotlib

matplotlib.use("Agg")

import pytest

from patternrec.pattern import Pattern


@pytest.fixture
def two_class_patterns():
    """Small, well separated two-class training set."""
    return [
        Pattern("A", [1.0, 1.0]),
        Pattern("A", [1.0, 3.0]),
        Pattern("A", [2.0, 2.0]),
        Pattern("B", [9.0, 9.0]),
        Pattern("B", [8.0, 9.0]),
        Pattern("B", [9.0, 8.0]),
    ]
