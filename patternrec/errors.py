# patternrec/errors.py
from __future__ import annotations


class StateError(RuntimeError):
    """An operation was invoked in a lifecycle state that does not allow it."""


class AlreadyTrainedError(StateError):
    pass


class NotTrainedError(StateError):
    pass


class AccumulatorClosedError(StateError):
    pass


class DegenerateComputationError(ArithmeticError):
    """
    A numeric step hit a degenerate case (too few samples, underflow,
    empty cluster) whose result would otherwise be NaN/Infinity.
    """


class EmptyClusterError(DegenerateComputationError):
    pass


class ConvergenceError(RuntimeError):
    def __init__(self, iterations: int):
        super().__init__(f"k-means did not converge after {iterations} iterations.")
        self.iterations = iterations
