"""Exceptions raised by the assignment solver.

Every `ValidationError` is raised before the solver allocates any working state,
so a failed call never leaves a partially reduced matrix behind.
"""


class ValidationError(ValueError):
    """Base class for score matrices the solver refuses to work on."""


class NonSquareMatrixError(ValidationError):
    """Score matrix is not two-dimensional with as many rows as columns."""


class NegativeScoreError(ValidationError):
    """Score matrix contains at least one entry below zero."""


class EmptyMatrixError(ValidationError):
    """Score matrix has no elements."""


class NonFiniteScoreError(ValidationError):
    """Score matrix contains NaN or infinite entries."""


class SolveCancelledError(RuntimeError):
    """The caller's cancel check asked the solver to stop between stages."""


class MarkerStateError(RuntimeError):
    """A row or column of the marker grid holds more than one star."""
