"""Input validation and reduction of score matrices into working matrices."""

from enum import Enum
from typing import Union

import numpy as np
from loguru import logger

from kuhn_munkres.solver.errors import (
    EmptyMatrixError,
    NegativeScoreError,
    NonFiniteScoreError,
    NonSquareMatrixError,
    ValidationError,
)


class ScoreDirection(str, Enum):
    """How the entries of a score matrix are interpreted."""

    MINIMIZE_IS_BEST = "minimize"
    MAXIMIZE_IS_BEST = "maximize"

    @classmethod
    def coerce(cls, value: Union["ScoreDirection", str]) -> "ScoreDirection":
        """Return the direction for an enum member, its value or its name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        try:
            return cls[str(value).upper()]
        except KeyError:
            message = (
                f"Invalid score direction: {value!r}. "
                f"Must be one of {[d.value for d in cls]}."
            )
            logger.error(message)
            raise ValueError(message) from None


def _fail(error_cls, message: str):
    logger.error(message)
    raise error_cls(message)


def validate_score_matrix(score_matrix) -> np.ndarray:
    """Check that `score_matrix` can be handed to the solver.

    Args:
        score_matrix: Array-like of shape `(n, n)` with pairwise scores. Rows refer to
            the first set of elements and columns to the second one.

    Returns:
        The scores as a new `float64` array of shape `(n, n)`.

    Raises:
        NonSquareMatrixError: If the input is ragged, not 2D or not square.
        EmptyMatrixError: If the matrix has no elements.
        ValidationError: If the entries are not real numbers, e.g. strings or complex.
        NonFiniteScoreError: If any score is NaN or infinite.
        NegativeScoreError: If any score is below zero.
    """
    try:
        raw = np.asarray(score_matrix)
    except ValueError as e:
        message = f"Score matrix could not be read as a 2D array: {e}"
        logger.error(message)
        raise NonSquareMatrixError(message) from e

    if raw.ndim != 2:
        _fail(
            NonSquareMatrixError,
            f"Score matrix must be 2D, got an array with {raw.ndim} dimension(s).",
        )
    if raw.shape[0] != raw.shape[1]:
        _fail(
            NonSquareMatrixError,
            f"Score matrix is not square! Got shape {raw.shape}.",
        )
    if raw.size == 0:
        _fail(EmptyMatrixError, "Score matrix is empty.")
    if raw.dtype.kind not in "biufO":
        _fail(
            ValidationError,
            f"Score matrix must hold real numbers, got dtype {raw.dtype}.",
        )
    try:
        scores = raw.astype(np.float64)
    except (TypeError, ValueError) as e:
        message = f"Score matrix must hold real numbers: {e}"
        logger.error(message)
        raise ValidationError(message) from e

    if not np.isfinite(scores).all():
        _fail(NonFiniteScoreError, "Score matrix contains NaN or infinite scores!")
    if (scores < 0).any():
        r, c = np.argwhere(scores < 0)[0]
        _fail(
            NegativeScoreError,
            f"Score matrix contains negative scores! First at ({r}, {c}): "
            f"{scores[r, c]}.",
        )
    return scores


def normalize_score_matrix(
    score_matrix: np.ndarray,
    direction: ScoreDirection = ScoreDirection.MINIMIZE_IS_BEST,
) -> np.ndarray:
    """Build the minimization-oriented working matrix for a validated score matrix.

    If larger scores are better, every entry `e` is replaced by `max - e` first. Then
    the minimum of each row is subtracted from that row and afterwards the minimum of
    each column from that column, so every row and every column holds a zero.

    Args:
        score_matrix: Validated square matrix of non-negative scores. Not modified.
        direction: Whether small or large scores are better.

    Returns:
        A new non-negative `float64` array of the same shape.
    """
    working = np.array(score_matrix, dtype=np.float64)
    if ScoreDirection.coerce(direction) is ScoreDirection.MAXIMIZE_IS_BEST:
        working = working.max() - working
    working -= working.min(axis=1, keepdims=True)
    working -= working.min(axis=0, keepdims=True)
    return working
