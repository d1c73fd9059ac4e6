"""Mutable bookkeeping shared by all stages of a single solve."""

from enum import IntEnum
from typing import Optional

import numpy as np
from attrs import define, field
from loguru import logger

from kuhn_munkres.solver.errors import MarkerStateError


class ElementMarker(IntEnum):
    """Per-cell marker over the working matrix.

    `STARRED` cells form the current (partial) assignment, `PRIMED` cells are
    candidates considered while building an alternating chain.
    """

    NONE = 0
    STARRED = 1
    PRIMED = 2


@define
class SolverContext:
    """State owned by one solve.

    The working matrix, markers and covers are created for a single call and are never
    shared, so independent solves may run concurrently on different matrices.

    Attributes:
        working_matrix: Reduced `(n, n)` float matrix, modified in place by stage three.
        zero_tolerance: Entries `<= zero_tolerance` are treated as zeros.
        markers: `(n, n)` int8 array holding `ElementMarker` values.
        row_covered: Boolean vector of length `n`.
        col_covered: Boolean vector of length `n`.
        num_augmentations: How often an alternating chain grew the assignment.
        num_adjustments: How often stage three created new zeros.
        num_transitions: Total number of stage transitions of the solve.
        stage_three_min: The value `h` used by the most recent matrix adjustment.
    """

    working_matrix: np.ndarray
    zero_tolerance: float = 1e-10
    markers: np.ndarray = field(default=None)
    row_covered: np.ndarray = field(default=None)
    col_covered: np.ndarray = field(default=None)
    num_augmentations: int = 0
    num_adjustments: int = 0
    num_transitions: int = 0
    stage_three_min: Optional[float] = None

    def __attrs_post_init__(self):
        """Allocate empty markers and covers for the working matrix."""
        n = self.size
        if self.markers is None:
            self.markers = np.full((n, n), ElementMarker.NONE, dtype=np.int8)
        if self.row_covered is None:
            self.row_covered = np.zeros(n, dtype=bool)
        if self.col_covered is None:
            self.col_covered = np.zeros(n, dtype=bool)

    @property
    def size(self) -> int:
        """Number of rows (and columns) of the working matrix."""
        return self.working_matrix.shape[0]

    @property
    def starred(self) -> np.ndarray:
        """Boolean mask of starred cells."""
        return self.markers == ElementMarker.STARRED

    @property
    def primed(self) -> np.ndarray:
        """Boolean mask of primed cells."""
        return self.markers == ElementMarker.PRIMED

    @property
    def num_starred(self) -> int:
        """Number of starred zeros, i.e. the size of the current partial assignment."""
        return int(self.starred.sum())

    def is_zero(self, row: int, col: int) -> bool:
        """Whether the working matrix entry at `(row, col)` counts as a zero."""
        return bool(self.working_matrix[row, col] <= self.zero_tolerance)

    def find_star_in_row(self, row: int) -> Optional[int]:
        """Return the column of the starred cell in `row`, or `None`."""
        cols = np.flatnonzero(self.markers[row] == ElementMarker.STARRED)
        return int(cols[0]) if len(cols) else None

    def find_star_in_col(self, col: int) -> Optional[int]:
        """Return the row of the starred cell in `col`, or `None`."""
        rows = np.flatnonzero(self.markers[:, col] == ElementMarker.STARRED)
        return int(rows[0]) if len(rows) else None

    def find_prime_in_row(self, row: int) -> Optional[int]:
        """Return the column of the primed cell in `row`, or `None`."""
        cols = np.flatnonzero(self.markers[row] == ElementMarker.PRIMED)
        return int(cols[0]) if len(cols) else None

    def uncovered_mask(self) -> np.ndarray:
        """Boolean `(n, n)` mask of cells whose row and column are both uncovered."""
        return ~self.row_covered[:, None] & ~self.col_covered[None, :]

    def clear_covers(self):
        """Uncover all rows and columns."""
        self.row_covered[:] = False
        self.col_covered[:] = False

    def cover_starred_columns(self):
        """Cover exactly the columns that contain a starred cell."""
        self.col_covered[:] = self.starred.any(axis=0)

    def check_invariants(self):
        """Raise `MarkerStateError` if a row or column holds more than one star."""
        starred = self.starred
        for axis, name in ((0, "Column"), (1, "Row")):
            counts = starred.sum(axis=axis)
            if (counts > 1).any():
                message = f"{name} {int(np.argmax(counts))} holds more than one star."
                logger.error(message)
                raise MarkerStateError(message)
