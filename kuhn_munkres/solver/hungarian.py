"""Kuhn-Munkres (Hungarian) solver for square assignment problems.

The solver assumes a square matrix of non-negative pairwise scores whose rows refer to
one set of elements and whose columns refer to the other one. Per default the matching
with the smallest summed score is searched for; with `ScoreDirection.MAXIMIZE_IS_BEST`
larger scores are considered better.

Note that the implementation works on dense `(n, n)` matrices and runs in `O(n^4)` in
the worst case, so it is meant for moderately sized problems like matching the objects
of two consecutive frames.
"""

from typing import Callable, List, Optional, Tuple, Union

import numpy as np
from attrs import define, field
from loguru import logger

from kuhn_munkres.solver.context import ElementMarker, SolverContext
from kuhn_munkres.solver.errors import SolveCancelledError
from kuhn_munkres.solver.normalizer import (
    ScoreDirection,
    normalize_score_matrix,
    validate_score_matrix,
)
from kuhn_munkres.solver.stages import (
    Stage,
    Transition,
    initialize,
    main_test,
    stage_one,
    stage_three,
    stage_two,
)


@define
class Assignment:
    """Optimal one-to-one assignment between rows and columns.

    Attributes:
        matrix: `(n, n)` uint8 array with exactly one 1 per row and per column.
        cost: Sum of the original scores over the assigned cells. For
            `MAXIMIZE_IS_BEST` this is the achieved maximum.
        direction: Score interpretation the assignment was optimized for.
    """

    matrix: np.ndarray
    cost: float
    direction: ScoreDirection = field(default=ScoreDirection.MINIMIZE_IS_BEST)

    @property
    def size(self) -> int:
        """Number of assigned pairs."""
        return self.matrix.shape[0]

    @property
    def row_ind(self) -> np.ndarray:
        """Row indices of the assigned pairs, sorted ascending."""
        return np.nonzero(self.matrix)[0]

    @property
    def col_ind(self) -> np.ndarray:
        """Column assigned to each entry of `row_ind`."""
        return np.nonzero(self.matrix)[1]

    def pairs(self) -> List[Tuple[int, int]]:
        """Return the assignment as a list of `(row, col)` tuples."""
        return [(int(r), int(c)) for r, c in zip(self.row_ind, self.col_ind)]


def extract_assignment(
    ctx: SolverContext,
    score_matrix: np.ndarray,
    direction: ScoreDirection = ScoreDirection.MINIMIZE_IS_BEST,
) -> Assignment:
    """Read the starred zeros of a finished solve into an `Assignment`."""
    matrix = (ctx.markers == ElementMarker.STARRED).astype(np.uint8)
    cost = float(score_matrix[matrix.astype(bool)].sum())
    return Assignment(matrix=matrix, cost=cost, direction=direction)


class HungarianSolver:
    """Bipartite matching with the Hungarian algorithm.

    Attributes:
        direction: Whether small (default) or large scores are better.
        zero_tolerance: Working matrix entries `<= zero_tolerance` count as zeros.
        trace: If `True`, the working matrix is logged at DEBUG level every time the
            zero search in stage one starts.
        cancel_check: Optional callable without arguments. It is polled before each
            zero search that follows an augmentation or a matrix adjustment, and the
            solve is aborted with `SolveCancelledError` as soon as it returns `True`.
        context: `SolverContext` of the most recent solve, kept for diagnostics.
    """

    def __init__(
        self,
        direction: Union[ScoreDirection, str] = ScoreDirection.MINIMIZE_IS_BEST,
        zero_tolerance: float = 1e-10,
        trace: bool = False,
        cancel_check: Optional[Callable[[], bool]] = None,
    ):
        """Initialize the solver."""
        self.direction = ScoreDirection.coerce(direction)
        if not np.isfinite(zero_tolerance) or zero_tolerance < 0:
            message = (
                f"zero_tolerance must be a finite value >= 0, got {zero_tolerance!r}"
            )
            logger.error(message)
            raise ValueError(message)
        self.zero_tolerance = float(zero_tolerance)
        self.trace = trace
        self.cancel_check = cancel_check
        self.context: Optional[SolverContext] = None

    @classmethod
    def from_config(cls, config, cancel_check: Optional[Callable[[], bool]] = None):
        """Create a solver from a `SolverConfig` (or a matching `DictConfig`)."""
        return cls(
            direction=config.score_direction,
            zero_tolerance=config.zero_tolerance,
            trace=config.trace,
            cancel_check=cancel_check,
        )

    def _check_cancelled(self):
        if self.cancel_check is not None and self.cancel_check():
            logger.info("Assignment solve cancelled by caller.")
            raise SolveCancelledError("Assignment solve cancelled by caller.")

    def solve(self, score_matrix) -> Assignment:
        """Find the optimal assignment for `score_matrix`.

        Args:
            score_matrix: Square array-like of non-negative scores.

        Returns:
            The optimal `Assignment`.

        Raises:
            ValidationError: If the matrix is not square, empty, non-finite or
                contains negative scores. Raised before solving starts.
            SolveCancelledError: If `cancel_check` requested cancellation.
        """
        scores = validate_score_matrix(score_matrix)
        ctx = SolverContext(
            working_matrix=normalize_score_matrix(scores, self.direction),
            zero_tolerance=self.zero_tolerance,
        )
        self.context = ctx
        logger.debug(
            f"Solving {ctx.size}x{ctx.size} assignment ({self.direction.value})."
        )

        transition = Transition(Stage.INIT)
        while transition.stage is not Stage.DONE:
            stage = transition.stage
            if stage is Stage.INIT:
                transition = initialize(ctx)
            elif stage is Stage.TEST:
                transition = main_test(ctx)
                if transition.stage is Stage.STAGE_ONE:
                    self._check_cancelled()
            elif stage is Stage.STAGE_ONE:
                if self.trace:
                    logger.debug(f"Working matrix:\n{ctx.working_matrix}")
                transition = stage_one(ctx)
            elif stage is Stage.STAGE_TWO:
                transition = stage_two(ctx, transition.cell)
                ctx.check_invariants()
            elif stage is Stage.STAGE_THREE:
                transition = stage_three(ctx)
                self._check_cancelled()
            ctx.num_transitions += 1

        assignment = extract_assignment(ctx, scores, self.direction)
        logger.debug(
            f"Solved {ctx.size}x{ctx.size} assignment with cost {assignment.cost} "
            f"after {ctx.num_augmentations} augmentation(s) and "
            f"{ctx.num_adjustments} adjustment(s)."
        )
        return assignment


def solve(
    score_matrix,
    direction: Union[ScoreDirection, str] = ScoreDirection.MINIMIZE_IS_BEST,
    **kwargs,
) -> Assignment:
    """Solve a square assignment problem.

    Args:
        score_matrix: Square array-like of non-negative scores.
        direction: `ScoreDirection` or one of `"minimize"`, `"maximize"`.
        **kwargs: Further arguments passed to `HungarianSolver`.

    Returns:
        The optimal `Assignment`.
    """
    return HungarianSolver(direction=direction, **kwargs).solve(score_matrix)
