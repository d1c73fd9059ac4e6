"""Stages of the Kuhn-Munkres state machine.

Every stage takes the `SolverContext` of the running solve, mutates it and returns a
`Transition` naming the stage to run next. Stages never call each other; the driver
loop in `kuhn_munkres.solver.hungarian` dispatches on the returned stage, so each one
can also be exercised on its own.

The procedure follows Grosche, Ziegler, Ziegler and Zeidler, Teubner-Taschenbuch der
Mathematik, Teil II, pp. 219 ff.
"""

from enum import Enum
from typing import Optional, Tuple

import numpy as np
from attrs import define
from loguru import logger

from kuhn_munkres.solver.context import ElementMarker, SolverContext


class Stage(Enum):
    """States of the solver loop."""

    INIT = "init"
    TEST = "test"
    STAGE_ONE = "stage_one"
    STAGE_TWO = "stage_two"
    STAGE_THREE = "stage_three"
    DONE = "done"


@define(frozen=True)
class Transition:
    """Next stage to run.

    Attributes:
        stage: The stage the driver should dispatch to.
        cell: `(row, col)` of the primed zero that starts the alternating chain. Only
            set when `stage` is `Stage.STAGE_TWO`.
    """

    stage: Stage
    cell: Optional[Tuple[int, int]] = None


def initialize(ctx: SolverContext) -> Transition:
    """Greedily star independent zeros of the freshly reduced working matrix.

    Rows are visited top to bottom and, within a row, columns left to right. The first
    zero in an uncovered row and column is starred and both are covered. Row covers are
    only scratch space for this pass and are cleared afterwards, while column covers
    remain as the record of which columns hold a star.
    """
    n = ctx.size
    for r in range(n):
        if ctx.row_covered[r]:
            continue
        for c in range(n):
            if ctx.col_covered[c]:
                continue
            if ctx.is_zero(r, c):
                ctx.markers[r, c] = ElementMarker.STARRED
                ctx.row_covered[r] = True
                ctx.col_covered[c] = True
                break
    ctx.row_covered[:] = False
    logger.debug(f"Initial starring selected {ctx.num_starred} of {n} zeros.")
    return Transition(Stage.TEST)


def main_test(ctx: SolverContext) -> Transition:
    """Finish once every column is covered, otherwise search for more zeros."""
    if ctx.col_covered.all():
        return Transition(Stage.DONE)
    return Transition(Stage.STAGE_ONE)


def stage_one(ctx: SolverContext) -> Transition:
    """Search for a zero that is neither row- nor column-covered.

    The search is row-major. A found zero is primed. If its row already contains a
    starred zero, coverage is moved from the star's column to the row and the search
    repeats. Otherwise the primed zero starts an alternating chain in stage two. If no
    uncovered zero is left, stage three has to create new ones.
    """
    candidates = np.argwhere(
        (ctx.working_matrix <= ctx.zero_tolerance) & ctx.uncovered_mask()
    )
    if len(candidates) == 0:
        return Transition(Stage.STAGE_THREE)

    r, c = (int(x) for x in candidates[0])
    ctx.markers[r, c] = ElementMarker.PRIMED

    star_col = ctx.find_star_in_row(r)
    if star_col is None:
        return Transition(Stage.STAGE_TWO, cell=(r, c))

    ctx.col_covered[star_col] = False
    ctx.row_covered[r] = True
    return Transition(Stage.STAGE_ONE)


def build_chain(ctx: SolverContext, row: int, col: int) -> np.ndarray:
    """Return the boolean mask of the alternating chain starting at a primed zero.

    From a primed cell the chain moves to the starred cell in the same column, from a
    starred cell to the primed cell in the same row, until no further move exists.
    """
    chain = np.zeros(ctx.markers.shape, dtype=bool)
    chain[row, col] = True
    while True:
        star_row = ctx.find_star_in_col(col)
        if star_row is None or chain[star_row, col]:
            break
        row = star_row
        chain[row, col] = True
        prime_col = ctx.find_prime_in_row(row)
        if prime_col is None or chain[row, prime_col]:
            break
        col = prime_col
        chain[row, col] = True
    return chain


def stage_two(ctx: SolverContext, cell: Tuple[int, int]) -> Transition:
    """Grow the assignment by one along the alternating chain starting at `cell`.

    Stars on the chain are removed and primes on the chain become stars. Primes off
    the chain are dropped. All covers are cleared and the columns now holding a star
    are covered again.
    """
    row, col = cell
    chain = build_chain(ctx, row, col)

    starred = ctx.starred
    primed = ctx.primed
    ctx.markers[chain & starred] = ElementMarker.NONE
    ctx.markers[chain & primed] = ElementMarker.STARRED
    ctx.markers[~chain & primed] = ElementMarker.NONE

    ctx.clear_covers()
    ctx.cover_starred_columns()
    ctx.num_augmentations += 1
    logger.debug(
        f"Augmented along a chain of {int(chain.sum())} cell(s) from {cell}; "
        f"{ctx.num_starred} of {ctx.size} assigned."
    )
    return Transition(Stage.TEST)


def stage_three(ctx: SolverContext) -> Transition:
    """Create new zeros when no uncovered zero is left.

    `h` is the smallest entry whose row and column are both uncovered. It is added to
    every covered column and subtracted from every uncovered row, so starred zeros
    (covered column, covered row) keep their value and all entries stay non-negative.
    """
    h = float(ctx.working_matrix[ctx.uncovered_mask()].min())
    ctx.stage_three_min = h
    ctx.working_matrix[:, ctx.col_covered] += h
    ctx.working_matrix[~ctx.row_covered, :] -= h
    ctx.num_adjustments += 1
    logger.debug(f"Adjusted working matrix by h={h}.")
    return Transition(Stage.STAGE_ONE)
