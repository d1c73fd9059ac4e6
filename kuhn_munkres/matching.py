"""Helpers to match the elements of two sets from a cost matrix."""

from typing import List, Sequence, Tuple

import numpy as np

from kuhn_munkres.solver import ScoreDirection, solve


def hungarian_matching(
    cost_matrix: np.ndarray, maximize: bool = False
) -> Tuple[np.ndarray, np.ndarray]:
    """Match rows to columns with the Hungarian algorithm.

    Args:
        cost_matrix: Square matrix of non-negative scores.
        maximize: If True, the summed score is maximized instead of minimized.

    Returns:
        A tuple `(row_ids, col_ids)` of index arrays, ordered by row.
    """
    direction = (
        ScoreDirection.MAXIMIZE_IS_BEST if maximize else ScoreDirection.MINIMIZE_IS_BEST
    )
    assignment = solve(cost_matrix, direction)
    return assignment.row_ind, assignment.col_ind


def greedy_matching(cost_matrix: np.ndarray) -> Tuple[List[int], List[int]]:
    """Match rows to columns using greedy bipartite matching.

    Not optimal, but useful as a baseline. Works on rectangular matrices as well.
    """
    cost_matrix = np.asarray(cost_matrix)
    # Sort edges by ascending cost.
    rows, cols = np.unravel_index(
        np.argsort(cost_matrix, axis=None, kind="stable"), cost_matrix.shape
    )
    unassigned_edges = list(zip(rows.tolist(), cols.tolist()))

    # Greedily assign edges.
    row_inds, col_inds = [], []
    while len(unassigned_edges) > 0:
        # Assign the lowest cost edge.
        row_ind, col_ind = unassigned_edges.pop(0)
        row_inds.append(row_ind)
        col_inds.append(col_ind)

        # Remove all other edges that contain either node (in reverse order).
        for i in range(len(unassigned_edges) - 1, -1, -1):
            if unassigned_edges[i][0] == row_ind or unassigned_edges[i][1] == col_ind:
                del unassigned_edges[i]

    return row_inds, col_inds


def assignment_to_pairs(matrix: np.ndarray) -> List[Tuple[int, int]]:
    """Convert a 0/1 assignment matrix into a list of `(row, col)` pairs."""
    rows, cols = np.nonzero(np.asarray(matrix))
    return [(int(r), int(c)) for r, c in zip(rows, cols)]


def pairs_to_assignment(pairs: Sequence[Tuple[int, int]], n: int) -> np.ndarray:
    """Convert `(row, col)` pairs into an `(n, n)` uint8 assignment matrix."""
    matrix = np.zeros((n, n), dtype=np.uint8)
    for r, c in pairs:
        matrix[r, c] = 1
    return matrix
