from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest
from _pytest.logging import LogCaptureFixture
from loguru import logger
from scipy.optimize import linear_sum_assignment

from kuhn_munkres.config import SolverConfig
from kuhn_munkres.solver import (
    Assignment,
    HungarianSolver,
    NegativeScoreError,
    NonSquareMatrixError,
    ScoreDirection,
    SolveCancelledError,
    solve,
)


@pytest.fixture
def caplog(caplog: LogCaptureFixture):
    handler_id = logger.add(
        caplog.handler,
        format="{message}",
        level=0,
        filter=lambda record: record["level"].no >= caplog.handler.level,
        enqueue=False,
    )
    yield caplog
    logger.remove(handler_id)


def assert_permutation_matrix(matrix):
    assert matrix.dtype == np.uint8
    assert set(np.unique(matrix)) <= {0, 1}
    assert (matrix.sum(axis=0) == 1).all()
    assert (matrix.sum(axis=1) == 1).all()


def test_solve_small_matrix(small_cost_matrix, brute_force):
    """The 3x3 fixture is solved with the brute force optimum."""
    assignment = solve(small_cost_matrix)
    assert isinstance(assignment, Assignment)
    assert_permutation_matrix(assignment.matrix)
    assert assignment.cost == brute_force(small_cost_matrix) == 5
    assert assignment.pairs() == [(0, 1), (1, 0), (2, 2)]
    assert assignment.direction is ScoreDirection.MINIMIZE_IS_BEST


def test_solve_identity(identity_cost_matrix):
    """Zeros on the diagonal give the diagonal assignment at cost 0."""
    assignment = solve(identity_cost_matrix)
    np.testing.assert_array_equal(assignment.matrix, np.eye(5, dtype=np.uint8))
    assert assignment.cost == 0


def test_solve_needs_augmentations(augmenting_cost_matrix, brute_force):
    solver = HungarianSolver()
    assignment = solver.solve(augmenting_cost_matrix)
    assert_permutation_matrix(assignment.matrix)
    assert assignment.cost == brute_force(augmenting_cost_matrix) == 20
    assert solver.context.num_augmentations >= 1
    assert solver.context.num_adjustments >= 1
    assert solver.context.stage_three_min > 0


def test_optimality_brute_force(random_matrices, brute_force):
    """Random matrices up to 6x6 match exhaustive enumeration in both directions."""
    for matrix in random_matrices:
        low = solve(matrix)
        assert_permutation_matrix(low.matrix)
        assert low.cost == pytest.approx(brute_force(matrix))

        high = solve(matrix, ScoreDirection.MAXIMIZE_IS_BEST)
        assert_permutation_matrix(high.matrix)
        assert high.cost == pytest.approx(brute_force(matrix, maximize=True))


@pytest.mark.parametrize("n", [7, 12, 25])
def test_matches_scipy(n):
    """Larger float matrices match scipy's linear_sum_assignment."""
    rng = np.random.default_rng(n)
    matrix = rng.random((n, n)) * 100
    for maximize in (False, True):
        row_ind, col_ind = linear_sum_assignment(matrix, maximize=maximize)
        assignment = solve(matrix, "maximize" if maximize else "minimize")
        assert_permutation_matrix(assignment.matrix)
        assert assignment.cost == pytest.approx(matrix[row_ind, col_ind].sum())


def test_uniform_shift_invariance(random_matrices):
    """Adding a constant keeps the assignment and shifts the cost by k * n."""
    k = 7.0
    for matrix in random_matrices:
        n = matrix.shape[0]
        base = solve(matrix)
        shifted = solve(matrix + k)
        np.testing.assert_array_equal(base.matrix, shifted.matrix)
        assert shifted.cost == pytest.approx(base.cost + k * n)


def test_idempotence_and_determinism(random_matrices):
    """Repeated solves agree; without ties even the permutation is identical."""
    for matrix in random_matrices:
        assert solve(matrix).cost == solve(matrix).cost

    rng = np.random.default_rng(42)
    matrix = rng.random((6, 6))
    first = solve(matrix)
    for _ in range(3):
        np.testing.assert_array_equal(solve(matrix).matrix, first.matrix)


def test_edge_cases():
    """1x1, all-equal and all-zero matrices."""
    single = solve([[3.5]])
    np.testing.assert_array_equal(single.matrix, [[1]])
    assert single.cost == 3.5

    for value in (0.0, 4.0):
        assignment = solve(np.full((4, 4), value))
        assert_permutation_matrix(assignment.matrix)
        assert assignment.cost == 4 * value


def test_maximize_cost_is_original_scores(small_cost_matrix, brute_force):
    """The reported cost uses the caller's scores, not the inverted ones."""
    assignment = solve(small_cost_matrix, ScoreDirection.MAXIMIZE_IS_BEST)
    assert assignment.cost == brute_force(small_cost_matrix, maximize=True)
    assert assignment.direction is ScoreDirection.MAXIMIZE_IS_BEST


def test_assignment_accessors(small_cost_matrix):
    assignment = solve(small_cost_matrix)
    assert assignment.size == 3
    np.testing.assert_array_equal(assignment.row_ind, [0, 1, 2])
    np.testing.assert_array_equal(assignment.col_ind, [1, 0, 2])


def test_validation_before_solving(caplog):
    """Invalid matrices fail eagerly and leave no context behind."""
    solver = HungarianSolver()
    with pytest.raises(NonSquareMatrixError):
        solver.solve(np.ones((2, 3)))
    assert solver.context is None

    with pytest.raises(NegativeScoreError):
        solver.solve([[0, 1], [-1, 0]])
    assert solver.context is None
    assert "negative scores" in caplog.text


def test_input_not_modified(small_cost_matrix):
    original = small_cost_matrix.copy()
    solve(small_cost_matrix)
    solve(small_cost_matrix, "maximize")
    np.testing.assert_array_equal(small_cost_matrix, original)


def test_cancel_check():
    """The solve aborts when the cancel check returns True."""
    matrix = np.arange(16, dtype=float).reshape(4, 4) ** 2
    with pytest.raises(SolveCancelledError):
        solve(matrix, cancel_check=lambda: True)

    calls = []

    def cancel_check():
        calls.append(1)
        return False

    assignment = solve(matrix, cancel_check=cancel_check)
    assert_permutation_matrix(assignment.matrix)
    assert len(calls) > 0


def test_from_config(small_cost_matrix, brute_force):
    config = SolverConfig(score_direction="maximize", zero_tolerance=1e-9)
    solver = HungarianSolver.from_config(config)
    assert solver.direction is ScoreDirection.MAXIMIZE_IS_BEST
    assert solver.zero_tolerance == 1e-9
    assignment = solver.solve(small_cost_matrix)
    assert assignment.cost == brute_force(small_cost_matrix, maximize=True)


def test_invalid_direction(caplog):
    with pytest.raises(ValueError):
        HungarianSolver(direction="sideways")
    assert "Invalid score direction" in caplog.text


@pytest.mark.parametrize("zero_tolerance", [-1.0, float("nan"), float("inf")])
def test_invalid_zero_tolerance(caplog, small_cost_matrix, zero_tolerance):
    with pytest.raises(ValueError):
        HungarianSolver(zero_tolerance=zero_tolerance)
    assert "zero_tolerance must be" in caplog.text

    with pytest.raises(ValueError):
        solve(small_cost_matrix, zero_tolerance=zero_tolerance)


def test_trace_logs_working_matrix(caplog, small_cost_matrix):
    """With `trace`, the working matrix is logged when searching for zeros."""
    solve(small_cost_matrix, trace=True)
    assert "Working matrix" in caplog.text
    assert "Solved 3x3 assignment" in caplog.text


def test_concurrent_solves(random_matrices, brute_force):
    """Independent solves share no state."""
    with ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(solve, random_matrices))
    for matrix, assignment in zip(random_matrices, results):
        assert_permutation_matrix(assignment.matrix)
        assert assignment.cost == pytest.approx(brute_force(matrix))
