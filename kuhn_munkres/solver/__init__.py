"""Kuhn-Munkres assignment solver."""

from kuhn_munkres.solver.context import ElementMarker, SolverContext
from kuhn_munkres.solver.errors import (
    EmptyMatrixError,
    MarkerStateError,
    NegativeScoreError,
    NonFiniteScoreError,
    NonSquareMatrixError,
    SolveCancelledError,
    ValidationError,
)
from kuhn_munkres.solver.hungarian import (
    Assignment,
    HungarianSolver,
    extract_assignment,
    solve,
)
from kuhn_munkres.solver.normalizer import (
    ScoreDirection,
    normalize_score_matrix,
    validate_score_matrix,
)
from kuhn_munkres.solver.stages import Stage, Transition

__all__ = [
    "Assignment",
    "ElementMarker",
    "EmptyMatrixError",
    "HungarianSolver",
    "MarkerStateError",
    "NegativeScoreError",
    "NonFiniteScoreError",
    "NonSquareMatrixError",
    "ScoreDirection",
    "SolveCancelledError",
    "SolverContext",
    "Stage",
    "Transition",
    "ValidationError",
    "extract_assignment",
    "normalize_score_matrix",
    "solve",
    "validate_score_matrix",
]
