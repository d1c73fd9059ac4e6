"""Main module for kuhn_munkres package."""

import os
from loguru import logger

# Minimum level that reaches the console handler.
LOG_LEVEL = os.environ.get("KUHN_MUNKRES_LOG_LEVEL", "INFO").upper()


def _should_log(record):
    """Filter function to control logging based on the configured level."""
    # Always log ERROR regardless of the configured level
    if record["level"].no >= logger.level("ERROR").no:
        return True

    if record["level"].no >= logger.level(LOG_LEVEL).no:
        return True

    return False


# Remove default handler and add custom one
logger.remove()

# Add logger with the custom filter
logger.add(
    lambda msg: print(msg, end=""),
    level="DEBUG",
    filter=_should_log,
    format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}",
)

__version__ = "0.1.0"

from kuhn_munkres.solver import (  # noqa: E402
    Assignment,
    ElementMarker,
    EmptyMatrixError,
    HungarianSolver,
    NegativeScoreError,
    NonFiniteScoreError,
    NonSquareMatrixError,
    ScoreDirection,
    SolveCancelledError,
    SolverContext,
    Stage,
    ValidationError,
    solve,
)
from kuhn_munkres.config import SolverConfig, load_solver_config  # noqa: E402

__all__ = [
    "Assignment",
    "ElementMarker",
    "EmptyMatrixError",
    "HungarianSolver",
    "NegativeScoreError",
    "NonFiniteScoreError",
    "NonSquareMatrixError",
    "ScoreDirection",
    "SolveCancelledError",
    "SolverConfig",
    "SolverContext",
    "Stage",
    "ValidationError",
    "load_solver_config",
    "solve",
]
