"""Configuration classes for the assignment solver."""

from kuhn_munkres.config.solver_config import (
    SolverConfig,
    load_solver_config,
    save_solver_config,
)

__all__ = [
    "SolverConfig",
    "load_solver_config",
    "save_solver_config",
]
