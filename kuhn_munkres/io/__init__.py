"""I/O utilities for kuhn_munkres."""

from kuhn_munkres.io.matrices import load_score_matrix, save_assignment

__all__ = [
    "load_score_matrix",
    "save_assignment",
]
