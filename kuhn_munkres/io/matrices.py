"""Reading score matrices and writing assignments."""

import json
from pathlib import Path
from typing import Optional, Union

import numpy as np
from loguru import logger

from kuhn_munkres.solver import Assignment, ValidationError


def load_score_matrix(
    path: Union[str, Path], delimiter: Optional[str] = None
) -> np.ndarray:
    """Load a score matrix from disk.

    Args:
        path: Path to a `.npy` file or to a text file with one matrix row per line.
        delimiter: Column delimiter of text files. Defaults to "," for `.csv` files and
            to whitespace otherwise.

    Returns:
        The scores as a 2D `float64` array. A single-element file gives a `(1, 1)`
        array.

    Raises:
        FileNotFoundError: If `path` does not exist.
        ValidationError: If the file content cannot be read as numbers.
    """
    path = Path(path)
    if not path.exists():
        message = f"Score matrix file not found: {path}"
        logger.error(message)
        raise FileNotFoundError(message)

    try:
        if path.suffix == ".npy":
            scores = np.asarray(np.load(path), dtype=np.float64)
        else:
            if delimiter is None and path.suffix == ".csv":
                delimiter = ","
            scores = np.loadtxt(path, delimiter=delimiter, dtype=np.float64, ndmin=2)
    except ValueError as e:
        message = f"Score matrix file {path} could not be read as numbers: {e}"
        logger.error(message)
        raise ValidationError(message) from e
    logger.debug(f"Loaded score matrix of shape {scores.shape} from {path}.")
    return scores


def save_assignment(assignment: Assignment, path: Union[str, Path]):
    """Save `assignment` as JSON with its pairs, cost, direction and 0/1 matrix."""
    data = {
        "pairs": assignment.pairs(),
        "cost": assignment.cost,
        "direction": assignment.direction.value,
        "matrix": assignment.matrix.tolist(),
    }
    Path(path).write_text(json.dumps(data, indent=2))
