"""Unified CLI for kuhn-munkres using Click."""

from pathlib import Path

import click
import numpy as np
from loguru import logger
from omegaconf import OmegaConf

from kuhn_munkres.config import SolverConfig, load_solver_config, save_solver_config
from kuhn_munkres.io import load_score_matrix, save_assignment
from kuhn_munkres.matching import greedy_matching, pairs_to_assignment
from kuhn_munkres.solver import (
    Assignment,
    HungarianSolver,
    ScoreDirection,
    ValidationError,
    validate_score_matrix,
)


@click.group()
def cli():
    """kuhn-munkres: optimal one-to-one assignment for square score matrices.

    Use subcommands to run different workflows:

    solve    - Solve the assignment problem for a score matrix file
    config   - Print or save the default solver config
    """
    pass


def _greedy_assignment(scores: np.ndarray, direction: ScoreDirection) -> Assignment:
    """Build an `Assignment` from the greedy baseline matcher."""
    scores = validate_score_matrix(scores)
    costs = -scores if direction is ScoreDirection.MAXIMIZE_IS_BEST else scores
    row_inds, col_inds = greedy_matching(costs)
    matrix = pairs_to_assignment(list(zip(row_inds, col_inds)), scores.shape[0])
    return Assignment(
        matrix=matrix,
        cost=float(scores[matrix.astype(bool)].sum()),
        direction=direction,
    )


@cli.command()
@click.option(
    "--matrix_path",
    "-i",
    type=str,
    required=True,
    help="Path to the score matrix. Either a `.npy` file or a text/CSV file with one matrix row per line.",
)
@click.option(
    "--output_path",
    "-o",
    type=str,
    default=None,
    help="If provided, the assignment (pairs, cost, direction and 0/1 matrix) is written to this JSON file.",
)
@click.option(
    "--config_path",
    "-c",
    type=str,
    default=None,
    help="Path to a solver config YAML file. Command line options take precedence over the values in the file.",
)
@click.option(
    "--maximize",
    is_flag=True,
    default=False,
    help="If True, larger scores are better and the summed score is maximized. Default: minimize.",
)
@click.option(
    "--method",
    type=click.Choice(["hungarian", "greedy"]),
    default="hungarian",
    help="Matching algorithm. `hungarian` is optimal, `greedy` repeatedly takes the best remaining pair. Default: `hungarian`.",
)
@click.option(
    "--zero_tolerance",
    type=float,
    default=None,
    help="Entries of the reduced matrix up to this value are treated as zeros. If not provided, the config value (1e-10 by default) is used.",
)
@click.option(
    "--delimiter",
    type=str,
    default=None,
    help="Column delimiter of text matrix files. Defaults to ',' for .csv files and whitespace otherwise.",
)
def solve(
    matrix_path, output_path, config_path, maximize, method, zero_tolerance, delimiter
):
    """Solve the assignment problem for the score matrix in MATRIX_PATH.

    Examples:
        kuhn-munkres solve -i costs.csv
        kuhn-munkres solve -i scores.npy --maximize -o assignment.json
        kuhn-munkres solve -i costs.txt -c solver.yaml --method greedy
    """
    config = load_solver_config(config_path) if config_path else SolverConfig()
    if maximize:
        config.score_direction = ScoreDirection.MAXIMIZE_IS_BEST.value
    if zero_tolerance is not None:
        config.zero_tolerance = zero_tolerance
    logger.debug("Solver config:\n" + OmegaConf.to_yaml(config.to_omegaconf()))

    try:
        scores = load_score_matrix(matrix_path, delimiter=delimiter)
        if method == "greedy":
            assignment = _greedy_assignment(
                scores, ScoreDirection.coerce(config.score_direction)
            )
        else:
            assignment = HungarianSolver.from_config(config).solve(scores)
    except (FileNotFoundError, ValidationError) as e:
        raise click.ClickException(str(e))

    for row, col in assignment.pairs():
        click.echo(f"{row} -> {col}")
    click.echo(f"Total cost: {assignment.cost:g}")

    if output_path is not None:
        save_assignment(assignment, output_path)
        logger.info(f"Saved assignment to {Path(output_path).as_posix()}")
    logger.info(
        f"Matched {assignment.size} pair(s) with {method} "
        f"({assignment.direction.value}), total cost {assignment.cost:g}."
    )


@cli.command()
@click.option(
    "--output_path",
    "-o",
    type=str,
    default=None,
    help="If provided, the default config is saved to this YAML file instead of being printed.",
)
def config(output_path):
    """Print or save the default solver config."""
    default_config = SolverConfig()
    if output_path is None:
        click.echo(OmegaConf.to_yaml(default_config.to_omegaconf()), nl=False)
        return
    save_solver_config(default_config, output_path)
    logger.info(f"Saved default solver config to {Path(output_path).as_posix()}")


if __name__ == "__main__":
    cli()
