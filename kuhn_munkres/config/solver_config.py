"""Serializable configuration class for specifying all solver parameters.

The configuration is intended to specify the parameters of an assignment solve, not
to implement any of the underlying functionality. Parameters are simple attributes
that can be read/edited by a human and serialized to/from YAML with OmegaConf. The
`HungarianSolver` provides a `from_config` classmethod for instantiation from it.
"""

from pathlib import Path
from typing import Text, Union

from attrs import asdict, define, field, validators
from loguru import logger
from omegaconf import DictConfig, OmegaConf

import kuhn_munkres
from kuhn_munkres.solver.normalizer import ScoreDirection


def validate_score_direction(instance, attribute, value):
    """Score direction validation.

    Ensures the score direction is one of the `ScoreDirection` values.
    """
    valid = [d.value for d in ScoreDirection]
    if value not in valid:
        message = f"{attribute.name} must be one of {valid}, got {value!r}"
        logger.error(message)
        raise ValueError(message)


@define
class SolverConfig:
    """Configuration of the assignment solver.

    Attributes:
        score_direction: (str) Either "minimize" if small scores are better or
            "maximize" if large scores are better. Default: "minimize".
        zero_tolerance: (float) Entries of the reduced working matrix that are smaller
            than or equal to this value are treated as zeros. Default: 1e-10.
        trace: (bool) If True, the working matrix is logged at DEBUG level every time
            the solver searches for an uncovered zero. Default: False.
        kuhn_munkres_version: Version of the package that generated this config.
    """

    score_direction: str = field(
        default="minimize", validator=validate_score_direction
    )
    zero_tolerance: float = field(default=1e-10, validator=validators.ge(0))
    trace: bool = False
    kuhn_munkres_version: Text = kuhn_munkres.__version__

    def to_omegaconf(self) -> DictConfig:
        """Convert the attrs class to OmegaConf object."""
        return OmegaConf.structured(self)

    @classmethod
    def from_omegaconf(cls, config: DictConfig) -> "SolverConfig":
        """Create a `SolverConfig` from an OmegaConf object, filling missing keys."""
        merged = OmegaConf.merge(OmegaConf.structured(cls), config)
        return cls(**OmegaConf.to_container(merged, resolve=True))


def load_solver_config(path: Union[str, Path]) -> SolverConfig:
    """Load a `SolverConfig` from a YAML file.

    Args:
        path: Path to a YAML file. Keys that are missing from the file keep their
            default values.

    Returns:
        The validated `SolverConfig`.
    """
    config = OmegaConf.load(Path(path).as_posix())
    if "solver_config" in config:
        config = config.solver_config
    return SolverConfig.from_omegaconf(config)


def save_solver_config(config: SolverConfig, path: Union[str, Path]):
    """Save `config` as a YAML file at `path`."""
    OmegaConf.save(OmegaConf.create(asdict(config)), Path(path).as_posix())
