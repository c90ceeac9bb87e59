"""
Configuration dataclasses for IRT model estimation.

This module defines the configuration parameters for:
- Quadrature settings (grid over the latent trait)
- Convergence criteria for the EM loop
- Per-fit options (model type, iteration cap, learning rate)
"""

import math
import numbers
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version

import toml

from mirt_engine.core.exceptions import InvalidConfigurationError
from mirt_engine.core.paths import ProjectRootNotFound, get_project_root_dir
from mirt_engine.irt.estimation.enums import ModelType, QuadratureRule

DISTRIBUTION_NAME = "mirt-engine"

# Default quadrature settings
DEFAULT_QUADRATURE_POINTS = 41
DEFAULT_QUADRATURE_BOUNDS = (-4.0, 4.0)

# Default convergence settings
DEFAULT_TOLERANCE = 1e-4
DEFAULT_YIELD_EVERY = 5

# Default fit options
DEFAULT_MODEL_TYPE = ModelType.TWO_PL
DEFAULT_MAX_ITERATIONS = 100
DEFAULT_LEARNING_RATE = 0.05

# Initial asymptotes by model family
DEFAULT_GUESSING = 0.2
DEFAULT_UPPER_ASYMPTOTE = 0.95


def is_positive_int(value: object) -> bool:
    """True for positive integers, excluding bool."""
    return (
        isinstance(value, numbers.Integral)
        and not isinstance(value, bool)
        and value > 0
    )


def _get_project_version() -> str:
    try:
        root_dir = get_project_root_dir()
    except ProjectRootNotFound:
        try:
            return distribution_version(DISTRIBUTION_NAME)
        except PackageNotFoundError:
            return "unknown"

    with open(root_dir / "pyproject.toml") as f:
        data = toml.load(f)

    version = data.get("project", {}).get("version")

    if not version:
        raise ValueError("Version not found in pyproject.toml")

    assert isinstance(version, str)
    return version


@dataclass(frozen=True)
class QuadratureConfig:
    """
    Configuration for the latent-trait quadrature grid.

    Attributes:
        n_points: Number of quadrature nodes (at least 2).
        bounds: (low, high) range of the evenly spaced grid, in standard
            deviation units. Ignored by the Gauss-Hermite rule.
        rule: How nodes and weights are placed. The uniform rule evaluates
            the standard-normal density on an even grid.
    """

    n_points: int = DEFAULT_QUADRATURE_POINTS
    bounds: tuple[float, float] = DEFAULT_QUADRATURE_BOUNDS
    rule: QuadratureRule = QuadratureRule.UNIFORM


@dataclass(frozen=True)
class ConvergenceConfig:
    """
    Configuration for EM loop termination and scheduling.

    Attributes:
        tolerance: The loop converges once the largest per-item change in
            a cycle falls below this value.
        yield_every: Number of cycles between cooperative yields in
            MIRTEstimator.fit_async.
    """

    tolerance: float = DEFAULT_TOLERANCE
    yield_every: int = DEFAULT_YIELD_EVERY


@dataclass(frozen=True)
class FitOptions:
    """
    Options for a single fit.

    Attributes:
        model_type: One of 1PL, 2PL, 3PL, 4PL.
        max_iter: Maximum number of EM cycles.
        learning_rate: Step size of the gradient update in the M-step.
    """

    model_type: ModelType = DEFAULT_MODEL_TYPE
    max_iter: int = DEFAULT_MAX_ITERATIONS
    learning_rate: float = DEFAULT_LEARNING_RATE

    def __post_init__(self) -> None:
        try:
            model_type = ModelType(self.model_type)
        except ValueError as e:
            allowed = ", ".join(m.value for m in ModelType)
            raise InvalidConfigurationError(
                f"model_type must be one of {allowed}, "
                f"got {self.model_type!r}"
            ) from e
        object.__setattr__(self, "model_type", model_type)

        if not is_positive_int(self.max_iter):
            raise InvalidConfigurationError(
                f"max_iter must be a positive integer, got {self.max_iter}"
            )
        if not (
            isinstance(self.learning_rate, numbers.Real)
            and math.isfinite(self.learning_rate)
            and self.learning_rate > 0
        ):
            raise InvalidConfigurationError(
                f"learning_rate must be a positive finite number, "
                f"got {self.learning_rate}"
            )


@dataclass(frozen=True)
class EstimationConfig:
    """
    Master configuration for IRT model estimation.

    Attributes:
        quadrature: Settings for the quadrature grid.
        convergence: Termination and scheduling settings.
        model_version: Version string for reproducibility tracking.
    """

    quadrature: QuadratureConfig = QuadratureConfig()
    convergence: ConvergenceConfig = ConvergenceConfig()
    model_version: str = field(default_factory=_get_project_version)


def default_config() -> EstimationConfig:
    """Create a default estimation configuration."""
    return EstimationConfig()
