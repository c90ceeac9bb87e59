"""
Quadrature grids for latent-trait integration.

This module provides nodes and weights for numerical integration over the
standard normal ability prior, used in EM estimation and EAP scoring.
"""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from mirt_engine.core.exceptions import InvalidConfigurationError
from mirt_engine.irt.estimation.config import (
    DEFAULT_QUADRATURE_BOUNDS,
    QuadratureConfig,
)
from mirt_engine.irt.estimation.enums import QuadratureRule


@dataclass(frozen=True)
class QuadratureGrid:
    """
    Quadrature nodes and weights.

    Attributes:
        nodes: Trait values in ascending order, shape (n_points,).
        weights: Prior probability mass at each node, shape (n_points,).
            Weights sum to 1.
    """

    nodes: NDArray[np.float64]
    weights: NDArray[np.float64]

    @property
    def n_points(self) -> int:
        """Number of quadrature nodes."""
        return len(self.nodes)

    @property
    def prior_mean(self) -> float:
        """Mean of the discretized prior."""
        return float(np.dot(self.nodes, self.weights))


def build_grid(
    n_points: int,
    bounds: tuple[float, float] = DEFAULT_QUADRATURE_BOUNDS,
) -> QuadratureGrid:
    """
    Build an evenly spaced grid with standard-normal weights.

    Nodes are n_points evenly spaced values over bounds (inclusive). Each
    weight is proportional to exp(-x^2 / 2) at its node; weights are
    normalized to sum to 1.

    Example:
        build_grid(5) has nodes [-4, -2, 0, 2, 4] and weights
        approximately [0.000264, 0.10644, 0.78660, 0.10644, 0.000264].

    Args:
        n_points: Number of nodes, at least 2.
        bounds: (low, high) range of the grid.

    Returns:
        QuadratureGrid with nodes and weights.

    Raises:
        InvalidConfigurationError: If n_points < 2 or bounds are not
            increasing.
    """
    if n_points < 2:
        raise InvalidConfigurationError(
            f"Quadrature grid needs at least 2 nodes, got {n_points}"
        )
    low, high = bounds
    if not low < high:
        raise InvalidConfigurationError(
            f"Quadrature bounds must be increasing, got {bounds}"
        )

    step = (high - low) / (n_points - 1)
    nodes = low + step * np.arange(n_points, dtype=np.float64)

    density = np.exp(-0.5 * nodes**2)
    weights = density / density.sum()

    return QuadratureGrid(nodes=nodes, weights=weights)


def build_gauss_hermite_grid(n_points: int) -> QuadratureGrid:
    """
    Build a Gauss-Hermite grid for the standard normal.

    Uses numpy's hermgauss function and transforms from physicists' Hermite
    polynomials (which integrate exp(-x^2)) to probabilists' convention
    (which integrates the standard normal distribution):
        - x_prob = sqrt(2) * x_phys
        - w_prob = w_phys / sqrt(pi)

    Raises:
        InvalidConfigurationError: If n_points < 2.
    """
    if n_points < 2:
        raise InvalidConfigurationError(
            f"Quadrature grid needs at least 2 nodes, got {n_points}"
        )

    x_phys, w_phys = np.polynomial.hermite.hermgauss(n_points)

    x_prob = np.sqrt(2.0) * x_phys
    w_prob = w_phys / np.sqrt(np.pi)

    # Normalize weights to sum to 1 (should already be close)
    weights = w_prob / w_prob.sum()

    return QuadratureGrid(
        nodes=x_prob.astype(np.float64),
        weights=weights.astype(np.float64),
    )


def get_quadrature(config: QuadratureConfig) -> QuadratureGrid:
    """Build the grid described by a quadrature configuration."""
    if config.rule == QuadratureRule.GAUSS_HERMITE:
        return build_gauss_hermite_grid(config.n_points)
    return build_grid(config.n_points, config.bounds)
