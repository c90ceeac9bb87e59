"""
Ability estimation for fitted item sets.

This module provides Expected A Posteriori (EAP) scoring: the posterior
mean of the trait over the quadrature grid given a respondent's answers,

    θ_EAP = Σ_q node_q P(node_q | responses)

using the same factorized likelihood and guarded normalization as the
E-step.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from mirt_engine.core.constants import MISSING_VALUE
from mirt_engine.core.data_models import (
    ResponseMatrix,
    ResponseValue,
    encode_response_vector,
)
from mirt_engine.core.exceptions import (
    InvalidConfigurationError,
    MalformedInputError,
)
from mirt_engine.irt.estimation.posterior import (
    compute_log_likelihood,
    normalize_posteriors,
)
from mirt_engine.irt.estimation.quadrature import QuadratureGrid
from mirt_engine.irt.parameters import Item


@dataclass(frozen=True)
class AbilityEstimates:
    """
    Ability estimates for respondents.

    Attributes:
        eap: Posterior mean estimates, shape (n_respondents,).
        se: Standard errors (posterior standard deviation),
            shape (n_respondents,).
    """

    eap: NDArray[np.float64]
    se: NDArray[np.float64]

    @property
    def n_respondents(self) -> int:
        """Number of respondents."""
        return len(self.eap)


def check_item_dimensions(
    items: Sequence[Item],
    expected: int | None = None,
) -> None:
    """
    Check that all items share one dimensionality.

    Raises:
        InvalidConfigurationError: If items disagree with each other or
            with expected.
    """
    dims = {item.n_dimensions for item in items}
    if len(dims) > 1:
        raise InvalidConfigurationError(
            f"All items must have the same number of discriminations, "
            f"got {sorted(dims)}"
        )
    if expected is not None and dims and dims != {expected}:
        raise InvalidConfigurationError(
            f"Items have {dims.pop()} discriminations but the model has "
            f"{expected} dimensions"
        )


def score_eap(
    responses: Sequence[ResponseValue],
    items: Sequence[Item],
    grid: QuadratureGrid,
) -> float:
    """
    EAP trait estimate for a single response vector.

    Args:
        responses: One entry per item: 1, 0, or missing (None, NaN or
            MISSING_VALUE).
        items: Fitted item parameters.
        grid: Quadrature grid.

    Returns:
        Posterior mean of the trait. With no recorded answers this is the
        prior mean of the grid.

    Raises:
        MalformedInputError: If the vector length differs from the number
            of items, or an entry is not 0, 1 or missing.
        InvalidConfigurationError: If items differ in dimensionality.
    """
    if len(responses) != len(items):
        raise MalformedInputError(
            f"Expected {len(items)} responses (one per item), "
            f"got {len(responses)}"
        )
    check_item_dimensions(items)

    encoded = encode_response_vector(responses)[np.newaxis, :]
    log_lik = compute_log_likelihood(
        encoded, encoded == MISSING_VALUE, items, grid.nodes
    )
    posteriors, _ = normalize_posteriors(log_lik, grid.weights)

    return float(posteriors[0] @ grid.nodes)


def estimate_abilities(
    data: ResponseMatrix,
    items: Sequence[Item],
    grid: QuadratureGrid,
) -> AbilityEstimates:
    """
    Estimate abilities for every respondent using EAP.

    Standard errors are the posterior standard deviation:
        SE = sqrt(E[θ² | responses] - (E[θ | responses])²)

    Args:
        data: Response matrix.
        items: Fitted item parameters, one per column.
        grid: Quadrature grid.

    Returns:
        AbilityEstimates with EAP estimates and standard errors.
    """
    if len(items) != data.n_items:
        raise MalformedInputError(
            f"Expected {data.n_items} items (one per column), "
            f"got {len(items)}"
        )
    check_item_dimensions(items)

    log_lik = compute_log_likelihood(
        data.responses, data.missing_mask, items, grid.nodes
    )
    posteriors, _ = normalize_posteriors(log_lik, grid.weights)

    eap = posteriors @ grid.nodes

    eap_squared = posteriors @ grid.nodes**2
    variance = eap_squared - eap**2
    # Ensure non-negative (numerical precision)
    variance = np.maximum(variance, 0.0)
    se = np.sqrt(variance)

    return AbilityEstimates(eap=eap, se=se)
