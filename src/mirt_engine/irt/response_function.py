"""
Item response function for the compensatory multidimensional 4PL.

This module computes P(correct | θ, item):
    kernel = Σ_k a_k θ_k + d
    P = c + (γ - c) * logistic(kernel)

The logistic is evaluated with scipy.special.expit, which does not
overflow for any finite kernel.
"""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray
from scipy.special import expit

from mirt_engine.core.exceptions import InvalidConfigurationError
from mirt_engine.irt.parameters import Item


def _as_trait_vector(
    theta: float | Sequence[float] | NDArray[np.float64],
    item: Item,
) -> NDArray[np.float64]:
    """
    Align a trait value with the item's discrimination vector.

    A scalar is a trait on the first dimension; the other components are 0.
    """
    if np.ndim(theta) == 0:
        vector = np.zeros(item.n_dimensions, dtype=np.float64)
        vector[0] = float(theta)  # type: ignore[arg-type]
        return vector

    vector = np.asarray(theta, dtype=np.float64)
    if vector.ndim != 1 or len(vector) != item.n_dimensions:
        raise InvalidConfigurationError(
            f"Dimensions of theta and discrimination parameters must match, "
            f"got theta of shape {vector.shape} and {item.n_dimensions} "
            f"discriminations"
        )
    return vector


def compute_kernel(
    theta: float | Sequence[float] | NDArray[np.float64],
    item: Item,
) -> float:
    """Linear predictor Σ_k a_k θ_k + d."""
    vector = _as_trait_vector(theta, item)
    return float(np.dot(np.asarray(item.a, dtype=np.float64), vector) + item.d)


def probability(
    theta: float | Sequence[float] | NDArray[np.float64],
    item: Item,
) -> float:
    """
    Probability of a correct response.

    Args:
        theta: Latent trait, either a vector with one entry per dimension
            or a scalar for the first dimension.
        item: Item parameters.

    Returns:
        Probability in [item.c, item.gamma].

    Raises:
        InvalidConfigurationError: If a trait vector's length differs from
            the number of discriminations.
    """
    kernel = compute_kernel(theta, item)
    p = item.c + (item.gamma - item.c) * expit(kernel)
    return float(np.clip(p, item.c, item.gamma))


def item_response_curve(
    nodes: NDArray[np.float64],
    item: Item,
) -> NDArray[np.float64]:
    """
    Evaluate P(correct) at each node of a one-dimensional grid.

    Each node is a trait on the first dimension; the remaining components
    of the trait are 0, so only a[0] enters the kernel.

    Args:
        nodes: Trait values, shape (n_nodes,).
        item: Item parameters.

    Returns:
        Probabilities, shape (n_nodes,).
    """
    kernel = item.a[0] * nodes + item.d
    probs = item.c + (item.gamma - item.c) * expit(kernel)
    result: NDArray[np.float64] = np.clip(probs, item.c, item.gamma)
    return result


def response_log_likelihood(
    responses: NDArray[np.int8],
    missing_mask: NDArray[np.bool_],
    nodes: NDArray[np.float64],
    item: Item,
) -> NDArray[np.float64]:
    """
    Log-likelihood contribution of one item for every respondent and node.

    Args:
        responses: Answers to this item, shape (n_respondents,).
        missing_mask: True where the answer is missing, shape (n_respondents,).
        nodes: Quadrature nodes, shape (n_nodes,).
        item: Item parameters.

    Returns:
        Array of shape (n_respondents, n_nodes). Missing answers contribute 0.
    """
    p = item_response_curve(nodes, item)
    log_p = np.log(p + 1e-300)
    log_q = np.log(1.0 - p + 1e-300)

    correct = (responses == 1) & ~missing_mask
    incorrect = (responses == 0) & ~missing_mask

    log_lik = np.zeros((len(responses), len(nodes)), dtype=np.float64)
    log_lik[correct, :] = log_p
    log_lik[incorrect, :] = log_q
    return log_lik
