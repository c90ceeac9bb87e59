"""
E-step: posterior distribution of the latent trait over the quadrature grid.

For respondent i and node q:
    L(i, q) = Π_j P(x_ij | node_q, item_j)      (present answers only)
    posterior(i, q) = L(i, q) w_q / (Σ_r L(i, r) w_r + ε)

The product is accumulated as a sum of logs and each row is rescaled by
its largest weighted term before exponentiating; the rescaling cancels
in the ratio.
"""

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.irt.estimation.data_models import EStepResult
from mirt_engine.irt.estimation.quadrature import QuadratureGrid
from mirt_engine.irt.parameters import Item
from mirt_engine.irt.response_function import response_log_likelihood

# Guard added to the evidence so degenerate patterns never divide by zero
EVIDENCE_EPSILON = 1e-10


def compute_log_likelihood(
    responses: NDArray[np.int8],
    missing_mask: NDArray[np.bool_],
    items: Sequence[Item],
    nodes: NDArray[np.float64],
) -> NDArray[np.float64]:
    """
    Log-likelihood of each respondent's answers at each node.

    Args:
        responses: Answers, shape (n_respondents, n_items).
        missing_mask: True where the answer is missing, same shape.
        items: Item parameters, one per column.
        nodes: Quadrature nodes, shape (n_nodes,).

    Returns:
        Array of shape (n_respondents, n_nodes).
    """
    n_respondents = responses.shape[0]
    log_lik = np.zeros((n_respondents, len(nodes)), dtype=np.float64)

    for item_idx, item in enumerate(items):
        log_lik += response_log_likelihood(
            responses[:, item_idx],
            missing_mask[:, item_idx],
            nodes,
            item,
        )

    return log_lik


def normalize_posteriors(
    log_lik: NDArray[np.float64],
    weights: NDArray[np.float64],
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Turn per-node log-likelihoods into posteriors.

    Args:
        log_lik: Log-likelihoods, shape (n_respondents, n_nodes).
        weights: Prior weights, shape (n_nodes,).

    Returns:
        Tuple of (posteriors with rows summing to 1, per-respondent
        log marginal likelihood).
    """
    log_joint = log_lik + np.log(weights + 1e-300)[np.newaxis, :]
    max_log_joint = np.max(log_joint, axis=1, keepdims=True)
    scaled = np.exp(log_joint - max_log_joint)

    evidence = scaled.sum(axis=1, keepdims=True)
    posteriors: NDArray[np.float64] = scaled / (evidence + EVIDENCE_EPSILON)

    log_marginal: NDArray[np.float64] = max_log_joint[:, 0] + np.log(
        evidence[:, 0] + EVIDENCE_EPSILON
    )
    return posteriors, log_marginal


def estimate_posteriors(
    data: ResponseMatrix,
    items: Sequence[Item],
    grid: QuadratureGrid,
) -> EStepResult:
    """
    E-step: compute the posterior over the grid for every respondent.

    Missing answers contribute a factor of 1 to the likelihood. A respondent
    with no recorded answers gets the prior weights as posterior.

    Args:
        data: Response matrix.
        items: Current item parameters, one per column of data.
        grid: Quadrature grid.

    Returns:
        EStepResult with posteriors and the marginal log-likelihood.
    """
    log_lik = compute_log_likelihood(
        data.responses, data.missing_mask, items, grid.nodes
    )
    posteriors, log_marginal = normalize_posteriors(log_lik, grid.weights)

    return EStepResult(
        posteriors=posteriors,
        log_likelihood=float(np.sum(log_marginal)),
    )
