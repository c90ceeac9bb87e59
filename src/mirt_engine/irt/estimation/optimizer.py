"""
M-step: fixed-learning-rate gradient step for one item.

With posterior weights w_iq from the E-step and observed answers x_i,
the expected gradients of the marginal log-likelihood are taken as
    ∂/∂d    = Σ_i Σ_q w_iq (x_i - P(node_q))
    ∂/∂a_0  = Σ_i Σ_q w_iq (x_i - P(node_q)) node_q

Only the first discrimination is updated. The grid is one-dimensional, so
a_1, a_2, ... keep their initial values when the model has more than one
dimension. The asymptotes c and gamma are never updated.
"""

import numpy as np
from numpy.typing import NDArray

from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.irt.estimation.enums import ModelType
from mirt_engine.irt.parameters import Item
from mirt_engine.irt.response_function import item_response_curve


def compute_item_gradients(
    item: Item,
    responses: NDArray[np.int8],
    missing_mask: NDArray[np.bool_],
    posteriors: NDArray[np.float64],
    nodes: NDArray[np.float64],
) -> tuple[float, float]:
    """
    Expected gradients of one item's intercept and first discrimination.

    Args:
        item: Current item parameters.
        responses: Answers to this item, shape (n_respondents,).
        missing_mask: True where the answer is missing.
        posteriors: Posterior weights, shape (n_respondents, n_nodes).
        nodes: Quadrature nodes, shape (n_nodes,).

    Returns:
        Tuple of (gradient for d, gradient for a[0]). Respondents without an
        answer to the item contribute nothing.
    """
    valid_mask = ~missing_mask
    if not valid_mask.any():
        return 0.0, 0.0

    observed = responses[valid_mask].astype(np.float64)
    weights = posteriors[valid_mask, :]
    p = item_response_curve(nodes, item)

    # errors[i, q] = (x_i - P(node_q)) * w_iq
    errors = (observed[:, np.newaxis] - p[np.newaxis, :]) * weights

    grad_d = float(errors.sum())
    grad_a0 = float((errors @ nodes).sum())
    return grad_d, grad_a0


def update_item(
    item: Item,
    item_idx: int,
    data: ResponseMatrix,
    posteriors: NDArray[np.float64],
    nodes: NDArray[np.float64],
    model_type: ModelType,
    learning_rate: float,
) -> float:
    """
    Apply one gradient-ascent step to an item, in place.

    d always moves; a[0] moves unless the model is 1PL, which holds
    discriminations at their initial value.

    Args:
        item: Item to update. Mutated.
        item_idx: Column of the item in data.
        data: Response matrix.
        posteriors: Posterior weights from the E-step.
        nodes: Quadrature nodes.
        model_type: Model family being fitted.
        learning_rate: Step size.

    Returns:
        |grad_d * learning_rate|, the convergence signal for this item.
    """
    grad_d, grad_a0 = compute_item_gradients(
        item,
        data.responses[:, item_idx],
        data.missing_mask[:, item_idx],
        posteriors,
        nodes,
    )

    step_d = grad_d * learning_rate
    item.d += step_d
    if not model_type.fixed_discrimination:
        item.a[0] += grad_a0 * learning_rate

    return abs(step_d)
