"""
Diagnostic utilities for IRT model validation.

Compares the observed proportion correct per item against the proportion
the fitted model predicts for the same respondents.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.irt.parameters import Item
from mirt_engine.irt.response_function import item_response_curve


@dataclass
class ItemFitComparison:
    """Observed vs model proportion correct, one entry per item."""

    item_id: NDArray[np.int64]
    n_responses: NDArray[np.int64]
    observed_prob: NDArray[np.float64]
    model_prob: NDArray[np.float64]
    difference: NDArray[np.float64]


def compute_item_fit_comparison(
    data: ResponseMatrix,
    items: Sequence[Item],
    abilities: NDArray[np.float64],
) -> ItemFitComparison:
    """Compare observed vs model proportion correct per item.

    Only respondents who answered an item count towards it, for both the
    observed and the model proportion. Items nobody answered get NaN.

    Args:
        data: Response matrix with observed responses
        items: Fitted item parameters
        abilities: Estimated trait value for each respondent

    Returns:
        ItemFitComparison with observed and model probabilities per item
    """
    valid_mask = data.valid_mask
    observed = data.proportion_correct()

    model_probs: list[float] = []
    for item_idx, item in enumerate(items):
        answered = valid_mask[:, item_idx]
        if not answered.any():
            model_probs.append(float("nan"))
            continue
        probs = item_response_curve(abilities[answered], item)
        model_probs.append(float(np.mean(probs)))

    model_arr = np.array(model_probs, dtype=np.float64)

    return ItemFitComparison(
        item_id=np.arange(data.n_items, dtype=np.int64),
        n_responses=valid_mask.sum(axis=0).astype(np.int64),
        observed_prob=observed,
        model_prob=model_arr,
        difference=observed - model_arr,
    )
