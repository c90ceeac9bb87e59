"""
Response sampling for binary IRT models.

This module draws 0/1 answers given abilities and item parameters, with an
optional missing rate for simulating incomplete designs.
"""

from collections.abc import Sequence

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from mirt_engine.core.constants import MISSING_VALUE
from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.core.exceptions import InvalidConfigurationError
from mirt_engine.core.utils import get_rng
from mirt_engine.irt.parameters import Item
from mirt_engine.irt.response_function import item_response_curve


def sample_response(
    ability: float,
    item: Item,
    rng: Generator | None = None,
) -> int:
    """
    Sample a single answer given ability and item parameters.

    Args:
        ability: Respondent's trait on the first dimension.
        item: Item parameters.
        rng: Random number generator.

    Returns:
        1 for a correct answer, 0 otherwise.
    """
    if rng is None:
        rng = get_rng()

    p = item_response_curve(np.array([ability], dtype=np.float64), item)[0]
    return int(rng.random() < p)


def sample_responses_batch(
    abilities: NDArray[np.float64],
    items: Sequence[Item],
    rng: Generator | None = None,
    missing_rate: float = 0.0,
) -> NDArray[np.int8]:
    """
    Sample answers for all respondents and items.

    Args:
        abilities: Array of shape (n_respondents,) with trait values.
        items: Item parameters, one per column.
        rng: Random number generator.
        missing_rate: Probability that any single answer is dropped.

    Returns:
        Array of shape (n_respondents, n_items) with 0, 1 or MISSING_VALUE.
    """
    if not 0.0 <= missing_rate < 1.0:
        raise InvalidConfigurationError(
            f"missing_rate must be in [0, 1), got {missing_rate}"
        )
    if rng is None:
        rng = get_rng()

    n_respondents = len(abilities)
    responses = np.empty((n_respondents, len(items)), dtype=np.int8)

    for j, item in enumerate(items):
        p = item_response_curve(abilities, item)
        u = rng.random(n_respondents)
        responses[:, j] = (u < p).astype(np.int8)

    if missing_rate > 0.0:
        dropped = rng.random(responses.shape) < missing_rate
        responses[dropped] = MISSING_VALUE

    return responses


def sample_synthetic_responses(
    abilities: NDArray[np.float64],
    items: Sequence[Item],
    rng: Generator | None = None,
    missing_rate: float = 0.0,
) -> ResponseMatrix:
    """
    Sample a synthetic response matrix from an item set.

    Args:
        abilities: Trait values of the simulated respondents.
        items: Item parameters.
        rng: Random number generator.
        missing_rate: Probability that any single answer is dropped.

    Returns:
        ResponseMatrix with sampled responses.
    """
    sample = sample_responses_batch(abilities, items, rng, missing_rate)
    return ResponseMatrix(responses=sample)
