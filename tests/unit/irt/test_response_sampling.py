"""
Tests for simulating binary responses.
"""

import numpy as np
import pytest

from mirt_engine.core.constants import MISSING_VALUE
from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.core.exceptions import InvalidConfigurationError
from mirt_engine.core.utils import get_rng
from mirt_engine.irt.parameters import Item
from mirt_engine.irt.sampling import (
    sample_response,
    sample_responses_batch,
    sample_synthetic_responses,
)


class TestSampleResponse:
    def test_binary_output(self) -> None:
        rng = get_rng(0)
        item = Item(a=[1.0], d=0.0)

        draws = {sample_response(0.0, item, rng) for _ in range(50)}

        assert draws <= {0, 1}

    def test_reproducible(self) -> None:
        item = Item(a=[1.0], d=0.3)

        first = [sample_response(0.5, item, get_rng(7)) for _ in range(5)]
        second = [sample_response(0.5, item, get_rng(7)) for _ in range(5)]

        assert first == second


class TestSampleResponsesBatch:
    def test_shape_and_values(self) -> None:
        rng = get_rng(1)
        abilities = rng.standard_normal(30)
        items = [Item(a=[1.0], d=float(d)) for d in (-1.0, 0.0, 1.0)]

        responses = sample_responses_batch(abilities, items, rng)

        assert responses.shape == (30, 3)
        assert responses.dtype == np.int8
        assert set(np.unique(responses)) <= {0, 1}

    def test_easier_items_answered_correctly_more_often(self) -> None:
        rng = get_rng(2)
        abilities = rng.standard_normal(2000)
        items = [Item(a=[1.0], d=-2.0), Item(a=[1.0], d=2.0)]

        responses = sample_responses_batch(abilities, items, rng)

        assert responses[:, 1].mean() > responses[:, 0].mean() + 0.4

    def test_guessing_floor_respected(self) -> None:
        """Very low ability still answers at about the guessing rate."""
        rng = get_rng(3)
        abilities = np.full(4000, -10.0)
        items = [Item(a=[1.0], d=0.0, c=0.25, gamma=1.0)]

        responses = sample_responses_batch(abilities, items, rng)

        assert responses.mean() == pytest.approx(0.25, abs=0.03)

    def test_missing_rate(self) -> None:
        rng = get_rng(4)
        abilities = rng.standard_normal(500)
        items = [Item(a=[1.0]) for _ in range(10)]

        responses = sample_responses_batch(
            abilities, items, rng, missing_rate=0.3
        )

        missing_share = (responses == MISSING_VALUE).mean()
        assert missing_share == pytest.approx(0.3, abs=0.03)

    def test_invalid_missing_rate_raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="missing_rate"):
            sample_responses_batch(
                np.zeros(3), [Item(a=[1.0])], get_rng(0), missing_rate=1.0
            )


def test_sample_synthetic_responses_returns_matrix() -> None:
    rng = get_rng(5)
    items = [Item(a=[1.0], d=0.0) for _ in range(4)]

    data = sample_synthetic_responses(rng.standard_normal(20), items, rng)

    assert isinstance(data, ResponseMatrix)
    assert data.n_respondents == 20
    assert data.n_items == 4
