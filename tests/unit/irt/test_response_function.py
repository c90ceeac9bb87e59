"""
Tests for the 4PL item response function.
"""

import numpy as np
import pytest

from mirt_engine.core.exceptions import InvalidConfigurationError
from mirt_engine.irt.parameters import Item
from mirt_engine.irt.response_function import (
    compute_kernel,
    item_response_curve,
    probability,
    response_log_likelihood,
)


class TestProbability:
    def test_zero_kernel_is_one_half(self) -> None:
        """Logistic of a zero kernel is exactly 0.5."""
        item = Item(a=[1.0], d=0.0, c=0.0, gamma=1.0)

        assert probability([0.0], item) == 0.5

    def test_within_asymptotes(self) -> None:
        """P stays in [c, gamma] for any trait value."""
        item = Item(a=[1.7, 0.4], d=-0.3, c=0.15, gamma=0.9)

        for t in np.linspace(-60.0, 60.0, 121):
            p = probability([t, -t], item)
            assert item.c <= p <= item.gamma

    def test_extreme_kernels_hit_asymptotes(self) -> None:
        """Large |kernel| does not overflow."""
        item = Item(a=[1.0], d=0.0, c=0.2, gamma=0.95)

        assert probability([-50.0], item) == pytest.approx(0.2)
        assert probability([50.0], item) == pytest.approx(0.95)
        assert np.isfinite(probability([1e6], item))

    def test_monotone_in_trait(self) -> None:
        """With positive discriminations P is non-decreasing in theta."""
        item = Item(a=[0.8, 1.2], d=0.5, c=0.1, gamma=0.97)

        probs = [probability([t, t], item) for t in np.linspace(-5, 5, 51)]

        assert all(np.diff(probs) >= 0)

    def test_multidimensional_kernel(self) -> None:
        item = Item(a=[1.0, 2.0], d=0.5)

        assert compute_kernel([1.0, -1.0], item) == pytest.approx(-0.5)

    def test_scalar_theta_is_first_dimension(self) -> None:
        """A scalar trait sets the first dimension; the rest are 0."""
        item = Item(a=[1.0, 3.0], d=0.2)

        assert probability(0.7, item) == pytest.approx(
            probability([0.7, 0.0], item)
        )

    def test_length_mismatch_raises(self) -> None:
        item = Item(a=[1.0, 1.0])

        with pytest.raises(InvalidConfigurationError, match="must match"):
            probability([0.0, 0.0, 0.0], item)


class TestItemResponseCurve:
    def test_matches_pointwise_probability(self) -> None:
        item = Item(a=[1.3, 0.7], d=-0.4, c=0.1, gamma=0.9)
        nodes = np.linspace(-4.0, 4.0, 9)

        curve = item_response_curve(nodes, item)

        expected = [probability(float(x), item) for x in nodes]
        np.testing.assert_allclose(curve, expected, rtol=1e-12)

    def test_only_first_discrimination_used(self) -> None:
        """Grid nodes are traits on the first dimension only."""
        nodes = np.array([-1.0, 0.0, 1.0])
        narrow = Item(a=[1.0, 0.0], d=0.0)
        wide = Item(a=[1.0, 5.0], d=0.0)

        np.testing.assert_allclose(
            item_response_curve(nodes, narrow),
            item_response_curve(nodes, wide),
        )


class TestResponseLogLikelihood:
    def test_missing_answers_contribute_zero(self) -> None:
        item = Item(a=[1.0], d=0.0)
        nodes = np.array([-1.0, 0.0, 1.0])
        responses = np.array([1, 0, -1], dtype=np.int8)
        missing = responses == -1

        log_lik = response_log_likelihood(responses, missing, nodes, item)

        p = item_response_curve(nodes, item)
        assert log_lik.shape == (3, 3)
        np.testing.assert_allclose(log_lik[0], np.log(p))
        np.testing.assert_allclose(log_lik[1], np.log(1.0 - p))
        np.testing.assert_array_equal(log_lik[2], 0.0)
