"""
Tests for estimation configuration and fit options.
"""

import numpy as np
import pytest

from mirt_engine.core.exceptions import InvalidConfigurationError
from mirt_engine.irt.estimation.config import (
    EstimationConfig,
    FitOptions,
    default_config,
)
from mirt_engine.irt.estimation.enums import ModelType


class TestFitOptions:
    def test_defaults(self) -> None:
        options = FitOptions()

        assert options.model_type == ModelType.TWO_PL
        assert options.max_iter == 100
        assert options.learning_rate == 0.05

    def test_model_type_from_string(self) -> None:
        options = FitOptions(model_type="3PL")  # type: ignore[arg-type]

        assert options.model_type is ModelType.THREE_PL

    def test_unknown_model_type_raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="model_type"):
            FitOptions(model_type="5PL")  # type: ignore[arg-type]

    @pytest.mark.parametrize("max_iter", [0, -1])
    def test_non_positive_max_iter_raises(self, max_iter: int) -> None:
        with pytest.raises(InvalidConfigurationError, match="max_iter"):
            FitOptions(max_iter=max_iter)

    @pytest.mark.parametrize("learning_rate", [0.0, -0.01])
    def test_non_positive_learning_rate_raises(
        self, learning_rate: float
    ) -> None:
        with pytest.raises(InvalidConfigurationError, match="learning_rate"):
            FitOptions(learning_rate=learning_rate)


class TestModelType:
    def test_restrictions(self) -> None:
        assert ModelType.ONE_PL.fixed_discrimination
        assert not ModelType.TWO_PL.fixed_discrimination
        assert ModelType.THREE_PL.has_guessing
        assert not ModelType.THREE_PL.has_upper_asymptote
        assert ModelType.FOUR_PL.has_guessing
        assert ModelType.FOUR_PL.has_upper_asymptote


def test_default_config() -> None:
    config = default_config()

    assert isinstance(config, EstimationConfig)
    assert config.quadrature.n_points == 41
    assert config.quadrature.bounds == (-4.0, 4.0)
    assert config.convergence.tolerance == 1e-4
    assert config.convergence.yield_every == 5
    assert config.model_version == "0.1.0"


class TestFitOptionsTypes:
    @pytest.mark.parametrize("max_iter", [2.5, 1.0, True, "10"])
    def test_non_integer_max_iter_raises(self, max_iter: object) -> None:
        with pytest.raises(InvalidConfigurationError, match="max_iter"):
            FitOptions(max_iter=max_iter)  # type: ignore[arg-type]

    def test_numpy_integer_max_iter_accepted(self) -> None:
        options = FitOptions(max_iter=np.int64(5))  # type: ignore[arg-type]

        assert options.max_iter == 5

    @pytest.mark.parametrize(
        "learning_rate", [float("inf"), float("nan"), "0.1"]
    )
    def test_non_finite_learning_rate_raises(
        self, learning_rate: object
    ) -> None:
        with pytest.raises(InvalidConfigurationError, match="learning_rate"):
            FitOptions(learning_rate=learning_rate)  # type: ignore[arg-type]
