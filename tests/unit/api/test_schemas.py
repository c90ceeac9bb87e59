import numpy as np
import pytest
from pydantic import ValidationError

from mirt_engine.api.schemas import (
    FitRequest,
    JobStatus,
    ScoreRequest,
)
from mirt_engine.core.constants import MISSING_VALUE
from mirt_engine.core.exceptions import MalformedInputError
from mirt_engine.irt.estimation.enums import ModelType


class TestFitRequest:
    def test_to_domain_basic(self) -> None:
        request = FitRequest(
            responses=[[1, 0, None], [0, 1, 1]],
            model_type=ModelType.THREE_PL,
            max_iter=20,
            learning_rate=0.01,
        )
        data, options = request.to_domain()
        assert data.n_respondents == 2
        assert data.n_items == 3
        np.testing.assert_array_equal(
            data.responses, [[1, 0, MISSING_VALUE], [0, 1, 1]]
        )
        assert options.model_type == ModelType.THREE_PL
        assert options.max_iter == 20
        assert options.learning_rate == 0.01

    def test_defaults(self) -> None:
        request = FitRequest(responses=[[1, 0]])
        assert request.dimensions == 1
        assert request.model_type == ModelType.TWO_PL
        assert request.max_iter == 100
        assert request.learning_rate == 0.05

    def test_model_type_from_string(self) -> None:
        request = FitRequest.model_validate(
            {"responses": [[1]], "model_type": "4PL"}
        )
        assert request.model_type == ModelType.FOUR_PL

    def test_unknown_model_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FitRequest.model_validate(
                {"responses": [[1]], "model_type": "5PL"}
            )

    def test_non_positive_max_iter_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FitRequest(responses=[[1]], max_iter=0)

    def test_non_positive_learning_rate_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FitRequest(responses=[[1]], learning_rate=0.0)

    def test_dimensions_minimum(self) -> None:
        with pytest.raises(ValidationError):
            FitRequest(responses=[[1]], dimensions=0)

    def test_ragged_rows_fail_on_conversion(self) -> None:
        request = FitRequest(responses=[[1, 0], [1]])
        with pytest.raises(MalformedInputError):
            request.to_domain()

    def test_non_binary_values_fail_on_conversion(self) -> None:
        request = FitRequest(responses=[[1, 2]])
        with pytest.raises(MalformedInputError):
            request.to_domain()


class TestScoreRequest:
    def test_items_parsed(self) -> None:
        request = ScoreRequest.model_validate(
            {
                "responses": [1, None],
                "items": [
                    {"a": [1.0], "d": 0.5},
                    {"a": [0.7], "d": -0.2, "c": 0.2, "gamma": 0.95},
                ],
            }
        )
        assert len(request.items) == 2
        assert request.items[1].c == 0.2

    def test_empty_items_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoreRequest(responses=[], items=[])

    def test_invalid_item_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScoreRequest.model_validate(
                {
                    "responses": [1],
                    "items": [{"a": [1.0], "c": 0.9, "gamma": 0.5}],
                }
            )


class TestJobStatus:
    def test_values(self) -> None:
        assert JobStatus.PENDING == "pending"
        assert JobStatus.RUNNING == "running"
        assert JobStatus.COMPLETED == "completed"
        assert JobStatus.CANCELLED == "cancelled"
        assert JobStatus.FAILED == "failed"
