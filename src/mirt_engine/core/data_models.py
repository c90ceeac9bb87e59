"""
Data models for binary response data.

This module defines:
- ResponseMatrix: respondents x items matrix of 0/1 answers with missing entries
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Self

import numpy as np
from numpy.typing import NDArray

from mirt_engine.core.constants import MISSING_VALUE
from mirt_engine.core.exceptions import MalformedInputError

ResponseValue = int | float | None


def encode_response(value: ResponseValue) -> int:
    """
    Encode one response as 0, 1 or MISSING_VALUE.

    None and NaN are treated as missing, as is MISSING_VALUE itself.

    Raises:
        MalformedInputError: If the value is not 0, 1 or missing.
    """
    if value is None:
        return MISSING_VALUE
    if isinstance(value, float) and math.isnan(value):
        return MISSING_VALUE
    if value == MISSING_VALUE:
        return MISSING_VALUE
    if value == 0 or value == 1:
        return int(value)
    raise MalformedInputError(
        f"Responses must be 0, 1 or missing, got {value!r}"
    )


def encode_response_vector(
    responses: Sequence[ResponseValue],
) -> NDArray[np.int8]:
    """Encode a single respondent's answers as an int8 array."""
    return np.array([encode_response(v) for v in responses], dtype=np.int8)


@dataclass(frozen=True)
class ResponseMatrix:
    """
    Binary response data for IRT estimation.

    Attributes:
        responses: Array of shape (n_respondents, n_items) with entries
            0 (incorrect), 1 (correct) or MISSING_VALUE.
    """

    responses: NDArray[np.int8]

    def __post_init__(self) -> None:
        """Validate response matrix."""
        if self.responses.ndim != 2:
            raise MalformedInputError(
                f"responses must be 2D, got shape {self.responses.shape}"
            )
        if self.responses.shape[0] == 0 or self.responses.shape[1] == 0:
            raise MalformedInputError(
                "Response matrix must have at least one respondent "
                f"and one item, got shape {self.responses.shape}"
            )
        allowed = np.isin(self.responses, (0, 1, MISSING_VALUE))
        if not allowed.all():
            bad = np.unique(self.responses[~allowed])
            raise MalformedInputError(
                f"Responses must be 0, 1 or missing, got {bad.tolist()}"
            )

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[ResponseValue]]) -> Self:
        """
        Build a response matrix from nested sequences.

        Args:
            rows: One sequence per respondent. Missing answers may be given
                as None, NaN or MISSING_VALUE.

        Raises:
            MalformedInputError: If there are no rows, rows differ in length,
                or a value is not 0, 1 or missing.
        """
        if len(rows) == 0:
            raise MalformedInputError("Response matrix has no respondents")

        lengths = {len(row) for row in rows}
        if len(lengths) != 1:
            raise MalformedInputError(
                f"All response rows must have the same length, "
                f"got lengths {sorted(lengths)}"
            )

        encoded = [[encode_response(v) for v in row] for row in rows]
        return cls(responses=np.array(encoded, dtype=np.int8))

    @property
    def n_respondents(self) -> int:
        """Number of respondents (rows)."""
        return self.responses.shape[0]

    @property
    def n_items(self) -> int:
        """Number of items (columns)."""
        return self.responses.shape[1]

    @property
    def missing_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True indicates missing response."""
        result: NDArray[np.bool_] = self.responses == MISSING_VALUE
        return result

    @property
    def valid_mask(self) -> NDArray[np.bool_]:
        """Boolean mask where True indicates a recorded response."""
        result: NDArray[np.bool_] = self.responses != MISSING_VALUE
        return result

    def item_response_counts(self, item_idx: int) -> NDArray[np.int64]:
        """
        Count incorrect and correct answers for an item (excluding missing).

        Returns:
            Array [n_incorrect, n_correct].
        """
        item_responses = self.responses[:, item_idx]
        valid = item_responses[item_responses != MISSING_VALUE]
        counts = np.bincount(valid.astype(np.int64), minlength=2)
        return counts.astype(np.int64)

    def proportion_correct(self) -> NDArray[np.float64]:
        """
        Observed proportion correct per item among recorded answers.

        Items with no recorded answers get NaN.
        """
        valid = self.valid_mask
        n_valid = valid.sum(axis=0)
        n_correct = (self.responses == 1).sum(axis=0)
        with np.errstate(invalid="ignore", divide="ignore"):
            result: NDArray[np.float64] = np.where(
                n_valid > 0, n_correct / n_valid, np.nan
            )
        return result
