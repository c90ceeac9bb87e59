"""
CSV loading utilities for binary response data.
"""

from pathlib import Path

import numpy as np
import pandas as pd

from mirt_engine.core.constants import (
    CORRECT_CHAR,
    INCORRECT_CHAR,
    MISSING_CHAR,
    MISSING_VALUE,
)
from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.core.exceptions import MalformedInputError


def _parse_answer_string(answer_string: str) -> list[int]:
    """Parse an answer string into 0/1 responses.

    CORRECT_CHAR maps to 1, INCORRECT_CHAR to 0, MISSING_CHAR to
    MISSING_VALUE.
    """
    responses: list[int] = []
    for char in answer_string:
        if char == MISSING_CHAR:
            responses.append(MISSING_VALUE)
        elif char == CORRECT_CHAR:
            responses.append(1)
        elif char == INCORRECT_CHAR:
            responses.append(0)
        else:
            raise MalformedInputError(
                f"Invalid character in answer string: '{char}'"
            )
    return responses


def load_csv_to_response_matrix(
    path: Path,
) -> tuple[list[str], ResponseMatrix]:
    """Load a CSV file with binary responses into a ResponseMatrix.

    Expected CSV columns:
        - respondent_id: unique identifier for each respondent
        - answer_string: one character per item (e.g., "10*1")

    Returns:
        Tuple of (respondent_ids, ResponseMatrix).

    Raises:
        MalformedInputError: If CSV format is invalid or data is inconsistent.
    """
    df = pd.read_csv(path, dtype=str, keep_default_na=False)

    if "respondent_id" not in df.columns:
        raise MalformedInputError("CSV must have 'respondent_id' column")
    if "answer_string" not in df.columns:
        raise MalformedInputError("CSV must have 'answer_string' column")

    respondent_ids: list[str] = df["respondent_id"].tolist()
    answer_strings: list[str] = df["answer_string"].tolist()

    if not answer_strings:
        raise MalformedInputError("CSV contains no respondents")

    lengths = {len(s) for s in answer_strings}
    if len(lengths) != 1:
        raise MalformedInputError(
            f"Inconsistent answer string lengths: {sorted(lengths)}"
        )

    response_lists = [_parse_answer_string(s) for s in answer_strings]
    responses = np.array(response_lists, dtype=np.int8)

    return respondent_ids, ResponseMatrix(responses=responses)
