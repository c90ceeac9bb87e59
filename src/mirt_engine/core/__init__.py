"""
Core shared types and utilities for the estimation engine.

This module provides the response-data model, the error hierarchy and
small helpers used by both the IRT engine and the service layer.
"""

from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.core.exceptions import (
    InvalidConfigurationError,
    MalformedInputError,
    MIRTError,
)
from mirt_engine.core.utils import get_rng

__all__ = [
    "InvalidConfigurationError",
    "MIRTError",
    "MalformedInputError",
    "ResponseMatrix",
    "get_rng",
]
