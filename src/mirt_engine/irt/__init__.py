"""
IRT (Item Response Theory) module.

This module provides:
- Item parameters for the multidimensional 4PL family
- The item response function
- Estimation (EM over a quadrature grid) and EAP scoring
- Sampling functions for simulating responses
- Diagnostic utilities for model validation
"""

from mirt_engine.irt.diagnostics import (
    ItemFitComparison,
    compute_item_fit_comparison,
)
from mirt_engine.irt.estimation.estimator import (
    CancellationToken,
    MIRTEstimator,
)
from mirt_engine.irt.parameters import Item
from mirt_engine.irt.response_function import probability
from mirt_engine.irt.sampling import (
    sample_response,
    sample_responses_batch,
    sample_synthetic_responses,
)

__all__ = [
    "CancellationToken",
    "Item",
    "ItemFitComparison",
    "MIRTEstimator",
    "compute_item_fit_comparison",
    "probability",
    "sample_response",
    "sample_responses_batch",
    "sample_synthetic_responses",
]
