from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from mirt_engine.irt.estimation.enums import ConvergenceStatus, ModelType
from mirt_engine.irt.parameters import Item


@dataclass
class EStepResult:
    """
    Results from the E-step of the EM algorithm.

    Attributes:
        posteriors: Posterior weights, shape (n_respondents, n_nodes).
            posteriors[i, q] = P(theta = node_q | responses_i, items).
        log_likelihood: Marginal log-likelihood for current parameters.
    """

    posteriors: NDArray[np.float64]
    log_likelihood: float


class CycleReport(BaseModel):
    """
    State of a fit at a cycle boundary.

    Attributes:
        cycle: 1-based number of the cycle that just finished.
        max_change: Largest per-item change applied in the cycle.
        log_likelihood: Marginal log-likelihood from the cycle's E-step.
        items: Snapshot of the item set after the cycle's M-step.
    """

    model_config = ConfigDict(frozen=True)

    cycle: int
    max_change: float
    log_likelihood: float
    items: tuple[Item, ...]


class FitResult(BaseModel):
    """
    Result of IRT model estimation.

    Attributes:
        items: Fitted item parameters, one per response-matrix column.
        model_type: Model family that was fitted.
        n_dimensions: Latent dimensionality of the items.
        n_iterations: Number of EM cycles performed.
        max_change: Largest per-item change in the last cycle.
        log_likelihood: Marginal log-likelihood from the last E-step.
        convergence_status: How estimation terminated.
        model_version: Version string for reproducibility tracking.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[Item, ...]
    model_type: ModelType
    n_dimensions: int
    n_iterations: int
    max_change: float
    log_likelihood: float
    convergence_status: ConvergenceStatus
    model_version: str

    @property
    def n_items(self) -> int:
        """Number of items in the model."""
        return len(self.items)

    @property
    def converged(self) -> bool:
        """Whether estimation converged."""
        return self.convergence_status == ConvergenceStatus.CONVERGED
