from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.irt.estimation.config import (
    DEFAULT_LEARNING_RATE,
    DEFAULT_MAX_ITERATIONS,
    FitOptions,
)
from mirt_engine.irt.estimation.enums import ConvergenceStatus, ModelType
from mirt_engine.irt.parameters import Item

# --- Enums ---


class JobStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


# --- Request schemas ---


class FitRequest(BaseModel):
    responses: list[list[int | None]]
    dimensions: int = Field(default=1, ge=1)
    model_type: ModelType = ModelType.TWO_PL
    max_iter: int = Field(default=DEFAULT_MAX_ITERATIONS, gt=0)
    learning_rate: float = Field(default=DEFAULT_LEARNING_RATE, gt=0)

    def to_domain(self) -> tuple[ResponseMatrix, FitOptions]:
        data = ResponseMatrix.from_rows(self.responses)
        options = FitOptions(
            model_type=self.model_type,
            max_iter=self.max_iter,
            learning_rate=self.learning_rate,
        )
        return data, options


class ScoreRequest(BaseModel):
    responses: list[int | None]
    items: list[Item] = Field(min_length=1)


# --- Response schemas ---


class JobProgress(BaseModel):
    cycle: int
    max_iter: int
    max_change: float
    log_likelihood: float


class FitResultSchema(BaseModel):
    items: list[Item]
    model_type: ModelType
    n_dimensions: int
    n_iterations: int
    max_change: float
    log_likelihood: float
    convergence_status: ConvergenceStatus
    model_version: str


class ScoreResponse(BaseModel):
    theta: float


class ErrorDetail(BaseModel):
    code: str
    message: str
    request_id: str | None = None


class JobStatusResponse(BaseModel):
    job_id: str
    status: JobStatus
    progress: JobProgress | None = None
    result: FitResultSchema | None = None
    error: ErrorDetail | None = None
    created_at: datetime
    completed_at: datetime | None = None


class JobCreatedResponse(BaseModel):
    job_id: str


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
