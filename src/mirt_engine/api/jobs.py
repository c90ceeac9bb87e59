import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from mirt_engine.api.config import ApiSettings
from mirt_engine.api.errors import (
    DataSizeExceededError,
    JobNotFoundError,
    TooManyJobsError,
)
from mirt_engine.api.schemas import (
    ErrorDetail,
    FitRequest,
    FitResultSchema,
    JobProgress,
    JobStatus,
    JobStatusResponse,
)
from mirt_engine.core.data_models import ResponseMatrix
from mirt_engine.irt.estimation.config import (
    EstimationConfig,
    FitOptions,
    QuadratureConfig,
)
from mirt_engine.irt.estimation.data_models import CycleReport, FitResult
from mirt_engine.irt.estimation.enums import ConvergenceStatus
from mirt_engine.irt.estimation.estimator import (
    CancellationToken,
    MIRTEstimator,
)

logger = logging.getLogger(__name__)


@dataclass
class Job:
    job_id: str
    status: JobStatus
    created_at: datetime
    request: FitRequest
    data: ResponseMatrix
    options: FitOptions
    cancellation: CancellationToken = field(default_factory=CancellationToken)
    progress: JobProgress | None = None
    result: FitResultSchema | None = None
    error: ErrorDetail | None = None
    completed_at: datetime | None = None
    task: asyncio.Task[None] | None = field(default=None, repr=False)


def _to_schema(result: FitResult) -> FitResultSchema:
    return FitResultSchema(
        items=list(result.items),
        model_type=result.model_type,
        n_dimensions=result.n_dimensions,
        n_iterations=result.n_iterations,
        max_change=result.max_change,
        log_likelihood=result.log_likelihood,
        convergence_status=result.convergence_status,
        model_version=result.model_version,
    )


class JobManager:
    def __init__(self, settings: ApiSettings) -> None:
        self._settings = settings
        self._jobs: dict[str, Job] = {}
        self._semaphore = asyncio.Semaphore(settings.max_concurrent_jobs)
        self._config = EstimationConfig(
            quadrature=QuadratureConfig(
                n_points=settings.n_quadrature_points
            )
        )

    def _validate_data_size(self, request: FitRequest) -> None:
        n_respondents = len(request.responses)
        n_items = len(request.responses[0]) if request.responses else 0

        if n_respondents > self._settings.max_respondents:
            raise DataSizeExceededError(
                f"n_respondents={n_respondents} exceeds "
                f"max={self._settings.max_respondents}"
            )
        if n_items > self._settings.max_items:
            raise DataSizeExceededError(
                f"n_items={n_items} exceeds max={self._settings.max_items}"
            )
        if request.dimensions > self._settings.max_dimensions:
            raise DataSizeExceededError(
                f"dimensions={request.dimensions} exceeds "
                f"max={self._settings.max_dimensions}"
            )

    def submit(self, request: FitRequest) -> str:
        self.evict_expired()
        self._validate_data_size(request)
        data, options = request.to_domain()

        if self._semaphore._value == 0:  # noqa: SLF001
            raise TooManyJobsError

        job_id = uuid.uuid4().hex[:12]
        job = Job(
            job_id=job_id,
            status=JobStatus.PENDING,
            created_at=datetime.now(UTC),
            request=request,
            data=data,
            options=options,
        )
        self._jobs[job_id] = job
        job.task = asyncio.create_task(self._run_job(job))
        return job_id

    def get_status(self, job_id: str) -> JobStatusResponse:
        self.evict_expired()
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return JobStatusResponse(
            job_id=job.job_id,
            status=job.status,
            progress=job.progress,
            result=job.result,
            error=job.error,
            created_at=job.created_at,
            completed_at=job.completed_at,
        )

    def cancel(self, job_id: str) -> None:
        """Stop a job at its next cycle boundary, keeping partial items."""
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        job.cancellation.cancel()

    async def _run_job(self, job: Job) -> None:
        async with self._semaphore:
            if job.cancellation.cancelled:
                job.status = JobStatus.CANCELLED
                job.completed_at = datetime.now(UTC)
                return

            job.status = JobStatus.RUNNING

            def on_cycle(report: CycleReport) -> None:
                job.progress = JobProgress(
                    cycle=report.cycle,
                    max_iter=job.options.max_iter,
                    max_change=report.max_change,
                    log_likelihood=report.log_likelihood,
                )

            try:
                estimator = MIRTEstimator(
                    dimensions=job.request.dimensions, config=self._config
                )
                result = await estimator.fit_async(
                    job.data,
                    job.options,
                    on_cycle=on_cycle,
                    cancellation=job.cancellation,
                )

                job.result = _to_schema(result)
                if result.convergence_status == ConvergenceStatus.CANCELLED:
                    job.status = JobStatus.CANCELLED
                else:
                    job.status = JobStatus.COMPLETED

            except Exception:
                logger.exception(f"Job {job.job_id} failed")
                job.status = JobStatus.FAILED
                job.error = ErrorDetail(
                    code="INTERNAL_ERROR",
                    message="Internal error during fit",
                )

            finally:
                job.completed_at = datetime.now(UTC)

    def evict_expired(self) -> None:
        """Drop finished jobs older than the configured TTL."""
        now = datetime.now(UTC)
        expired = [
            jid
            for jid, job in self._jobs.items()
            if job.completed_at
            and (now - job.completed_at).total_seconds()
            > self._settings.job_ttl_seconds
        ]
        for jid in expired:
            del self._jobs[jid]
        if expired:
            logger.debug(f"Evicted {len(expired)} expired job(s)")
