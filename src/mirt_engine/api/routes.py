from fastapi import APIRouter, Depends, Response

from mirt_engine.api.dependencies import (
    get_job_manager,
    get_scoring_grid,
    get_version,
)
from mirt_engine.api.jobs import JobManager
from mirt_engine.api.schemas import (
    FitRequest,
    HealthResponse,
    JobCreatedResponse,
    JobStatusResponse,
    ScoreRequest,
    ScoreResponse,
)
from mirt_engine.irt.estimation.abilities import score_eap
from mirt_engine.irt.estimation.quadrature import QuadratureGrid

router = APIRouter(prefix="/api/v1")


@router.post("/fits", status_code=202)
async def submit_fit(
    request: FitRequest,
    job_manager: JobManager = Depends(get_job_manager),
) -> JobCreatedResponse:
    job_id = job_manager.submit(request)
    return JobCreatedResponse(job_id=job_id)


@router.get("/fits/{job_id}")
async def get_fit_status(
    job_id: str,
    job_manager: JobManager = Depends(get_job_manager),
) -> JobStatusResponse:
    return job_manager.get_status(job_id)


@router.delete("/fits/{job_id}", status_code=204)
async def cancel_fit(
    job_id: str,
    job_manager: JobManager = Depends(get_job_manager),
) -> Response:
    job_manager.cancel(job_id)
    return Response(status_code=204)


@router.post("/score")
async def score(
    request: ScoreRequest,
    grid: QuadratureGrid = Depends(get_scoring_grid),
) -> ScoreResponse:
    theta = score_eap(request.responses, request.items, grid)
    return ScoreResponse(theta=theta)


@router.get("/health")
async def health_check(
    version: str = Depends(get_version),
) -> HealthResponse:
    return HealthResponse(version=version)
