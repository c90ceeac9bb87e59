from functools import lru_cache

from mirt_engine.api.config import ApiSettings
from mirt_engine.api.jobs import JobManager
from mirt_engine.irt.estimation.quadrature import QuadratureGrid, build_grid


@lru_cache(maxsize=1)
def get_settings() -> ApiSettings:
    return ApiSettings()


_job_manager: JobManager | None = None
_scoring_grid: QuadratureGrid | None = None


def init_job_manager(settings: ApiSettings) -> JobManager:
    global _job_manager  # noqa: PLW0603
    _job_manager = JobManager(settings)
    return _job_manager


def get_job_manager() -> JobManager:
    assert _job_manager is not None, "JobManager not initialized"
    return _job_manager


def init_scoring_grid(settings: ApiSettings) -> QuadratureGrid:
    global _scoring_grid  # noqa: PLW0603
    _scoring_grid = build_grid(settings.n_quadrature_points)
    return _scoring_grid


def get_scoring_grid() -> QuadratureGrid:
    assert _scoring_grid is not None, "Scoring grid not initialized"
    return _scoring_grid


def get_version() -> str:
    from mirt_engine.irt.estimation.config import _get_project_version

    return _get_project_version()
