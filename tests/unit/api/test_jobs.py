from datetime import UTC, datetime, timedelta

import pytest

from mirt_engine.api.config import ApiSettings
from mirt_engine.api.errors import JobNotFoundError
from mirt_engine.api.jobs import JobManager
from mirt_engine.api.schemas import FitRequest, JobStatus

RESPONSES: list[list[int | None]] = [
    [1, 0, 1],
    [1, 1, 1],
    [0, 0, 0],
    [1, 0, 0],
    [0, 1, 1],
]


async def _finished_job(manager: JobManager) -> str:
    job_id = manager.submit(FitRequest(responses=RESPONSES, max_iter=3))
    task = manager._jobs[job_id].task  # noqa: SLF001
    assert task is not None
    await task
    return job_id


class TestJobExpiry:
    @pytest.mark.asyncio
    async def test_finished_job_kept_within_ttl(self) -> None:
        manager = JobManager(ApiSettings(job_ttl_seconds=3600))
        job_id = await _finished_job(manager)

        status = manager.get_status(job_id)

        assert status.status == JobStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_expired_job_not_found(self) -> None:
        manager = JobManager(ApiSettings(job_ttl_seconds=60))
        job_id = await _finished_job(manager)
        job = manager._jobs[job_id]  # noqa: SLF001
        job.completed_at = datetime.now(UTC) - timedelta(seconds=120)

        with pytest.raises(JobNotFoundError):
            manager.get_status(job_id)

    @pytest.mark.asyncio
    async def test_submit_evicts_expired_jobs(self) -> None:
        manager = JobManager(ApiSettings(job_ttl_seconds=60))
        old_id = await _finished_job(manager)
        manager._jobs[old_id].completed_at = (  # noqa: SLF001
            datetime.now(UTC) - timedelta(seconds=120)
        )

        new_id = await _finished_job(manager)

        assert old_id not in manager._jobs  # noqa: SLF001
        assert manager.get_status(new_id).status == JobStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_running_job_never_evicted(self) -> None:
        """Only jobs with a completion time can expire."""
        manager = JobManager(ApiSettings(job_ttl_seconds=0))
        job_id = manager.submit(
            FitRequest(responses=RESPONSES, max_iter=100000)
        )

        status = manager.get_status(job_id)

        assert status.status in (JobStatus.PENDING, JobStatus.RUNNING)
        manager.cancel(job_id)
        task = manager._jobs[job_id].task  # noqa: SLF001
        assert task is not None
        await task
