from __future__ import annotations

import logging
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel

from portfolio_intel.schemas.records import Metadata

logger = logging.getLogger(__name__)


class JobStatus(StrEnum):
    pending = "pending"
    running = "running"
    done = "done"
    failed = "failed"


class Job(BaseModel):
    job_id: str
    status: JobStatus
    created_at: datetime
    started_at: datetime | None = None
    finished_at: datetime | None = None
    result: Metadata | None = None
    error: str | None = None

    @property
    def active(self) -> bool:
        return self.status in (JobStatus.pending, JobStatus.running)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStore:
    """In-memory history of refresh runs in submission order.

    At most one run is active; submitting while one is active hands back
    that run instead of starting another.
    """

    def __init__(self, max_jobs: int = 100) -> None:
        self._jobs: OrderedDict[str, Job] = OrderedDict()
        self._max_jobs = max_jobs

    def submit(self) -> tuple[Job, bool]:
        if active := self.active_job():
            return active, False

        job = Job(job_id=uuid.uuid4().hex[:12], status=JobStatus.pending, created_at=_utcnow())
        self._jobs[job.job_id] = job
        self._trim()
        return job, True

    def _trim(self) -> None:
        finished = [job_id for job_id, job in self._jobs.items() if not job.active]
        while len(self._jobs) > self._max_jobs and finished:
            del self._jobs[finished.pop(0)]

    def get_job(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    def latest_job(self) -> Job | None:
        return next(reversed(self._jobs.values()), None)

    def active_job(self) -> Job | None:
        return next((job for job in self._jobs.values() if job.active), None)

    def _update(self, job_id: str, status: JobStatus, **changes) -> None:
        job = self._jobs.get(job_id)
        if job is None:
            logger.warning("Ignoring %s for unknown refresh job %s", status, job_id)
            return
        job.status = status
        for field, value in changes.items():
            setattr(job, field, value)

    def start(self, job_id: str) -> None:
        self._update(job_id, JobStatus.running, started_at=_utcnow())

    def finish(self, job_id: str, result: Metadata | None) -> None:
        self._update(job_id, JobStatus.done, result=result, finished_at=_utcnow())

    def fail(self, job_id: str, error: str) -> None:
        self._update(job_id, JobStatus.failed, error=error, finished_at=_utcnow())
