import asyncio
import logging

from fastapi import APIRouter, HTTPException

from portfolio_intel.dependencies import JobStoreDep, RefresherDep
from portfolio_intel.jobs import Job, JobStore
from portfolio_intel.schemas.responses import JobStatusResponse, JobSubmittedResponse
from portfolio_intel.services.fetch_all import PortfolioRefresher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Strong references so running refreshes are not garbage collected.
_background: set[asyncio.Task] = set()


async def _run_refresh(job_id: str, refresher: PortfolioRefresher, store: JobStore) -> None:
    store.start(job_id)
    try:
        metadata = await refresher.run()
    except Exception as exc:
        logger.exception("Refresh job %s failed", job_id)
        store.fail(job_id, str(exc))
    else:
        store.finish(job_id, metadata)


def _status(job: Job) -> JobStatusResponse:
    return JobStatusResponse(**job.model_dump())


@router.post("/refresh", response_model=JobSubmittedResponse, status_code=202)
async def start_refresh(refresher: RefresherDep, store: JobStoreDep) -> JobSubmittedResponse:
    job, created = store.submit()
    if not created:
        return JobSubmittedResponse(
            job_id=job.job_id, status=job.status, message="Refresh already running."
        )

    task = asyncio.create_task(_run_refresh(job.job_id, refresher, store))
    _background.add(task)
    task.add_done_callback(_background.discard)
    return JobSubmittedResponse(job_id=job.job_id, status=job.status, message="Refresh started.")


@router.get("/refresh", response_model=JobStatusResponse)
async def get_latest_refresh(store: JobStoreDep) -> JobStatusResponse:
    job = store.latest_job()
    if job is None:
        raise HTTPException(status_code=404, detail="No refresh has been started")
    return _status(job)


@router.get("/refresh/{job_id}", response_model=JobStatusResponse)
async def get_refresh_status(job_id: str, store: JobStoreDep) -> JobStatusResponse:
    job = store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found")
    return _status(job)
