from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from portfolio_intel.schemas.records import Metadata


class JobSubmittedResponse(BaseModel):
    job_id: str
    status: str
    message: str


class JobStatusResponse(BaseModel):
    job_id: str
    status: str
    created_at: datetime
    started_at: datetime | None = None
    finished_at: datetime | None = None
    result: Metadata | None = None
    error: str | None = None


class StatusResponse(BaseModel):
    google: bool
    tripadvisor: bool
    github: bool
    llm: bool


class OkResponse(BaseModel):
    ok: bool = True
    lastFetched: str | None = None
