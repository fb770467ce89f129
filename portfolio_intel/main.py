import logging
import sys
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from portfolio_intel.config import DASHBOARD_DIR, Settings
from portfolio_intel.exceptions.custom import (
    DuplicateHotelError,
    FolderNotFoundError,
    HotelNotFoundError,
    MissingCredentialError,
    RateLimitError,
    SourceError,
)
from portfolio_intel.exceptions.handlers import (
    duplicate_hotel_handler,
    missing_credential_handler,
    not_found_handler,
    rate_limit_error_handler,
    source_error_handler,
)
from portfolio_intel.jobs import JobStore
from portfolio_intel.routers.folders import router as folders_router
from portfolio_intel.routers.hotels import router as hotels_router
from portfolio_intel.routers.portfolio import router as portfolio_router
from portfolio_intel.routers.refresh import router as refresh_router
from portfolio_intel.services.claude import ClaudeService
from portfolio_intel.services.enrichment import ClaudeEnrichment, DisabledEnrichment
from portfolio_intel.services.fetch_all import (
    PortfolioRefresher,
    build_google_service,
    build_tripadvisor_service,
)
from portfolio_intel.services.folders import FolderService
from portfolio_intel.services.github_sync import GitHubSync
from portfolio_intel.services.hotels import HotelLookupService


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    configure_logging(settings.log_level)

    async with httpx.AsyncClient(timeout=30.0) as client:
        google = build_google_service(settings, client) if settings.has_google else None
        tripadvisor = (
            build_tripadvisor_service(settings, client) if settings.has_tripadvisor else None
        )

        enrichment = DisabledEnrichment()
        if settings.has_llm:
            enrichment = ClaudeEnrichment(ClaudeService(settings.anthropic_api_key))

        github: GitHubSync | None = None
        if settings.has_github:
            github = GitHubSync(
                client,
                settings.github_token,
                settings.github_repo,
                branch=settings.github_branch,
                path=settings.folders_path.name,
            )

        hotel_lookup = HotelLookupService(google, tripadvisor=tripadvisor, enrichment=enrichment)

        app.state.settings = settings
        app.state.job_store = JobStore()
        app.state.refresher = PortfolioRefresher(settings, client)
        app.state.hotel_lookup = hotel_lookup
        app.state.folder_service = FolderService(
            settings.folders_path, hotel_lookup, github=github
        )

        yield


app = FastAPI(title="Portfolio Intel", lifespan=lifespan)

app.add_exception_handler(SourceError, source_error_handler)
app.add_exception_handler(RateLimitError, rate_limit_error_handler)
app.add_exception_handler(MissingCredentialError, missing_credential_handler)
app.add_exception_handler(FolderNotFoundError, not_found_handler)
app.add_exception_handler(HotelNotFoundError, not_found_handler)
app.add_exception_handler(DuplicateHotelError, duplicate_hotel_handler)

app.include_router(portfolio_router)
app.include_router(refresh_router)
app.include_router(hotels_router)
app.include_router(folders_router)

app.mount("/", StaticFiles(directory=DASHBOARD_DIR, html=True), name="dashboard")
