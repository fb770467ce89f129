import logging

import httpx

from portfolio_intel.config import (
    GOOGLE_PLACEHOLDER,
    TRIPADVISOR_PLACEHOLDER,
    Settings,
    require_key,
)
from portfolio_intel.exceptions.custom import (
    GooglePlacesError,
    MissingCredentialError,
    TripAdvisorError,
)
from portfolio_intel.schemas.records import Metadata, SourceRunSummary
from portfolio_intel.services.fetchers import GoogleFetcher, TripAdvisorFetcher
from portfolio_intel.services.google_places import GooglePlacesService
from portfolio_intel.services.merge import (
    GOOGLE_FILE,
    TRIPADVISOR_FILE,
    load_properties,
    merge_sources,
)
from portfolio_intel.services.rate_limited import RateLimitedClient
from portfolio_intel.services.store import ResultStore, run_source
from portfolio_intel.services.tripadvisor import TripAdvisorService

logger = logging.getLogger(__name__)


def build_google_service(settings: Settings, client: httpx.AsyncClient) -> GooglePlacesService:
    api_key = require_key(
        settings.google_places_api_key, GOOGLE_PLACEHOLDER, "GOOGLE_PLACES_API_KEY"
    )
    return GooglePlacesService(
        RateLimitedClient(
            client,
            "Google Places",
            api_key,
            delay=settings.google_delay,
            cooldown=settings.rate_limit_cooldown,
            error_cls=GooglePlacesError,
        )
    )


def build_tripadvisor_service(settings: Settings, client: httpx.AsyncClient) -> TripAdvisorService:
    api_key = require_key(
        settings.tripadvisor_api_key, TRIPADVISOR_PLACEHOLDER, "TRIPADVISOR_API_KEY"
    )
    return TripAdvisorService(
        RateLimitedClient(
            client,
            "TripAdvisor",
            api_key,
            delay=settings.tripadvisor_delay,
            cooldown=settings.rate_limit_cooldown,
            error_cls=TripAdvisorError,
            headers={"accept": "application/json"},
        )
    )


class PortfolioRefresher:
    """Runs every configured source over the property list, then merges."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self._settings = settings
        self._client = client

    async def run(self) -> Metadata:
        settings = self._settings
        if not settings.has_google and not settings.has_tripadvisor:
            raise MissingCredentialError(
                "Missing GOOGLE_PLACES_API_KEY and TRIPADVISOR_API_KEY in environment"
            )

        properties = load_properties(settings.properties_path)
        logger.info(
            "Refreshing %d properties (Google: %s, TripAdvisor: %s)",
            len(properties),
            "configured" if settings.has_google else "missing key",
            "configured" if settings.has_tripadvisor else "missing key",
        )

        summaries: list[SourceRunSummary] = []
        if settings.has_google:
            fetcher = GoogleFetcher(build_google_service(settings, self._client))
            store = ResultStore(settings.data_dir / GOOGLE_FILE)
            summaries.append(await run_source(fetcher, properties, store))
        else:
            logger.warning("Skipping Google (no API key)")

        if settings.has_tripadvisor:
            fetcher = TripAdvisorFetcher(build_tripadvisor_service(settings, self._client))
            store = ResultStore(settings.data_dir / TRIPADVISOR_FILE)
            summaries.append(await run_source(fetcher, properties, store))
        else:
            logger.warning("Skipping TripAdvisor (no API key)")

        for summary in summaries:
            logger.info(
                "%s: %d succeeded, %d failed", summary.source, summary.success, summary.failed
            )

        return merge_sources(
            settings.properties_path, settings.data_dir, publish_dir=settings.publish_dir
        )
