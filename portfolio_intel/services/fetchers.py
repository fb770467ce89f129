import logging
from datetime import datetime, timezone

from portfolio_intel.exceptions.custom import ErrorKind, SourceError
from portfolio_intel.mappers.google_mapper import map_google_record
from portfolio_intel.mappers.tripadvisor_mapper import map_tripadvisor_record
from portfolio_intel.schemas.records import (
    GoogleRecord,
    Property,
    SourceRecord,
    TripAdvisorRecord,
)
from portfolio_intel.services.google_places import GooglePlacesService, build_search_query
from portfolio_intel.services.tripadvisor import TripAdvisorService

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SourceFetcher:
    """Produces exactly one record per property and never raises."""

    source: str = ""
    record_cls: type[SourceRecord] = SourceRecord

    async def fetch_property(self, prop: Property) -> SourceRecord:
        fetched_at = utc_now_iso()
        try:
            return await self._fetch(prop, fetched_at)
        except SourceError as exc:
            logger.warning("[%s] %s failed (%s): %s", self.source, prop.name, exc.kind, exc.message)
            return self._error_record(prop, fetched_at, exc.message, exc.kind)
        except Exception as exc:
            logger.exception("[%s] %s failed unexpectedly", self.source, prop.name)
            return self._error_record(prop, fetched_at, str(exc) or repr(exc), ErrorKind.transport)

    def _error_record(
        self, prop: Property, fetched_at: str, message: str, kind: ErrorKind
    ) -> SourceRecord:
        return self.record_cls(
            propertyId=prop.id,
            source=self.source,
            fetchedAt=fetched_at,
            error=message,
            errorKind=kind,
        )

    async def _fetch(self, prop: Property, fetched_at: str) -> SourceRecord:
        raise NotImplementedError


class GoogleFetcher(SourceFetcher):
    source = "google"
    record_cls = GoogleRecord

    def __init__(self, places: GooglePlacesService):
        self._places = places

    @staticmethod
    def query_for(prop: Property) -> str:
        return prop.googleQuery or build_search_query(prop.name, prop.city, prop.state)

    async def _fetch(self, prop: Property, fetched_at: str) -> GoogleRecord:
        candidate = await self._places.find_place(self.query_for(prop))
        details = await self._places.get_place_details(candidate.place_id)
        return map_google_record(
            prop.id, fetched_at, candidate, details, self._places.photo_url
        )


class TripAdvisorFetcher(SourceFetcher):
    source = "tripadvisor"
    record_cls = TripAdvisorRecord

    def __init__(self, tripadvisor: TripAdvisorService):
        self._ta = tripadvisor

    @staticmethod
    def query_for(prop: Property) -> str:
        return prop.tripadvisorQuery or build_search_query(prop.name, prop.city, prop.state)

    async def _fetch(self, prop: Property, fetched_at: str) -> TripAdvisorRecord:
        location = await self._ta.search(self.query_for(prop))
        location_id = location.location_id

        details = await self._ta.get_details(location_id)
        if not details.location_id:
            details.location_id = location_id
        reviews = await self._ta.get_reviews(location_id)
        photos = await self._ta.get_photos(location_id)

        return map_tripadvisor_record(prop.id, fetched_at, details, reviews, photos)
