import logging

from pydantic import ValidationError

from portfolio_intel.exceptions.custom import MissingCredentialError, SourceError
from portfolio_intel.mappers.google_mapper import map_photo, map_review
from portfolio_intel.mappers.tripadvisor_mapper import map_tripadvisor_summary
from portfolio_intel.schemas.folders import CachedData, HotelCandidate, HotelDetails
from portfolio_intel.services.enrichment import DisabledEnrichment, EnrichmentProvider
from portfolio_intel.services.google_places import GooglePlacesService, build_search_query
from portfolio_intel.services.tripadvisor import TripAdvisorService

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 8
MAX_HOTEL_PHOTOS = 20


class HotelLookupService:
    """Ad hoc single-hotel lookups backing the saved folders feature."""

    def __init__(
        self,
        google: GooglePlacesService | None,
        tripadvisor: TripAdvisorService | None = None,
        enrichment: EnrichmentProvider | None = None,
    ):
        self._google = google
        self._tripadvisor = tripadvisor
        self._enrichment = enrichment or DisabledEnrichment()

    def _require_google(self) -> GooglePlacesService:
        if self._google is None:
            raise MissingCredentialError("Google API key not configured")
        return self._google

    async def search(self, query: str) -> list[HotelCandidate]:
        query = (query or "").strip()
        if len(query) < 2:
            return []
        results = await self._require_google().text_search(query)
        return [
            HotelCandidate(
                placeId=r.place_id,
                name=r.name,
                address=r.formatted_address,
                rating=r.rating,
                totalRatings=r.user_ratings_total,
            )
            for r in results[:MAX_SEARCH_RESULTS]
        ]

    async def get_hotel_details(self, place_id: str) -> HotelDetails:
        google = self._require_google()
        details = await google.get_place_details(place_id)
        location = details.geometry.location if details.geometry else None
        return HotelDetails(
            placeId=place_id,
            name=details.name,
            address=details.formatted_address,
            rating=details.rating,
            totalRatings=details.user_ratings_total,
            lat=location.lat if location else None,
            lng=location.lng if location else None,
            googleMapsUrl=details.url,
            website=details.website,
            phone=details.formatted_phone_number,
            reviews=[
                map_review(r).model_dump(exclude={"googleMapsUrl"}) for r in details.reviews
            ],
            photos=[
                map_photo(p, google.photo_url).model_dump(exclude={"attributions"})
                for p in details.photos[:MAX_HOTEL_PHOTOS]
            ],
        )

    async def _tripadvisor_data(self, details: HotelDetails) -> dict | None:
        if self._tripadvisor is None or not details.name:
            return None
        query = build_search_query(details.name, details.address)
        try:
            location = await self._tripadvisor.search(query)
            ta_details = await self._tripadvisor.get_details(location.location_id)
        except SourceError as exc:
            logger.info("No TripAdvisor data for %s: %s", details.name, exc.message)
            return None
        except ValidationError as exc:
            logger.warning("Unexpected TripAdvisor payload for %s: %s", details.name, exc)
            return None
        if not ta_details.location_id:
            ta_details.location_id = location.location_id
        return map_tripadvisor_summary(ta_details)

    async def build_cached_data(self, details: HotelDetails) -> CachedData:
        """Cache blob for a saved hotel; every enrichment step is best-effort."""
        tripadvisor = await self._tripadvisor_data(details)

        room_count = (tripadvisor or {}).get("numRooms")
        if room_count is None and details.name:
            room_count = await self._enrichment.lookup_room_count(details.name, details.address)

        sentiment = await self._enrichment.summarize(details.reviews) if details.reviews else None

        return CachedData(
            googleMapsUrl=details.googleMapsUrl,
            website=details.website,
            phone=details.phone,
            reviews=details.reviews,
            photos=details.photos,
            tripadvisor=tripadvisor,
            roomCount=room_count,
            sentiment=sentiment,
        )
