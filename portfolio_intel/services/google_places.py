import logging

from portfolio_intel.exceptions.custom import (
    GooglePlacesError,
    NotFoundError,
    RateLimitError,
)
from portfolio_intel.schemas.google_places import (
    DetailsResponse,
    PlaceCandidate,
    PlaceDetails,
    TextSearchResponse,
)
from portfolio_intel.services.rate_limited import RateLimitedClient

logger = logging.getLogger(__name__)

SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
PHOTO_URL = "https://maps.googleapis.com/maps/api/place/photo"

PHOTO_MAX_WIDTH = 800

DETAILS_FIELDS = ",".join([
    "name",
    "rating",
    "user_ratings_total",
    "reviews",
    "photos",
    "website",
    "formatted_phone_number",
    "opening_hours",
    "url",
    "price_level",
    "formatted_address",
    "geometry",
])


def build_search_query(
    name: str | None,
    city: str | None = None,
    state: str | None = None,
) -> str:
    parts = [p for p in (name, city, state) if p]
    return ", ".join(parts)


class GooglePlacesService:
    def __init__(self, http: RateLimitedClient):
        self._http = http

    async def _check_status(self, status: str, error_message: str | None, query: str) -> None:
        if status == "OK":
            return
        if status == "ZERO_RESULTS":
            raise NotFoundError(f'No results found for "{query}"')
        if status == "OVER_QUERY_LIMIT":
            await self._http.cool_down()
            raise RateLimitError(self._http.service)
        raise GooglePlacesError(f"{status}: {error_message or 'request failed'}")

    async def text_search(self, query: str) -> list[PlaceCandidate]:
        """Ranked lodging candidates for a free-text query (may be empty)."""
        data = await self._http.get(SEARCH_URL, params={"query": query, "type": "lodging"})
        resp = TextSearchResponse(**data)
        if resp.status == "ZERO_RESULTS":
            logger.info("No results for query: %s", query)
            return []
        await self._check_status(resp.status, resp.error_message, query)
        return resp.results

    async def find_place(self, query: str) -> PlaceCandidate:
        results = await self.text_search(query)
        if not results:
            raise NotFoundError(f'No results found for "{query}"')
        return results[0]

    async def get_place_details(self, place_id: str) -> PlaceDetails:
        data = await self._http.get(
            DETAILS_URL,
            params={
                "place_id": place_id,
                "fields": DETAILS_FIELDS,
                "reviews_sort": "newest",
            },
        )
        resp = DetailsResponse(**data)
        await self._check_status(resp.status, resp.error_message, place_id)
        if resp.result is None:
            raise GooglePlacesError(f"No details returned for {place_id}")
        return resp.result

    def photo_url(self, photo_reference: str, max_width: int = PHOTO_MAX_WIDTH) -> str:
        return (
            f"{PHOTO_URL}?maxwidth={max_width}"
            f"&photoreference={photo_reference}&key={self._http.api_key}"
        )
