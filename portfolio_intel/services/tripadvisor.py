import logging
from datetime import datetime, timezone

from portfolio_intel.exceptions.custom import NotFoundError
from portfolio_intel.schemas.tripadvisor import (
    TripAdvisorLocation,
    TripAdvisorPhoto,
    TripAdvisorPhotosResponse,
    TripAdvisorReview,
    TripAdvisorReviewsResponse,
    TripAdvisorSearchResponse,
    TripAdvisorSearchResult,
)
from portfolio_intel.services.rate_limited import RateLimitedClient

logger = logging.getLogger(__name__)

BASE_URL = "https://api.content.tripadvisor.com/api/v1"
SEARCH_URL = f"{BASE_URL}/location/search"
DETAILS_URL = BASE_URL + "/location/{location_id}/details"
REVIEWS_URL = BASE_URL + "/location/{location_id}/reviews"
PHOTOS_URL = BASE_URL + "/location/{location_id}/photos"

LANGUAGE = "en"
REVIEW_PAGE_SIZE = 5
REVIEW_WINDOW_YEARS = 3
MAX_PHOTOS = 30


def review_cutoff(now: datetime | None = None, years: int = REVIEW_WINDOW_YEARS) -> datetime:
    now = now or datetime.now(timezone.utc)
    try:
        return now.replace(year=now.year - years)
    except ValueError:
        # Feb 29 in a non-leap target year
        return now.replace(year=now.year - years, day=28)


def parse_published(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def take_in_window(
    reviews: list[TripAdvisorReview], cutoff: datetime
) -> tuple[list[TripAdvisorReview], bool]:
    """Keep reviews up to the first one older than ``cutoff``.

    Returns the kept prefix and whether an out-of-window review was hit.
    Pages are newest first, so everything after that review is dropped
    unseen. An unparseable date counts as out of window.
    """
    kept: list[TripAdvisorReview] = []
    for review in reviews:
        published = parse_published(review.published_date)
        if published is None or published < cutoff:
            return kept, True
        kept.append(review)
    return kept, False


class TripAdvisorService:
    def __init__(self, http: RateLimitedClient):
        self._http = http

    async def search(self, query: str) -> TripAdvisorSearchResult:
        """Return the most relevant hotel location for ``query``."""
        data = await self._http.get(
            SEARCH_URL,
            params={"searchQuery": query, "category": "hotels", "language": LANGUAGE},
        )
        results = TripAdvisorSearchResponse(**data).data
        if not results:
            logger.info("No TripAdvisor results for: %s", query)
            raise NotFoundError(f'No TripAdvisor results for "{query}"')
        return results[0]

    async def get_details(self, location_id: str) -> TripAdvisorLocation:
        data = await self._http.get(
            DETAILS_URL.format(location_id=location_id),
            params={"language": LANGUAGE, "currency": "USD"},
        )
        return TripAdvisorLocation(**data)

    async def get_reviews(
        self, location_id: str, now: datetime | None = None
    ) -> list[TripAdvisorReview]:
        """All reviews from the last three years, newest first."""
        cutoff = review_cutoff(now)
        url = REVIEWS_URL.format(location_id=location_id)

        collected: list[TripAdvisorReview] = []
        offset = 0
        pages = 0
        while True:
            pages += 1
            data = await self._http.get(
                url,
                params={"language": LANGUAGE, "limit": REVIEW_PAGE_SIZE, "offset": offset},
            )
            page = TripAdvisorReviewsResponse(**data).data
            if not page:
                break

            kept, hit_old = take_in_window(page, cutoff)
            collected.extend(kept)
            if hit_old:
                break
            offset += len(page)

        logger.info(
            "TripAdvisor %s: %d reviews across %d page(s)", location_id, len(collected), pages
        )
        return collected

    async def get_photos(self, location_id: str, limit: int = MAX_PHOTOS) -> list[TripAdvisorPhoto]:
        data = await self._http.get(
            PHOTOS_URL.format(location_id=location_id),
            params={"language": LANGUAGE, "limit": limit},
        )
        return TripAdvisorPhotosResponse(**data).data[:limit]
