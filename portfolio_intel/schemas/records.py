"""Normalized records written to the per-source and portfolio JSON files.

Field names are camelCase because they are the read contract of the dashboard.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from portfolio_intel.exceptions.custom import ErrorKind


class Property(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    brand: str | None = None
    city: str | None = None
    state: str | None = None
    address: str | None = None
    googleQuery: str | None = None
    tripadvisorQuery: str | None = None


class GoogleReview(BaseModel):
    author: str | None = None
    rating: int | None = None
    text: str | None = None
    time: int | None = None
    timeDescription: str | None = None
    profilePhoto: str | None = None
    googleMapsUrl: str | None = None


class GooglePhoto(BaseModel):
    url: str
    width: int | None = None
    height: int | None = None
    attributions: list[str] = []


class ReviewUser(BaseModel):
    username: str | None = None
    avatar: str | None = None
    userLocation: str | None = None


class TripAdvisorReview(BaseModel):
    id: int | str | None = None
    title: str | None = None
    text: str | None = None
    rating: int | None = None
    publishedDate: str | None = None
    helpfulVotes: int | None = None
    tripType: str | None = None
    travelDate: str | None = None
    user: ReviewUser = ReviewUser()
    url: str | None = None


class PhotoImages(BaseModel):
    thumbnail: str | None = None
    small: str | None = None
    medium: str | None = None
    large: str | None = None
    original: str | None = None


class TripAdvisorPhoto(BaseModel):
    id: int | str | None = None
    caption: str | None = None
    publishedDate: str | None = None
    source: str = "unknown"
    user: str | None = None
    images: PhotoImages = PhotoImages()


class Subrating(BaseModel):
    name: str | None = None
    value: float | None = None


class SourceRecord(BaseModel):
    """One property's fetch result for one source.

    Either ``error`` is set (and only the identity/timestamp fields accompany
    it) or the record carries whatever the platform returned.
    """

    propertyId: int
    source: str
    fetchedAt: str
    error: str | None = None
    errorKind: ErrorKind | None = None
    reviews: list = []
    photos: list = []

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class GoogleRecord(SourceRecord):
    source: str = "google"
    placeId: str | None = None
    googleMapsUrl: str | None = None
    website: str | None = None
    phone: str | None = None
    rating: float | None = None
    totalRatings: int | None = None
    address: str | None = None
    priceLevel: int | None = None
    rawName: str | None = None
    reviews: list[GoogleReview] = []
    photos: list[GooglePhoto] = []


class TripAdvisorRecord(SourceRecord):
    source: str = "tripadvisor"
    locationId: str | None = None
    locationIdStr: str | None = None
    tripadvisorUrl: str | None = None
    name: str | None = None
    address: str | None = None
    rating: float | None = None
    numReviews: int | None = None
    rankingString: str | None = None
    rankingCategory: str | None = None
    priceLevel: str | None = None
    priceRange: str | None = None
    numRooms: int | None = None
    subratings: dict[str, Subrating] | None = None
    awardedBadges: list[str] | None = None
    reviews: list[TripAdvisorReview] = []
    photos: list[TripAdvisorPhoto] = []


class PortfolioRecord(BaseModel):
    id: int
    name: str
    brand: str | None = None
    city: str | None = None
    state: str | None = None
    address: str | None = None
    google: dict | None = None
    tripadvisor: dict | None = None


class Metadata(BaseModel):
    lastFetch: str | None = None
    propertyCount: int = 0
    googleSuccess: int = 0
    taSuccess: int = 0


class SourceRunSummary(BaseModel):
    source: str
    total: int = 0
    success: int = 0
    failed: int = 0
