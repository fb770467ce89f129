from pydantic import BaseModel


class TripAdvisorSearchResult(BaseModel):
    location_id: str
    name: str | None = None
    address_obj: dict | None = None


class TripAdvisorSearchResponse(BaseModel):
    data: list[TripAdvisorSearchResult] = []


class TripAdvisorLocation(BaseModel):
    location_id: str = ""
    name: str | None = None
    web_url: str | None = None
    address_obj: dict | None = None
    rating: str | int | float | None = None
    num_reviews: str | int | None = None
    ranking_data: dict | None = None
    price_level: str | None = None
    price: str | None = None
    num_rooms: str | int | None = None
    subratings: dict[str, dict] | None = None
    awards: list[dict] | None = None


class TripAdvisorReview(BaseModel):
    id: int | str | None = None
    title: str | None = None
    text: str | None = None
    rating: int | None = None
    published_date: str | None = None
    helpful_votes: int | None = None
    trip_type: str | None = None
    travel_date: str | None = None
    user: dict | None = None
    url: str | None = None


class TripAdvisorReviewsResponse(BaseModel):
    data: list[TripAdvisorReview] = []


class TripAdvisorPhoto(BaseModel):
    id: int | str | None = None
    caption: str | None = None
    published_date: str | None = None
    images: dict[str, dict | None] = {}
    source: dict | None = None
    user: dict | None = None


class TripAdvisorPhotosResponse(BaseModel):
    data: list[TripAdvisorPhoto] = []
