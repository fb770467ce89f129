from pydantic import BaseModel


class LatLng(BaseModel):
    lat: float | None = None
    lng: float | None = None


class Geometry(BaseModel):
    location: LatLng | None = None


class PlaceCandidate(BaseModel):
    place_id: str
    name: str | None = None
    formatted_address: str | None = None
    rating: float | None = None
    user_ratings_total: int | None = None


class TextSearchResponse(BaseModel):
    status: str = "OK"
    error_message: str | None = None
    results: list[PlaceCandidate] = []


class PlaceReview(BaseModel):
    author_name: str | None = None
    author_url: str | None = None
    profile_photo_url: str | None = None
    rating: int | None = None
    text: str | None = None
    time: int | None = None
    relative_time_description: str | None = None


class PlacePhoto(BaseModel):
    photo_reference: str
    width: int | None = None
    height: int | None = None
    html_attributions: list[str] = []


class PlaceDetails(BaseModel):
    name: str | None = None
    formatted_address: str | None = None
    rating: float | None = None
    user_ratings_total: int | None = None
    reviews: list[PlaceReview] = []
    photos: list[PlacePhoto] = []
    website: str | None = None
    formatted_phone_number: str | None = None
    opening_hours: dict | None = None
    url: str | None = None
    price_level: int | None = None
    geometry: Geometry | None = None


class DetailsResponse(BaseModel):
    status: str = "OK"
    error_message: str | None = None
    result: PlaceDetails | None = None
