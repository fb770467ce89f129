from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Sentiment(StrEnum):
    positive = "positive"
    mixed = "mixed"
    negative = "negative"


class ReviewSummary(BaseModel):
    sentiment: Sentiment
    score: int | None = None
    summary: str
    positives: list[str] = []
    negatives: list[str] = []


class HotelCandidate(BaseModel):
    placeId: str
    name: str | None = None
    address: str | None = None
    rating: float | None = None
    totalRatings: int | None = None


class HotelDetails(BaseModel):
    placeId: str
    name: str | None = None
    address: str | None = None
    rating: float | None = None
    totalRatings: int | None = None
    lat: float | None = None
    lng: float | None = None
    googleMapsUrl: str | None = None
    website: str | None = None
    phone: str | None = None
    reviews: list[dict] = []
    photos: list[dict] = []


class CachedData(BaseModel):
    model_config = ConfigDict(extra="allow")

    googleMapsUrl: str | None = None
    website: str | None = None
    phone: str | None = None
    reviews: list[dict] = []
    photos: list[dict] = []
    tripadvisor: dict | None = None
    roomCount: int | None = None
    sentiment: ReviewSummary | None = None


class HotelSeed(BaseModel):
    """Request body for saving a hotel; search-result fields are fallbacks."""

    placeId: str
    name: str | None = None
    address: str | None = None
    rating: float | None = None
    totalRatings: int | None = None


class SavedHotelSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    placeId: str
    name: str | None = None
    address: str | None = None
    rating: float | None = None
    totalRatings: int | None = None
    lat: float | None = None
    lng: float | None = None
    savedAt: str | None = None
    lastFetched: str | None = None


class SavedHotel(SavedHotelSummary):
    cachedData: CachedData = CachedData()


class SavedFolder(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    createdAt: str
    hotels: list[SavedHotel] = []


class FolderSummary(BaseModel):
    id: str
    name: str
    createdAt: str
    hotels: list[SavedHotelSummary] = []


class FoldersDocument(BaseModel):
    model_config = ConfigDict(extra="allow")

    folders: list[SavedFolder] = []


class CreateFolderRequest(BaseModel):
    name: str = ""
