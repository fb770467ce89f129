from unittest.mock import AsyncMock

import pytest
import respx
from httpx import Response

from payloads import (
    GOOGLE_DETAILS_URL,
    GOOGLE_SEARCH_URL,
    TA_LOCATION_URL,
    TA_SEARCH_URL,
    google_details,
    google_search,
    ta_details,
    ta_search,
)
from portfolio_intel.exceptions.custom import MissingCredentialError
from portfolio_intel.schemas.folders import HotelDetails, ReviewSummary, Sentiment
from portfolio_intel.services.hotels import HotelLookupService


@pytest.fixture
def enrichment():
    mock = AsyncMock()
    mock.lookup_room_count.return_value = 88
    mock.summarize.return_value = ReviewSummary(sentiment=Sentiment.positive, summary="Good.")
    return mock


@pytest.mark.asyncio
async def test_search_short_query_returns_empty():
    assert await HotelLookupService(None).search(" a ") == []


@pytest.mark.asyncio
async def test_search_without_google_key():
    with pytest.raises(MissingCredentialError):
        await HotelLookupService(None).search("Hotel Alpha")


@respx.mock
@pytest.mark.asyncio
async def test_search_maps_candidates(google_service):
    payload = google_search()
    payload["results"] = payload["results"] * 5
    respx.get(GOOGLE_SEARCH_URL).mock(return_value=Response(200, json=payload))

    results = await HotelLookupService(google_service).search("Hotel Alpha")

    assert len(results) == 8
    assert results[0].placeId == "place-1"
    assert results[0].totalRatings == 900


@respx.mock
@pytest.mark.asyncio
async def test_get_hotel_details(google_service):
    respx.get(GOOGLE_DETAILS_URL).mock(
        return_value=Response(200, json=google_details(photos=25))
    )

    details = await HotelLookupService(google_service).get_hotel_details("place-1")

    assert details.placeId == "place-1"
    assert details.lat == 30.26
    assert details.lng == -97.74
    assert details.phone == "(512) 555-0100"
    assert len(details.photos) == 20
    assert "photoreference=ref-0" in details.photos[0]["url"]
    assert details.reviews[0]["author"] == "Guest 0"


@respx.mock
@pytest.mark.asyncio
async def test_cached_data_prefers_tripadvisor_room_count(tripadvisor_service, enrichment):
    respx.get(TA_SEARCH_URL).mock(return_value=Response(200, json=ta_search()))
    respx.get(TA_LOCATION_URL.format(location_id="999", endpoint="details")).mock(
        return_value=Response(200, json=ta_details())
    )
    service = HotelLookupService(None, tripadvisor=tripadvisor_service, enrichment=enrichment)
    details = HotelDetails(placeId="p", name="Hotel Alpha", address="1 Main St",
                           reviews=[{"rating": 5, "text": "Lovely"}])

    cached = await service.build_cached_data(details)

    assert cached.tripadvisor["rating"] == 4.5
    assert cached.roomCount == 120
    enrichment.lookup_room_count.assert_not_awaited()
    assert cached.sentiment.summary == "Good."


@respx.mock
@pytest.mark.asyncio
async def test_cached_data_tripadvisor_miss_falls_back_to_llm(tripadvisor_service, enrichment):
    respx.get(TA_SEARCH_URL).mock(return_value=Response(200, json={"data": []}))
    service = HotelLookupService(None, tripadvisor=tripadvisor_service, enrichment=enrichment)
    details = HotelDetails(placeId="p", name="Hotel Alpha", address="1 Main St")

    cached = await service.build_cached_data(details)

    assert cached.tripadvisor is None
    assert cached.roomCount == 88
    enrichment.lookup_room_count.assert_awaited_once_with("Hotel Alpha", "1 Main St")
    enrichment.summarize.assert_not_awaited()
    assert cached.sentiment is None


@pytest.mark.asyncio
async def test_cached_data_without_enrichment():
    details = HotelDetails(placeId="p", name="Hotel Alpha", website="https://alpha.example.com",
                           reviews=[{"text": "ok"}])

    cached = await HotelLookupService(None).build_cached_data(details)

    assert cached.website == "https://alpha.example.com"
    assert cached.reviews == [{"text": "ok"}]
    assert cached.roomCount is None
    assert cached.sentiment is None


@respx.mock
@pytest.mark.asyncio
async def test_cached_data_survives_malformed_tripadvisor_details(tripadvisor_service, enrichment):
    respx.get(TA_SEARCH_URL).mock(return_value=Response(200, json=ta_search()))
    respx.get(TA_LOCATION_URL.format(location_id="999", endpoint="details")).mock(
        return_value=Response(200, json={**ta_details(), "subratings": "not a mapping"})
    )
    service = HotelLookupService(None, tripadvisor=tripadvisor_service, enrichment=enrichment)
    details = HotelDetails(placeId="p", name="Hotel Alpha", address="1 Main St")

    cached = await service.build_cached_data(details)

    assert cached.tripadvisor is None
    assert cached.roomCount == 88
