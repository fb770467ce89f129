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
    ta_photos,
    ta_review,
    ta_search,
)
from portfolio_intel.exceptions.custom import ErrorKind, RateLimitError
from portfolio_intel.schemas.records import Property
from portfolio_intel.services.fetchers import GoogleFetcher, TripAdvisorFetcher
from portfolio_intel.services.tripadvisor import TripAdvisorService


def _mock_tripadvisor(location_id="999", details=None):
    respx.get(TA_SEARCH_URL).mock(return_value=Response(200, json=ta_search(location_id)))
    respx.get(TA_LOCATION_URL.format(location_id=location_id, endpoint="details")).mock(
        return_value=Response(200, json=details or ta_details(location_id))
    )
    respx.get(TA_LOCATION_URL.format(location_id=location_id, endpoint="reviews")).mock(
        side_effect=[
            Response(200, json={"data": [ta_review(1, "2099-01-01T00:00:00Z")]}),
            Response(200, json={"data": []}),
        ]
    )
    respx.get(TA_LOCATION_URL.format(location_id=location_id, endpoint="photos")).mock(
        return_value=Response(200, json=ta_photos(2))
    )


@respx.mock
@pytest.mark.asyncio
async def test_google_fetch_success(google_service, properties):
    search = respx.get(GOOGLE_SEARCH_URL).mock(return_value=Response(200, json=google_search()))
    respx.get(GOOGLE_DETAILS_URL).mock(return_value=Response(200, json=google_details()))

    record = await GoogleFetcher(google_service).fetch_property(properties[0])

    assert record.ok
    assert record.propertyId == 1
    assert record.source == "google"
    assert record.placeId == "place-1"
    assert len(record.reviews) == 2
    assert len(record.photos) == 3
    assert record.fetchedAt.endswith("Z")
    assert search.calls.last.request.url.params["query"] == "Hotel Alpha Austin TX"


@respx.mock
@pytest.mark.asyncio
async def test_google_no_results_is_terminal(google_service, properties):
    respx.get(GOOGLE_SEARCH_URL).mock(
        return_value=Response(200, json={"status": "ZERO_RESULTS", "results": []})
    )

    record = await GoogleFetcher(google_service).fetch_property(properties[0])

    assert record.error == 'No results found for "Hotel Alpha Austin TX"'
    assert record.errorKind == ErrorKind.not_found
    assert record.reviews == []
    assert record.photos == []
    assert respx.calls.call_count == 1
    assert record.to_json() == {
        "propertyId": 1,
        "source": "google",
        "fetchedAt": record.fetchedAt,
        "error": 'No results found for "Hotel Alpha Austin TX"',
        "errorKind": "not_found",
        "reviews": [],
        "photos": [],
    }


@respx.mock
@pytest.mark.asyncio
async def test_google_query_falls_back_to_name_city_state(google_service):
    search = respx.get(GOOGLE_SEARCH_URL).mock(
        return_value=Response(200, json={"status": "ZERO_RESULTS", "results": []})
    )
    prop = Property(id=9, name="Hotel Gamma", city="Denver", state="CO")

    await GoogleFetcher(google_service).fetch_property(prop)

    assert search.calls.last.request.url.params["query"] == "Hotel Gamma, Denver, CO"


@respx.mock
@pytest.mark.asyncio
async def test_tripadvisor_fetch_success(tripadvisor_service, properties):
    _mock_tripadvisor()

    record = await TripAdvisorFetcher(tripadvisor_service).fetch_property(properties[0])

    assert record.ok
    assert record.locationId == "999"
    assert record.rating == 4.5
    assert [r.id for r in record.reviews] == [1]
    assert len(record.photos) == 2


@respx.mock
@pytest.mark.asyncio
async def test_tripadvisor_null_subratings_and_awards_still_succeed(tripadvisor_service, properties):
    details = ta_details()
    details["subratings"] = None
    details["awards"] = None
    _mock_tripadvisor(details=details)

    record = await TripAdvisorFetcher(tripadvisor_service).fetch_property(properties[0])

    assert record.ok
    assert record.subratings == {}
    assert record.awardedBadges == []
    assert record.numRooms == 120


@respx.mock
@pytest.mark.asyncio
async def test_tripadvisor_error_mid_pipeline(tripadvisor_service, properties):
    respx.get(TA_SEARCH_URL).mock(return_value=Response(200, json=ta_search()))
    respx.get(TA_LOCATION_URL.format(location_id="999", endpoint="details")).mock(
        return_value=Response(429, text="slow down")
    )

    record = await TripAdvisorFetcher(tripadvisor_service).fetch_property(properties[0])

    assert record.error == "Rate limit exceeded for TripAdvisor"
    assert record.errorKind == ErrorKind.rate_limited
    assert record.reviews == []
    assert "locationId" not in record.to_json()


@pytest.mark.asyncio
async def test_unexpected_exception_becomes_error_record(properties):
    ta = AsyncMock(spec=TripAdvisorService)
    ta.search.side_effect = KeyError("location_id")

    record = await TripAdvisorFetcher(ta).fetch_property(properties[1])

    assert record.propertyId == 2
    assert record.error == "'location_id'"
    assert record.errorKind == ErrorKind.transport


@pytest.mark.asyncio
async def test_rate_limit_not_retried_within_run(properties):
    ta = AsyncMock(spec=TripAdvisorService)
    ta.search.side_effect = RateLimitError("TripAdvisor")

    record = await TripAdvisorFetcher(ta).fetch_property(properties[0])

    assert record.errorKind == ErrorKind.rate_limited
    assert ta.search.await_count == 1
    ta.get_details.assert_not_awaited()
