import json

import httpx
import pytest
from httpx import ASGITransport

from portfolio_intel.exceptions.custom import GooglePlacesError, TripAdvisorError
from portfolio_intel.schemas.records import Property
from portfolio_intel.services.google_places import GooglePlacesService
from portfolio_intel.services.rate_limited import RateLimitedClient
from portfolio_intel.services.tripadvisor import TripAdvisorService

PROPERTIES = [
    {
        "id": 1,
        "name": "Hotel Alpha",
        "brand": "Indigo",
        "city": "Austin",
        "state": "TX",
        "address": "1 Main St",
        "googleQuery": "Hotel Alpha Austin TX",
        "tripadvisorQuery": "Hotel Alpha Austin",
    },
    {
        "id": 2,
        "name": "Hotel Beta",
        "brand": "Courtyard",
        "city": "Nashville",
        "state": "TN",
        "address": "2 Broadway",
        "googleQuery": "Hotel Beta Nashville TN",
        "tripadvisorQuery": "Hotel Beta Nashville",
    },
]


@pytest.fixture
def properties() -> list[Property]:
    return [Property(**p) for p in PROPERTIES]


@pytest.fixture
def properties_file(tmp_path):
    path = tmp_path / "properties.json"
    path.write_text(json.dumps(PROPERTIES))
    return path


@pytest.fixture
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def google_service(http_client) -> GooglePlacesService:
    return GooglePlacesService(
        RateLimitedClient(
            http_client, "Google Places", "test-key",
            delay=0, cooldown=0, error_cls=GooglePlacesError,
        )
    )


@pytest.fixture
def tripadvisor_service(http_client) -> TripAdvisorService:
    return TripAdvisorService(
        RateLimitedClient(
            http_client, "TripAdvisor", "test-ta-key",
            delay=0, cooldown=0, error_cls=TripAdvisorError,
        )
    )


@pytest.fixture
def mock_env(monkeypatch, tmp_path, properties_file):
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "test-key")
    monkeypatch.setenv("TRIPADVISOR_API_KEY", "test-ta-key")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("GITHUB_TOKEN", "")
    monkeypatch.setenv("GITHUB_REPO", "")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("PROPERTIES_PATH", str(properties_file))
    monkeypatch.setenv("FOLDERS_PATH", str(tmp_path / "saved-portfolios.json"))
    monkeypatch.setenv("GOOGLE_DELAY", "0")
    monkeypatch.setenv("TRIPADVISOR_DELAY", "0")
    monkeypatch.setenv("RATE_LIMIT_COOLDOWN", "0")
    return tmp_path


@pytest.fixture
async def client(mock_env):
    from portfolio_intel.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
