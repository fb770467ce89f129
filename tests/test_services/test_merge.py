import json
from datetime import datetime, timezone

from portfolio_intel.schemas.records import Property
from portfolio_intel.services.merge import (
    build_metadata,
    load_properties,
    load_records,
    merge_portfolio,
    merge_sources,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def _props():
    return [
        Property(id=1, name="Hotel Alpha", brand="Indigo", city="Austin", state="TX"),
        Property(id=2, name="Hotel Beta", city="Nashville", state="TN"),
    ]


def test_merge_totality_with_missing_sources():
    google = [{"propertyId": 1, "source": "google", "rating": 4.3}]

    portfolio = merge_portfolio(_props(), google, [])

    assert len(portfolio) == 2
    assert portfolio[0].google == google[0]
    assert portfolio[0].tripadvisor is None
    assert portfolio[1].google is None
    assert portfolio[1].tripadvisor is None
    dumped = portfolio[1].model_dump(mode="json")
    assert "google" in dumped and "tripadvisor" in dumped


def test_merge_follows_property_order_not_file_order():
    ta = [
        {"propertyId": 2, "source": "tripadvisor"},
        {"propertyId": 1, "source": "tripadvisor"},
        {"propertyId": 42, "source": "tripadvisor"},
    ]

    portfolio = merge_portfolio(_props(), [], ta)

    assert [p.id for p in portfolio] == [1, 2]
    assert [p.tripadvisor["propertyId"] for p in portfolio] == [1, 2]


def test_metadata_counts_only_error_free_records():
    portfolio = merge_portfolio(
        _props(),
        [{"propertyId": 1}, {"propertyId": 2, "error": "No results"}],
        [{"propertyId": 2}],
    )

    metadata = build_metadata(portfolio, NOW)

    assert metadata.lastFetch == "2025-06-01T12:00:00.000Z"
    assert metadata.propertyCount == 2
    assert metadata.googleSuccess == 1
    assert metadata.taSuccess == 1


def test_load_records_tolerates_missing_and_bad_files(tmp_path):
    assert load_records(tmp_path / "missing.json") == []

    bad = tmp_path / "bad.json"
    bad.write_text("[{")
    assert load_records(bad) == []

    wrong_shape = tmp_path / "object.json"
    wrong_shape.write_text('{"propertyId": 1}')
    assert load_records(wrong_shape) == []


def test_load_properties_skips_malformed(tmp_path):
    path = tmp_path / "properties.json"
    path.write_text(json.dumps([{"id": 1, "name": "Hotel Alpha"}, {"name": "no id"}]))

    assert [p.id for p in load_properties(path)] == [1]
    assert load_properties(tmp_path / "missing.json") == []


def test_merge_sources_writes_portfolio_and_metadata(tmp_path, properties_file):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "google.json").write_text(json.dumps([{"propertyId": 1, "source": "google"}]))
    publish = tmp_path / "docs" / "data"

    metadata = merge_sources(properties_file, data_dir, publish_dir=publish, now=NOW)

    portfolio = json.loads((data_dir / "portfolio.json").read_text())
    assert [p["id"] for p in portfolio] == [1, 2]
    assert portfolio[0]["google"] == {"propertyId": 1, "source": "google"}
    assert portfolio[0]["tripadvisor"] is None
    assert portfolio[1]["google"] is None
    assert portfolio[0]["brand"] == "Indigo"

    saved_meta = json.loads((data_dir / "metadata.json").read_text())
    assert saved_meta == {
        "lastFetch": "2025-06-01T12:00:00.000Z",
        "propertyCount": 2,
        "googleSuccess": 1,
        "taSuccess": 0,
    }
    assert metadata.googleSuccess == 1
    assert json.loads((publish / "portfolio.json").read_text()) == portfolio
