import logging
import shutil
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from portfolio_intel.schemas.records import Metadata, PortfolioRecord, Property
from portfolio_intel.services.store import read_json, write_json

logger = logging.getLogger(__name__)

GOOGLE_FILE = "google.json"
TRIPADVISOR_FILE = "tripadvisor.json"
PORTFOLIO_FILE = "portfolio.json"
METADATA_FILE = "metadata.json"


def load_properties(path: Path) -> list[Property]:
    properties: list[Property] = []
    for raw in read_json(Path(path), default=[]) or []:
        try:
            properties.append(Property(**raw))
        except (TypeError, ValidationError):
            logger.warning("Skipping malformed property entry: %r", raw)
    return properties


def load_records(path: Path) -> list[dict]:
    data = read_json(Path(path), default=[])
    if not isinstance(data, list):
        logger.warning("%s is not a list of records, ignoring it", path)
        return []
    return [r for r in data if isinstance(r, dict)]


def _index(records: list[dict]) -> dict:
    return {r["propertyId"]: r for r in records if "propertyId" in r}


def merge_portfolio(
    properties: list[Property],
    google: list[dict],
    tripadvisor: list[dict],
) -> list[PortfolioRecord]:
    """One record per property, in property-list order; missing sources are None."""
    google_by_id = _index(google)
    ta_by_id = _index(tripadvisor)
    return [
        PortfolioRecord(
            id=p.id,
            name=p.name,
            brand=p.brand,
            city=p.city,
            state=p.state,
            address=p.address,
            google=google_by_id.get(p.id),
            tripadvisor=ta_by_id.get(p.id),
        )
        for p in properties
    ]


def _succeeded(record: dict | None) -> bool:
    return record is not None and not record.get("error")


def build_metadata(portfolio: list[PortfolioRecord], now: datetime | None = None) -> Metadata:
    now = now or datetime.now(timezone.utc)
    return Metadata(
        lastFetch=now.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        propertyCount=len(portfolio),
        googleSuccess=sum(1 for p in portfolio if _succeeded(p.google)),
        taSuccess=sum(1 for p in portfolio if _succeeded(p.tripadvisor)),
    )


def write_portfolio(
    data_dir: Path,
    portfolio: list[PortfolioRecord],
    metadata: Metadata,
    publish_dir: Path | None = None,
) -> None:
    data_dir = Path(data_dir)
    write_json(data_dir / PORTFOLIO_FILE, [p.model_dump(mode="json") for p in portfolio])
    write_json(data_dir / METADATA_FILE, metadata.model_dump(mode="json"))

    if publish_dir:
        publish_dir = Path(publish_dir)
        publish_dir.mkdir(parents=True, exist_ok=True)
        for name in (PORTFOLIO_FILE, METADATA_FILE):
            shutil.copyfile(data_dir / name, publish_dir / name)
        logger.info("Published portfolio data to %s", publish_dir)


def merge_sources(
    properties_path: Path,
    data_dir: Path,
    publish_dir: Path | None = None,
    now: datetime | None = None,
) -> Metadata:
    """Rebuild portfolio.json and metadata.json from the per-source files."""
    data_dir = Path(data_dir)
    properties = load_properties(properties_path)
    portfolio = merge_portfolio(
        properties,
        load_records(data_dir / GOOGLE_FILE),
        load_records(data_dir / TRIPADVISOR_FILE),
    )
    metadata = build_metadata(portfolio, now)
    write_portfolio(data_dir, portfolio, metadata, publish_dir)

    logger.info(
        "Portfolio merged: %d/%d with Google data, %d/%d with TripAdvisor data",
        metadata.googleSuccess, metadata.propertyCount,
        metadata.taSuccess, metadata.propertyCount,
    )
    return metadata
