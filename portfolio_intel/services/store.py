import json
import logging
from pathlib import Path

from portfolio_intel.schemas.records import Property, SourceRecord, SourceRunSummary
from portfolio_intel.services.fetchers import SourceFetcher

logger = logging.getLogger(__name__)


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def read_json(path: Path, default=None):
    """Read a JSON file, returning ``default`` when it is missing or unreadable."""
    if not path.exists():
        return default
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.warning("Could not read %s, treating it as empty", path)
        return default


class ResultStore:
    """Per-source result file indexed by property id.

    Every ``put`` rewrites the whole file, so an interrupted run keeps fresh
    data for the properties already processed and the previous data for the
    rest.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._index: dict[int, dict] = {}

    def load(self) -> dict[int, dict]:
        self._index = {}
        for record in read_json(self.path, default=[]) or []:
            if not isinstance(record, dict) or "propertyId" not in record:
                continue
            try:
                property_id = int(record["propertyId"])
            except (TypeError, ValueError):
                logger.warning("Skipping record with bad propertyId in %s", self.path)
                continue
            self._index[property_id] = {**record, "propertyId": property_id}
        return dict(self._index)

    def get(self, property_id: int) -> dict | None:
        return self._index.get(property_id)

    def records(self) -> list[dict]:
        return [self._index[key] for key in sorted(self._index)]

    def put(self, record: SourceRecord) -> None:
        self._index[record.propertyId] = record.to_json()
        self.save()

    def save(self) -> None:
        write_json(self.path, self.records())


async def run_source(
    fetcher: SourceFetcher,
    properties: list[Property],
    store: ResultStore,
) -> SourceRunSummary:
    """Fetch every property for one source, one at a time, persisting after each."""
    store.load()
    summary = SourceRunSummary(source=fetcher.source, total=len(properties))

    logger.info("[%s] fetching %d properties", fetcher.source, len(properties))
    for position, prop in enumerate(properties, start=1):
        record = await fetcher.fetch_property(prop)
        store.put(record)

        if record.ok:
            summary.success += 1
            logger.info(
                "[%s] %d/%d %s: ok (%d reviews, %d photos)",
                fetcher.source, position, len(properties), prop.name,
                len(record.reviews), len(record.photos),
            )
        else:
            summary.failed += 1
            logger.info(
                "[%s] %d/%d %s: failed: %s",
                fetcher.source, position, len(properties), prop.name, record.error,
            )

    logger.info(
        "[%s] fetch complete: %d/%d succeeded, %d failed (saved to %s)",
        fetcher.source, summary.success, summary.total, summary.failed, store.path,
    )
    return summary
