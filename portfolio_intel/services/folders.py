import logging
import time
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from portfolio_intel.exceptions.custom import (
    DuplicateHotelError,
    FolderNotFoundError,
    HotelNotFoundError,
)
from portfolio_intel.schemas.folders import (
    FolderSummary,
    FoldersDocument,
    HotelSeed,
    SavedFolder,
    SavedHotel,
    SavedHotelSummary,
)
from portfolio_intel.services.github_sync import GitHubSync
from portfolio_intel.services.hotels import HotelLookupService
from portfolio_intel.services.store import read_json, write_json

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _summary(hotel: SavedHotel) -> SavedHotelSummary:
    return SavedHotelSummary(**hotel.model_dump(exclude={"cachedData"}))


class FolderService:
    """User-curated hotel folders persisted as one JSON document.

    Every mutation loads the document, applies the change, writes it back and
    mirrors it to GitHub when a sync target is configured. Single writer.
    """

    def __init__(
        self,
        path: Path,
        lookup: HotelLookupService,
        github: GitHubSync | None = None,
    ):
        self.path = Path(path)
        self._lookup = lookup
        self._github = github

    def load(self) -> FoldersDocument:
        data = read_json(self.path, default=None)
        if not isinstance(data, dict):
            return FoldersDocument()
        try:
            return FoldersDocument(**data)
        except ValidationError:
            logger.warning("Saved folders file %s is malformed, starting empty", self.path)
            return FoldersDocument()

    async def save(self, doc: FoldersDocument) -> None:
        data = doc.model_dump(mode="json", exclude_none=True)
        write_json(self.path, data)
        if self._github is not None:
            await self._github.sync(data)

    @staticmethod
    def _find_folder(doc: FoldersDocument, folder_id: str) -> SavedFolder:
        for folder in doc.folders:
            if folder.id == folder_id:
                return folder
        raise FolderNotFoundError(folder_id)

    @staticmethod
    def _find_hotel(folder: SavedFolder, place_id: str) -> SavedHotel:
        for hotel in folder.hotels:
            if hotel.placeId == place_id:
                return hotel
        raise HotelNotFoundError(place_id)

    def list_folders(self) -> list[FolderSummary]:
        return [
            FolderSummary(
                id=f.id,
                name=f.name,
                createdAt=f.createdAt,
                hotels=[_summary(h) for h in f.hotels],
            )
            for f in self.load().folders
        ]

    async def create_folder(self, name: str) -> SavedFolder:
        name = (name or "").strip()
        if not name:
            raise ValueError("name required")

        doc = self.load()
        existing = {f.id for f in doc.folders}
        stamp = int(time.time() * 1000)
        while f"f_{stamp}" in existing:
            stamp += 1

        folder = SavedFolder(id=f"f_{stamp}", name=name, createdAt=_now_iso(), hotels=[])
        doc.folders.append(folder)
        await self.save(doc)
        logger.info("Created folder %s (%s)", folder.id, folder.name)
        return folder

    async def delete_folder(self, folder_id: str) -> None:
        doc = self.load()
        folder = self._find_folder(doc, folder_id)
        doc.folders.remove(folder)
        await self.save(doc)
        logger.info("Deleted folder %s", folder_id)

    async def add_hotel(self, folder_id: str, seed: HotelSeed) -> SavedHotelSummary:
        doc = self.load()
        folder = self._find_folder(doc, folder_id)
        if any(h.placeId == seed.placeId for h in folder.hotels):
            raise DuplicateHotelError(seed.placeId)

        details = await self._lookup.get_hotel_details(seed.placeId)
        cached = await self._lookup.build_cached_data(details)
        now = _now_iso()
        hotel = SavedHotel(
            placeId=seed.placeId,
            name=details.name or seed.name,
            address=details.address or seed.address,
            rating=details.rating if details.rating is not None else seed.rating,
            totalRatings=(
                details.totalRatings if details.totalRatings is not None else seed.totalRatings
            ),
            lat=details.lat,
            lng=details.lng,
            savedAt=now,
            lastFetched=now,
            cachedData=cached,
        )
        folder.hotels.append(hotel)
        await self.save(doc)
        logger.info("Saved %s to folder %s", hotel.name, folder_id)
        return _summary(hotel)

    async def remove_hotel(self, folder_id: str, place_id: str) -> None:
        doc = self.load()
        folder = self._find_folder(doc, folder_id)
        folder.hotels.remove(self._find_hotel(folder, place_id))
        await self.save(doc)

    async def refresh_hotel(self, folder_id: str, place_id: str) -> SavedHotel:
        doc = self.load()
        folder = self._find_folder(doc, folder_id)
        hotel = self._find_hotel(folder, place_id)

        details = await self._lookup.get_hotel_details(place_id)
        hotel.rating = details.rating
        hotel.totalRatings = details.totalRatings
        hotel.lat = details.lat
        hotel.lng = details.lng
        hotel.lastFetched = _now_iso()
        hotel.cachedData = await self._lookup.build_cached_data(details)

        await self.save(doc)
        return hotel

    def get_hotel(self, folder_id: str, place_id: str) -> dict:
        folder = self._find_folder(self.load(), folder_id)
        hotel = self._find_hotel(folder, place_id)
        return {
            **hotel.model_dump(mode="json", exclude_none=True),
            "folderId": folder.id,
            "folderName": folder.name,
        }
