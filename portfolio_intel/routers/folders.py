from fastapi import APIRouter, HTTPException

from portfolio_intel.dependencies import FolderServiceDep
from portfolio_intel.schemas.folders import (
    CreateFolderRequest,
    FolderSummary,
    HotelSeed,
    SavedFolder,
    SavedHotelSummary,
)
from portfolio_intel.schemas.responses import OkResponse

router = APIRouter(prefix="/api/folders")


@router.get("", response_model=list[FolderSummary])
async def list_folders(service: FolderServiceDep) -> list[FolderSummary]:
    return service.list_folders()


@router.post("", response_model=SavedFolder, status_code=201)
async def create_folder(request: CreateFolderRequest, service: FolderServiceDep) -> SavedFolder:
    try:
        return await service.create_folder(request.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/{folder_id}", response_model=OkResponse, response_model_exclude_none=True)
async def delete_folder(folder_id: str, service: FolderServiceDep) -> OkResponse:
    await service.delete_folder(folder_id)
    return OkResponse()


@router.post("/{folder_id}/hotels", response_model=SavedHotelSummary, status_code=201)
async def add_hotel(
    folder_id: str, seed: HotelSeed, service: FolderServiceDep
) -> SavedHotelSummary:
    return await service.add_hotel(folder_id, seed)


@router.get("/{folder_id}/hotels/{place_id}")
async def get_saved_hotel(folder_id: str, place_id: str, service: FolderServiceDep) -> dict:
    return service.get_hotel(folder_id, place_id)


@router.delete("/{folder_id}/hotels/{place_id}", response_model=OkResponse, response_model_exclude_none=True)
async def remove_hotel(folder_id: str, place_id: str, service: FolderServiceDep) -> OkResponse:
    await service.remove_hotel(folder_id, place_id)
    return OkResponse()


@router.post("/{folder_id}/hotels/{place_id}/refresh", response_model=OkResponse, response_model_exclude_none=True)
async def refresh_hotel(folder_id: str, place_id: str, service: FolderServiceDep) -> OkResponse:
    hotel = await service.refresh_hotel(folder_id, place_id)
    return OkResponse(lastFetched=hotel.lastFetched)
