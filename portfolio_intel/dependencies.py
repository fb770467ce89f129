from typing import Annotated

from fastapi import Depends, Request

from portfolio_intel.config import Settings
from portfolio_intel.jobs import JobStore
from portfolio_intel.services.fetch_all import PortfolioRefresher
from portfolio_intel.services.folders import FolderService
from portfolio_intel.services.hotels import HotelLookupService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_job_store(request: Request) -> JobStore:
    return request.app.state.job_store


def get_refresher(request: Request) -> PortfolioRefresher:
    return request.app.state.refresher


def get_hotel_lookup(request: Request) -> HotelLookupService:
    return request.app.state.hotel_lookup


def get_folder_service(request: Request) -> FolderService:
    return request.app.state.folder_service


SettingsDep = Annotated[Settings, Depends(get_settings)]
JobStoreDep = Annotated[JobStore, Depends(get_job_store)]
RefresherDep = Annotated[PortfolioRefresher, Depends(get_refresher)]
HotelLookupDep = Annotated[HotelLookupService, Depends(get_hotel_lookup)]
FolderServiceDep = Annotated[FolderService, Depends(get_folder_service)]
