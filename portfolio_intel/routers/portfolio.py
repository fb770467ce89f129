from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from portfolio_intel.dependencies import SettingsDep
from portfolio_intel.schemas.responses import StatusResponse
from portfolio_intel.services.merge import METADATA_FILE, PORTFOLIO_FILE
from portfolio_intel.services.store import read_json

router = APIRouter(prefix="/api")


def _file_response(path, missing: str) -> JSONResponse:
    data = read_json(path)
    if data is None:
        raise HTTPException(status_code=404, detail=missing)
    return JSONResponse(content=data)


@router.get("/portfolio")
async def get_portfolio(settings: SettingsDep) -> JSONResponse:
    return _file_response(
        settings.data_dir / PORTFOLIO_FILE,
        "No portfolio data found. Run `portfolio-intel fetch` first.",
    )


@router.get("/metadata")
async def get_metadata(settings: SettingsDep) -> JSONResponse:
    return _file_response(settings.data_dir / METADATA_FILE, "No fetch has completed yet.")


@router.get("/properties")
async def get_properties(settings: SettingsDep) -> JSONResponse:
    return _file_response(settings.properties_path, "Property list not found.")


@router.get("/status", response_model=StatusResponse)
async def get_status(settings: SettingsDep) -> StatusResponse:
    return StatusResponse(
        google=settings.has_google,
        tripadvisor=settings.has_tripadvisor,
        github=settings.has_github,
        llm=settings.has_llm,
    )
