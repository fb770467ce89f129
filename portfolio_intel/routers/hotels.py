from fastapi import APIRouter, HTTPException

from portfolio_intel.dependencies import HotelLookupDep
from portfolio_intel.schemas.folders import HotelCandidate, HotelDetails

router = APIRouter(prefix="/api")


@router.get("/search", response_model=list[HotelCandidate])
async def search_hotels(lookup: HotelLookupDep, q: str = "") -> list[HotelCandidate]:
    return await lookup.search(q)


@router.get("/hotel", response_model=HotelDetails)
async def get_hotel(lookup: HotelLookupDep, placeId: str = "") -> HotelDetails:
    if not placeId:
        raise HTTPException(status_code=400, detail="placeId required")
    return await lookup.get_hotel_details(placeId)
