"""
Reverse geocoding endpoint.
"""

from fastapi import APIRouter, Query

from adventure_api.clients.geocoding import reverse_geocode
from adventure_api.schemas.envelope import ApiResponse, respond
from adventure_api.schemas.location import LocationResponse

router = APIRouter(prefix="/location", tags=["Location"])


@router.get("/reverse", response_model=ApiResponse[LocationResponse])
async def reverse_geocode_endpoint(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
):
    """City and country for a coordinate pair; empty strings when unknown."""
    place = await reverse_geocode(lat, lng)
    return respond(LocationResponse(**place), "Location resolved")
