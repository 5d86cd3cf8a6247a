from fastapi import APIRouter, Depends, Query

from ryoko.core.geocoding_service import get_coordinates_from_url
from ryoko.core.location_images import get_location_image
from ryoko.core.maps_client import GoogleMapsClient, get_maps_client
from ryoko.core.schemas import (
    CoordinatesResponse,
    LocationImageRequest,
    LocationImageResponse,
    MatchPlaceRequest,
    MatchPlaceResponse,
    NeighborhoodRequest,
    NeighborhoodResponse,
    parse_grounding_chunks,
)
from ryoko.core.settings import Settings, get_settings
from ryoko.core.source_matcher import find_matching_uri, find_neighborhood_uri


router = APIRouter(prefix="/places", tags=["places"])


@router.get("/coordinates", response_model=CoordinatesResponse)
async def coordinates_for_link(
    url: str = Query(..., min_length=1, description="Google Maps link"),
    name: str | None = Query(None, description="Place name to geocode by"),
    region: str | None = Query(None, description="City/region used on retry"),
    client: GoogleMapsClient | None = Depends(get_maps_client),
    settings: Settings = Depends(get_settings),
) -> CoordinatesResponse:
    """Coordinates for a map link; `coordinates` is null when unresolved."""
    coordinate = await get_coordinates_from_url(
        url,
        client,
        place_name=name,
        region_hint=region or settings.geocode_region_hint or None,
    )
    return CoordinatesResponse(coordinates=coordinate)


@router.post("/match", response_model=MatchPlaceResponse)
def match_place(payload: MatchPlaceRequest) -> MatchPlaceResponse:
    sources = parse_grounding_chunks(payload.sources)
    return MatchPlaceResponse(uri=find_matching_uri(payload.name, sources))


@router.post("/neighborhood", response_model=NeighborhoodResponse)
def neighborhood_link(payload: NeighborhoodRequest) -> NeighborhoodResponse:
    sources = parse_grounding_chunks(payload.sources)
    return NeighborhoodResponse(uri=find_neighborhood_uri(payload.location, sources))


@router.post("/image", response_model=LocationImageResponse)
async def location_image(
    payload: LocationImageRequest,
    client: GoogleMapsClient | None = Depends(get_maps_client),
    settings: Settings = Depends(get_settings),
) -> LocationImageResponse:
    """Photo or static map for an itinerary card; `imageUrl` is null when none."""
    sources = parse_grounding_chunks(payload.sources)
    image_url = await get_location_image(
        payload.activity_name,
        payload.google_maps_link,
        sources,
        client,
        max_width=settings.photo_max_width,
    )
    return LocationImageResponse(image_url=image_url)
