from fastapi import APIRouter, Depends

from ryoko.core.itinerary_annotator import match_sources_to_itinerary
from ryoko.core.maps_client import GoogleMapsClient, get_maps_client
from ryoko.core.map_view import build_map_view
from ryoko.core.schemas import (
    AnnotateItineraryRequest,
    AnnotateItineraryResponse,
    MapView,
    MapViewRequest,
    parse_grounding_chunks,
)
from ryoko.core.settings import Settings, get_settings
from ryoko.core.throttle import ThrottledQueue


router = APIRouter(prefix="/itineraries", tags=["itineraries"])


@router.post("/annotate", response_model=AnnotateItineraryResponse)
def annotate_itinerary(payload: AnnotateItineraryRequest) -> AnnotateItineraryResponse:
    """Fill missing map and neighborhood links from the grounding citations."""
    sources = parse_grounding_chunks(payload.sources)
    itinerary = match_sources_to_itinerary(payload.itinerary, sources)
    return AnnotateItineraryResponse(itinerary=itinerary)


@router.post("/map", response_model=MapView)
async def itinerary_map(
    payload: MapViewRequest,
    client: GoogleMapsClient | None = Depends(get_maps_client),
    settings: Settings = Depends(get_settings),
) -> MapView:
    """
    Markers for the itinerary map.

    Links without coordinates are geocoded one at a time with a short pause
    between calls.
    """
    queue = ThrottledQueue(delay=settings.geocode_delay_seconds)
    region_hint = payload.region_hint or settings.geocode_region_hint or None
    return await build_map_view(
        payload.itinerary, client, queue=queue, region_hint=region_hint
    )
