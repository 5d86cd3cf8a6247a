"""
Build the marker list for the itinerary map.
"""

import logging

from ryoko.core.coordinates import DirectCoordinates, extract_coordinates_from_url
from ryoko.core.geo_utils import calculate_center
from ryoko.core.geocoding_service import batch_resolve_coordinates
from ryoko.core.maps_client import GoogleMapsClient
from ryoko.core.schemas import Coordinate, Itinerary, MapLocation, MapView
from ryoko.core.throttle import ThrottledQueue

logger = logging.getLogger(__name__)

HOTELS_DAY_LABEL = "Hotels"
DEFAULT_ZOOM = 12


def _direct_coordinates(link: str) -> Coordinate | None:
    result = extract_coordinates_from_url(link)
    if isinstance(result, DirectCoordinates):
        return result.coordinate
    return None


def collect_map_locations(itinerary: Itinerary) -> list[MapLocation]:
    """
    Every hotel, activity and hidden gem that has a map link.

    Coordinates are filled in only where the link carries them directly.
    """
    locations: list[MapLocation] = []

    for hotel in itinerary.recommended_hotels:
        if not hotel.google_maps_link:
            continue
        locations.append(
            MapLocation(
                name=hotel.name,
                link=hotel.google_maps_link,
                day=HOTELS_DAY_LABEL,
                type="hotel",
                coordinates=_direct_coordinates(hotel.google_maps_link),
            )
        )

    for day in itinerary.daily_itinerary:
        for item in day.items:
            if item.google_maps_link:
                locations.append(
                    MapLocation(
                        name=item.activity,
                        link=item.google_maps_link,
                        day=day.day,
                        time=item.time or None,
                        type="activity",
                        coordinates=_direct_coordinates(item.google_maps_link),
                    )
                )
            gem = item.hidden_gem
            if gem is not None and gem.google_maps_link:
                locations.append(
                    MapLocation(
                        name=gem.name,
                        link=gem.google_maps_link,
                        day=day.day,
                        time=item.time or None,
                        type="hidden-gem",
                        coordinates=_direct_coordinates(gem.google_maps_link),
                    )
                )

    return locations


async def build_map_view(
    itinerary: Itinerary,
    client: GoogleMapsClient | None,
    queue: ThrottledQueue | None = None,
    region_hint: str | None = None,
) -> MapView:
    """
    Map markers for an itinerary, geocoding links without coordinates.

    Locations that still cannot be placed are left off the map. The center
    is the average of the placed markers.
    """
    locations = collect_map_locations(itinerary)
    pending = [loc for loc in locations if loc.coordinates is None]

    if pending:
        logger.info(f"Geocoding {len(pending)} of {len(locations)} map locations")
        resolved = await batch_resolve_coordinates(
            [(loc.link, loc.name) for loc in pending],
            client,
            queue=queue,
            region_hint=region_hint,
        )
        for loc, coordinate in zip(pending, resolved):
            loc.coordinates = coordinate

    placed = [loc for loc in locations if loc.coordinates is not None]
    if len(placed) < len(locations):
        logger.info(f"Could not place {len(locations) - len(placed)} map locations")

    return MapView(
        center=calculate_center([loc.coordinates for loc in placed]),
        zoom=DEFAULT_ZOOM,
        locations=placed,
    )
