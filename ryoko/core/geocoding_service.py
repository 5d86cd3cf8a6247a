"""
Geocoding fallback for map links that carry no usable coordinates.
"""

import logging
import time

from ryoko.core.coordinates import (
    DirectCoordinates,
    GeocodeKind,
    GeocodeRequired,
    extract_coordinates_from_url,
)
from ryoko.core.maps_client import GoogleMapsClient
from ryoko.core.schemas import Coordinate
from ryoko.core.throttle import ThrottledQueue

logger = logging.getLogger(__name__)


async def _geocode_text(
    client: GoogleMapsClient, text: str, region_hint: str | None
) -> Coordinate | None:
    coordinate = await client.geocode(address=text)
    if coordinate is not None or not region_hint:
        return coordinate

    # One retry with the trip's city/region appended to disambiguate
    retry_text = f"{text}, {region_hint}"
    logger.debug(f"Retrying geocoding with region context: {retry_text}")
    return await client.geocode(address=retry_text)


async def geocode_extraction(
    result: GeocodeRequired,
    client: GoogleMapsClient | None,
    place_name: str | None = None,
    region_hint: str | None = None,
) -> Coordinate | None:
    """
    Resolve a link that needs geocoding to coordinates.

    Args:
        result: Extraction result flagged as needing geocoding
        client: Google Maps client, or None when the provider is unavailable
        place_name: Human-readable name from the caller; preferred over any
            name embedded in the link
        region_hint: City/region appended on a single retry for text lookups

    Returns:
        Coordinates, or None if the place cannot be resolved
    """
    if client is None:
        return None

    if result.kind == GeocodeKind.CUSTOMER_ID:
        # A CID is opaque to the Geocoding API; only the name can be geocoded
        name = (place_name or "").strip() or result.place_name
        if not name:
            logger.debug(f"Cannot resolve cid {result.value} without a place name")
            return None
        return await _geocode_text(client, name, region_hint)

    if result.kind == GeocodeKind.PLACE_ID:
        return await client.geocode(place_id=result.value)

    return await _geocode_text(client, result.value, region_hint)


async def get_coordinates_from_url(
    url: str | None,
    client: GoogleMapsClient | None,
    place_name: str | None = None,
    region_hint: str | None = None,
) -> Coordinate | None:
    """
    Coordinates for a map link, geocoding when the link has none.

    Direct coordinates are returned without touching the provider.
    """
    result = extract_coordinates_from_url(url)
    if result is None:
        return None
    if isinstance(result, DirectCoordinates):
        return result.coordinate
    return await geocode_extraction(
        result, client, place_name=place_name, region_hint=region_hint
    )


async def batch_resolve_coordinates(
    places: list[tuple[str, str | None]],
    client: GoogleMapsClient | None,
    queue: ThrottledQueue | None = None,
    region_hint: str | None = None,
) -> list[Coordinate | None]:
    """
    Resolve many (link, place name) pairs one at a time.

    Args:
        places: Map links paired with the name to geocode by when needed
        client: Google Maps client, or None when the provider is unavailable
        queue: Throttled queue controlling the pause between calls
        region_hint: City/region appended on retry for text lookups

    Returns:
        One entry per input pair, in input order; None where unresolved or
        where the batch was abandoned before reaching the pair
    """
    queue = queue or ThrottledQueue()
    start_time = time.monotonic()

    async def resolve(index: int) -> Coordinate | None:
        url, name = places[index]
        return await get_coordinates_from_url(
            url, client, place_name=name, region_hint=region_hint
        )

    results: list[Coordinate | None] = [None] * len(places)
    async for index, coordinate in queue.run(range(len(places)), resolve):
        results[index] = coordinate

    resolved = sum(1 for r in results if r is not None)
    duration = time.monotonic() - start_time
    logger.info(f"Resolved {resolved}/{len(places)} places in {duration:.2f}s")
    return results
