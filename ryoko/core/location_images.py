"""
Image lookup for itinerary cards.

Prefers a real place photo from the Places API and falls back to a static map
centered on the place. Returns None when neither is available; the frontend
shows placeholder imagery in that case.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from ryoko.core.coordinates import (
    DirectCoordinates,
    GeocodeKind,
    extract_coordinates_from_url,
    extract_place_name,
)
from ryoko.core.geocoding_service import geocode_extraction
from ryoko.core.maps_client import GoogleMapsClient
from ryoko.core.schemas import Coordinate, GroundingChunk

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceInfo:
    place_id: str | None = None
    coordinate: Coordinate | None = None


def find_matching_source(
    activity_name: str, sources: Iterable[GroundingChunk]
) -> GroundingChunk | None:
    """First citation (maps or web) whose title contains or is contained in the name."""
    wanted = (activity_name or "").lower().strip()
    if not wanted:
        return None

    for source in sources:
        title = (source.title or "").lower().strip()
        if not title:
            continue
        if wanted == title or wanted in title or title in wanted:
            return source
    return None


async def find_place_id_for_url(
    url: str, place_name: str | None, client: GoogleMapsClient
) -> str | None:
    """
    Place ID for a map link.

    Uses the link's own place_id when present. Otherwise searches by name,
    biased around the link's @lat,lng when it has one.
    """
    result = extract_coordinates_from_url(url)
    if result is None:
        return None

    if not isinstance(result, DirectCoordinates) and result.kind == GeocodeKind.PLACE_ID:
        return result.value

    name = (place_name or "").strip()
    if not name:
        return None

    if isinstance(result, DirectCoordinates):
        if result.pattern != "at_marker":
            return None
        return await client.find_place_id(name, near=result.coordinate)

    return await client.find_place_id(name)


async def get_place_photo(
    url: str,
    place_name: str | None,
    client: GoogleMapsClient,
    max_width: int = 800,
) -> str | None:
    """Photo URL of the place a map link points at, or None."""
    place_id = await find_place_id_for_url(url, place_name, client)
    if not place_id:
        return None

    reference = await client.get_photo_reference(place_id)
    if not reference:
        return None
    return client.photo_url(reference, max_width=max_width)


async def extract_place_info(
    url: str, activity_name: str | None, client: GoogleMapsClient
) -> PlaceInfo | None:
    """Place ID or coordinate for a map link, geocoding when needed."""
    result = extract_coordinates_from_url(url)
    if result is None:
        return None
    if isinstance(result, DirectCoordinates):
        return PlaceInfo(coordinate=result.coordinate)
    if result.kind == GeocodeKind.PLACE_ID:
        return PlaceInfo(place_id=result.value)

    name = (activity_name or "").strip() or extract_place_name(url)
    coordinate = await geocode_extraction(result, client, place_name=name)
    if coordinate is None:
        return None
    return PlaceInfo(coordinate=coordinate)


async def _static_map_for(
    url: str, activity_name: str, client: GoogleMapsClient
) -> str | None:
    info = await extract_place_info(url, activity_name, client)
    if info is None:
        return None
    return client.static_map_url(place_id=info.place_id, coordinate=info.coordinate)


async def get_location_image(
    activity_name: str,
    google_maps_link: str | None,
    sources: Iterable[GroundingChunk],
    client: GoogleMapsClient | None,
    max_width: int = 800,
) -> str | None:
    """
    Best image URL for an itinerary card.

    Args:
        activity_name: Name shown on the card
        google_maps_link: The card's own map link, if any
        sources: Grounding citations for the itinerary
        client: Google Maps client, or None when the provider is unavailable
        max_width: Maximum photo width in pixels

    Returns:
        A place photo URL, else a static map URL, else None
    """
    if client is None:
        return None

    link = google_maps_link if google_maps_link and google_maps_link.strip() else None
    matching_source = find_matching_source(activity_name, sources)
    source_uri = (matching_source.uri if matching_source else None) or link

    candidates = [u for u in dict.fromkeys([source_uri, link]) if u]

    for url in candidates:
        photo = await get_place_photo(url, activity_name, client, max_width=max_width)
        if photo:
            return photo

    for url in candidates:
        static_map = await _static_map_for(url, activity_name, client)
        if static_map:
            return static_map

    logger.debug(f"No image found for '{activity_name}'")
    return None
