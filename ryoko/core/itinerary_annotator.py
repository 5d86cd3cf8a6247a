"""
Fill missing map links on a generated itinerary from its grounding citations.
"""

import logging
from typing import Iterable

from ryoko.core.schemas import GroundingChunk, HiddenGem, Itinerary, ItineraryItem
from ryoko.core.source_matcher import find_matching_uri, find_neighborhood_uri

logger = logging.getLogger(__name__)


def _has_link(value: str | None) -> bool:
    return bool(value and value.strip())


def _annotate_gem(gem: HiddenGem, sources: list[GroundingChunk]) -> int:
    filled = 0
    if not _has_link(gem.google_maps_link):
        uri = find_matching_uri(gem.name, sources)
        if uri:
            gem.google_maps_link = uri
            filled += 1
    if not _has_link(gem.location_uri) and gem.location.strip():
        gem.location_uri = find_neighborhood_uri(gem.location, sources)
        filled += 1
    return filled


def _annotate_item(item: ItineraryItem, sources: list[GroundingChunk]) -> int:
    filled = 0
    if not _has_link(item.google_maps_link):
        uri = find_matching_uri(item.activity, sources)
        if uri:
            item.google_maps_link = uri
            filled += 1
    if not _has_link(item.location_uri) and item.location.strip():
        item.location_uri = find_neighborhood_uri(item.location, sources)
        filled += 1
    if item.hidden_gem is not None:
        filled += _annotate_gem(item.hidden_gem, sources)
    return filled


def match_sources_to_itinerary(
    itinerary: Itinerary, sources: Iterable[GroundingChunk]
) -> Itinerary:
    """
    Return a copy of the itinerary with missing map links filled in.

    Links already present are kept as they are. Hotels and activities get a
    link when a citation matches their name; every activity and hidden gem
    with an area label gets a neighborhood link. The input is not modified.

    Args:
        itinerary: Itinerary as produced by the generator
        sources: Grounding citations returned alongside it, in provider order

    Returns:
        A new Itinerary
    """
    sources = list(sources)
    annotated = itinerary.model_copy(deep=True)
    filled = 0

    for hotel in annotated.recommended_hotels:
        if _has_link(hotel.google_maps_link):
            continue
        uri = find_matching_uri(hotel.name, sources)
        if uri:
            hotel.google_maps_link = uri
            filled += 1

    for day in annotated.daily_itinerary:
        for item in day.items:
            filled += _annotate_item(item, sources)

    logger.debug(f"Filled {filled} links from {len(sources)} citations")
    return annotated
