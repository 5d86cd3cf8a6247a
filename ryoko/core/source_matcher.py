"""
Match itinerary place names to grounding citations.

The generator is asked to put a Google Maps link on every place, but it often
leaves them out. The maps citations returned alongside the itinerary usually
include the missing places, so we recover links by fuzzy-matching names
against citation titles.
"""

import logging
import re
from typing import Iterable
from urllib.parse import quote

from ryoko.core.schemas import GroundingChunk, MapsCitation

logger = logging.getLogger(__name__)

# Shorter/longer length ratio required for a containment match
MIN_CONTAINMENT_RATIO = 0.6
# Fraction of query words that must appear in a title for a word-overlap match
MIN_WORD_OVERLAP = 0.5
# Words this short are ignored by the word-overlap pass
MIN_WORD_LENGTH = 3
# Names at most this long that contain a generic marker are not places
MAX_GENERIC_WORDS = 4

GENERIC_MARKERS = frozenset(
    {
        "near",
        "around",
        "in",
        "at",
        "explore",
        "dinner",
        "lunch",
        "breakfast",
        "depart",
        "transit",
        "airport",
    }
)

# Title fragments that mark a citation as a business rather than an area
BUSINESS_MARKERS = ("restaurant", "hotel", "cafe", "store", "museum")

NEIGHBORHOOD_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_name(text: str | None) -> str:
    """Lowercase, drop punctuation and symbols, collapse whitespace."""
    if not text:
        return ""
    text = _NON_WORD_RE.sub("", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def is_generic_place_name(name: str) -> bool:
    """
    Detect phrases like "lunch near the station" that describe an activity
    rather than name a specific place.
    """
    words = normalize_name(name).split()
    if not words or len(words) > MAX_GENERIC_WORDS:
        return False
    return any(word in GENERIC_MARKERS for word in words)


def is_similar_match(first: str, second: str) -> bool:
    """Equal after normalization, or one contains a large share of the other."""
    a = normalize_name(first)
    b = normalize_name(second)
    if not a or not b:
        return False
    if a == b:
        return True
    if a in b or b in a:
        shorter, longer = sorted((len(a), len(b)))
        return shorter / longer >= MIN_CONTAINMENT_RATIO
    return False


def _maps_citations(sources: Iterable[GroundingChunk]) -> list[MapsCitation]:
    return [s for s in sources if isinstance(s, MapsCitation) and s.title and s.uri]


def find_matching_uri(place_name: str, sources: Iterable[GroundingChunk]) -> str | None:
    """
    Find the Google Maps URI of the citation that best matches a place name.

    Args:
        place_name: Activity or hotel name from the itinerary
        sources: Grounding citations; only maps citations are considered

    Returns:
        URI of the matched citation, or None when no confident match exists.
        Earlier citations win ties.
    """
    normalized_place = normalize_name(place_name)
    if not normalized_place or is_generic_place_name(place_name):
        return None

    candidates = _maps_citations(sources)

    # Pass 1: exact or near-complete containment, first hit wins
    for citation in candidates:
        if is_similar_match(place_name, citation.title):
            return citation.uri

    # Pass 2: share of the name's significant words found in the title
    place_words = [w for w in normalized_place.split() if len(w) >= MIN_WORD_LENGTH]
    if not place_words:
        return None

    best_match: MapsCitation | None = None
    best_score = 0.0
    for citation in candidates:
        title = normalize_name(citation.title)
        matching = [w for w in place_words if w in title]
        score = len(matching) / len(place_words)
        if score >= MIN_WORD_OVERLAP and (best_match is None or score > best_score):
            best_match = citation
            best_score = score

    if best_match is not None:
        logger.debug(
            f"Word-overlap match for '{place_name}': '{best_match.title}' ({best_score:.2f})"
        )
        return best_match.uri
    return None


def generate_neighborhood_maps_url(location: str) -> str:
    """Google Maps search link for an area name."""
    return NEIGHBORHOOD_SEARCH_URL + quote(location.strip(), safe="!~*'()")


def find_neighborhood_uri(location: str, sources: Iterable[GroundingChunk]) -> str:
    """
    Link for a neighborhood/area label.

    Prefers a maps citation for the area itself (titles that look like a
    business are skipped), and otherwise falls back to a Maps search link, so
    a link is always returned.
    """
    normalized_location = normalize_name(location)

    if normalized_location:
        for citation in _maps_citations(sources):
            title = normalize_name(citation.title)
            if not (
                title == normalized_location
                or normalized_location in title
                or title in normalized_location
            ):
                continue
            if any(marker in title for marker in BUSINESS_MARKERS):
                continue
            return citation.uri

    return generate_neighborhood_maps_url(location or "")
