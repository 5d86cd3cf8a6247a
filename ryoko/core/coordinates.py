"""
Coordinate extraction from Google Maps links.

Links produced by the itinerary generator and by grounding citations come in
many shapes. Some carry a coordinate pair we can read directly; others only
carry an identifier or a search query and have to be geocoded.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import unquote, unquote_plus

from ryoko.core.geo_utils import is_valid_coordinate
from ryoko.core.schemas import Coordinate

logger = logging.getLogger(__name__)


class GeocodeKind(str, Enum):
    PLACE_ID = "place_id"
    CUSTOMER_ID = "cid"
    QUERY = "query"


@dataclass(frozen=True)
class DirectCoordinates:
    """The link carried a usable coordinate pair."""

    coordinate: Coordinate
    pattern: str


@dataclass(frozen=True)
class GeocodeRequired:
    """The link must be geocoded before it can be placed on a map."""

    kind: GeocodeKind
    value: str
    # Name from a /place/<name>/ path segment, if the link has one
    place_name: str | None = None


ExtractionResult = DirectCoordinates | GeocodeRequired

_PLACE_ID_RE = re.compile(r"place_id=([^&]+)")
_CID_RE = re.compile(r"[?&]cid=([^&]+)")
_QUERY_RE = re.compile(r"[?&]query=([^&]+)")
_PLACE_NAME_RE = re.compile(r"/place/([^/@?]+)")

# Coordinate-bearing shapes in the order they are tried
_COORDINATE_PATTERNS = (
    ("at_marker", re.compile(r"@([-\d.]+),([-\d.]+)(?:,(\d+))?")),
    ("q_param", re.compile(r"[?&]q=([-\d.]+),([-\d.]+)(?:&|$)")),
    ("ll_param", re.compile(r"[?&]ll=([-\d.]+),([-\d.]+)")),
    ("center_param", re.compile(r"center=([-\d.]+),([-\d.]+)")),
)
_PLACE_PATH_PATTERN = ("place_path", re.compile(r"/place/[^/@]+@([-\d.]+),([-\d.]+)"))


def _parse_pair(match: re.Match) -> tuple[float, float] | None:
    try:
        return float(match.group(1)), float(match.group(2))
    except ValueError:
        return None


def extract_place_name(url: Any) -> str | None:
    """Return the human-readable name from a /place/<name>/ link, if present."""
    if not url or not isinstance(url, str):
        return None
    match = _PLACE_NAME_RE.search(url)
    if not match:
        return None
    name = unquote_plus(match.group(1)).strip()
    return name or None


def extract_coordinates_from_url(url: Any) -> ExtractionResult | None:
    """
    Classify a Google Maps link and pull coordinates out of it when possible.

    Shapes are tried in priority order and the first match wins:
    place_id, @lat,lng, ?q=lat,lng, ?ll=lat,lng, center=lat,lng, cid,
    query, /place/name@lat,lng.

    Args:
        url: Google Maps link (anything else yields None)

    Returns:
        DirectCoordinates, GeocodeRequired, or None when the link is absent,
        unrecognized, or carries out-of-range coordinates
    """
    if not url or not isinstance(url, str):
        return None

    match = _PLACE_ID_RE.search(url)
    if match:
        return GeocodeRequired(
            kind=GeocodeKind.PLACE_ID,
            value=unquote(match.group(1)),
            place_name=extract_place_name(url),
        )

    for pattern_name, regex in _COORDINATE_PATTERNS:
        match = regex.search(url)
        if not match:
            continue
        pair = _parse_pair(match)
        if pair is None:
            continue
        return _direct_or_none(pair, pattern_name, url)

    match = _CID_RE.search(url)
    if match:
        return GeocodeRequired(
            kind=GeocodeKind.CUSTOMER_ID,
            value=unquote(match.group(1)),
            place_name=extract_place_name(url),
        )

    match = _QUERY_RE.search(url)
    if match:
        return GeocodeRequired(
            kind=GeocodeKind.QUERY,
            value=unquote_plus(match.group(1)),
            place_name=extract_place_name(url),
        )

    pattern_name, regex = _PLACE_PATH_PATTERN
    match = regex.search(url)
    if match:
        pair = _parse_pair(match)
        if pair is not None:
            return _direct_or_none(pair, pattern_name, url)

    return None


def _direct_or_none(
    pair: tuple[float, float], pattern_name: str, url: str
) -> DirectCoordinates | None:
    lat, lng = pair
    if not is_valid_coordinate(lat, lng):
        # Never clamp or fall through to a weaker shape
        logger.debug(f"Out-of-range coordinates ({lat}, {lng}) in {url}")
        return None
    return DirectCoordinates(coordinate=Coordinate(lat=lat, lng=lng), pattern=pattern_name)
