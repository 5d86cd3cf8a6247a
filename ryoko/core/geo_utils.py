"""
Geographic helpers shared by link extraction and the map view.
"""

from typing import Iterable

from ryoko.core.schemas import Coordinate


def is_valid_coordinate(lat: float, lng: float) -> bool:
    """Check that a latitude/longitude pair lies within the valid ranges."""
    return -90 <= lat <= 90 and -180 <= lng <= 180


def calculate_center(coordinates: Iterable[Coordinate]) -> Coordinate | None:
    """
    Average a set of coordinates into a single map center.

    Args:
        coordinates: Resolved coordinates of every marker on the map

    Returns:
        The mean coordinate, or None when there is nothing to average
    """
    points = list(coordinates)
    if not points:
        return None

    avg_lat = sum(p.lat for p in points) / len(points)
    avg_lng = sum(p.lng for p in points) / len(points)
    return Coordinate(lat=avg_lat, lng=avg_lng)
