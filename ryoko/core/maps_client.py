"""
Google Maps web service integration for geocoding, place lookup and imagery.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable
from urllib.parse import quote

import httpx

from ryoko.core.schemas import Coordinate
from ryoko.core.settings import get_settings

logger = logging.getLogger(__name__)

MAPS_API_BASE = "https://maps.googleapis.com/maps/api"
GEOCODE_URL = f"{MAPS_API_BASE}/geocode/json"
PLACES_API_BASE = f"{MAPS_API_BASE}/place"
STATIC_MAP_URL = f"{MAPS_API_BASE}/staticmap"


class MapsUnavailableError(RuntimeError):
    """Raised when the Google Maps client cannot be created."""


class GoogleMapsClient:
    """Async client for the Google Maps Geocoding, Places and Static Maps APIs.

    Every lookup returns None on failure: transport errors, timeouts, bad
    HTTP statuses, undecodable bodies and non-OK provider statuses are logged
    and absorbed here.
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        if not api_key:
            raise MapsUnavailableError("GOOGLE_MAPS_API_KEY is not set")
        self.api_key = api_key
        self.timeout = timeout
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any] | None:
        try:
            response = await self._http.get(
                url, params={**params, "key": self.api_key}, timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning(f"Google Maps request timed out: {url}")
            return None
        except httpx.HTTPError as e:
            logger.warning(f"Google Maps request failed: {e}")
            return None
        except ValueError as e:
            logger.warning(f"Google Maps returned a non-JSON body: {e}")
            return None

        if not isinstance(data, dict):
            logger.warning(f"Unexpected Google Maps payload from {url}")
            return None
        return data

    async def geocode(
        self, *, address: str | None = None, place_id: str | None = None
    ) -> Coordinate | None:
        """
        Geocode an address or a Google Place ID to coordinates.

        Args:
            address: Free-text place name or address
            place_id: Google Place ID (used instead of address when given)

        Returns:
            Coordinate of the first result, or None if geocoding fails
        """
        if place_id:
            params = {"place_id": place_id}
        elif address:
            params = {"address": address}
        else:
            return None

        data = await self._get_json(GEOCODE_URL, params)
        if data is None:
            return None

        status = data.get("status")
        if status != "OK" or not data.get("results"):
            logger.info(f"Geocoding failed for {place_id or address}: {status}")
            return None

        try:
            location = data["results"][0]["geometry"]["location"]
            coordinate = Coordinate(lat=location["lat"], lng=location["lng"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning(f"Malformed geocoding result for {place_id or address}: {e}")
            return None

        logger.debug(f"Geocoded {place_id or address} to {coordinate.lat}, {coordinate.lng}")
        return coordinate

    async def find_place_id(
        self, query: str, near: Coordinate | None = None, radius: int = 100
    ) -> str | None:
        """
        Find the Place ID for a place name using Text Search.

        Args:
            query: Place name to search for
            near: Optional coordinates to bias the search around
            radius: Bias radius in meters when `near` is given

        Returns:
            Place ID of the result whose name matches exactly (case-insensitive),
            else of the first result; None when nothing is found
        """
        if not query:
            return None

        params: dict[str, Any] = {"query": query}
        if near is not None:
            params["location"] = f"{near.lat},{near.lng}"
            params["radius"] = radius

        data = await self._get_json(f"{PLACES_API_BASE}/textsearch/json", params)
        if data is None:
            return None

        results = data.get("results") or []
        if data.get("status") != "OK" or not results:
            logger.info(f"Place search found nothing for '{query}': {data.get('status')}")
            return None

        wanted = query.lower()
        exact = next(
            (r for r in results if (r.get("name") or "").lower() == wanted), None
        )
        match = exact or results[0]
        return match.get("place_id") or None

    async def get_photo_reference(self, place_id: str) -> str | None:
        """Return the first photo reference from Place Details, if any."""
        if not place_id:
            return None

        data = await self._get_json(
            f"{PLACES_API_BASE}/details/json",
            {"place_id": place_id, "fields": "photos,name"},
        )
        if data is None:
            return None

        if data.get("status") != "OK":
            logger.info(f"Place details failed for {place_id}: {data.get('status')}")
            return None

        photos = (data.get("result") or {}).get("photos") or []
        if not photos:
            return None
        return photos[0].get("photo_reference") or None

    def photo_url(self, photo_reference: str, max_width: int = 800) -> str | None:
        """
        Build a Place Photo URL from a photo reference.

        Args:
            photo_reference: Photo reference from Place Details
            max_width: Maximum width in pixels
        """
        if not photo_reference:
            return None

        return (
            f"{PLACES_API_BASE}/photo"
            f"?maxwidth={max_width}"
            f"&photo_reference={quote(photo_reference)}"
            f"&key={self.api_key}"
        )

    def static_map_url(
        self,
        *,
        place_id: str | None = None,
        coordinate: Coordinate | None = None,
        zoom: int = 15,
        size: str = "800x600",
    ) -> str | None:
        """Build a Static Maps image URL centered on a place ID or coordinate."""
        if place_id:
            target = f"place_id:{quote(place_id)}"
        elif coordinate is not None:
            target = f"{coordinate.lat},{coordinate.lng}"
        else:
            return None

        return (
            f"{STATIC_MAP_URL}"
            f"?center={target}"
            f"&zoom={zoom}"
            f"&size={size}"
            f"&maptype=roadmap"
            f"&markers=color:red%7C{target}"
            f"&key={self.api_key}"
        )


async def create_maps_client() -> GoogleMapsClient:
    """Build the process-wide client from settings."""
    settings = get_settings()
    if not settings.google_maps_api_key:
        raise MapsUnavailableError("GOOGLE_MAPS_API_KEY is not set")
    logger.info("Initializing Google Maps client")
    return GoogleMapsClient(
        settings.google_maps_api_key, timeout=settings.maps_request_timeout
    )


class MapsClientLoader:
    """Load-once holder for the Google Maps client.

    The first caller starts the load; callers arriving while it is in flight
    await the same load; later callers get the cached client. A failed load
    leaves nothing cached, so the next call tries again.
    """

    def __init__(self, factory: Callable[[], Awaitable[GoogleMapsClient]]):
        self._factory = factory
        self._client: GoogleMapsClient | None = None
        self._pending: asyncio.Future | None = None

    @property
    def is_loaded(self) -> bool:
        return self._client is not None

    async def get(self) -> GoogleMapsClient:
        if self._client is not None:
            return self._client
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load())
        # A cancelled waiter must not cancel the shared load
        return await asyncio.shield(self._pending)

    async def _load(self) -> GoogleMapsClient:
        try:
            client = await self._factory()
        except BaseException:
            self._pending = None
            raise
        self._client = client
        self._pending = None
        return client

    async def reset(self) -> None:
        """Close and forget the cached client."""
        client, self._client = self._client, None
        self._pending = None
        if client is not None:
            await client.aclose()


maps_client_loader = MapsClientLoader(create_maps_client)


async def get_maps_client() -> GoogleMapsClient | None:
    """
    Return the shared Google Maps client, or None when it is unavailable.

    A missing API key is not an error for callers: every lookup that needs
    the provider simply finds no result.
    """
    try:
        return await maps_client_loader.get()
    except MapsUnavailableError as e:
        logger.warning(f"Google Maps unavailable: {e}")
        return None
    except Exception as e:
        logger.error(f"Failed to initialize Google Maps client: {e}")
        return None
