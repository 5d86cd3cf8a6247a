import httpx
import pytest

from ryoko.core.maps_client import GoogleMapsClient


def _refuse(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"Unexpected network call: {request.url}")


class FakeMapsClient(GoogleMapsClient):
    """In-memory stand-in for the Google Maps client; records every lookup."""

    def __init__(self, geocodes=None, place_ids=None, photos=None):
        super().__init__(
            "test-key",
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(_refuse)),
        )
        self.geocodes = geocodes or {}
        self.place_ids = place_ids or {}
        self.photos = photos or {}
        self.calls = []

    async def geocode(self, *, address=None, place_id=None):
        key = place_id or address
        self.calls.append(("geocode", key))
        return self.geocodes.get(key)

    async def find_place_id(self, query, near=None, radius=100):
        self.calls.append(("find_place_id", query, near))
        return self.place_ids.get(query)

    async def get_photo_reference(self, place_id):
        self.calls.append(("photo", place_id))
        return self.photos.get(place_id)


@pytest.fixture
def fake_maps_client():
    return FakeMapsClient
