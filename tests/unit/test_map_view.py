import pytest

from ryoko.core.map_view import build_map_view, collect_map_locations
from ryoko.core.schemas import Coordinate, Itinerary
from ryoko.core.throttle import ThrottledQueue


async def no_sleep(delay):
    return None


def make_itinerary():
    return Itinerary.model_validate(
        {
            "tripTitle": "Tokyo",
            "recommendedHotels": [
                {
                    "name": "Park Hyatt Tokyo",
                    "googleMapsLink": "https://www.google.com/maps/@35.6856,139.6907,17z",
                },
                {"name": "Unlinked Inn", "googleMapsLink": None},
            ],
            "dailyItinerary": [
                {
                    "day": "Day 1",
                    "items": [
                        {
                            "time": "Morning",
                            "activity": "Senso-ji",
                            "googleMapsLink": "https://maps.google.com/?ll=35.7148,139.7967",
                            "hiddenGem": {
                                "name": "Kappabashi Street",
                                "googleMapsLink": "https://maps.google.com/?cid=55",
                            },
                        },
                        {"time": "Noon", "activity": "Lunch somewhere"},
                        {
                            "time": "Night",
                            "activity": "Mystery Bar",
                            "googleMapsLink": "https://maps.google.com/?cid=66",
                        },
                    ],
                }
            ],
        }
    )


def test_collect_map_locations():
    locations = collect_map_locations(make_itinerary())

    assert [(loc.name, loc.type, loc.day) for loc in locations] == [
        ("Park Hyatt Tokyo", "hotel", "Hotels"),
        ("Senso-ji", "activity", "Day 1"),
        ("Kappabashi Street", "hidden-gem", "Day 1"),
        ("Mystery Bar", "activity", "Day 1"),
    ]
    assert locations[0].coordinates == Coordinate(lat=35.6856, lng=139.6907)
    assert locations[0].time is None
    assert locations[2].time == "Morning"
    assert locations[2].coordinates is None


@pytest.mark.asyncio
async def test_build_map_view_geocodes_and_drops_unresolved(fake_maps_client):
    client = fake_maps_client(geocodes={"Kappabashi Street": Coordinate(lat=35.71, lng=139.79)})

    view = await build_map_view(
        make_itinerary(), client, queue=ThrottledQueue(delay=0.1, sleep=no_sleep)
    )

    assert [loc.name for loc in view.locations] == [
        "Park Hyatt Tokyo",
        "Senso-ji",
        "Kappabashi Street",
    ]
    assert view.zoom == 12
    assert view.center.lat == pytest.approx((35.6856 + 35.7148 + 35.71) / 3)
    assert view.center.lng == pytest.approx((139.6907 + 139.7967 + 139.79) / 3)
    assert client.calls == [
        ("geocode", "Kappabashi Street"),
        ("geocode", "Mystery Bar"),
    ]


@pytest.mark.asyncio
async def test_build_map_view_without_client_keeps_direct_coordinates():
    view = await build_map_view(
        make_itinerary(), None, queue=ThrottledQueue(delay=0, sleep=no_sleep)
    )
    assert [loc.name for loc in view.locations] == ["Park Hyatt Tokyo", "Senso-ji"]


@pytest.mark.asyncio
async def test_empty_itinerary_has_no_center():
    view = await build_map_view(Itinerary(), None)
    assert view.locations == []
    assert view.center is None
