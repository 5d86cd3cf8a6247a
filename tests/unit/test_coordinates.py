import pytest

from ryoko.core.coordinates import (
    DirectCoordinates,
    GeocodeKind,
    GeocodeRequired,
    extract_coordinates_from_url,
    extract_place_name,
)
from ryoko.core.schemas import Coordinate


@pytest.mark.parametrize(
    "url, lat, lng, pattern",
    [
        (
            "https://www.google.com/maps/place/Tokyo+Tower/@35.6586,139.7454,17z",
            35.6586,
            139.7454,
            "at_marker",
        ),
        ("https://maps.google.com/?q=35.0,135.0", 35.0, 135.0, "q_param"),
        ("https://maps.google.com/?q=35.0,135.0&z=10", 35.0, 135.0, "q_param"),
        ("https://maps.google.com/?ll=-33.86,151.21", -33.86, 151.21, "ll_param"),
        ("https://maps.google.com/maps?center=48.85,2.35", 48.85, 2.35, "center_param"),
        ("https://www.google.com/maps/@-90,180", -90.0, 180.0, "at_marker"),
    ],
)
def test_direct_coordinates(url, lat, lng, pattern):
    result = extract_coordinates_from_url(url)
    assert isinstance(result, DirectCoordinates)
    assert result.coordinate == Coordinate(lat=lat, lng=lng)
    assert result.pattern == pattern


@pytest.mark.parametrize(
    "url",
    [
        "https://www.google.com/maps/@95.0,10.0,12z",
        "https://maps.google.com/?q=10.0,200.0",
        "https://maps.google.com/?ll=-91,0",
        # An invalid pair is not rescued by a later valid shape
        "https://www.google.com/maps/@100.0,10.0?ll=35.0,139.0",
    ],
)
def test_out_of_range_coordinates_yield_nothing(url):
    assert extract_coordinates_from_url(url) is None


def test_at_marker_wins_over_q_param():
    url = "https://www.google.com/maps/place/Spot/@35.1,139.2,15z?q=1.0,2.0"
    result = extract_coordinates_from_url(url)
    assert result.coordinate == Coordinate(lat=35.1, lng=139.2)


def test_place_id_link_needs_geocoding():
    url = "https://maps.google.com/?place_id=ChIJ51cu8IcbXWARiRtXIothAS4"
    result = extract_coordinates_from_url(url)
    assert result == GeocodeRequired(
        kind=GeocodeKind.PLACE_ID, value="ChIJ51cu8IcbXWARiRtXIothAS4"
    )


def test_place_id_wins_over_coordinates():
    url = "https://www.google.com/maps/place/Spot/@35.1,139.2,15z?place_id=abc"
    result = extract_coordinates_from_url(url)
    assert isinstance(result, GeocodeRequired)
    assert result.kind == GeocodeKind.PLACE_ID
    assert result.value == "abc"


def test_cid_link_needs_geocoding():
    result = extract_coordinates_from_url("https://maps.google.com/?cid=123")
    assert result == GeocodeRequired(kind=GeocodeKind.CUSTOMER_ID, value="123")


def test_cid_link_keeps_place_name_from_path():
    url = "https://www.google.com/maps/place/Park+Hyatt+Tokyo/?cid=123"
    result = extract_coordinates_from_url(url)
    assert result.kind == GeocodeKind.CUSTOMER_ID
    assert result.place_name == "Park Hyatt Tokyo"


def test_query_link_is_decoded():
    url = "https://www.google.com/maps/search/?api=1&query=Senso-ji+Temple%2C+Asakusa"
    result = extract_coordinates_from_url(url)
    assert result.kind == GeocodeKind.QUERY
    assert result.value == "Senso-ji Temple, Asakusa"


def test_unparseable_numbers_fall_through_to_next_shape():
    url = "https://maps.google.com/maps/@-,-/data?cid=77"
    result = extract_coordinates_from_url(url)
    assert result == GeocodeRequired(kind=GeocodeKind.CUSTOMER_ID, value="77")


@pytest.mark.parametrize(
    "url", [None, "", 42, "https://example.com/page", "not a url at all"]
)
def test_unrecognized_input_yields_nothing(url):
    assert extract_coordinates_from_url(url) is None


def test_extract_place_name():
    assert (
        extract_place_name("https://www.google.com/maps/place/Caf%C3%A9+de+Flore/@48.85,2.33")
        == "Café de Flore"
    )
    assert extract_place_name("https://maps.google.com/?cid=1") is None
    assert extract_place_name(None) is None
