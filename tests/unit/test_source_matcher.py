from ryoko.core.schemas import MapsCitation, WebCitation
from ryoko.core.source_matcher import (
    NEIGHBORHOOD_SEARCH_URL,
    find_matching_uri,
    find_neighborhood_uri,
    generate_neighborhood_maps_url,
    is_generic_place_name,
    is_similar_match,
    normalize_name,
)


def maps(title, uri):
    return MapsCitation(title=title, uri=uri)


def test_normalize_name():
    assert normalize_name("  Tsukiji   Outer-Market! ") == "tsukiji outermarket"
    assert normalize_name("Café  Kitsuné") == "café kitsuné"
    assert normalize_name(None) == ""


def test_generic_place_names():
    assert is_generic_place_name("lunch near the station")
    assert is_generic_place_name("Explore the old town")
    assert is_generic_place_name("Depart for the airport")
    # Markers are whole words, not substrings
    assert not is_generic_place_name("Meiji Jingu")
    # Long phrases are treated as real names
    assert not is_generic_place_name("Dinner at the Park Hyatt New York Grill")


def test_is_similar_match():
    assert is_similar_match("Senso-ji Temple", "Sensoji Temple")
    assert is_similar_match("Shibuya Sky", "Shibuya Sky Deck")
    assert not is_similar_match("Ramen", "Ichiran Ramen Shibuya")
    assert not is_similar_match("Tokyo Tower", "Tokyo Tower Observatory Deck")
    assert not is_similar_match("", "Anything")


def test_exact_match():
    sources = [
        maps("Tokyo Skytree", "https://maps.google.com/?cid=1"),
        maps("Park Hyatt Tokyo", "https://maps.google.com/?cid=123"),
    ]
    assert find_matching_uri("park hyatt tokyo", sources) == "https://maps.google.com/?cid=123"


def test_short_name_matches_only_by_word_overlap():
    sources = [maps("Ichiran Ramen Shibuya", "https://maps.google.com/?cid=5")]
    assert find_matching_uri("Ramen", sources) == "https://maps.google.com/?cid=5"


def test_generic_phrase_never_matches():
    sources = [maps("Shibuya Station", "https://maps.google.com/?cid=9")]
    assert find_matching_uri("lunch near the station", sources) is None


def test_first_citation_wins_ties():
    first = maps("Golden Gai Alley", "https://maps.google.com/?cid=1")
    second = maps("Golden Gai District", "https://maps.google.com/?cid=2")
    assert find_matching_uri("Golden Gai bars", [first, second]) == first.uri
    assert find_matching_uri("Golden Gai bars", [second, first]) == second.uri


def test_low_overlap_is_not_a_match():
    sources = [maps("Kyoto Station", "https://maps.google.com/?cid=3")]
    assert find_matching_uri("Tokyo Skytree", sources) is None


def test_web_citations_are_not_candidates():
    sources = [WebCitation(title="Park Hyatt Tokyo", uri="https://example.com/hyatt")]
    assert find_matching_uri("Park Hyatt Tokyo", sources) is None


def test_neighborhood_url_is_generated_without_citations():
    uri = find_neighborhood_uri("Shibuya", [])
    assert uri == NEIGHBORHOOD_SEARCH_URL + "Shibuya"
    assert generate_neighborhood_maps_url("Shinjuku Gyoen") == (
        NEIGHBORHOOD_SEARCH_URL + "Shinjuku%20Gyoen"
    )


def test_neighborhood_prefers_area_citation_over_business():
    sources = [
        maps("Shibuya Excel Hotel Tokyu", "https://maps.google.com/?cid=10"),
        maps("Shibuya", "https://maps.google.com/?cid=11"),
    ]
    assert find_neighborhood_uri("Shibuya", sources) == "https://maps.google.com/?cid=11"


def test_neighborhood_rejects_only_business_citations():
    sources = [maps("Asakusa Museum of Culture", "https://maps.google.com/?cid=12")]
    assert find_neighborhood_uri("Asakusa", sources).startswith(NEIGHBORHOOD_SEARCH_URL)


def test_first_citation_wins_exact_title_ties():
    first = maps("Tsukiji Outer Market", "https://maps.google.com/?cid=21")
    second = maps("Tsukiji Outer Market", "https://maps.google.com/?cid=22")
    assert find_matching_uri("Tsukiji Outer Market", [first, second]) == first.uri
    assert find_matching_uri("Tsukiji Outer Market", [second, first]) == second.uri
