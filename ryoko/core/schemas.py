import logging
from typing import Annotated, Any, Iterable, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
)
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    """Base model that reads and writes the generator's camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Coordinate(CamelModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


def _none_as_empty(value: Any) -> Any:
    return "" if value is None else value


# Free text the generator sometimes sends as null
OptionalText = Annotated[str, BeforeValidator(_none_as_empty)]


# =============================================================================
# Itinerary Schemas
# =============================================================================


class HiddenGem(CamelModel):
    name: str
    location: OptionalText = ""
    description: OptionalText = ""
    google_maps_link: str | None = Field(None, description="Google Maps link")
    location_uri: str | None = Field(
        None, description="Google Maps link for the neighborhood/area"
    )


class ItineraryItem(CamelModel):
    time: OptionalText = Field("", description="Free-text time label, e.g., 'Morning'")
    activity: str = Field(..., description="Exact proper name of the place")
    location: OptionalText = Field("", description="Neighborhood or area label")
    description: OptionalText = ""
    google_maps_link: str | None = Field(None, description="Google Maps link")
    location_uri: str | None = Field(
        None, description="Google Maps link for the neighborhood/area"
    )
    hidden_gem: HiddenGem | None = None


class Hotel(CamelModel):
    name: str
    description: OptionalText = ""
    location: OptionalText = ""
    google_maps_link: str | None = Field(None, description="Google Maps link")


class DailyPlan(CamelModel):
    day: str = Field(..., description="Day label, e.g., 'Day 1'")
    title: OptionalText = ""
    items: list[ItineraryItem] = Field(default_factory=list)


class Itinerary(CamelModel):
    trip_title: OptionalText = ""
    vibe_check: OptionalText = ""
    packing_list: list[str] = Field(default_factory=list)
    recommended_hotels: list[Hotel] = Field(default_factory=list)
    daily_itinerary: list[DailyPlan] = Field(default_factory=list)


# =============================================================================
# Grounding Citations
# =============================================================================


class ReviewSnippet(CamelModel):
    uri: str = ""
    title: str = ""


class WebCitation(CamelModel):
    kind: Literal["web"] = "web"
    uri: str
    title: str = ""


class MapsCitation(CamelModel):
    kind: Literal["maps"] = "maps"
    uri: str
    title: str = ""
    review_snippets: list[ReviewSnippet] = Field(default_factory=list)


GroundingChunk = Annotated[
    Union[WebCitation, MapsCitation], Field(discriminator="kind")
]

_chunk_adapter = TypeAdapter(GroundingChunk)


def _review_snippets(maps: dict[str, Any]) -> list[ReviewSnippet]:
    answer_sources = maps.get("placeAnswerSources")
    if not isinstance(answer_sources, dict):
        return []
    raw = answer_sources.get("reviewSnippets")
    if not isinstance(raw, list):
        return []

    snippets = []
    for entry in raw:
        try:
            snippets.append(ReviewSnippet.model_validate(entry))
        except ValidationError:
            logger.debug(f"Dropping malformed review snippet: {entry!r}")
    return snippets


def _chunk_from_payload(entry: Any) -> WebCitation | MapsCitation:
    if isinstance(entry, (WebCitation, MapsCitation)):
        return entry
    if not isinstance(entry, dict):
        raise TypeError(f"unsupported citation payload: {type(entry).__name__}")

    maps = entry.get("maps")
    if isinstance(maps, dict):
        return MapsCitation(
            uri=maps.get("uri"),
            title=maps.get("title") or "",
            review_snippets=_review_snippets(maps),
        )

    web = entry.get("web")
    if isinstance(web, dict):
        return WebCitation(uri=web.get("uri"), title=web.get("title") or "")

    return _chunk_adapter.validate_python(entry)


def parse_grounding_chunks(raw: Iterable[Any] | None) -> list[WebCitation | MapsCitation]:
    """
    Convert loosely-typed grounding payloads into citation variants.

    Accepts the provider shape ({"web": {...}} / {"maps": {...}}), the flat
    {"kind", "uri", "title"} shape, or already-parsed citations. Entries that
    fit neither shape are dropped.
    """
    chunks: list[WebCitation | MapsCitation] = []
    for entry in raw or []:
        try:
            chunks.append(_chunk_from_payload(entry))
        except (TypeError, ValidationError) as e:
            logger.warning(f"Dropping malformed grounding chunk: {e}")
    return chunks


# =============================================================================
# Map View Schemas
# =============================================================================


class MapLocation(CamelModel):
    name: str
    link: str
    day: str
    time: str | None = None
    type: Literal["hotel", "activity", "hidden-gem"]
    coordinates: Coordinate | None = None


class MapView(CamelModel):
    center: Coordinate | None = None
    zoom: int = 12
    locations: list[MapLocation] = Field(default_factory=list)


# =============================================================================
# Group Preference Schemas
# =============================================================================


class MemberPreferences(CamelModel):
    """Travel preferences submitted by one plan member."""

    budget: str | None = None
    interests: list[str] = Field(default_factory=list)
    dietary: list[str] = Field(default_factory=list)
    accessibility: list[str] = Field(default_factory=list)
    must_do: list[str] = Field(default_factory=list)
    veto: list[str] = Field(default_factory=list)


class PlanPreferencesRequest(CamelModel):
    group_vibe: str = ""
    must_do_list: str = ""
    veto_list: str = ""
    members: list[MemberPreferences] = Field(default_factory=list)


class AggregatedPreferences(CamelModel):
    group_vibe: str
    must_do_list: str
    veto_list: str
    member_count: int


# =============================================================================
# Request / Response Schemas
# =============================================================================


class AnnotateItineraryRequest(CamelModel):
    itinerary: Itinerary
    sources: list[dict[str, Any]] = Field(default_factory=list)


class AnnotateItineraryResponse(CamelModel):
    itinerary: Itinerary


class MapViewRequest(CamelModel):
    itinerary: Itinerary
    region_hint: str | None = None


class MatchPlaceRequest(CamelModel):
    name: str
    sources: list[dict[str, Any]] = Field(default_factory=list)


class MatchPlaceResponse(CamelModel):
    uri: str | None = None


class NeighborhoodRequest(CamelModel):
    location: str
    sources: list[dict[str, Any]] = Field(default_factory=list)


class NeighborhoodResponse(CamelModel):
    uri: str


class LocationImageRequest(CamelModel):
    activity_name: str
    google_maps_link: str | None = None
    sources: list[dict[str, Any]] = Field(default_factory=list)


class LocationImageResponse(CamelModel):
    image_url: str | None = None


class CoordinatesResponse(CamelModel):
    coordinates: Coordinate | None = None
