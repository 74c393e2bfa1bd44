"""Type definitions shared across the advisory core."""

from enum import Enum
from typing import Literal, NotRequired, TypedDict


class Page(str, Enum):
    """Every page the application can show. Exactly one is current."""

    HOME = "home"
    SKIN_CONSULTATION = "skin_consultation"
    FITNESS_ASSESSMENT = "fitness_assessment"
    LOCATION_FINDER = "location_finder"
    AI_CONSULTANT = "ai_consultant"
    MARKET_TRENDS = "market_trends"
    OUR_EXPERTS = "our_experts"
    COLLABORATION = "collaboration"
    FRANCHISE = "franchise"
    SELLER_HUB = "seller_hub"
    COSMETIC_SIMULATOR = "cosmetic_simulator"
    PHYSIQUE_SIMULATOR = "physique_simulator"
    CASE_STUDY = "case_study"
    JOIN_US = "join_us"
    MY_CONSULTATIONS = "my_consultations"
    DOWNLOAD_APP = "download_app"


ConsultationMode = Literal["skin", "fitness"]
SearchMethod = Literal["geo", "text"]
ProviderCategory = Literal["clinics", "doctors", "gyms", "coaches"]


class SavedConsultation(TypedDict):
    """A plan the user saved from an assessment page."""

    id: str
    name: str
    mode: str
    payload: dict
    created_at: str


class ProviderSearchResult(TypedDict):
    """A clinic, doctor, gym or coach returned by the provider lookup."""

    name: str
    address: str
    phone: NotRequired[str | None]
    rating: NotRequired[float | None]
    maps_uri: NotRequired[str | None]
    distance_km: NotRequired[float | None]
    specialty: NotRequired[str | None]


class SearchResultItem(TypedDict):
    """A ranked hit from the site-wide semantic search."""

    title: str
    description: str
    target_page: NotRequired[str | None]
    relevance: NotRequired[float | None]


class GeoCoordinate(TypedDict):
    """Device position, used for a single provider search and never stored."""

    lat: float
    lon: float


class ChatMessage(TypedDict):
    """One turn of the AI coach conversation."""

    role: Literal["user", "model"]
    text: str
