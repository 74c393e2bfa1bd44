"""
Centralized configuration for the AURA advisory core.
All tunable constants and settings are defined here.
"""

import os

# Quota circuit breaker
# Marker substrings (matched case-insensitively) that identify a quota failure
QUOTA_ERROR_MARKERS: tuple[str, ...] = ("429", "quota")

QUOTA_EXCEEDED_MESSAGE: str = "API quota exceeded. Please check your billing or try again later."

GENERIC_ERROR_MESSAGE: str = "An unexpected error occurred."

# Geolocation
# Upper bound for acquiring the device position before searching without it
GEOLOCATION_TIMEOUT_SECONDS: float = 10.0

# Fallback city used by the default geolocator (None = position unavailable)
HOME_CITY: str | None = os.environ.get("AURA_HOME_CITY")

# Search ordering
# False keeps last-writer-wins; True drops responses from superseded requests
DISCARD_STALE_RESULTS: bool = False

# Localization
DEFAULT_LOCALE: str = os.environ.get("AURA_LOCALE", "en")

# LLM settings
LLM_MODEL: str = os.environ.get("AURA_LLM_MODEL", "qwen3:8b")

OLLAMA_HOST: str | None = os.environ.get("OLLAMA_HOST")

# Request timeout handed to the Ollama HTTP client
OLLAMA_TIMEOUT_SECONDS: float = 60.0

# Temperature - lower values = more deterministic, faster responses
LLM_TEMPERATURE: float = 0.3

# Context window size - lower values reduce TTFT (time to first token)
LLM_NUM_CTX: int = 4096

# Number of ranked items requested from semantic search
SEARCH_RESULTS_COUNT: int = 5

# Database paths
DB_PATH: str = os.environ.get("AURA_DB_PATH", "data/aura/consultations.db")
TABLE_NAME: str = "saved_consultations"

# Geocoding - Local lookup table for cities served by partner clinics and gyms
CITY_COORDINATES: dict[str, tuple[float, float]] = {
    "dubai": (25.2048, 55.2708),
    "abu dhabi": (24.4539, 54.3773),
    "riyadh": (24.7136, 46.6753),
    "jeddah": (21.4858, 39.1925),
    "doha": (25.2854, 51.5310),
    "kuwait city": (29.3759, 47.9774),
    "cairo": (30.0444, 31.2357),
    "istanbul": (41.0082, 28.9784),
    "london": (51.5074, -0.1278),
    "paris": (48.8566, 2.3522),
    "milan": (45.4642, 9.1900),
    "seoul": (37.5665, 126.9780),
    "los angeles": (34.0522, -118.2437),
    "new york": (40.7128, -74.0060),
}
