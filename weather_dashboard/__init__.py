"""Weather dashboard data layer: TTL-cached forecast fetching with periodic refresh."""

from .cache import CacheEntry, TTLCache
from .errors import FetchError, HttpStatusError, NetworkError, ParseError
from .scheduler import RefreshScheduler
from .weather_client import WeatherClient, cache_key_for

__all__ = [
    "CacheEntry",
    "TTLCache",
    "FetchError",
    "HttpStatusError",
    "NetworkError",
    "ParseError",
    "RefreshScheduler",
    "WeatherClient",
    "cache_key_for",
]
