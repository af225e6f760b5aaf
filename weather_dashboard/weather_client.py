import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from .cache import TTLCache
from .errors import HttpStatusError, NetworkError, ParseError
from .schemas import ForecastDocument
from .settings import settings

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "weather_"


def cache_key_for(city: str) -> str:
    """Return the cache key addressing `city`'s forecast (case-sensitive)."""
    return f"{CACHE_KEY_PREFIX}{city}"


class WeatherClient:
    """Async client for the weather forecast API, fronted by a TTL cache.

    Parameters
    ----------
    cache : TTLCache
        Cache owned by the application and shared with the refresh loop.
    base_url : Optional[str]
        Base URL for API endpoints. Defaults to `settings.api_base_url`.
    api_key : Optional[str]
        API key sent as the `key` query parameter. Defaults to `settings.api_key`.
    transport : Optional[httpx.AsyncBaseTransport]
        Transport handed to `httpx.AsyncClient`; tests pass a `MockTransport`.

    Notes
    -----
    - Concurrent calls for the same city are not coalesced; each issues its
      own request and the last response to arrive overwrites the cache.
    - Failed fetches never modify the cache.
    """

    def __init__(
        self,
        cache: TTLCache,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.cache = cache
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.api_key = settings.api_key if api_key is None else api_key
        self.days = settings.forecast_days
        self.timeout = settings.http_timeout
        self._transport = transport

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        """Perform a GET request against `{base_url}/{path}` and parse the JSON body.

        Raises
        ------
        httpx.HTTPStatusError
            If the response status is not 2xx.
        httpx.RequestError
            For transport-level errors (DNS, timeouts, etc.).
        ValueError
            If the body is not valid JSON.
        """

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            r = await client.get(f"{self.base_url}/{path}", params=params)
            r.raise_for_status()
            return r.json()

    async def fetch_forecast(self, city: str, force_refresh: bool = False) -> Dict[str, Any]:
        """Return the forecast document for `city`, preferring the cache.

        Parameters
        ----------
        city : str
            City name or identifier, passed through to the API as `q`.
        force_refresh : bool
            Skip the cache lookup and always contact the API.

        Returns
        -------
        Dict[str, Any]
            Raw `forecast.json` payload (location, current, forecast, ...).

        Raises
        ------
        NetworkError
            If the request failed to complete.
        HttpStatusError
            If the API answered with a non-2xx status.
        ParseError
            If the body is not JSON or lacks the expected forecast fields.
        """

        key = cache_key_for(city)
        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        params = {"key": self.api_key, "q": city, "days": self.days, "aqi": "yes"}
        try:
            data = await self._get_json("forecast.json", params)
        except httpx.HTTPStatusError as exc:
            logger.error("Forecast fetch for %s failed with HTTP %s", city, exc.response.status_code)
            raise HttpStatusError(city, exc.response.status_code) from exc
        except httpx.RequestError as exc:
            logger.error("Forecast fetch for %s failed: %s", city, exc)
            raise NetworkError(f"Request for {city} failed: {exc}", city=city) from exc
        except ValueError as exc:
            logger.error("Forecast body for %s is not JSON: %s", city, exc)
            raise ParseError(f"Malformed response body for {city}", city=city) from exc

        try:
            ForecastDocument.model_validate(data)
        except ValidationError as exc:
            logger.error("Forecast body for %s failed validation: %s", city, exc)
            raise ParseError(f"Malformed forecast document for {city}", city=city) from exc

        self.cache.set(key, data)
        return data

    async def search_cities(self, query: str) -> List[Dict[str, Any]]:
        """Look up cities matching `query` for the search box.

        Returns an empty list for a blank query or when the lookup fails;
        search results are never cached.
        """

        if not query or not query.strip():
            return []
        try:
            data = await self._get_json("search.json", {"key": self.api_key, "q": query.strip()})
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("City search for %r failed: %s", query, exc)
            return []
        return data if isinstance(data, list) else []
