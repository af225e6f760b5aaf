"""FastAPI application serving the weather dashboard's data."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Callable, Optional

import httpx
from fastapi import FastAPI, HTTPException, Query, Request

from .cache import TTLCache
from .dashboard import Dashboard
from .errors import FetchError, register_error_handlers
from .preferences import UNITS, PreferencesStore
from .scheduler import RefreshScheduler
from .schemas import CitiesResponse, PreferencesResponse, UnitUpdate
from .settings import settings
from .weather_client import WeatherClient

if settings.is_production:
    logging.basicConfig(
        level=logging.INFO,
        format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
        stream=sys.stdout,
    )
else:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)


def _check_unit(unit: Optional[str]) -> None:
    if unit is not None and unit not in UNITS:
        raise HTTPException(status_code=400, detail=f"Unsupported unit: {unit}. Supported: {list(UNITS)}")


def create_app(
    transport: Optional[httpx.AsyncBaseTransport] = None,
    preferences_path: Optional[str] = None,
    clock: Optional[Callable[[], float]] = None,
) -> FastAPI:
    """Build the app. The cache, client, dashboard and refresh loop live on `app.state`.

    Parameters
    ----------
    transport : Optional[httpx.AsyncBaseTransport]
        Transport for outbound weather API calls (tests pass a `MockTransport`).
    preferences_path : Optional[str]
        Where favorites and unit are stored. Defaults to `settings.preferences_path`.
    clock : Optional[Callable[[], float]]
        Time source shared by the cache and the dashboard.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        cache = TTLCache(settings.cache_ttl, clock=clock)
        client = WeatherClient(cache, transport=transport)
        preferences = PreferencesStore(preferences_path or settings.preferences_path)
        dashboard = Dashboard(preferences, clock=clock)
        scheduler = RefreshScheduler(client, dashboard.tracked_cities, on_result=dashboard.record)

        app.state.cache = cache
        app.state.client = client
        app.state.preferences = preferences
        app.state.dashboard = dashboard
        app.state.scheduler = scheduler

        if not settings.api_key:
            logger.warning("WEATHER_API_KEY is not set; forecast requests will be rejected upstream")
        scheduler.start()

        yield

        await scheduler.stop()
        await scheduler.wait_idle()

    app = FastAPI(title="Weather Dashboard API", version="1.0.0", lifespan=lifespan)
    register_error_handlers(app)

    @app.get("/health")
    async def health():
        """Liveness probe; no external calls."""
        return {"status": "ok"}

    @app.get("/v1/forecast/{city}")
    async def forecast(
        request: Request,
        city: str,
        refresh: bool = Query(False, description="Bypass the cache and contact the weather API"),
    ):
        """Return the raw forecast document for `city`.

        Served from the in-memory cache while fresh unless `refresh` is set.
        A failed upstream call answers 502 and leaves the cache untouched.
        """

        data = await request.app.state.client.fetch_forecast(city, force_refresh=refresh)
        dashboard: Dashboard = request.app.state.dashboard
        if city in dashboard.tracked_cities():
            dashboard.record(city, data, None)
        return data

    @app.get("/v1/cities", response_model=CitiesResponse)
    async def cities(request: Request, unit: Optional[str] = Query(None, description="C or F; defaults to the saved unit")):
        """Weather cards for every tracked city, favorites first."""
        _check_unit(unit)
        dashboard: Dashboard = request.app.state.dashboard
        cards = dashboard.cards(unit)
        return {"count": len(cards), "last_update": dashboard.last_update, "data": cards}

    @app.get("/v1/search")
    async def search(request: Request, q: str = Query("", description="Partial city name")):
        items = await request.app.state.client.search_cities(q)
        return {"count": len(items), "data": items}

    @app.get("/v1/preferences", response_model=PreferencesResponse)
    async def get_preferences(request: Request):
        return request.app.state.preferences.load()

    @app.put("/v1/preferences/unit", response_model=PreferencesResponse)
    async def set_unit(request: Request, body: UnitUpdate):
        _check_unit(body.unit)
        preferences: PreferencesStore = request.app.state.preferences
        preferences.set_unit(body.unit)
        return preferences.load()

    @app.post("/v1/favorites/{city}", response_model=PreferencesResponse)
    async def add_favorite(request: Request, city: str):
        """Mark `city` as a favorite and load its forecast so its card is populated."""
        preferences: PreferencesStore = request.app.state.preferences
        preferences.add_favorite(city)
        try:
            data = await request.app.state.client.fetch_forecast(city)
        except FetchError as exc:
            request.app.state.dashboard.record(city, None, exc)
        else:
            request.app.state.dashboard.record(city, data, None)
        return preferences.load()

    @app.delete("/v1/favorites/{city}", response_model=PreferencesResponse)
    async def remove_favorite(request: Request, city: str):
        preferences: PreferencesStore = request.app.state.preferences
        preferences.remove_favorite(city)
        request.app.state.dashboard.prune()
        return preferences.load()

    @app.delete("/v1/cache")
    async def clear_cache(request: Request):
        request.app.state.cache.clear()
        return {"status": "cleared"}

    return app


app = create_app()
