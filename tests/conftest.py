"""
Shared fixtures for the weather dashboard tests.

Provides:
- a controllable clock so TTL expiry is tested without real waits
- a forecast document factory matching the `forecast.json` shape
- a recording MockTransport so tests can count and inspect outbound requests
"""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from weather_dashboard.cache import TTLCache


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_forecast(city: str = "London", temp_c: float = 10.0, country: str = "United Kingdom") -> Dict[str, Any]:
    """Build a minimal but complete forecast document for `city`."""
    return {
        "location": {"name": city, "country": country},
        "current": {
            "temp_c": temp_c,
            "condition": {"code": 1003, "text": "Partly cloudy"},
            "humidity": 71,
            "wind_kph": 13.0,
            "wind_dir": "WSW",
            "vis_km": 10.0,
            "pressure_mb": 1016.0,
        },
        "forecast": {
            "forecastday": [
                {
                    "date": "2026-10-19",
                    "day": {"maxtemp_c": temp_c + 4, "mintemp_c": temp_c - 3},
                    "hour": [
                        {"time": "2026-10-19 00:00", "temp_c": temp_c - 2, "feelslike_c": temp_c - 4},
                        {"time": "2026-10-19 01:00", "temp_c": temp_c - 1, "feelslike_c": temp_c - 3},
                    ],
                },
                {
                    "date": "2026-10-20",
                    "day": {"maxtemp_c": temp_c + 2, "mintemp_c": temp_c - 5},
                    "hour": [],
                },
            ]
        },
    }


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], Any]):
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def cities(self, path: Optional[str] = None) -> List[str]:
        return [
            r.url.params.get("q")
            for r in self.requests
            if path is None or r.url.path.endswith(path)
        ]


def forecast_handler(request: httpx.Request) -> httpx.Response:
    city = request.url.params.get("q")
    return httpx.Response(200, json=make_forecast(city))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TTLCache(60, clock=clock)


@pytest.fixture
def transport():
    return RecordingTransport(forecast_handler)
