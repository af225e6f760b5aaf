"""Dashboard view state: which cities are tracked and what was last fetched for each."""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .preferences import FAVORITES_KEY, UNIT_KEY, PreferencesStore
from .settings import settings


# Condition codes as reported in `current.condition.code`
WEATHER_BACKGROUNDS = {
    1000: "clear-sky",
    1003: "partly-cloudy",
    1006: "cloudy",
    1063: "rainy",
    1066: "snowy",
}
_CLOUDY_CODES = {1003, 1006, 1009}
_RAINY_CODES = {1063, 1180, 1183, 1186, 1189, 1192, 1195}


def convert_temp(temp_c: float, unit: str) -> float:
    """Convert a Celsius reading to `unit` ("C" or "F"), rounded to one decimal."""
    if unit == "F":
        return round(temp_c * 9 / 5 + 32, 1)
    return round(temp_c, 1)


def background_for(code: Optional[int]) -> str:
    condition = WEATHER_BACKGROUNDS.get(code, "clear-sky")
    return f"https://source.unsplash.com/1920x1080/?weather,{condition}"


def category_for(code: Optional[int]) -> str:
    if code in _CLOUDY_CODES:
        return "cloudy"
    if code in _RAINY_CODES:
        return "rainy"
    return "sunny"


@dataclass
class CityWeather:
    city: str
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    updated_at: Optional[float] = None


class Dashboard:
    """Latest per-city results, fed by the refresh loop and read by the API.

    A failed refresh records the error but keeps the previous data so the
    card keeps showing the last known conditions.
    """

    def __init__(
        self,
        preferences: PreferencesStore,
        default_cities: Optional[List[str]] = None,
        max_cities: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.preferences = preferences
        self.default_cities = list(settings.default_cities if default_cities is None else default_cities)
        self.max_cities = settings.max_tracked_cities if max_cities is None else max_cities
        self._clock = clock or time.time
        self._results: Dict[str, CityWeather] = {}
        self._lock = threading.Lock()
        self.last_update: Optional[float] = None

    def tracked_cities(self, favorites: Optional[List[str]] = None) -> List[str]:
        """Favorites first, then the default cities, without duplicates, capped at `max_cities`."""
        if favorites is None:
            favorites = self.preferences.favorites()
        cities: List[str] = []
        for city in favorites + self.default_cities:
            if city not in cities:
                cities.append(city)
        return cities[: self.max_cities]

    def record(self, city: str, data: Optional[Dict[str, Any]], error: Optional[Exception]) -> None:
        now = self._clock()
        with self._lock:
            entry = self._results.setdefault(city, CityWeather(city=city))
            if error is not None:
                entry.error = str(error)
                return
            entry.data = data
            entry.error = None
            entry.updated_at = now
            self.last_update = now

    def prune(self) -> List[str]:
        """Forget results for cities that are no longer tracked; returns the dropped names."""
        tracked = set(self.tracked_cities())
        with self._lock:
            dropped = [city for city in self._results if city not in tracked]
            for city in dropped:
                del self._results[city]
        return dropped

    def latest(self, city: str) -> Optional[CityWeather]:
        with self._lock:
            return self._results.get(city)

    def summary(self, city: str, unit: str, favorites: Optional[List[str]] = None) -> Dict[str, Any]:
        """Flatten the latest payload for `city` into the fields a weather card shows."""
        if favorites is None:
            favorites = self.preferences.favorites()
        entry = self.latest(city) or CityWeather(city=city)
        card: Dict[str, Any] = {
            "city": city,
            "unit": unit,
            "favorite": city in favorites,
            "error": entry.error,
            "updated_at": entry.updated_at,
        }
        if entry.data is None:
            return card

        location = entry.data["location"]
        current = entry.data["current"]
        code = current["condition"]["code"]
        days = entry.data["forecast"]["forecastday"]
        card.update(
            {
                "name": location["name"],
                "country": location["country"],
                "temperature": convert_temp(current["temp_c"], unit),
                "condition": current["condition"]["text"],
                "condition_code": code,
                "category": category_for(code),
                "background": background_for(code),
                "humidity": current["humidity"],
                "wind_kph": current["wind_kph"],
                "wind_dir": current["wind_dir"],
                "vis_km": current["vis_km"],
                "pressure_mb": current["pressure_mb"],
                "daily": [
                    {
                        "date": d["date"],
                        "max": convert_temp(d["day"]["maxtemp_c"], unit),
                        "min": convert_temp(d["day"]["mintemp_c"], unit),
                    }
                    for d in days
                ],
                "hourly": [
                    {
                        "time": h["time"],
                        "temp": convert_temp(h["temp_c"], unit),
                        "feels_like": convert_temp(h["feelslike_c"], unit),
                    }
                    for h in (days[0].get("hour", []) if days else [])
                ],
            }
        )
        return card

    def cards(self, unit: Optional[str] = None) -> List[Dict[str, Any]]:
        """Summaries for every tracked city, reading preferences once."""
        prefs = self.preferences.load()
        unit = unit or prefs[UNIT_KEY]
        favorites = prefs[FAVORITES_KEY]
        return [self.summary(city, unit, favorites) for city in self.tracked_cities(favorites)]
