from typing import List, Optional

from pydantic import BaseModel


class Location(BaseModel):
    name: str
    country: str


class Condition(BaseModel):
    code: int
    text: str


class Current(BaseModel):
    """Current conditions block of a forecast document (metric fields only)."""

    temp_c: float
    condition: Condition
    humidity: float
    wind_kph: float
    wind_dir: str
    vis_km: float
    pressure_mb: float


class DaySummary(BaseModel):
    maxtemp_c: float
    mintemp_c: float


class HourPoint(BaseModel):
    time: str
    temp_c: float
    feelslike_c: float


class ForecastDay(BaseModel):
    date: str
    day: DaySummary
    hour: List[HourPoint] = []


class Forecast(BaseModel):
    forecastday: List[ForecastDay]


class ForecastDocument(BaseModel):
    """Minimal shape of a `forecast.json` response.

    Notes
    -----
    - Used to reject malformed bodies. The raw JSON object, not this model,
      is what gets cached and returned.
    - Extra fields (air quality, astro, alerts, ...) are ignored.
    """

    location: Location
    current: Current
    forecast: Forecast


class CityCard(BaseModel):
    city: str
    name: Optional[str] = None
    country: Optional[str] = None
    unit: str
    temperature: Optional[float] = None
    condition: Optional[str] = None
    condition_code: Optional[int] = None
    category: Optional[str] = None
    background: Optional[str] = None
    humidity: Optional[float] = None
    wind_kph: Optional[float] = None
    wind_dir: Optional[str] = None
    vis_km: Optional[float] = None
    pressure_mb: Optional[float] = None
    daily: List[dict] = []
    hourly: List[dict] = []
    favorite: bool = False
    error: Optional[str] = None
    updated_at: Optional[float] = None


class CitiesResponse(BaseModel):
    count: int
    last_update: Optional[float] = None
    data: List[CityCard]


class PreferencesResponse(BaseModel):
    favorites: List[str]
    unit: str


class UnitUpdate(BaseModel):
    unit: str
