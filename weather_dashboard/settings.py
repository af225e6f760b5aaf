from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the dashboard service.

    Notes
    -----
    - Every field can be overridden from the environment with the `WEATHER_`
      prefix (e.g. `WEATHER_API_KEY`, `WEATHER_CACHE_TTL`); `environment`
      is read from plain `ENVIRONMENT`.
    - `cache_ttl` and `refresh_interval` are expressed in seconds. A cached
      forecast is fresh while it is younger than `cache_ttl`; the refresh loop
      force-refreshes every tracked city once per `refresh_interval`.
    """

    model_config = SettingsConfigDict(env_prefix="WEATHER_", populate_by_name=True)

    api_base_url: str = "https://api.weatherapi.com/v1"
    api_key: str = ""
    cache_ttl: int = Field(default=60, gt=0)
    refresh_interval: int = Field(default=60, gt=0)
    http_timeout: int = Field(default=20, gt=0)
    forecast_days: int = 7
    preferences_path: str = "preferences.json"
    environment: str = Field(default="local", validation_alias="ENVIRONMENT")
    # Cities shown when the user has no favorites (favorites are listed first otherwise)
    default_cities: List[str] = [
        "London", "New York", "Tokyo", "Paris", "Sydney", "Mumbai",
        "Dubai", "Singapore", "Hong Kong", "Berlin", "Toronto", "Barcelona",
        "Rome", "Amsterdam", "Seoul", "Bangkok",
    ]
    max_tracked_cities: int = 16

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


settings = Settings()
