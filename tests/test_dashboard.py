import pytest

from weather_dashboard.dashboard import Dashboard, background_for, category_for, convert_temp
from weather_dashboard.errors import HttpStatusError
from weather_dashboard.preferences import PreferencesStore

from .conftest import make_forecast


@pytest.fixture
def preferences(tmp_path):
    return PreferencesStore(tmp_path / "prefs.json")


@pytest.fixture
def dashboard(preferences, clock):
    return Dashboard(preferences, default_cities=["London", "Paris", "Tokyo"], max_cities=3, clock=clock)


@pytest.mark.parametrize(
    "temp, unit, expected",
    [(0, "C", 0), (0, "F", 32.0), (100, "F", 212.0), (-40, "F", -40.0), (21.46, "C", 21.5)],
)
def test_convert_temp(temp, unit, expected):
    assert convert_temp(temp, unit) == expected


def test_condition_helpers():
    assert category_for(1000) == "sunny"
    assert category_for(1006) == "cloudy"
    assert category_for(1189) == "rainy"
    assert category_for(9999) == "sunny"
    assert background_for(1066).endswith("weather,snowy")
    assert background_for(None).endswith("weather,clear-sky")


def test_tracked_cities_without_favorites(dashboard):
    assert dashboard.tracked_cities() == ["London", "Paris", "Tokyo"]


def test_favorites_come_first_deduplicated_and_capped(dashboard, preferences):
    preferences.add_favorite("Seoul")
    preferences.add_favorite("Paris")
    assert dashboard.tracked_cities() == ["Seoul", "Paris", "London"]


def test_record_success_updates_last_update(dashboard, clock):
    dashboard.record("London", make_forecast("London"), None)

    latest = dashboard.latest("London")
    assert latest.data["location"]["name"] == "London"
    assert latest.error is None
    assert latest.updated_at == clock.now
    assert dashboard.last_update == clock.now


def test_failed_refresh_keeps_previous_data(dashboard, clock):
    dashboard.record("Paris", make_forecast("Paris", temp_c=18.0), None)
    clock.advance(60)
    dashboard.record("Paris", None, HttpStatusError("Paris", 500))

    latest = dashboard.latest("Paris")
    assert latest.data["current"]["temp_c"] == 18.0
    assert "HTTP 500" in latest.error
    assert dashboard.last_update == clock.now - 60


def test_summary_in_fahrenheit(dashboard, preferences):
    preferences.add_favorite("London")
    dashboard.record("London", make_forecast("London", temp_c=10.0), None)

    card = dashboard.summary("London", "F")

    assert card["favorite"] is True
    assert card["name"] == "London"
    assert card["country"] == "United Kingdom"
    assert card["temperature"] == 50.0
    assert card["condition"] == "Partly cloudy"
    assert card["category"] == "cloudy"
    assert card["daily"][0] == {"date": "2026-10-19", "max": 57.2, "min": 44.6}
    assert card["hourly"][0] == {"time": "2026-10-19 00:00", "temp": 46.4, "feels_like": 42.8}
    assert len(card["daily"]) == 2


def test_cards_use_saved_unit_and_include_unloaded_cities(dashboard, preferences):
    preferences.set_unit("F")
    dashboard.record("Tokyo", make_forecast("Tokyo", temp_c=20.0), None)

    cards = dashboard.cards()

    assert [c["city"] for c in cards] == ["London", "Paris", "Tokyo"]
    assert cards[0]["unit"] == "F"
    assert "temperature" not in cards[0]
    assert cards[2]["temperature"] == 68.0


def test_prune_drops_cities_no_longer_tracked(dashboard, preferences):
    preferences.add_favorite("Seoul")
    dashboard.record("Seoul", make_forecast("Seoul"), None)
    dashboard.record("London", make_forecast("London"), None)

    preferences.remove_favorite("Seoul")

    assert dashboard.prune() == ["Seoul"]
    assert dashboard.latest("Seoul") is None
    assert dashboard.latest("London") is not None


def test_cards_read_preferences_once(dashboard, preferences, monkeypatch):
    preferences.add_favorite("London")
    loads = []
    original_load = preferences.load

    def counting_load():
        loads.append(1)
        return original_load()

    monkeypatch.setattr(preferences, "load", counting_load)

    cards = dashboard.cards()

    assert len(cards) == 3
    assert cards[0]["favorite"] is True
    assert len(loads) == 1
