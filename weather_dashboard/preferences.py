import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

FAVORITES_KEY = "favorites"
UNIT_KEY = "unit"
UNITS = ("C", "F")

DEFAULT_UNIT = "C"


class PreferencesStore:
    """User favorites and temperature unit, persisted as a JSON document.

    Stands in for the browser key-value store: `favorites` holds a JSON array
    of city identifiers and `unit` holds `"C"` or `"F"`.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        """Read all preferences, falling back to defaults for anything missing or unreadable."""
        prefs: Dict[str, Any] = {FAVORITES_KEY: [], UNIT_KEY: DEFAULT_UNIT}
        try:
            if not self.path.exists():
                return prefs
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Preferences read failed, using defaults: %s", e)
            return prefs

        if isinstance(stored, dict):
            if isinstance(stored.get(FAVORITES_KEY), list):
                prefs[FAVORITES_KEY] = [str(c) for c in stored[FAVORITES_KEY]]
            if stored.get(UNIT_KEY) in UNITS:
                prefs[UNIT_KEY] = stored[UNIT_KEY]
        return prefs

    def save(self, key: str, value: Any) -> None:
        prefs = self.load()
        prefs[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(prefs, f)

    def favorites(self) -> List[str]:
        return self.load()[FAVORITES_KEY]

    def add_favorite(self, city: str) -> List[str]:
        favorites = list(self.favorites())
        if city not in favorites:
            favorites.append(city)
            self.save(FAVORITES_KEY, favorites)
        return favorites

    def remove_favorite(self, city: str) -> List[str]:
        favorites = [c for c in self.favorites() if c != city]
        self.save(FAVORITES_KEY, favorites)
        return favorites

    def unit(self) -> str:
        return self.load()[UNIT_KEY]

    def set_unit(self, unit: str) -> str:
        if unit not in UNITS:
            raise ValueError(f"Unsupported unit: {unit}. Supported: {list(UNITS)}")
        self.save(UNIT_KEY, unit)
        return unit
