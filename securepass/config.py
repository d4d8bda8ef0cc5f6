"""
SecurePass persistent configuration.

Loads/saves settings from ~/.securepass/config.json.
"""

import copy
import json
from pathlib import Path
from typing import Any, Optional

from securepass.core.charclass import CharacterClass
from securepass.core.log import get_logger
from securepass.core.recipe import InclusionState, Recipe

logger = get_logger('config')


DEFAULTS = {
    "generator": {
        "length": 20,
        "count": 5,
        "classes": {
            "upper": "allow",
            "lower": "allow",
            "digit": "allow",
            "symbol": "allow",
            "ambiguous": "exclude",
            "whitespace": "unstated",
        },
        "include_extra": "",
        "exclude_extra": "",
    },
    "health": {
        "self_test": False,
    },
    "logging": {
        "level": "WARNING",
    },
}

CONFIG_DIR = Path.home() / ".securepass"
CONFIG_FILE = CONFIG_DIR / "config.json"


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge override into base, returning a new dict."""
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Config:
    """Persistent configuration with deep-merge defaults."""

    def __init__(self, config_file: Optional[Path] = None):
        self._file = Path(config_file) if config_file else CONFIG_FILE
        self._data = self._load()

    @property
    def path(self) -> Path:
        return self._file

    def _load(self) -> dict:
        """Load config from file, deep-merged with defaults."""
        if self._file.exists():
            try:
                with open(self._file, 'r', encoding='utf-8') as f:
                    user_data = json.load(f)
                if isinstance(user_data, dict):
                    return _deep_merge(DEFAULTS, user_data)
                logger.warning("Ignoring %s: top level is not a JSON object", self._file)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning("Ignoring unreadable config %s: %s", self._file, e)
        return copy.deepcopy(DEFAULTS)

    def get(self, section: str, key: str) -> Any:
        """Get a config value."""
        values = self._data.get(section)
        if not isinstance(values, dict):
            return None
        return values.get(key)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set a config value."""
        if not isinstance(self._data.get(section), dict):
            self._data[section] = {}
        self._data[section][key] = value

    def save(self) -> None:
        """Save config to file."""
        self._file.parent.mkdir(parents=True, exist_ok=True)
        with open(self._file, 'w', encoding='utf-8') as f:
            json.dump(self._data, f, indent=2)

    def recipe(self) -> Recipe:
        """
        Build a Recipe from the generator section.

        Raises:
            ValueError: If a class name, state or extra is malformed
            InvalidLength: If the configured length is below 1
        """
        classes = self.get("generator", "classes") or {}
        if not isinstance(classes, dict):
            raise ValueError(f"Config generator.classes must be an object, got {classes!r}")
        states = {
            CharacterClass.parse(name): InclusionState.parse(state)
            for name, state in classes.items()
        }

        extras = {}
        for key in ("include_extra", "exclude_extra"):
            value = self.get("generator", key) or ""
            if not isinstance(value, str):
                raise ValueError(f"Config generator.{key} must be a string, got {value!r}")
            extras[key] = value

        return Recipe(
            length=self.get("generator", "length"),
            states=states,
            **extras,
        )

    def set_recipe(self, recipe: Recipe) -> None:
        """Store a recipe in the generator section."""
        for key, value in recipe.as_dict().items():
            self.set("generator", key, value)
