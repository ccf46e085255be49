"""User settings for the gottem editor.

Settings live in a JSON file in the OS-appropriate config directory and
survive application restarts. A missing or unreadable file yields the
defaults, so a first run needs no setup.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import platformdirs

from .constants import EditorConstants
from .errors import SettingsError
from .query import Provider

logger = logging.getLogger(__name__)


def _default_providers() -> List[Provider]:
    return [Provider(name, shortcut) for name, shortcut in EditorConstants.DEFAULT_PROVIDERS]


@dataclass
class Settings:
    wrap_width: int = EditorConstants.WRAP_WIDTH
    default_provider: Optional[str] = None
    save_after_query: bool = True
    log_level: str = "INFO"
    providers: List[Provider] = field(default_factory=_default_providers)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from parsed JSON, ignoring unknown keys.

        Raises:
            SettingsError: A known key holds a value the editor cannot use.
        """
        settings = cls()
        if "wrap_width" in data:
            width = data["wrap_width"]
            if not isinstance(width, int) or isinstance(width, bool) or width < EditorConstants.MIN_WRAP_WIDTH:
                raise SettingsError(f"wrap_width must be an integer >= {EditorConstants.MIN_WRAP_WIDTH}")
            settings.wrap_width = width
        if "save_after_query" in data:
            settings.save_after_query = bool(data["save_after_query"])
        if "log_level" in data:
            level = str(data["log_level"]).upper()
            if logging.getLevelName(level) == f"Level {level}":
                raise SettingsError(f"unknown log_level {data['log_level']!r}")
            settings.log_level = level
        if "providers" in data:
            settings.providers = _parse_providers(data["providers"])
        if data.get("default_provider") is not None:
            shortcut = str(data["default_provider"])
            if shortcut not in {p.shortcut for p in settings.providers}:
                raise SettingsError(f"default_provider {shortcut!r} is not a configured provider")
            settings.default_provider = shortcut
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wrap_width": self.wrap_width,
            "default_provider": self.default_provider,
            "save_after_query": self.save_after_query,
            "log_level": self.log_level,
            "providers": [{"name": p.name, "shortcut": p.shortcut} for p in self.providers],
        }

    def default_provider_index(self) -> int:
        for index, provider in enumerate(self.providers):
            if provider.shortcut == self.default_provider:
                return index
        return 0


def _parse_providers(raw: Any) -> List[Provider]:
    if not isinstance(raw, list) or not raw:
        raise SettingsError("providers must be a non-empty list")
    providers = []
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("name") or not entry.get("shortcut"):
            raise SettingsError(f"invalid provider entry {entry!r}")
        providers.append(Provider(str(entry["name"]), str(entry["shortcut"])))
    return providers


def settings_path() -> Path:
    return Path(platformdirs.user_config_dir(EditorConstants.APP_NAME)) / EditorConstants.SETTINGS_FILENAME


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Load settings from disk, falling back to defaults on any read problem.

    Raises:
        SettingsError: The file parsed but holds invalid values.
    """
    path = Path(path) if path is not None else settings_path()
    if not path.exists():
        return Settings()
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return Settings()
    if not isinstance(data, dict):
        logger.warning("Settings file has invalid format (not a dict), ignoring")
        return Settings()
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> bool:
    """Save settings atomically.

    Returns:
        True if save was successful, False otherwise.
    """
    path = Path(path) if path is not None else settings_path()
    temp_file = path.with_suffix(EditorConstants.ATOMIC_SAVE_SUFFIX)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(settings.to_dict(), f, indent=2)
        temp_file.replace(path)
        return True
    except OSError as e:
        logger.warning(f"Could not save settings to {path}: {e}")
        try:
            if temp_file.exists():
                temp_file.unlink()
        except OSError:
            pass
        return False
