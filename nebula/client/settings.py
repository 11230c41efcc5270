"""Typed access to the user's local settings store.

The store is a single JSON document. Two collections in it make up the
installed package set:

- ``nebula||themes`` -- installed theme identifiers
- ``nebula||plugins`` -- plugin descriptors ``{name, src, type, remove}``

A plugin descriptor with ``remove: true`` is logically uninstalled; the
service worker drops it on its next start.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

THEMES_KEY = "nebula||themes"
PLUGINS_KEY = "nebula||plugins"
ACTIVE_THEME_KEY = "nebula||theme"


class PluginType(str, Enum):
    """Where an installed plugin runs."""

    page = "page"
    service_worker = "serviceWorker"


@dataclass
class PluginDescriptor:
    name: str
    type: PluginType
    src: str = ""
    remove: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.type, str):
            self.type = PluginType(self.type)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "src": self.src, "type": self.type.value, "remove": self.remove}


@dataclass
class ThemeSettings:
    """The theme currently applied to the proxy pages."""

    name: str
    payload: str
    video: Optional[str] = None
    bg_image: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "payload": self.payload,
            "video": self.video,
            "bgImage": self.bg_image,
        }


class SettingsBackend(Protocol):
    """Persistence for the raw settings document."""

    def read(self) -> dict[str, Any]: ...

    def write(self, data: dict[str, Any]) -> None: ...


class JsonFileSettingsBackend:
    """Settings document kept as a JSON file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, OSError):
            logger.warning("Ignoring unreadable settings file %s", self.path)
            return {}

    def write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2))


class SettingsRepository:
    """Typed get/set over a :class:`SettingsBackend`.

    Reads are served from an in-memory copy of the document. Every write goes
    straight to the backend and drops the copy; :meth:`refresh` drops it too,
    so the next read sees whatever another view persisted in the meantime.
    """

    def __init__(self, backend: SettingsBackend) -> None:
        self._backend = backend
        self._cache: Optional[dict[str, Any]] = None

    def refresh(self) -> None:
        self._cache = None

    def _document(self) -> dict[str, Any]:
        if self._cache is None:
            self._cache = self._backend.read()
        return self._cache

    def _set(self, key: str, value: Any) -> None:
        data = dict(self._backend.read())
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        self._backend.write(data)
        self._cache = None

    # ------------------------------------------------------------------
    # Themes
    # ------------------------------------------------------------------

    def installed_themes(self) -> list[str]:
        raw = self._document().get(THEMES_KEY)
        if not isinstance(raw, list):
            return []
        return [t for t in raw if isinstance(t, str)]

    def set_installed_themes(self, themes: list[str]) -> None:
        self._set(THEMES_KEY, list(themes))

    def active_theme(self) -> Optional[ThemeSettings]:
        raw = self._document().get(ACTIVE_THEME_KEY)
        if not isinstance(raw, dict) or "name" not in raw:
            return None
        return ThemeSettings(
            name=raw["name"],
            payload=raw.get("payload", ""),
            video=raw.get("video"),
            bg_image=raw.get("bgImage"),
        )

    def set_active_theme(self, theme: Optional[ThemeSettings]) -> None:
        self._set(ACTIVE_THEME_KEY, theme.to_dict() if theme else None)

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def installed_plugins(self) -> list[PluginDescriptor]:
        raw = self._document().get(PLUGINS_KEY)
        if not isinstance(raw, list):
            return []
        plugins = []
        for item in raw:
            try:
                plugins.append(
                    PluginDescriptor(
                        name=item["name"],
                        type=item["type"],
                        src=item.get("src", ""),
                        remove=bool(item.get("remove", False)),
                    )
                )
            except (KeyError, TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed plugin entry: %r", item)
        return plugins

    def set_installed_plugins(self, plugins: list[PluginDescriptor]) -> None:
        self._set(PLUGINS_KEY, [p.to_dict() for p in plugins])
