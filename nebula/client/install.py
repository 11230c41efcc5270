"""Settings-side install service.

Install requests arrive as the messages the package view dispatches::

    {"theme": {"payload": ..., "video": ..., "bgImage": ...}}
    {"plugin": {"name": ..., "src": ..., "type": "page" | "serviceWorker"}}

and are applied to the local settings store.
"""

from __future__ import annotations

import logging
from typing import Any

from nebula.catalog.models import CatalogRecord, PackageType
from nebula.client.settings import PluginDescriptor, PluginType, SettingsRepository, ThemeSettings

logger = logging.getLogger(__name__)


def build_install_message(record: CatalogRecord) -> dict[str, Any]:
    """Return the install message for *record*, shaped by its package type."""
    if record.type is PackageType.theme:
        return {
            "theme": {
                "payload": record.payload,
                "video": record.background_video,
                "bgImage": record.background_image,
            }
        }
    plugin_type = PluginType.page if record.type is PackageType.plugin_page else PluginType.service_worker
    return {
        "plugin": {
            "name": record.package_name,
            "src": record.payload,
            "type": plugin_type.value,
        }
    }


class InstallService:
    """Applies install/uninstall requests to a :class:`SettingsRepository`."""

    def __init__(self, settings: SettingsRepository) -> None:
        self.settings = settings

    async def install(self, package_name: str, message: dict[str, Any]) -> None:
        if "theme" in message:
            theme = message["theme"]
            themes = self.settings.installed_themes()
            if package_name not in themes:
                self.settings.set_installed_themes(themes + [package_name])
            self.settings.set_active_theme(
                ThemeSettings(
                    name=package_name,
                    payload=theme.get("payload", ""),
                    video=theme.get("video"),
                    bg_image=theme.get("bgImage"),
                )
            )
        elif "plugin" in message:
            plugin = message["plugin"]
            descriptor = PluginDescriptor(
                name=plugin["name"], type=plugin["type"], src=plugin.get("src", "")
            )
            others = [p for p in self.settings.installed_plugins() if p.name != descriptor.name]
            self.settings.set_installed_plugins(others + [descriptor])
        else:
            raise ValueError(f"Unknown install message: {sorted(message)}")
        logger.info("Installed %s", package_name)

    async def uninstall(self, package_type: PackageType, package_name: str) -> None:
        if package_type is PackageType.theme:
            themes = self.settings.installed_themes()
            self.settings.set_installed_themes([t for t in themes if t != package_name])
            active = self.settings.active_theme()
            if active is not None and active.name == package_name:
                self.settings.set_active_theme(None)
        else:
            plugins = self.settings.installed_plugins()
            for plugin in plugins:
                if plugin.name == package_name:
                    plugin.remove = True
            self.settings.set_installed_plugins(plugins)
        logger.info("Uninstalled %s", package_name)
