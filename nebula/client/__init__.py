"""Client side of the marketplace: installed-package settings and the
install/uninstall state machine behind the package detail view."""

from nebula.client.catalog_client import CatalogClient
from nebula.client.install import InstallService, build_install_message
from nebula.client.package_view import (
    InstallState,
    MediaBranch,
    MediaSelection,
    PackageView,
    select_media,
)
from nebula.client.settings import (
    JsonFileSettingsBackend,
    PluginDescriptor,
    PluginType,
    SettingsRepository,
    ThemeSettings,
)

__all__ = [
    "CatalogClient",
    "InstallService",
    "InstallState",
    "JsonFileSettingsBackend",
    "MediaBranch",
    "MediaSelection",
    "PackageView",
    "PluginDescriptor",
    "PluginType",
    "SettingsRepository",
    "ThemeSettings",
    "build_install_message",
    "select_media",
]
