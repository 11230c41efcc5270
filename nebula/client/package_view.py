"""Package detail view: media branch and install/uninstall state machine.

States are ``NotInstalled`` and ``Installed``. :meth:`PackageView.load`
fetches the record and derives the state from the persisted settings; it is
meant to run once per view activation. ``install`` is only valid from
``NotInstalled`` and ``uninstall`` only from ``Installed``. The state changes
after the install service call completes; a failed call propagates and
leaves the state as it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nebula.catalog.models import CatalogRecord, PackageType
from nebula.client.catalog_client import CatalogClient
from nebula.client.install import InstallService, build_install_message
from nebula.client.settings import SettingsRepository
from nebula.errors import InvalidTransitionError


class InstallState(str, Enum):
    not_installed = "NotInstalled"
    installed = "Installed"


class MediaBranch(str, Enum):
    video = "video"
    background_image = "background_image"
    image = "image"


@dataclass
class MediaSelection:
    branch: MediaBranch
    src: str


def select_media(record: CatalogRecord, asset_base: str = "/packages") -> MediaSelection:
    """Pick the one media branch to render: video, then background image, then image."""
    base = f"{asset_base.rstrip('/')}/{record.package_name}"
    if record.background_video:
        return MediaSelection(MediaBranch.video, f"{base}/{record.background_video}")
    if record.background_image:
        return MediaSelection(MediaBranch.background_image, f"{base}/{record.background_image}")
    return MediaSelection(MediaBranch.image, f"{base}/{record.image}")


def is_installed(record: CatalogRecord, settings: SettingsRepository) -> bool:
    if record.type is PackageType.theme:
        return record.package_name in settings.installed_themes()
    return any(
        p.name == record.package_name and not p.remove for p in settings.installed_plugins()
    )


class PackageView:
    """Client-side view of one catalog package."""

    def __init__(
        self,
        package_name: str,
        catalog: CatalogClient,
        settings: SettingsRepository,
        installer: InstallService,
        asset_base: str = "/packages",
    ) -> None:
        self.package_name = package_name
        self.catalog = catalog
        self.settings = settings
        self.installer = installer
        self.asset_base = asset_base
        self.record: Optional[CatalogRecord] = None
        self.media: Optional[MediaSelection] = None
        self.state = InstallState.not_installed

    @property
    def can_install(self) -> bool:
        return self.record is not None and self.state is InstallState.not_installed

    @property
    def can_uninstall(self) -> bool:
        return self.record is not None and self.state is InstallState.installed

    async def load(self) -> InstallState:
        self.record = await self.catalog.get_package(self.package_name)
        self.media = select_media(self.record, self.asset_base)
        self.settings.refresh()
        self.state = (
            InstallState.installed
            if is_installed(self.record, self.settings)
            else InstallState.not_installed
        )
        return self.state

    async def install(self) -> InstallState:
        if not self.can_install:
            raise InvalidTransitionError(f"Cannot install {self.package_name} from {self.state.value}")
        await self.installer.install(self.package_name, build_install_message(self.record))
        self.state = InstallState.installed
        return self.state

    async def uninstall(self) -> InstallState:
        if not self.can_uninstall:
            raise InvalidTransitionError(
                f"Cannot uninstall {self.package_name} from {self.state.value}"
            )
        await self.installer.uninstall(self.record.type, self.package_name)
        self.state = InstallState.not_installed
        return self.state
