"""Asset directory manager.

Each package owns ``<assets_dir>/<package_name>/``, holding the files its
record references (images, background media, payload scripts/stylesheets).
The manager knows nothing about the catalog store; the mutation gateway
sequences the two.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from nebula.catalog.models import is_valid_identifier
from nebula.errors import AssetWriteError, BadRequestError, PackageConflictError

logger = logging.getLogger(__name__)


def safe_filename(filename: str | None) -> str:
    """Reduce an uploaded filename to its final path component.

    Raises :class:`BadRequestError` if nothing usable remains.
    """
    name = Path((filename or "").replace("\\", "/")).name
    if not name or name in (".", ".."):
        raise BadRequestError("Invalid file name!")
    return name


class AssetDirectoryManager:
    """One filesystem directory per package identifier."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def initialize(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, package_name: str) -> Path:
        if not is_valid_identifier(package_name):
            raise BadRequestError("Invalid package name!")
        return self.root / package_name

    def exists(self, package_name: str) -> bool:
        return self.path_for(package_name).is_dir()

    def create(self, package_name: str) -> Path:
        """Create the directory; raises :class:`PackageConflictError` if present."""
        path = self.path_for(package_name)
        self.root.mkdir(parents=True, exist_ok=True)
        try:
            path.mkdir()
        except FileExistsError as exc:
            raise PackageConflictError("Package already exists!") from exc
        logger.debug("Created asset directory %s", path)
        return path

    def write_file(self, package_name: str, filename: str, stream: BinaryIO) -> Path:
        """Copy *stream* into the package directory, replacing any existing file.

        Fails with :class:`AssetWriteError` when the directory does not exist.
        """
        target_dir = self.path_for(package_name)
        target = target_dir / safe_filename(filename)
        if not target_dir.is_dir():
            raise AssetWriteError(
                "File couldn't be uploaded! (Package most likely doesn't exist)"
            )
        try:
            with open(target, "wb") as out:
                shutil.copyfileobj(stream, out)
        except OSError as exc:
            logger.error("Writing %s failed: %s", target, exc)
            raise AssetWriteError(
                "File couldn't be uploaded! (Package most likely doesn't exist)"
            ) from exc
        return target

    def list_files(self, package_name: str) -> list[str]:
        path = self.path_for(package_name)
        if not path.is_dir():
            return []
        return sorted(p.name for p in path.iterdir() if p.is_file())
