"""Mutation gateway — the only write path into the catalog.

Two operations, each authorized on its own:

``create_package``
    feature flag -> pre-shared key -> conflict check -> insert record ->
    create asset directory. If the directory step fails the record is
    deleted again, so callers never observe a record without a directory.

``upload_asset``
    feature flag -> pre-shared key -> target header -> file present ->
    stream into ``<package>/<filename>``. A missing directory means the
    package does not exist and the upload fails.

Neither operation is serialized per identifier; two concurrent creates of
the same name are settled by the store's UNIQUE constraint and ``mkdir``.
"""

from __future__ import annotations

import hmac
import logging
from pathlib import Path
from typing import BinaryIO, Optional

from nebula.catalog.assets import AssetDirectoryManager, safe_filename
from nebula.catalog.models import CatalogRecord, is_valid_identifier
from nebula.catalog.store import CatalogStore
from nebula.config import MarketplaceConfig
from nebula.errors import (
    BadRequestError,
    InternalFailureError,
    MarketplaceDisabledError,
    PackageConflictError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


class MutationGateway:
    """Authorizes and sequences writes to the store and the asset directories."""

    def __init__(
        self,
        store: CatalogStore,
        assets: AssetDirectoryManager,
        config: MarketplaceConfig,
    ) -> None:
        self.store = store
        self.assets = assets
        self.config = config

    def authorize(self, credential: Optional[str]) -> None:
        """Raise unless the marketplace is enabled and *credential* matches."""
        if not self.config.enabled:
            raise MarketplaceDisabledError("Marketplace is disabled!")
        if not credential or not self.config.psk or not hmac.compare_digest(
            credential.encode("utf-8"), self.config.psk.encode("utf-8")
        ):
            raise UnauthorizedError("PSK isn't correct!")

    def create_package(self, credential: Optional[str], record: CatalogRecord) -> CatalogRecord:
        """Create the catalog record and its asset directory as one unit."""
        self.authorize(credential)
        name = record.package_name
        if not is_valid_identifier(name):
            raise BadRequestError("Invalid package name!")

        if self.assets.exists(name) or self.store.get(name) is not None:
            logger.warning("Refusing to create %s: package already exists", name)
            raise PackageConflictError("Package already exists!")

        self.store.create(record)
        try:
            self.assets.create(name)
        except PackageConflictError:
            # Lost a race with a concurrent create of the same name.
            self.store.delete(name)
            logger.warning("Asset directory for %s appeared during create; rolled back", name)
            raise
        except OSError as exc:
            self.store.delete(name)
            logger.error("Creating asset directory for %s failed; rolled back", name, exc_info=True)
            raise InternalFailureError("Package couldn't be created!") from exc

        logger.info("Package %s created (%s)", name, record.type.value)
        return record

    def upload_asset(
        self,
        credential: Optional[str],
        package_name: Optional[str],
        filename: Optional[str],
        stream: Optional[BinaryIO],
    ) -> Path:
        """Write one uploaded file into an existing package's directory."""
        self.authorize(credential)
        if not package_name:
            raise BadRequestError("No packagename defined!")
        if stream is None or not filename:
            raise BadRequestError("No file uploaded!")
        if not is_valid_identifier(package_name):
            raise BadRequestError("Invalid package name!")

        path = self.assets.write_file(package_name, safe_filename(filename), stream)
        logger.info("Uploaded %s to package %s", path.name, package_name)
        return path
