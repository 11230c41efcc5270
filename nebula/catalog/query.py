"""Read-only catalog views used by the public endpoints."""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional

from nebula.catalog.models import CatalogPage
from nebula.catalog.store import CatalogStore
from nebula.errors import BadRequestError, InternalFailureError, PackageNotFoundError

logger = logging.getLogger(__name__)


def parse_page(raw: Optional[str]) -> int:
    """Parse the ``page`` query value; absent or non-numeric means page 1."""
    if raw is None:
        return 1
    try:
        return int(raw.strip())
    except ValueError:
        return 1


class CatalogQuery:
    """Paginated and single-package views over the catalog store."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def list_page(self, page: int = 1) -> CatalogPage:
        if page < 1:
            raise BadRequestError("Page must be a positive number!")
        try:
            return self.store.list(page)
        except sqlite3.Error as exc:
            logger.error("Listing catalog page %d failed", page, exc_info=True)
            raise InternalFailureError("An error occurred") from exc

    def get_package(self, package_name: str) -> dict[str, Any]:
        try:
            record = self.store.get(package_name)
        except sqlite3.Error as exc:
            logger.error("Looking up package %s failed", package_name, exc_info=True)
            raise InternalFailureError("An unexpected error occurred") from exc
        if record is None:
            raise PackageNotFoundError("Package not found!")
        return record.public_fields()
