"""Catalog — server-side package records, asset directories and writes.

- Store: durable, paginated package records (SQLite)
- Assets: one directory of media/payload files per package
- Gateway: authorized create-package and upload-asset
- Query: read-only listing and lookup for the public API
"""

from nebula.catalog.assets import AssetDirectoryManager
from nebula.catalog.gateway import MutationGateway
from nebula.catalog.models import PAGE_SIZE, CatalogPage, CatalogRecord, PackageType
from nebula.catalog.query import CatalogQuery
from nebula.catalog.store import CatalogStore

__all__ = [
    "AssetDirectoryManager",
    "CatalogPage",
    "CatalogQuery",
    "CatalogRecord",
    "CatalogStore",
    "MutationGateway",
    "PAGE_SIZE",
    "PackageType",
]
