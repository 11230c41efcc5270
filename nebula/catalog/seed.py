"""Seed the catalog from a YAML file of package definitions.

The file holds a top-level ``packages`` list; each entry uses the same
field names as the create-package request body (``uuid`` or
``package_name`` for the identifier)::

    packages:
      - uuid: aurora
        title: Aurora
        type: theme
        payload: aurora.css
        image: preview.png
        background_video: aurora.mp4
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from nebula.catalog.assets import AssetDirectoryManager
from nebula.catalog.models import CatalogRecord, PackageType, is_valid_identifier, validate_tags
from nebula.catalog.store import CatalogStore
from nebula.errors import BadRequestError, ConfigError, MarketplaceError, PackageConflictError

logger = logging.getLogger(__name__)


def load_seed_file(path: str | Path) -> list[CatalogRecord]:
    """Parse a seed file into catalog records."""
    path = Path(path)
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read seed file {path}: {exc}") from exc

    entries = data.get("packages", []) if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ConfigError(f"{path}: 'packages' must be a list")

    records = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigError(f"{path}: entry {i} is not a mapping")
        name = _text(entry, "uuid") or _text(entry, "package_name")
        if not is_valid_identifier(name):
            raise ConfigError(f"{path}: entry {i} has a missing or invalid uuid {name!r}")
        for required in ("title", "payload"):
            if not _text(entry, required):
                raise ConfigError(f"{path}: entry {i} ({name}) has no {required}")
        try:
            records.append(
                CatalogRecord(
                    package_name=name,
                    title=_text(entry, "title"),
                    type=PackageType(entry.get("type") or "theme"),
                    payload=_text(entry, "payload"),
                    description=_text(entry, "description"),
                    author=_text(entry, "author"),
                    image=_text(entry, "image"),
                    tags=validate_tags(entry.get("tags")),
                    version=_text(entry, "version"),
                    background_image=_text(entry, "background_image") or None,
                    background_video=_text(entry, "background_video") or None,
                )
            )
        except ValueError as exc:
            raise ConfigError(f"{path}: entry {i} ({name}): {exc}") from exc
    return records


def _text(entry: dict, key: str) -> str:
    """Return a string field, treating a missing or null value as empty."""
    value = entry.get(key)
    return "" if value is None else str(value)


def seed_catalog(
    store: CatalogStore, assets: AssetDirectoryManager, records: list[CatalogRecord]
) -> list[str]:
    """Create every record that is not in the catalog yet.

    Existing packages are left untouched. A missing asset directory for an
    existing record is recreated. A record whose directory cannot be created
    is deleted again before the error propagates. Returns the names that
    were created.
    """
    created = []
    for record in records:
        name = record.package_name
        if not is_valid_identifier(name):
            raise BadRequestError("Invalid package name!")
        inserted = False
        if store.get(name) is None:
            try:
                store.create(record)
            except PackageConflictError:
                continue
            inserted = True
        if not assets.exists(name):
            try:
                assets.create(name)
            except (MarketplaceError, OSError):
                if inserted:
                    store.delete(name)
                    logger.error("Asset directory for %s failed; seed entry rolled back", name)
                raise
        if inserted:
            created.append(name)
    if created:
        logger.info("Seeded %d package(s): %s", len(created), ", ".join(created))
    return created
