"""Catalog data models — package records and listing pages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

PAGE_SIZE = 20

# Fields exposed by the read endpoints; package_name is the key, not a field.
PUBLIC_FIELDS = (
    "title",
    "description",
    "image",
    "author",
    "tags",
    "version",
    "background_image",
    "background_video",
    "payload",
    "type",
)

_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")

Tags = Union[dict[str, Any], list[str], None]


class PackageType(str, Enum):
    """A theme, or a plugin running in one of two execution contexts."""

    theme = "theme"
    plugin_page = "plugin-page"
    plugin_sw = "plugin-sw"

    @property
    def is_plugin(self) -> bool:
        return self is not PackageType.theme


def is_valid_identifier(name: str) -> bool:
    """Return True if *name* can name both a catalog row and a directory."""
    return bool(name) and name not in (".", "..") and bool(_IDENTIFIER_RE.match(name))


def validate_tags(tags: Any) -> Tags:
    """Return *tags* if it is a string-keyed mapping or a list of strings.

    Raises ``ValueError`` for any other shape.
    """
    if tags is None:
        return None
    if isinstance(tags, dict):
        if not all(isinstance(k, str) for k in tags):
            raise ValueError("tag mapping keys must be strings")
        return tags
    if isinstance(tags, list):
        if not all(isinstance(t, str) for t in tags):
            raise ValueError("tag lists may only contain strings")
        return tags
    raise ValueError("tags must be a mapping or a list of strings")


@dataclass
class CatalogRecord:
    """One distributable package (theme or plugin)."""

    package_name: str
    title: str
    type: PackageType
    payload: str
    description: str = ""
    author: str = ""
    image: str = ""
    tags: Tags = None
    version: str = ""
    background_image: Optional[str] = None
    background_video: Optional[str] = None

    def __post_init__(self) -> None:
        if isinstance(self.type, str):
            self.type = PackageType(self.type)
        self.background_image = self.background_image or None
        self.background_video = self.background_video or None

    def public_fields(self) -> dict[str, Any]:
        """Return the field set served by the read endpoints."""
        return {
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "author": self.author,
            "tags": self.tags,
            "version": self.version,
            "background_image": self.background_image,
            "background_video": self.background_video,
            "payload": self.payload,
            "type": self.type.value,
        }

    @classmethod
    def from_public_fields(cls, package_name: str, data: dict[str, Any]) -> CatalogRecord:
        return cls(
            package_name=package_name,
            title=data.get("title") or "",
            type=PackageType(data.get("type", "theme")),
            payload=data.get("payload") or "",
            description=data.get("description") or "",
            author=data.get("author") or "",
            image=data.get("image") or "",
            tags=data.get("tags"),
            version=data.get("version") or "",
            background_image=data.get("background_image"),
            background_video=data.get("background_video"),
        )


@dataclass
class CatalogPage:
    """One page of the catalog listing."""

    items: list[CatalogRecord] = field(default_factory=list)
    page: int = 1
    total_pages: int = 0
    total_count: int = 0

    @property
    def assets(self) -> dict[str, dict[str, Any]]:
        """Public fields keyed by package name, in listing order."""
        return {r.package_name: r.public_fields() for r in self.items}
