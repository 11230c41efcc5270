"""Pydantic models for API request/response serialization.

These models mirror the ``nebula.catalog`` dataclasses and define the JSON
shapes of the marketplace endpoints.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from nebula.catalog.models import CatalogRecord, PackageType, is_valid_identifier, validate_tags

TagsField = Optional[Union[dict[str, Any], list[str]]]


# ---------------------------------------------------------------------------
# Catalog models
# ---------------------------------------------------------------------------


class PackageResponse(BaseModel):
    """Public fields of a catalog record."""

    title: str
    description: str = ""
    image: str = ""
    author: str = ""
    tags: TagsField = None
    version: str = ""
    background_image: Optional[str] = None
    background_video: Optional[str] = None
    payload: str = ""
    type: PackageType


class CatalogAssetsResponse(BaseModel):
    """One listing page: packages keyed by name, plus the page count."""

    assets: dict[str, PackageResponse] = Field(default_factory=dict)
    pages: int = 0


# ---------------------------------------------------------------------------
# Marketplace (write) models
# ---------------------------------------------------------------------------


class CreatePackageRequest(BaseModel):
    """Body of ``POST /api/create-package``."""

    uuid: str = Field(..., description="Package identifier; also names the asset directory")
    title: str = Field(..., min_length=1)
    type: PackageType
    payload: str = Field(..., min_length=1, description="Inline code or a filename in the package directory")
    description: str = ""
    author: str = ""
    image: str = ""
    version: str = ""
    tags: TagsField = None
    background_image: Optional[str] = None
    background_video: Optional[str] = None

    @field_validator("uuid")
    @classmethod
    def _check_uuid(cls, value: str) -> str:
        if not is_valid_identifier(value):
            raise ValueError("must be a single path segment of letters, digits, '.', '-' or '_'")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _check_tags(cls, value: Any) -> Any:
        return validate_tags(value)

    @field_validator("background_image", "background_video")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    def to_record(self) -> CatalogRecord:
        return CatalogRecord(
            package_name=self.uuid,
            title=self.title,
            type=self.type,
            payload=self.payload,
            description=self.description,
            author=self.author,
            image=self.image,
            tags=self.tags,
            version=self.version,
            background_image=self.background_image,
            background_video=self.background_video,
        )


class StatusResponse(BaseModel):
    """Outcome of a write endpoint."""

    status: str


class ErrorResponse(BaseModel):
    """Outcome of a failed read endpoint."""

    error: str
