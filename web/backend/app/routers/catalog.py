"""Catalog router -- public, read-only listing and package lookup."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from nebula.catalog.query import CatalogQuery, parse_page
from web.backend.app.middleware.auth import get_query
from web.backend.app.models.api import CatalogAssetsResponse, ErrorResponse, PackageResponse

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get(
    "/catalog-assets/",
    response_model=CatalogAssetsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="List catalog packages, 20 per page",
)
async def list_catalog_assets(
    page: Optional[str] = Query(None, description="1-based page number"),
    query: CatalogQuery = Depends(get_query),
):
    """Return one page of packages keyed by name, plus the total page count.

    A missing or non-numeric ``page`` means page 1. A page past the end
    returns an empty ``assets`` mapping.
    """
    result = query.list_page(parse_page(page))
    return CatalogAssetsResponse(
        assets={
            name: PackageResponse(**fields) for name, fields in result.assets.items()
        },
        pages=result.total_pages,
    )


@router.get(
    "/packages/{package}",
    response_model=PackageResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Get a single package",
)
async def get_package(package: str, query: CatalogQuery = Depends(get_query)):
    """Retrieve the public fields of one package."""
    return PackageResponse(**query.get_package(package))
