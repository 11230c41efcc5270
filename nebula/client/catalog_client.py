"""Async HTTP client for the public catalog endpoints."""

from __future__ import annotations

from typing import Optional

import httpx

from nebula.catalog.models import CatalogPage, CatalogRecord
from nebula.errors import CatalogUnavailableError, PackageNotFoundError


class CatalogClient:
    """Fetches catalog records from a running marketplace server.

    Pass an existing ``httpx.AsyncClient`` to share a connection pool (or to
    point the client at an in-process app); otherwise one is created per call.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 15.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = client
        self._timeout = timeout

    async def _get(self, path: str, params: Optional[dict] = None) -> httpx.Response:
        try:
            if self._client is not None:
                return await self._client.get(f"{self.base_url}{path}", params=params)
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.get(f"{self.base_url}{path}", params=params)
        except httpx.RequestError as exc:
            raise CatalogUnavailableError(f"Failed to reach catalog API: {exc}") from exc

    async def get_package(self, package_name: str) -> CatalogRecord:
        resp = await self._get(f"/api/packages/{package_name}")
        if resp.status_code == 404:
            raise PackageNotFoundError("Package not found!")
        if resp.status_code != 200:
            raise CatalogUnavailableError(f"Catalog API error: {resp.status_code}")
        return CatalogRecord.from_public_fields(package_name, resp.json())

    async def list_page(self, page: int = 1) -> CatalogPage:
        resp = await self._get("/api/catalog-assets/", params={"page": page})
        if resp.status_code != 200:
            raise CatalogUnavailableError(f"Catalog API error: {resp.status_code}")
        data = resp.json()
        items = [
            CatalogRecord.from_public_fields(name, fields)
            for name, fields in data.get("assets", {}).items()
        ]
        return CatalogPage(items=items, page=page, total_pages=data.get("pages", 0))
