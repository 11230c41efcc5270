"""Auth middleware -- FastAPI dependencies for the marketplace write path.

Write endpoints require two things, checked in this order:
1. the marketplace feature flag is enabled
2. the ``psk`` header matches the configured pre-shared key

The check runs as a dependency, so it is decided before the body is checked
against its schema. A body that is not JSON at all is rejected with 400
before any dependency runs.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from nebula.catalog.gateway import MutationGateway
from nebula.catalog.query import CatalogQuery


def get_gateway(request: Request) -> MutationGateway:
    """Return the gateway the application was built with."""
    return request.app.state.gateway


def get_query(request: Request) -> CatalogQuery:
    return request.app.state.query


async def require_marketplace_access(
    psk: Optional[str] = Header(None),
    gateway: MutationGateway = Depends(get_gateway),
) -> str:
    """FastAPI dependency that gates the write endpoints.

    Raises ``MarketplaceDisabledError`` or ``UnauthorizedError``; the
    application's error handlers turn them into 500 and 403 responses.
    Returns the verified key.
    """
    gateway.authorize(psk)
    return psk
