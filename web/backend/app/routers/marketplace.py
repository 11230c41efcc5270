"""Marketplace router -- gated package creation and asset upload."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Header, UploadFile

from nebula.catalog.gateway import MutationGateway
from web.backend.app.middleware.auth import get_gateway, require_marketplace_access
from web.backend.app.models.api import CreatePackageRequest, StatusResponse

router = APIRouter(prefix="/api", tags=["marketplace"])

_ERROR_RESPONSES = {
    400: {"model": StatusResponse},
    403: {"model": StatusResponse},
    409: {"model": StatusResponse},
    500: {"model": StatusResponse},
}


@router.post(
    "/create-package",
    response_model=StatusResponse,
    responses=_ERROR_RESPONSES,
    summary="Create a package record and its asset directory",
)
def create_package(
    body: CreatePackageRequest,
    psk: str = Depends(require_marketplace_access),
    gateway: MutationGateway = Depends(get_gateway),
):
    """Create a catalog package.

    Requires the ``psk`` header. Fails with 409 if the identifier is already
    taken; nothing is written in that case.
    """
    gateway.create_package(psk, body.to_record())
    return StatusResponse(status="Package created successfully!")


@router.post(
    "/upload-asset",
    response_model=StatusResponse,
    responses=_ERROR_RESPONSES,
    summary="Upload a file into a package's asset directory",
)
def upload_asset(
    psk: str = Depends(require_marketplace_access),
    packagename: Optional[str] = Header(None),
    file: Optional[UploadFile] = File(None),
    gateway: MutationGateway = Depends(get_gateway),
):
    """Store a multipart file upload as ``<packagename>/<filename>``.

    An existing file of the same name is overwritten.
    """
    if file is None:
        gateway.upload_asset(psk, packagename, None, None)
    else:
        gateway.upload_asset(psk, packagename, file.filename, file.file)
    return StatusResponse(status="File uploaded successfully!")
