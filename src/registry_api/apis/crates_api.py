# coding: utf-8

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Request, Security
from fastapi.responses import Response

from registry_api.auth.tokens import AuthenticatedUser
from registry_api.errors import NonExistentCrateVersionError, NonExistentPackageInfoError
from registry_api.models.owners import OwnerList, OwnersAddRequest, OwnersAddResponse
from registry_api.models.responses import (
    CrateDetail,
    CrateVersionDetail,
    ErrorResponse,
    OkResponse,
    PublishResponse,
)
from registry_api.security_api import get_current_user, get_reader, get_services
from registry_api.services.registry import RegistryServices

router = APIRouter()

CRATE_MEDIA_TYPE = "application/x-tar"


@router.put(
    "/api/v1/crates/new",
    responses={
        200: {"model": PublishResponse, "description": "Published"},
        400: {"model": ErrorResponse, "description": "Malformed payload"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Not an owner"},
        409: {"model": ErrorResponse, "description": "Version exists or write conflict"},
    },
    tags=["Crates"],
    summary="Publish a crate version",
    response_model_by_alias=True,
)
async def publish_crate(
    request: Request,
    services: RegistryServices = Depends(get_services),
    user: AuthenticatedUser = Security(get_current_user),
) -> PublishResponse:
    body = await request.body()
    return await services.publish.publish(body, user)


@router.get(
    "/api/v1/crates/{name}",
    responses={
        200: {"model": CrateDetail, "description": "OK"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Crate summary with its versions",
    response_model_by_alias=True,
)
async def get_crate(
    name: str = Path(..., description="Crate name"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> CrateDetail:
    return await services.index.get_crate(name)


@router.get(
    "/api/v1/crates/{name}/owners",
    responses={
        200: {"model": OwnerList, "description": "OK"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Owners"],
    summary="List crate owners",
    response_model_by_alias=True,
)
async def list_owners(
    name: str = Path(..., description="Crate name"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> OwnerList:
    return await services.owners.list_owners(name)


@router.put(
    "/api/v1/crates/{name}/owners",
    responses={
        200: {"model": OwnersAddResponse, "description": "OK"},
        400: {"model": ErrorResponse, "description": "Invalid input"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Not an owner"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Owners"],
    summary="Add crate owners",
    response_model_by_alias=True,
)
async def add_owners(
    name: str = Path(..., description="Crate name"),
    owners_add_request: OwnersAddRequest = Body(..., description=""),
    services: RegistryServices = Depends(get_services),
    user: AuthenticatedUser = Security(get_current_user),
) -> OwnersAddResponse:
    return await services.owners.add_owners(name, owners_add_request.users, user)


@router.get(
    "/api/v1/crates/{name}/{version}",
    responses={
        200: {"model": CrateVersionDetail, "description": "OK"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Get one crate version",
    response_model_by_alias=True,
)
async def get_crate_version(
    name: str = Path(..., description="Crate name"),
    version: str = Path(..., description="Semantic version"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> CrateVersionDetail:
    return await services.index.get_version(name, version)


@router.delete(
    "/api/v1/crates/{name}/{version}/yank",
    responses={
        200: {"model": OkResponse, "description": "OK"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Not an owner"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Yank a crate version",
    response_model_by_alias=True,
)
async def yank_crate_version(
    name: str = Path(..., description="Crate name"),
    version: str = Path(..., description="Semantic version"),
    services: RegistryServices = Depends(get_services),
    user: AuthenticatedUser = Security(get_current_user),
) -> OkResponse:
    await _require_owner_for_yank(services, name, version, user)
    return await services.yank.yank(name, version)


@router.put(
    "/api/v1/crates/{name}/{version}/unyank",
    responses={
        200: {"model": OkResponse, "description": "OK"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Not an owner"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Unyank a crate version",
    response_model_by_alias=True,
)
async def unyank_crate_version(
    name: str = Path(..., description="Crate name"),
    version: str = Path(..., description="Semantic version"),
    services: RegistryServices = Depends(get_services),
    user: AuthenticatedUser = Security(get_current_user),
) -> OkResponse:
    await _require_owner_for_yank(services, name, version, user)
    return await services.yank.unyank(name, version)


@router.get(
    "/api/v1/crates/{name}/{version}/download",
    responses={
        200: {"content": {CRATE_MEDIA_TYPE: {}}, "description": "Crate tarball"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Crates"],
    summary="Download a crate tarball",
)
async def download_crate(
    name: str = Path(..., description="Crate name"),
    version: str = Path(..., description="Semantic version"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> Response:
    tarball = await services.index.download(name, version)
    return Response(content=tarball, media_type=CRATE_MEDIA_TYPE)


async def _require_owner_for_yank(
    services: RegistryServices,
    name: str,
    version: str,
    user: AuthenticatedUser,
) -> None:
    try:
        await services.owners.require_owner(name, user)
    except NonExistentPackageInfoError as exc:
        raise NonExistentCrateVersionError(name, version) from exc
