# coding: utf-8
"""Sparse index files.

cargo addresses a crate's index file by a length-based prefix. The prefix
carries no information beyond the name, so it is not validated here.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Security
from fastapi.responses import PlainTextResponse

from registry_api.auth.tokens import AuthenticatedUser
from registry_api.models.responses import ErrorResponse
from registry_api.security_api import get_reader, get_services
from registry_api.services.registry import RegistryServices

router = APIRouter()

_RESPONSES = {
    200: {"content": {"text/plain": {}}, "description": "Newline separated index entries"},
    401: {"model": ErrorResponse, "description": "Unauthorized"},
    404: {"model": ErrorResponse, "description": "Not Found"},
}


async def _index_file(services: RegistryServices, name: str) -> PlainTextResponse:
    return PlainTextResponse(await services.index.get_index(name))


@router.get("/1/{name}", responses=_RESPONSES, tags=["Index"], summary="Index file of a one letter crate")
async def get_index_1(
    name: str = Path(..., description="Crate name"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> PlainTextResponse:
    return await _index_file(services, name)


@router.get("/2/{name}", responses=_RESPONSES, tags=["Index"], summary="Index file of a two letter crate")
async def get_index_2(
    name: str = Path(..., description="Crate name"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> PlainTextResponse:
    return await _index_file(services, name)


@router.get(
    "/3/{first}/{name}",
    responses=_RESPONSES,
    tags=["Index"],
    summary="Index file of a three letter crate",
)
async def get_index_3(
    first: str = Path(..., description="First letter of the crate name"),
    name: str = Path(..., description="Crate name"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> PlainTextResponse:
    return await _index_file(services, name)


@router.get(
    "/{first_two}/{second_two}/{name}",
    responses=_RESPONSES,
    tags=["Index"],
    summary="Index file of a crate with four or more letters",
)
async def get_index(
    first_two: str = Path(..., description="Characters 1-2 of the crate name"),
    second_two: str = Path(..., description="Characters 3-4 of the crate name"),
    name: str = Path(..., description="Crate name"),
    services: RegistryServices = Depends(get_services),
    reader: Optional[AuthenticatedUser] = Security(get_reader),
) -> PlainTextResponse:
    return await _index_file(services, name)
