# coding: utf-8

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from registry_api.http.errors import not_found
from registry_api.models.responses import ErrorResponse, RegistryConfig
from registry_api.security_api import get_services
from registry_api.services.registry import RegistryServices

router = APIRouter()


@router.get(
    "/config.json",
    responses={
        200: {"model": RegistryConfig, "description": "OK"},
    },
    tags=["Registry"],
    summary="Sparse registry configuration",
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def get_registry_config(
    services: RegistryServices = Depends(get_services),
) -> RegistryConfig:
    settings = services.settings
    return RegistryConfig(
        dl=settings.resolved_download_url(),
        api=settings.api_url.rstrip("/"),
        auth_required=True if settings.auth_required else None,
    )


@router.get(
    "/me",
    responses={
        307: {"description": "Redirect to the token management page"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Registry"],
    summary="Token management page used by cargo login",
)
async def get_me(
    services: RegistryServices = Depends(get_services),
) -> RedirectResponse:
    if not services.settings.frontend_url:
        raise not_found("no token management page is configured")
    return RedirectResponse(services.settings.frontend_url)
