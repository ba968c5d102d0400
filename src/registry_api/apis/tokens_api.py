# coding: utf-8

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, Path, Security, status

from registry_api.auth.tokens import AuthenticatedUser
from registry_api.models.responses import ErrorResponse, OkResponse
from registry_api.models.tokens import AuthTokenCreateRequest, AuthTokenList, GeneratedToken
from registry_api.security_api import get_current_user, get_services
from registry_api.services.registry import RegistryServices

router = APIRouter()


@router.get(
    "/api/v1/tokens",
    responses={
        200: {"model": AuthTokenList, "description": "OK"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
    },
    tags=["Tokens"],
    summary="List the caller's tokens",
    response_model_by_alias=True,
)
async def list_tokens(
    services: RegistryServices = Depends(get_services),
    user: AuthenticatedUser = Security(get_current_user),
) -> AuthTokenList:
    return await services.tokens.list_tokens(user)


@router.post(
    "/api/v1/tokens",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"model": GeneratedToken, "description": "Created; the key is only returned once"},
        400: {"model": ErrorResponse, "description": "Invalid input"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
    },
    tags=["Tokens"],
    summary="Generate a token",
    response_model_by_alias=True,
)
async def create_token(
    auth_token_create_request: AuthTokenCreateRequest = Body(..., description=""),
    services: RegistryServices = Depends(get_services),
    user: AuthenticatedUser = Security(get_current_user),
) -> GeneratedToken:
    return await services.tokens.generate_token(user.user_id, auth_token_create_request.name)


@router.delete(
    "/api/v1/tokens/{token_id}",
    responses={
        200: {"model": OkResponse, "description": "OK"},
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        403: {"model": ErrorResponse, "description": "Token belongs to another user"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    },
    tags=["Tokens"],
    summary="Delete a token",
    response_model_by_alias=True,
)
async def delete_token(
    token_id: str = Path(..., description="Token id"),
    services: RegistryServices = Depends(get_services),
    user: AuthenticatedUser = Security(get_current_user),
) -> OkResponse:
    await services.tokens.delete_token(token_id, user)
    return OkResponse()
