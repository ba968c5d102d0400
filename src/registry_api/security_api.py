# coding: utf-8

from __future__ import annotations

from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from registry_api.auth.tokens import AuthenticatedUser
from registry_api.services.registry import RegistryServices

# cargo sends the raw token in ``Authorization``; no scheme prefix is required.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def get_services(request: Request) -> RegistryServices:
    return request.app.state.registry


async def get_current_user(
    request: Request,
    credential: Optional[str] = Security(authorization_header),
) -> AuthenticatedUser:
    """Resolve the caller for endpoints that always need an identity."""

    return await get_services(request).validator.authenticate(credential)


async def get_reader(
    request: Request,
    credential: Optional[str] = Security(authorization_header),
) -> Optional[AuthenticatedUser]:
    """Resolve the caller for read endpoints.

    Reads are anonymous unless the registry is configured with
    ``auth_required``.
    """

    services = get_services(request)
    if not services.settings.auth_required:
        return None
    return await services.validator.authenticate(credential)
