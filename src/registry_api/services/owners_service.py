from __future__ import annotations

import logging
from typing import Sequence

from registry_api.auth.tokens import AuthenticatedUser
from registry_api.errors import MalformedPayloadError, UnauthorizedError
from registry_api.models.owners import OwnerList, OwnersAddResponse, OwnerUser
from registry_api.repo.base import Repository

LOGGER = logging.getLogger(__name__)


class OwnersService:
    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    async def require_owner(self, name: str, user: AuthenticatedUser) -> None:
        owners = await self._repository.list_owners(name)
        if user.user_id not in owners:
            raise UnauthorizedError(
                f"user '{user.user_id}' is not an owner of crate '{name}'",
                forbidden=True,
            )

    async def list_owners(self, name: str) -> OwnerList:
        owners = await self._repository.list_owners(name)
        return OwnerList(users=[OwnerUser(id=owner, login=owner) for owner in owners])

    async def add_owners(
        self,
        name: str,
        user_ids: Sequence[str],
        user: AuthenticatedUser,
    ) -> OwnersAddResponse:
        cleaned = [user_id.strip() for user_id in user_ids]
        if not cleaned or any(not user_id for user_id in cleaned):
            raise MalformedPayloadError("owner ids must be non-empty strings")
        await self.require_owner(name, user)
        await self._repository.add_owners(name, cleaned)
        LOGGER.info("Added owners %s to %s by %s", cleaned, name, user.user_id)
        return OwnersAddResponse(
            msg=f"user(s) {', '.join(cleaned)} added as owners of crate {name}"
        )
