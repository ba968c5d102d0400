from __future__ import annotations

import logging
from typing import Callable, Optional

from registry_api.auth.tokens import AuthenticatedUser, generate_token_key, hash_token
from registry_api.models.tokens import AuthToken, AuthTokenList, GeneratedToken
from registry_api.repo.base import Repository
from registry_api.repo.common import _generate_id, _now

LOGGER = logging.getLogger(__name__)


class TokensService:
    def __init__(self, repository: Repository, *, clock: Optional[Callable] = None) -> None:
        self._repository = repository
        self._clock = clock or _now

    async def generate_token(self, user_id: str, name: str) -> GeneratedToken:
        key = generate_token_key()
        token = AuthToken(
            id=_generate_id(),
            name=name,
            user_id=user_id,
            created_at=self._clock(),
        )
        await self._repository.store_auth_token(token, token_hash=hash_token(key))
        LOGGER.info("Generated token %s (%s) for %s", token.id, name, user_id)
        return GeneratedToken(key=key, token=token)

    async def list_tokens(self, user: AuthenticatedUser) -> AuthTokenList:
        return AuthTokenList(items=await self._repository.list_auth_tokens(user.user_id))

    async def delete_token(self, token_id: str, user: AuthenticatedUser) -> None:
        await self._repository.delete_auth_token(user.user_id, token_id)
        LOGGER.info("Deleted token %s of %s", token_id, user.user_id)
