"""API token generation and validation.

Only the sha256 digest of a key is persisted; the plaintext is handed to the
caller once, at generation time.
"""

from __future__ import annotations

import hashlib
import logging
import secrets
import string
from typing import Optional

from registry_api.errors import UnauthorizedError
from registry_api.models.tokens import AuthToken
from registry_api.repo.base import Repository

LOGGER = logging.getLogger(__name__)

TOKEN_KEY_LENGTH = 32
_TOKEN_ALPHABET = string.ascii_letters + string.digits
_BEARER_PREFIX = "bearer "


def generate_token_key() -> str:
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(TOKEN_KEY_LENGTH))


def hash_token(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def _extract_key(credential: Optional[str]) -> str:
    # cargo sends the raw token; browsers and scripts tend to send "Bearer <token>".
    value = (credential or "").strip()
    if value.lower().startswith(_BEARER_PREFIX):
        value = value[len(_BEARER_PREFIX):].strip()
    return value


class AuthenticatedUser:
    def __init__(self, user_id: str, token: Optional[AuthToken] = None):
        self.user_id = user_id
        self.token_id = token.id if token else None
        self.token_name = token.name if token else None


class AuthTokenValidator:
    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    async def authenticate(self, credential: Optional[str]) -> AuthenticatedUser:
        key = _extract_key(credential)
        if not key:
            raise UnauthorizedError("missing authorization token")
        token = await self._repository.get_auth_token(hash_token(key))
        if token is None:
            LOGGER.info("Rejected unknown authorization token")
            raise UnauthorizedError("invalid authorization token")
        return AuthenticatedUser(token.user_id, token)
