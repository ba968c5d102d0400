from .tokens import (
    AuthenticatedUser,
    AuthTokenValidator,
    generate_token_key,
    hash_token,
)

__all__ = [
    "AuthTokenValidator",
    "AuthenticatedUser",
    "generate_token_key",
    "hash_token",
]
