"""Repository interface for package and token metadata."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from registry_api.models.package import PackageVersion
from registry_api.models.tokens import AuthToken


class Repository(ABC):
    """Durable store of packages, their versions, owners and auth tokens.

    Implementations classify every store failure into ``registry_api.errors``
    before it leaves the repository.
    """

    @abstractmethod
    async def get_package_info(self, name: str) -> List[PackageVersion]:
        """Return every recorded version of ``name`` in publish order.

        Raises ``NonExistentPackageInfoError`` when nothing was published.
        """

    @abstractmethod
    async def get_package_version(self, name: str, version: str) -> PackageVersion:
        """Raises ``NonExistentCrateVersionError`` for an unknown version."""

    @abstractmethod
    async def get_head_version(self, name: str) -> PackageVersion:
        """Return the highest non-yanked version, or the highest overall when
        every version is yanked."""

    @abstractmethod
    async def store_package_info(
        self,
        name: str,
        version: str,
        package_version: PackageVersion,
        *,
        owner_id: str,
    ) -> None:
        """Record a new version.

        A first publish creates the package with ``owner_id`` as its only owner
        together with the version, atomically; losing a race to another creator
        raises ``WriteConflictError``. Publishing an existing (name, version)
        raises ``DuplicateCrateVersionError``.
        """

    @abstractmethod
    async def set_yanked(self, name: str, version: str, yanked: bool) -> None:
        ...

    @abstractmethod
    async def list_owners(self, name: str) -> List[str]:
        ...

    @abstractmethod
    async def add_owners(self, name: str, user_ids: Sequence[str]) -> None:
        ...

    @abstractmethod
    async def store_auth_token(self, token: AuthToken, *, token_hash: str) -> None:
        ...

    @abstractmethod
    async def get_auth_token(self, token_hash: str) -> Optional[AuthToken]:
        ...

    @abstractmethod
    async def list_auth_tokens(self, user_id: str) -> List[AuthToken]:
        ...

    @abstractmethod
    async def delete_auth_token(self, user_id: str, token_id: str) -> None:
        """Raises ``NonExistentTokenError`` for an unknown id and a forbidden
        ``UnauthorizedError`` when the token belongs to another user."""

    async def close(self) -> None:
        """Release store resources."""
