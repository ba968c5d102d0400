"""In-memory repository used by tests and local scratch runs.

Each conditional write checks and mutates without yielding to the event loop,
which mirrors the atomicity the SQL store gets from primary keys and
transactions. Reads yield once so concurrent callers interleave.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from registry_api.errors import (
    DuplicateCrateVersionError,
    NonExistentCrateVersionError,
    NonExistentPackageInfoError,
    NonExistentTokenError,
    UnauthorizedError,
    WriteConflictError,
)
from registry_api.models.package import PackageVersion
from registry_api.models.tokens import AuthToken
from registry_api.repo.base import Repository
from registry_api.repo.common import _lookup_key, _now, _unique
from registry_api.versioning import parse_version, version_sort_key

LOGGER = logging.getLogger(__name__)


@dataclass
class _PackageState:
    created_at: datetime
    owners: List[str] = field(default_factory=list)
    versions: Dict[str, PackageVersion] = field(default_factory=dict)


def _sort_key(version: str) -> str:
    return version_sort_key(parse_version(version))


class MemoryRepository(Repository):
    def __init__(self) -> None:
        self._packages: Dict[str, _PackageState] = {}
        self._tokens: Dict[str, AuthToken] = {}

    def _package(self, name: str) -> _PackageState:
        state = self._packages.get(name)
        if state is None:
            raise NonExistentPackageInfoError(name)
        return state

    async def get_package_info(self, name: str) -> List[PackageVersion]:
        await asyncio.sleep(0)
        state = self._packages.get(name)
        if state is None or not state.versions:
            raise NonExistentPackageInfoError(name)
        return [version.model_copy(deep=True) for version in state.versions.values()]

    async def get_package_version(self, name: str, version: str) -> PackageVersion:
        await asyncio.sleep(0)
        state = self._packages.get(name)
        record = state.versions.get(_lookup_key(name, version)) if state else None
        if record is None:
            raise NonExistentCrateVersionError(name, version)
        return record.model_copy(deep=True)

    async def get_head_version(self, name: str) -> PackageVersion:
        await asyncio.sleep(0)
        state = self._packages.get(name)
        if state is None or not state.versions:
            raise NonExistentPackageInfoError(name)
        _, head = max(
            state.versions.items(),
            key=lambda item: (not item[1].yanked, item[0]),
        )
        return head.model_copy(deep=True)

    async def store_package_info(
        self,
        name: str,
        version: str,
        package_version: PackageVersion,
        *,
        owner_id: str,
    ) -> None:
        sort_key = _sort_key(version)
        record = package_version.model_copy(deep=True)
        if record.published_at is None:
            record.published_at = _now()

        await asyncio.sleep(0)
        creating = name not in self._packages
        await asyncio.sleep(0)

        if creating:
            if name in self._packages:
                LOGGER.warning("Write conflict while creating crate %s", name)
                raise WriteConflictError(name)
            self._packages[name] = _PackageState(
                created_at=record.published_at,
                owners=[owner_id],
                versions={sort_key: record},
            )
            return

        state = self._packages[name]
        if sort_key in state.versions:
            raise DuplicateCrateVersionError(name, version)
        state.versions[sort_key] = record

    async def set_yanked(self, name: str, version: str, yanked: bool) -> None:
        await asyncio.sleep(0)
        state = self._packages.get(name)
        record = state.versions.get(_lookup_key(name, version)) if state else None
        if record is None:
            raise NonExistentCrateVersionError(name, version)
        record.yanked = yanked

    async def list_owners(self, name: str) -> List[str]:
        await asyncio.sleep(0)
        return list(self._package(name).owners)

    async def add_owners(self, name: str, user_ids: Sequence[str]) -> None:
        await asyncio.sleep(0)
        state = self._package(name)
        for user_id in _unique(user_ids):
            if user_id not in state.owners:
                state.owners.append(user_id)

    async def store_auth_token(self, token: AuthToken, *, token_hash: str) -> None:
        await asyncio.sleep(0)
        self._tokens[token_hash] = token.model_copy()

    async def get_auth_token(self, token_hash: str) -> Optional[AuthToken]:
        await asyncio.sleep(0)
        token = self._tokens.get(token_hash)
        return token.model_copy() if token else None

    async def list_auth_tokens(self, user_id: str) -> List[AuthToken]:
        await asyncio.sleep(0)
        tokens = [token for token in self._tokens.values() if token.user_id == user_id]
        return sorted((token.model_copy() for token in tokens), key=lambda token: token.created_at)

    async def delete_auth_token(self, user_id: str, token_id: str) -> None:
        await asyncio.sleep(0)
        for token_hash, token in list(self._tokens.items()):
            if token.id != token_id:
                continue
            if token.user_id != user_id:
                raise UnauthorizedError("token belongs to another user", forbidden=True)
            del self._tokens[token_hash]
            return
        raise NonExistentTokenError(token_id)
