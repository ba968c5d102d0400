"""Publish pipeline: decode, authorize, store the tarball, record metadata."""

from __future__ import annotations

import hashlib
import logging
from typing import Callable, Optional

from registry_api.auth.tokens import AuthenticatedUser
from registry_api.codec import decode_publish_payload
from registry_api.errors import (
    DuplicateCrateVersionError,
    NonExistentCrateVersionError,
    NonExistentPackageInfoError,
    UnauthorizedError,
)
from registry_api.models.package import PackageVersion
from registry_api.models.responses import PublishResponse
from registry_api.repo.base import Repository
from registry_api.repo.common import _now
from registry_api.storage import BlobStore, crate_blob_key

LOGGER = logging.getLogger(__name__)


class PublishService:
    def __init__(
        self,
        repository: Repository,
        blob_store: BlobStore,
        *,
        clock: Optional[Callable] = None,
    ) -> None:
        self._repository = repository
        self._blob_store = blob_store
        self._clock = clock or _now

    async def _ensure_publishable(self, name: str, version: str, user: AuthenticatedUser) -> bool:
        """Return whether ``name`` already exists; reject non-owners and known versions."""

        try:
            owners = await self._repository.list_owners(name)
        except NonExistentPackageInfoError:
            return False
        if user.user_id not in owners:
            raise UnauthorizedError(
                f"user '{user.user_id}' is not an owner of crate '{name}'",
                forbidden=True,
            )
        # Checked before the blob write so a rejected duplicate leaves no orphan.
        try:
            await self._repository.get_package_version(name, version)
        except NonExistentCrateVersionError:
            return True
        raise DuplicateCrateVersionError(name, version)

    async def publish(self, body: bytes, user: AuthenticatedUser) -> PublishResponse:
        metadata, tarball = decode_publish_payload(body)
        name, version = metadata.name, metadata.vers

        existing = await self._ensure_publishable(name, version, user)

        checksum = hashlib.sha256(tarball).hexdigest()
        await self._blob_store.put(crate_blob_key(name, version, checksum), tarball)

        package_version = PackageVersion.from_publish(
            metadata,
            checksum=checksum,
            published_by=user.user_id,
            published_at=self._clock(),
        )
        await self._repository.store_package_info(
            name,
            version,
            package_version,
            owner_id=user.user_id,
        )
        LOGGER.info(
            "Published %s %s (%s, %d bytes) by %s",
            name,
            version,
            "new version" if existing else "new crate",
            len(tarball),
            user.user_id,
        )
        return PublishResponse()
