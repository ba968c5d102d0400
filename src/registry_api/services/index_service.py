"""Read side: index files, crate details and downloads."""

from __future__ import annotations

from typing import List

from registry_api.errors import BlobNotFoundError, NonExistentCrateVersionError
from registry_api.models.index import render_index
from registry_api.models.package import PackageVersion
from registry_api.models.responses import CrateDetail, CrateVersionDetail
from registry_api.repo.base import Repository
from registry_api.storage import BlobStore, crate_blob_key


def _version_detail(version: PackageVersion) -> CrateVersionDetail:
    metadata = version.metadata
    return CrateVersionDetail(
        name=version.name,
        version=version.vers,
        checksum=version.checksum,
        yanked=version.yanked,
        description=metadata.description,
        readme=metadata.readme,
        license=metadata.license,
        repository=metadata.repository,
        homepage=metadata.homepage,
        documentation=metadata.documentation,
        published_by=version.published_by,
    )


class IndexService:
    def __init__(self, repository: Repository, blob_store: BlobStore) -> None:
        self._repository = repository
        self._blob_store = blob_store

    async def get_index(self, name: str) -> str:
        versions = await self._repository.get_package_info(name)
        return render_index([version.to_index_entry() for version in versions])

    async def get_crate(self, name: str) -> CrateDetail:
        versions: List[PackageVersion] = await self._repository.get_package_info(name)
        head = await self._repository.get_head_version(name)
        return CrateDetail(
            name=name,
            max_version=head.vers,
            description=head.metadata.description,
            repository=head.metadata.repository,
            versions=[version.vers for version in versions],
        )

    async def get_version(self, name: str, version: str) -> CrateVersionDetail:
        record = await self._repository.get_package_version(name, version)
        return _version_detail(record)

    async def download(self, name: str, version: str) -> bytes:
        # The record names the blob, so orphans from lost races are never served.
        record = await self._repository.get_package_version(name, version)
        try:
            return await self._blob_store.get(crate_blob_key(name, version, record.checksum))
        except BlobNotFoundError as exc:
            raise NonExistentCrateVersionError(name, version) from exc
