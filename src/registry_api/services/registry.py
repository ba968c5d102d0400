"""Process-wide capability objects shared by every request."""

from __future__ import annotations

from dataclasses import dataclass

from registry_api.auth.tokens import AuthTokenValidator
from registry_api.config.settings import RegistrySettings
from registry_api.repo.base import Repository
from registry_api.services.index_service import IndexService
from registry_api.services.owners_service import OwnersService
from registry_api.services.publish_service import PublishService
from registry_api.services.tokens_service import TokensService
from registry_api.services.yank_service import YankService
from registry_api.storage import BlobStore


@dataclass(frozen=True)
class RegistryServices:
    settings: RegistrySettings
    repository: Repository
    blob_store: BlobStore
    validator: AuthTokenValidator
    publish: PublishService
    index: IndexService
    owners: OwnersService
    yank: YankService
    tokens: TokensService

    @classmethod
    def build(
        cls,
        settings: RegistrySettings,
        repository: Repository,
        blob_store: BlobStore,
    ) -> "RegistryServices":
        return cls(
            settings=settings,
            repository=repository,
            blob_store=blob_store,
            validator=AuthTokenValidator(repository),
            publish=PublishService(repository, blob_store),
            index=IndexService(repository, blob_store),
            owners=OwnersService(repository),
            yank=YankService(repository),
            tokens=TokensService(repository),
        )
