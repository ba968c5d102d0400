"""Application factory for the registry API."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from registry_api import __version__
from registry_api.apis.config_api import router as ConfigApiRouter
from registry_api.apis.crates_api import router as CratesApiRouter
from registry_api.apis.index_api import router as IndexApiRouter
from registry_api.apis.tokens_api import router as TokensApiRouter
from registry_api.config.settings import RegistrySettings, get_settings
from registry_api.db.session import build_async_engine
from registry_api.http.errors import register_error_handlers
from registry_api.repo.base import Repository
from registry_api.repo.sql import SqlRepository
from registry_api.services.registry import RegistryServices
from registry_api.storage import BlobStore, FileSystemBlobStore


def create_app(
    settings: Optional[RegistrySettings] = None,
    *,
    repository: Optional[Repository] = None,
    blob_store: Optional[BlobStore] = None,
) -> FastAPI:
    """Build the API around explicit backends.

    Backends that are not passed in are built from ``settings``: a SQL
    repository on ``database_url`` and a filesystem blob store on
    ``storage_root``.
    """

    settings = settings or get_settings()
    if repository is None:
        repository = SqlRepository(build_async_engine(settings.database_url))
    if blob_store is None:
        blob_store = FileSystemBlobStore(settings.storage_root)

    app = FastAPI(
        title="Crate Registry API",
        description="Private cargo registry: publish, sparse index, yank and ownership.",
        version=__version__,
    )
    app.state.registry = RegistryServices.build(settings, repository, blob_store)
    register_error_handlers(app)

    app.include_router(ConfigApiRouter)
    app.include_router(TokensApiRouter)
    app.include_router(CratesApiRouter)
    # Index paths are generic three segment patterns; they must come last.
    app.include_router(IndexApiRouter)
    return app
