"""Runtime entrypoint: the app built from process settings plus lifecycle hooks."""

from __future__ import annotations

import logging

from fastapi.middleware.cors import CORSMiddleware

from registry_api.config.settings import get_settings
from registry_api.db.migrations import upgrade_database
from registry_api.main import create_app
from registry_api.repo.sql import SqlRepository

LOGGER = logging.getLogger(__name__)

settings = get_settings()
app = create_app(settings)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def _startup() -> None:
    repository = app.state.registry.repository
    if isinstance(repository, SqlRepository):
        await upgrade_database(repository.engine)
        LOGGER.info("Metadata store schema is up to date")


@app.on_event("shutdown")
async def _shutdown() -> None:
    await app.state.registry.repository.close()
