from __future__ import annotations

import logging

from registry_api.models.responses import OkResponse
from registry_api.repo.base import Repository

LOGGER = logging.getLogger(__name__)


class YankService:
    """Toggles the yanked flag of an existing version.

    Authorization is left to the caller; the flag is only ever set on
    versions that exist.
    """

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    async def _set(self, name: str, version: str, yanked: bool) -> OkResponse:
        await self._repository.set_yanked(name, version, yanked)
        LOGGER.info("%s %s %s", "Yanked" if yanked else "Unyanked", name, version)
        return OkResponse()

    async def yank(self, name: str, version: str) -> OkResponse:
        return await self._set(name, version, True)

    async def unyank(self, name: str, version: str) -> OkResponse:
        return await self._set(name, version, False)
