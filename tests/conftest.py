from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from registry_api.config.settings import RegistrySettings
from registry_api.db.session import build_async_engine, create_schema
from registry_api.main import create_app
from registry_api.repo.memory import MemoryRepository
from registry_api.repo.sql import SqlRepository
from registry_api.services.tokens_service import TokensService
from registry_api.storage import MemoryBlobStore


@pytest_asyncio.fixture(params=["memory", "sql"])
async def repository(request, tmp_path):
    if request.param == "memory":
        yield MemoryRepository()
    else:
        engine = build_async_engine(f"sqlite+aiosqlite:///{(tmp_path / 'registry.db').as_posix()}")
        await create_schema(engine)
        repo = SqlRepository(engine)
        yield repo
        await repo.close()


@pytest.fixture
def blob_store() -> MemoryBlobStore:
    return MemoryBlobStore()


def make_settings(**overrides) -> RegistrySettings:
    values = {
        "api_url": "http://testserver",
        "auth_required": False,
        "frontend_url": None,
    }
    values.update(overrides)
    return RegistrySettings(_env_file=None, **values)


@dataclass
class ApiHarness:
    client: TestClient
    repository: MemoryRepository
    blob_store: MemoryBlobStore
    keys: Dict[str, str]

    def auth(self, user_id: str) -> Dict[str, str]:
        return {"Authorization": self.keys[user_id]}


def _build_harness(settings: RegistrySettings) -> ApiHarness:
    repository = MemoryRepository()
    blob_store = MemoryBlobStore()
    tokens = TokensService(repository)
    keys = {
        user_id: asyncio.run(tokens.generate_token(user_id, "tests")).key
        for user_id in ("alice", "bob")
    }
    app = create_app(settings, repository=repository, blob_store=blob_store)
    return ApiHarness(
        client=TestClient(app),
        repository=repository,
        blob_store=blob_store,
        keys=keys,
    )


@pytest.fixture
def api() -> ApiHarness:
    return _build_harness(make_settings())


@pytest.fixture
def private_api() -> ApiHarness:
    return _build_harness(make_settings(auth_required=True, frontend_url="http://testserver/tokens"))
