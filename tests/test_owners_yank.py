import json

import pytest

from registry_api.auth.tokens import AuthenticatedUser
from registry_api.errors import (
    MalformedPayloadError,
    NonExistentCrateVersionError,
    NonExistentPackageInfoError,
    UnauthorizedError,
)
from registry_api.services.index_service import IndexService
from registry_api.services.owners_service import OwnersService
from registry_api.services.publish_service import PublishService
from registry_api.services.yank_service import YankService

from factories import publish_body

ALICE = AuthenticatedUser("alice")
BOB = AuthenticatedUser("bob")


async def _publish(repository, blob_store, *versions):
    service = PublishService(repository, blob_store)
    for vers in versions:
        await service.publish(publish_body(vers=vers), ALICE)


@pytest.mark.asyncio
async def test_owner_can_add_owners(repository, blob_store):
    await _publish(repository, blob_store, "0.1.0")
    owners = OwnersService(repository)

    response = await owners.add_owners("testcrate_1", ["bob", "carol"], ALICE)

    assert response.ok is True
    assert "bob" in response.msg
    listed = await owners.list_owners("testcrate_1")
    assert sorted(user.login for user in listed.users) == ["alice", "bob", "carol"]
    assert all(user.id == user.login and user.name is None for user in listed.users)


@pytest.mark.asyncio
async def test_non_owner_cannot_add_owners(repository, blob_store):
    await _publish(repository, blob_store, "0.1.0")

    with pytest.raises(UnauthorizedError) as excinfo:
        await OwnersService(repository).add_owners("testcrate_1", ["bob"], BOB)

    assert excinfo.value.forbidden is True
    assert await repository.list_owners("testcrate_1") == ["alice"]


@pytest.mark.asyncio
async def test_add_owners_validation(repository, blob_store):
    await _publish(repository, blob_store, "0.1.0")
    owners = OwnersService(repository)

    with pytest.raises(MalformedPayloadError):
        await owners.add_owners("testcrate_1", [], ALICE)
    with pytest.raises(MalformedPayloadError):
        await owners.add_owners("testcrate_1", ["bob", " "], ALICE)
    with pytest.raises(NonExistentPackageInfoError):
        await owners.add_owners("never_published", ["bob"], ALICE)


@pytest.mark.asyncio
async def test_yank_shows_in_index_and_is_reversible(repository, blob_store):
    await _publish(repository, blob_store, "0.1.1", "0.1.2")
    yank = YankService(repository)
    index = IndexService(repository, blob_store)

    assert (await yank.yank("testcrate_1", "0.1.2")).ok is True
    entries = [json.loads(line) for line in (await index.get_index("testcrate_1")).split("\n")]
    assert [(entry["vers"], entry["yanked"]) for entry in entries] == [
        ("0.1.1", False),
        ("0.1.2", True),
    ]
    assert (await index.get_crate("testcrate_1")).max_version == "0.1.1"

    await yank.unyank("testcrate_1", "0.1.2")
    assert (await index.get_version("testcrate_1", "0.1.2")).yanked is False
    assert (await index.get_crate("testcrate_1")).max_version == "0.1.2"


@pytest.mark.asyncio
async def test_yank_unknown_version(repository, blob_store):
    await _publish(repository, blob_store, "0.1.0")
    yank = YankService(repository)

    with pytest.raises(NonExistentCrateVersionError):
        await yank.yank("testcrate_1", "9.9.9")
    with pytest.raises(NonExistentCrateVersionError):
        await yank.unyank("never_published", "0.1.0")


@pytest.mark.asyncio
async def test_download_requires_known_version(repository, blob_store):
    await _publish(repository, blob_store, "0.1.0")
    index = IndexService(repository, blob_store)

    assert await index.download("testcrate_1", "0.1.0")
    with pytest.raises(NonExistentCrateVersionError):
        await index.download("testcrate_1", "0.2.0")
