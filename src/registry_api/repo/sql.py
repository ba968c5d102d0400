"""SQLAlchemy-backed repository.

Uniqueness of (name, version) and of package creation is enforced by primary
keys, so concurrent publishers are arbitrated by the database rather than by
any read-then-write check in this process.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from registry_api.db.models import (
    AuthTokenRecord,
    PackageOwnerRecord,
    PackageRecord,
    PackageVersionRecord,
)
from registry_api.db.session import build_session_factory
from registry_api.errors import (
    DuplicateCrateVersionError,
    InternalError,
    NonExistentCrateVersionError,
    NonExistentPackageInfoError,
    NonExistentTokenError,
    RegistryError,
    UnauthorizedError,
    WriteConflictError,
)
from registry_api.models.package import PackageVersion
from registry_api.models.publish import PublishMetadata
from registry_api.models.tokens import AuthToken
from registry_api.repo.base import Repository
from registry_api.repo.common import _lookup_key, _now, _unique
from registry_api.versioning import parse_version, version_sort_key

LOGGER = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

# Serialization failure and deadlock on PostgreSQL.
_CONTENTION_SQLSTATES = {"40001", "40P01"}


def _is_contention(exc: OperationalError) -> bool:
    code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    return code in _CONTENTION_SQLSTATES or "database is locked" in str(exc.orig)


def _version_from_record(record: PackageVersionRecord) -> PackageVersion:
    return PackageVersion(
        name=record.package_name,
        vers=record.version,
        checksum=record.checksum,
        metadata=PublishMetadata.model_validate(record.metadata_json),
        yanked=record.yanked,
        published_by=record.published_by,
        published_at=record.published_at,
    )


def _token_from_record(record: AuthTokenRecord) -> AuthToken:
    return AuthToken(
        id=record.id,
        name=record.name,
        user_id=record.user_id,
        created_at=record.created_at,
    )


class SqlRepository(Repository):
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._session_factory = build_session_factory(engine)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def _session(self, action: str, **context: Any) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
        except RegistryError:
            raise
        except SQLAlchemyError as exc:
            LOGGER.error("Metadata store failure during %s %s", action, context, exc_info=True)
            raise InternalError() from exc

    async def _require_package(self, session: AsyncSession, name: str) -> None:
        if await session.get(PackageRecord, name) is None:
            raise NonExistentPackageInfoError(name)

    async def get_package_info(self, name: str) -> List[PackageVersion]:
        async with self._session("get_package_info", name=name) as session:
            stmt = (
                select(PackageVersionRecord)
                .where(PackageVersionRecord.package_name == name)
                .order_by(PackageVersionRecord.published_at, PackageVersionRecord.sort_key)
            )
            records = (await session.execute(stmt)).scalars().all()
        if not records:
            raise NonExistentPackageInfoError(name)
        return [_version_from_record(record) for record in records]

    async def get_package_version(self, name: str, version: str) -> PackageVersion:
        sort_key = _lookup_key(name, version)
        async with self._session("get_package_version", name=name, version=version) as session:
            record = await session.get(PackageVersionRecord, (name, sort_key))
        if record is None:
            raise NonExistentCrateVersionError(name, version)
        return _version_from_record(record)

    async def get_head_version(self, name: str) -> PackageVersion:
        async with self._session("get_head_version", name=name) as session:
            # false sorts before true, so a yanked version only wins when
            # nothing else is left.
            stmt = (
                select(PackageVersionRecord)
                .where(PackageVersionRecord.package_name == name)
                .order_by(
                    PackageVersionRecord.yanked.asc(),
                    PackageVersionRecord.sort_key.desc(),
                )
                .limit(1)
            )
            record = (await session.execute(stmt)).scalar_one_or_none()
        if record is None:
            raise NonExistentPackageInfoError(name)
        return _version_from_record(record)

    async def store_package_info(
        self,
        name: str,
        version: str,
        package_version: PackageVersion,
        *,
        owner_id: str,
    ) -> None:
        published_at = package_version.published_at or _now()
        version_record = PackageVersionRecord(
            package_name=name,
            sort_key=version_sort_key(parse_version(version)),
            version=version,
            checksum=package_version.checksum,
            yanked=package_version.yanked,
            metadata_json=package_version.metadata.model_dump(mode="json"),
            published_by=package_version.published_by,
            published_at=published_at,
        )

        async with self._session("store_package_info", name=name, version=version) as session:
            if await session.get(PackageRecord, name) is None:
                await self._create_package(session, name, owner_id, version_record)
                return

            session.add(version_record)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                LOGGER.warning("Rejected duplicate publish of %s %s", name, version)
                raise DuplicateCrateVersionError(name, version) from exc
            except OperationalError as exc:
                if not _is_contention(exc):
                    raise
                await session.rollback()
                LOGGER.warning("Write conflict while publishing %s %s", name, version)
                raise WriteConflictError(name) from exc

    async def _create_package(
        self,
        session: AsyncSession,
        name: str,
        owner_id: str,
        version_record: PackageVersionRecord,
    ) -> None:
        created_at = version_record.published_at
        session.add(PackageRecord(name=name, created_at=created_at))
        try:
            await session.flush()
            session.add_all(
                [
                    PackageOwnerRecord(package_name=name, user_id=owner_id, added_at=created_at),
                    version_record,
                ]
            )
            await session.commit()
        except (IntegrityError, OperationalError) as exc:
            if isinstance(exc, OperationalError) and not _is_contention(exc):
                raise
            await session.rollback()
            LOGGER.warning("Write conflict while creating crate %s", name)
            raise WriteConflictError(name) from exc

    async def set_yanked(self, name: str, version: str, yanked: bool) -> None:
        sort_key = _lookup_key(name, version)
        async with self._session("set_yanked", name=name, version=version) as session:
            result = await session.execute(
                update(PackageVersionRecord)
                .where(
                    PackageVersionRecord.package_name == name,
                    PackageVersionRecord.sort_key == sort_key,
                )
                .values(yanked=yanked)
            )
            if result.rowcount == 0:
                raise NonExistentCrateVersionError(name, version)
            await session.commit()

    async def list_owners(self, name: str) -> List[str]:
        async with self._session("list_owners", name=name) as session:
            await self._require_package(session, name)
            stmt = (
                select(PackageOwnerRecord.user_id)
                .where(PackageOwnerRecord.package_name == name)
                .order_by(PackageOwnerRecord.added_at, PackageOwnerRecord.user_id)
            )
            return list((await session.execute(stmt)).scalars().all())

    async def add_owners(self, name: str, user_ids: Sequence[str]) -> None:
        user_ids = _unique(user_ids)
        async with self._session("add_owners", name=name, users=user_ids) as session:
            await self._require_package(session, name)
            if not user_ids:
                return
            added_at = _now()
            insert = _UPSERT_INSERTS.get(self._engine.dialect.name)
            if insert is not None:
                stmt = (
                    insert(PackageOwnerRecord)
                    .values(
                        [
                            {"package_name": name, "user_id": user_id, "added_at": added_at}
                            for user_id in user_ids
                        ]
                    )
                    .on_conflict_do_nothing(index_elements=["package_name", "user_id"])
                )
                await session.execute(stmt)
            else:
                existing = set(
                    (
                        await session.execute(
                            select(PackageOwnerRecord.user_id).where(
                                PackageOwnerRecord.package_name == name
                            )
                        )
                    ).scalars()
                )
                session.add_all(
                    PackageOwnerRecord(package_name=name, user_id=user_id, added_at=added_at)
                    for user_id in user_ids
                    if user_id not in existing
                )
            await session.commit()

    async def store_auth_token(self, token: AuthToken, *, token_hash: str) -> None:
        async with self._session("store_auth_token", token_id=token.id) as session:
            session.add(
                AuthTokenRecord(
                    token_hash=token_hash,
                    id=token.id,
                    user_id=token.user_id,
                    name=token.name,
                    created_at=token.created_at,
                )
            )
            await session.commit()

    async def get_auth_token(self, token_hash: str) -> Optional[AuthToken]:
        async with self._session("get_auth_token") as session:
            record = await session.get(AuthTokenRecord, token_hash)
        return _token_from_record(record) if record else None

    async def list_auth_tokens(self, user_id: str) -> List[AuthToken]:
        async with self._session("list_auth_tokens", user_id=user_id) as session:
            stmt = (
                select(AuthTokenRecord)
                .where(AuthTokenRecord.user_id == user_id)
                .order_by(AuthTokenRecord.created_at)
            )
            records = (await session.execute(stmt)).scalars().all()
        return [_token_from_record(record) for record in records]

    async def delete_auth_token(self, user_id: str, token_id: str) -> None:
        async with self._session("delete_auth_token", token_id=token_id) as session:
            owner = (
                await session.execute(
                    select(AuthTokenRecord.user_id).where(AuthTokenRecord.id == token_id)
                )
            ).scalar_one_or_none()
            if owner is None:
                raise NonExistentTokenError(token_id)
            if owner != user_id:
                raise UnauthorizedError("token belongs to another user", forbidden=True)
            await session.execute(
                delete(AuthTokenRecord).where(
                    AuthTokenRecord.id == token_id,
                    AuthTokenRecord.user_id == user_id,
                )
            )
            await session.commit()

    async def close(self) -> None:
        await self._engine.dispose()
