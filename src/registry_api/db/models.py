"""SQLAlchemy models for registry persistence.

Versions are partitioned by ``package_name`` and keyed within the partition by
``sort_key`` (see ``registry_api.versioning.version_sort_key``), so listing a
crate is a single-partition range scan and the primary key itself enforces
one record per (name, version).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from registry_api.versioning import MAX_SORT_KEY_LENGTH, MAX_VERSION_LENGTH

from .base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PackageRecord(Base):
    __tablename__ = "packages"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class PackageOwnerRecord(Base):
    __tablename__ = "package_owners"

    package_name: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("packages.name", ondelete="CASCADE"),
        primary_key=True,
    )
    user_id: Mapped[str] = mapped_column(String(128), primary_key=True, index=True)
    added_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class PackageVersionRecord(Base):
    __tablename__ = "package_versions"

    package_name: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("packages.name", ondelete="CASCADE"),
        primary_key=True,
    )
    sort_key: Mapped[str] = mapped_column(String(MAX_SORT_KEY_LENGTH), primary_key=True)
    version: Mapped[str] = mapped_column(String(MAX_VERSION_LENGTH))
    checksum: Mapped[str] = mapped_column(String(64))
    yanked: Mapped[bool] = mapped_column(Boolean, default=False)
    metadata_json: Mapped[dict[str, Any]] = mapped_column("metadata", JSON)
    published_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    published_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)


class AuthTokenRecord(Base):
    __tablename__ = "auth_tokens"

    token_hash: Mapped[str] = mapped_column(String(64), primary_key=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, index=True)
    user_id: Mapped[str] = mapped_column(String(128), index=True)
    name: Mapped[str] = mapped_column(String(128))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_now)
