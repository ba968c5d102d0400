"""Publish metadata sent by cargo ahead of the crate tarball."""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from registry_api.errors import MalformedPayloadError
from registry_api.models.index import IndexDependency
from registry_api.versioning import (
    MAX_SORT_KEY_LENGTH,
    MAX_VERSION_LENGTH,
    parse_version,
    version_sort_key,
)

CRATE_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_-]{0,63}$")


class DependencyKind(str, Enum):
    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"


class PublishDependency(BaseModel):
    """A dependency as declared in the publish request."""

    model_config = ConfigDict(extra="allow")

    name: str
    version_req: str
    features: List[str] = Field(default_factory=list)
    optional: bool = False
    default_features: bool = True
    target: Optional[str] = None
    kind: DependencyKind = DependencyKind.NORMAL
    registry: Optional[str] = None
    explicit_name_in_toml: Optional[str] = None

    def to_index_dependency(self) -> IndexDependency:
        # A renamed dependency is indexed under its local name, with the real
        # crate name moved to ``package``.
        if self.explicit_name_in_toml:
            name, package = self.explicit_name_in_toml, self.name
        else:
            name, package = self.name, None
        return IndexDependency(
            name=name,
            req=self.version_req,
            features=list(self.features),
            optional=self.optional,
            default_features=self.default_features,
            target=self.target,
            kind=self.kind.value,
            registry=self.registry,
            package=package,
        )


class PublishMetadata(BaseModel):
    """Crate metadata. Unknown fields are kept verbatim."""

    model_config = ConfigDict(extra="allow")

    name: str
    vers: str
    deps: List[PublishDependency] = Field(default_factory=list)
    features: Dict[str, List[str]] = Field(default_factory=dict)
    authors: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    documentation: Optional[str] = None
    homepage: Optional[str] = None
    readme: Optional[str] = None
    readme_file: Optional[str] = None
    keywords: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    license: Optional[str] = None
    license_file: Optional[str] = None
    repository: Optional[str] = None
    badges: Dict[str, Any] = Field(default_factory=dict)
    links: Optional[str] = None
    rust_version: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not CRATE_NAME_PATTERN.match(value):
            raise ValueError(
                "crate names must start with a letter and contain at most 64 "
                "alphanumeric, '-' or '_' characters"
            )
        return value

    @field_validator("vers")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if len(value) > MAX_VERSION_LENGTH:
            raise ValueError(f"version is too long, the limit is {MAX_VERSION_LENGTH} characters")
        try:
            parsed = parse_version(value)
        except MalformedPayloadError as exc:
            raise ValueError(exc.message) from exc
        # Numeric pre-release identifiers are padded in the key, so it can outgrow the text.
        if len(version_sort_key(parsed)) > MAX_SORT_KEY_LENGTH:
            raise ValueError(f"version '{value}' is too long to store")
        return value
