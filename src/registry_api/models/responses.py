"""Response bodies of the cargo web API."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OkResponse(BaseModel):
    ok: bool = True


class PublishWarnings(BaseModel):
    invalid_categories: List[str] = Field(default_factory=list)
    invalid_badges: List[str] = Field(default_factory=list)
    other: List[str] = Field(default_factory=list)


class PublishResponse(BaseModel):
    warnings: PublishWarnings = Field(default_factory=PublishWarnings)


class RegistryConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    dl: str
    api: str
    auth_required: Optional[bool] = Field(default=None, alias="auth-required")


class CrateVersionDetail(BaseModel):
    name: str
    version: str
    checksum: str
    yanked: bool
    description: Optional[str] = None
    readme: Optional[str] = None
    license: Optional[str] = None
    repository: Optional[str] = None
    homepage: Optional[str] = None
    documentation: Optional[str] = None
    published_by: Optional[str] = None


class CrateDetail(BaseModel):
    name: str
    max_version: str
    description: Optional[str] = None
    repository: Optional[str] = None
    versions: List[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    detail: str


class ErrorResponse(BaseModel):
    """Error body understood by cargo."""

    errors: List[ErrorDetail]
