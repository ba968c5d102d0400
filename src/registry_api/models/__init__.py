from .index import IndexDependency, IndexEntry, render_index
from .owners import OwnerList, OwnersAddRequest, OwnersAddResponse, OwnerUser
from .package import PackageVersion, split_features
from .publish import DependencyKind, PublishDependency, PublishMetadata
from .responses import (
    CrateDetail,
    CrateVersionDetail,
    ErrorDetail,
    ErrorResponse,
    OkResponse,
    PublishResponse,
    PublishWarnings,
    RegistryConfig,
)
from .tokens import AuthToken, AuthTokenCreateRequest, AuthTokenList, GeneratedToken

__all__ = [
    "AuthToken",
    "AuthTokenCreateRequest",
    "AuthTokenList",
    "CrateDetail",
    "CrateVersionDetail",
    "DependencyKind",
    "ErrorDetail",
    "ErrorResponse",
    "GeneratedToken",
    "IndexDependency",
    "IndexEntry",
    "OkResponse",
    "OwnerList",
    "OwnerUser",
    "OwnersAddRequest",
    "OwnersAddResponse",
    "PackageVersion",
    "PublishDependency",
    "PublishMetadata",
    "PublishResponse",
    "PublishWarnings",
    "RegistryConfig",
    "render_index",
    "split_features",
]
