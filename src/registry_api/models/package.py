"""Stored package version records."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel

from registry_api.models.index import IndexEntry
from registry_api.models.publish import PublishMetadata


def _is_new_feature_syntax(value: str) -> bool:
    return value.startswith("dep:") or "?/" in value


def split_features(
    features: Dict[str, List[str]],
) -> Tuple[Dict[str, List[str]], Dict[str, List[str]]]:
    """Separate features using ``dep:``/``?/`` syntax, which older cargo
    versions cannot parse, into the ``features2`` map."""

    legacy: Dict[str, List[str]] = {}
    modern: Dict[str, List[str]] = {}
    for feature, values in features.items():
        if any(_is_new_feature_syntax(value) for value in values):
            modern[feature] = list(values)
        else:
            legacy[feature] = list(values)
    return legacy, modern


class PackageVersion(BaseModel):
    """A published crate version, as recorded by the repository."""

    name: str
    vers: str
    checksum: str
    metadata: PublishMetadata
    yanked: bool = False
    published_by: Optional[str] = None
    published_at: Optional[datetime] = None

    @classmethod
    def from_publish(
        cls,
        metadata: PublishMetadata,
        *,
        checksum: str,
        published_by: str,
        published_at: datetime,
    ) -> "PackageVersion":
        return cls(
            name=metadata.name,
            vers=metadata.vers,
            checksum=checksum,
            metadata=metadata,
            published_by=published_by,
            published_at=published_at,
        )

    def to_index_entry(self) -> IndexEntry:
        features, features2 = split_features(self.metadata.features)
        return IndexEntry(
            name=self.name,
            vers=self.vers,
            deps=[dep.to_index_dependency() for dep in self.metadata.deps],
            cksum=self.checksum,
            features=features,
            yanked=self.yanked,
            links=self.metadata.links,
            features2=features2 or None,
            v=2 if features2 else None,
            rust_version=self.metadata.rust_version,
        )
