"""Builders for publish payloads and stored versions used across tests."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from registry_api.codec import encode_publish_payload
from registry_api.models.package import PackageVersion
from registry_api.models.publish import PublishMetadata

DEFAULT_TARBALL = b"\x1f\x8b\x08\x00fake-crate-tarball"


def crate_metadata(name: str = "testcrate_1", vers: str = "0.1.0", **extra: Any) -> Dict[str, Any]:
    metadata: Dict[str, Any] = {
        "name": name,
        "vers": vers,
        "deps": [
            {
                "name": "serde",
                "version_req": "^1.0",
                "features": ["derive"],
                "optional": False,
                "default_features": True,
                "target": None,
                "kind": "normal",
                "registry": None,
                "explicit_name_in_toml": None,
            }
        ],
        "features": {"default": ["std"], "std": []},
        "authors": ["Test Author"],
        "description": "A crate used by the registry tests",
        "license": "MIT",
        "repository": "https://example.invalid/testcrate",
        "links": None,
    }
    metadata.update(extra)
    return metadata


def publish_body(
    name: str = "testcrate_1",
    vers: str = "0.1.0",
    tarball: bytes = DEFAULT_TARBALL,
    **extra: Any,
) -> bytes:
    return encode_publish_payload(crate_metadata(name, vers, **extra), tarball)


def package_version(
    name: str = "testcrate_1",
    vers: str = "0.1.0",
    *,
    tarball: bytes = DEFAULT_TARBALL,
    published_by: str = "alice",
    published_at: Optional[datetime] = None,
    **extra: Any,
) -> PackageVersion:
    return PackageVersion.from_publish(
        PublishMetadata.model_validate(crate_metadata(name, vers, **extra)),
        checksum=hashlib.sha256(tarball).hexdigest(),
        published_by=published_by,
        published_at=published_at or datetime.now(timezone.utc),
    )
