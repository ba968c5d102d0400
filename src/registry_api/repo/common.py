from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List
from uuid import uuid4

from registry_api.errors import MalformedPayloadError, NonExistentCrateVersionError
from registry_api.versioning import parse_version, version_sort_key


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _generate_id() -> str:
    return str(uuid4())


def _unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _lookup_key(name: str, version: str) -> str:
    """Sort key for a version being looked up; unparsable versions cannot exist."""

    try:
        return version_sort_key(parse_version(version))
    except MalformedPayloadError as exc:
        raise NonExistentCrateVersionError(name, version) from exc
