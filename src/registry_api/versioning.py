"""Semantic version parsing and storage sort keys."""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

from registry_api.errors import MalformedPayloadError

SEMVER_RE = re.compile(
    r"(?P<major>0|[1-9][0-9]*)\.(?P<minor>0|[1-9][0-9]*)\.(?P<patch>0|[1-9][0-9]*)"
    r"(?:-(?P<prerelease>(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
    r"(?:\.(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*))*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)

VERSION_KEY_PREFIX = "V#"

# Column widths of the version table.
MAX_VERSION_LENGTH = 128
MAX_SORT_KEY_LENGTH = 255

_NUMBER_WIDTH = 20
# Separators sit below every identifier character ("-", digits, letters) so a
# shorter identifier list sorts first, and below each other so build metadata
# never outranks a longer pre-release.
_BUILD_SEPARATOR = "+"
_PRERELEASE_SEPARATOR = ","
_RELEASE_MARKER = "~"


class SemanticVersion(NamedTuple):
    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build: Optional[str] = None

    def __str__(self) -> str:
        value = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            value += f"-{self.prerelease}"
        if self.build:
            value += f"+{self.build}"
        return value


def parse_version(value: str) -> SemanticVersion:
    match = SEMVER_RE.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise MalformedPayloadError(f"invalid semantic version '{value}'")
    return SemanticVersion(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=match.group("prerelease"),
        build=match.group("build"),
    )


def _encode_identifier(identifier: str) -> str:
    if identifier.isdigit():
        return "0" + identifier.zfill(_NUMBER_WIDTH)
    return "1" + identifier


def version_sort_key(version: SemanticVersion) -> str:
    """Return a string whose lexical order matches semver precedence.

    ``major.minor.patch`` are zero padded, pre-release identifiers are encoded
    so numeric ones order before alphanumeric ones, and a release sorts after
    all of its pre-releases. Build metadata does not affect precedence but is
    kept so that distinct versions never share a key.
    """

    core = ".".join(
        str(part).zfill(_NUMBER_WIDTH)
        for part in (version.major, version.minor, version.patch)
    )
    if version.prerelease:
        suffix = _PRERELEASE_SEPARATOR.join(
            _encode_identifier(identifier) for identifier in version.prerelease.split(".")
        )
    else:
        suffix = _RELEASE_MARKER
    key = f"{VERSION_KEY_PREFIX}{core}#{suffix}"
    if version.build:
        key += _BUILD_SEPARATOR + version.build
    return key


__all__ = [
    "MAX_SORT_KEY_LENGTH",
    "MAX_VERSION_LENGTH",
    "SEMVER_RE",
    "SemanticVersion",
    "VERSION_KEY_PREFIX",
    "parse_version",
    "version_sort_key",
]
