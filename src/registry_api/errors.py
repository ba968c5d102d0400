"""Error taxonomy shared by the registry core.

Every failure that crosses a component boundary is one of these. Client-fault
errors carry the structured detail needed to correct the request;
``InternalError`` never does.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base error for registry operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedPayloadError(RegistryError):
    """Raised when uploaded bytes do not match the publish contract."""


class DuplicateCrateVersionError(RegistryError):
    """Raised when a (name, version) pair has already been published."""

    def __init__(self, name: str, version: str) -> None:
        super().__init__(f"crate '{name}' version '{version}' already exists")
        self.name = name
        self.version = version


class NonExistentPackageInfoError(RegistryError):
    """Raised when a package has never been published."""

    def __init__(self, name: str) -> None:
        super().__init__(f"crate '{name}' does not exist")
        self.name = name


class NonExistentCrateVersionError(RegistryError):
    """Raised when a specific package version is unknown."""

    def __init__(self, name: str, version: str) -> None:
        super().__init__(f"crate '{name}' has no version '{version}'")
        self.name = name
        self.version = version


class NonExistentTokenError(RegistryError):
    """Raised when an auth token id is unknown."""

    def __init__(self, token_id: str) -> None:
        super().__init__(f"token '{token_id}' does not exist")
        self.token_id = token_id


class UnauthorizedError(RegistryError):
    """Raised when a credential is missing, invalid or insufficient.

    ``forbidden`` distinguishes a valid identity lacking rights (403) from a
    missing or unknown credential (401).
    """

    def __init__(self, message: str = "unauthorized", *, forbidden: bool = False) -> None:
        super().__init__(message)
        self.forbidden = forbidden


class WriteConflictError(RegistryError):
    """Raised when the store cancels a package creation because of a race.

    Callers may retry the operation.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"write conflict while creating crate '{name}', retry the request")
        self.name = name


class BlobNotFoundError(RegistryError):
    """Raised when a blob key has no stored content."""

    def __init__(self, key: str) -> None:
        super().__init__(f"blob '{key}' not found")
        self.key = key


class InternalError(RegistryError):
    """Raised for unexpected store or encoding failures."""

    def __init__(self, message: str = "internal server error") -> None:
        super().__init__(message)


class BlobConflictError(InternalError):
    """Raised when a blob key already holds different bytes."""

    def __init__(self, key: str) -> None:
        super().__init__(f"blob '{key}' already holds different content")
        self.key = key


__all__ = [
    "BlobConflictError",
    "BlobNotFoundError",
    "DuplicateCrateVersionError",
    "InternalError",
    "MalformedPayloadError",
    "NonExistentCrateVersionError",
    "NonExistentPackageInfoError",
    "NonExistentTokenError",
    "RegistryError",
    "UnauthorizedError",
    "WriteConflictError",
]
