"""Binary framing of the cargo publish request body.

Layout::

    u32_le  metadata length
    bytes   metadata (UTF-8 JSON)
    u32_le  tarball length
    bytes   tarball

Bytes after the tarball are ignored.
"""

from __future__ import annotations

import json
import struct
from typing import Tuple

from pydantic import ValidationError

from registry_api.errors import MalformedPayloadError
from registry_api.models.publish import PublishMetadata

_LENGTH = struct.Struct("<I")


def _read_chunk(body: bytes, offset: int, what: str) -> Tuple[bytes, int]:
    if len(body) - offset < _LENGTH.size:
        raise MalformedPayloadError(f"payload too short to contain the {what} length")
    (length,) = _LENGTH.unpack_from(body, offset)
    start = offset + _LENGTH.size
    end = start + length
    if end > len(body):
        raise MalformedPayloadError(
            f"{what} declares {length} bytes but only {len(body) - start} remain"
        )
    return body[start:end], end


def decode_publish_payload(body: bytes) -> Tuple[PublishMetadata, bytes]:
    raw_metadata, offset = _read_chunk(body, 0, "metadata")
    tarball, _ = _read_chunk(body, offset, "tarball")
    try:
        payload = json.loads(raw_metadata.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedPayloadError("metadata is not valid UTF-8 JSON") from exc
    if not isinstance(payload, dict):
        raise MalformedPayloadError("metadata must be a JSON object")
    try:
        metadata = PublishMetadata.model_validate(payload)
    except ValidationError as exc:
        raise MalformedPayloadError(f"invalid publish metadata: {exc.errors()[0]['msg']}") from exc
    return metadata, tarball


def encode_publish_payload(metadata: PublishMetadata | dict, tarball: bytes) -> bytes:
    if isinstance(metadata, PublishMetadata):
        metadata = metadata.model_dump(mode="json")
    raw_metadata = json.dumps(metadata, separators=(",", ":")).encode("utf-8")
    return b"".join(
        (
            _LENGTH.pack(len(raw_metadata)),
            raw_metadata,
            _LENGTH.pack(len(tarball)),
            tarball,
        )
    )


__all__ = ["decode_publish_payload", "encode_publish_payload"]
