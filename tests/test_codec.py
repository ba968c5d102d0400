import json
import struct

import pytest

from registry_api.codec import decode_publish_payload, encode_publish_payload
from registry_api.errors import MalformedPayloadError

from factories import DEFAULT_TARBALL, crate_metadata, publish_body


def _frame(raw_metadata: bytes, tarball: bytes = DEFAULT_TARBALL) -> bytes:
    return (
        struct.pack("<I", len(raw_metadata))
        + raw_metadata
        + struct.pack("<I", len(tarball))
        + tarball
    )


def test_decode_returns_metadata_and_tarball():
    metadata, tarball = decode_publish_payload(publish_body(vers="1.2.3"))

    assert metadata.name == "testcrate_1"
    assert metadata.vers == "1.2.3"
    assert metadata.deps[0].name == "serde"
    assert metadata.deps[0].version_req == "^1.0"
    assert tarball == DEFAULT_TARBALL


def test_encode_then_decode_preserves_payload():
    source = crate_metadata(vers="0.3.0-beta.1")
    metadata, tarball = decode_publish_payload(encode_publish_payload(source, b"abc"))

    assert metadata.model_dump(mode="json")["features"] == source["features"]
    assert tarball == b"abc"
    # re-encoding the decoded model yields the same tarball framing
    again, _ = decode_publish_payload(encode_publish_payload(metadata, tarball))
    assert again == metadata


def test_unknown_metadata_fields_are_kept():
    body = publish_body(badges={"maintenance": {"status": "experimental"}}, custom_field=42)

    metadata, _ = decode_publish_payload(body)

    assert metadata.model_dump()["custom_field"] == 42
    assert metadata.badges == {"maintenance": {"status": "experimental"}}


def test_trailing_bytes_are_ignored():
    metadata, tarball = decode_publish_payload(publish_body() + b"trailing garbage")

    assert metadata.name == "testcrate_1"
    assert tarball == DEFAULT_TARBALL


def test_empty_tarball_is_accepted():
    _, tarball = decode_publish_payload(publish_body(tarball=b""))

    assert tarball == b""


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"\x01\x00",
        struct.pack("<I", 100) + b"{}",
    ],
    ids=["empty", "short-length-prefix", "metadata-shorter-than-declared"],
)
def test_truncated_metadata_is_rejected(body):
    with pytest.raises(MalformedPayloadError):
        decode_publish_payload(body)


def test_truncated_tarball_is_rejected():
    body = publish_body()
    with pytest.raises(MalformedPayloadError):
        decode_publish_payload(body[:-1])

    raw_metadata = json.dumps(crate_metadata()).encode("utf-8")
    missing_tarball_length = struct.pack("<I", len(raw_metadata)) + raw_metadata + b"\x05"
    with pytest.raises(MalformedPayloadError):
        decode_publish_payload(missing_tarball_length)


@pytest.mark.parametrize(
    "raw_metadata",
    [
        b"\xff\xfe not utf-8",
        b"{not json",
        b"[1, 2, 3]",
        json.dumps({"vers": "1.0.0"}).encode("utf-8"),
        json.dumps({"name": "testcrate_1"}).encode("utf-8"),
        json.dumps(crate_metadata(vers="1.0")).encode("utf-8"),
        json.dumps(crate_metadata(name="9lives")).encode("utf-8"),
        json.dumps(crate_metadata(deps=[{"name": "serde"}])).encode("utf-8"),
    ],
    ids=[
        "invalid-utf8",
        "invalid-json",
        "not-an-object",
        "missing-name",
        "missing-vers",
        "not-semver",
        "bad-crate-name",
        "dependency-without-requirement",
    ],
)
def test_invalid_metadata_is_rejected(raw_metadata):
    with pytest.raises(MalformedPayloadError):
        decode_publish_payload(_frame(raw_metadata))


@pytest.mark.parametrize(
    "vers",
    [
        "1.0.0-" + "a" * 130,
        "1.0.0-" + ".".join(["1"] * 20),
    ],
    ids=["long-text", "many-numeric-identifiers"],
)
def test_versions_too_long_to_store_are_rejected(vers):
    with pytest.raises(MalformedPayloadError, match="too long"):
        decode_publish_payload(publish_body(vers=vers))


def test_version_with_a_few_prerelease_identifiers_fits():
    metadata, _ = decode_publish_payload(publish_body(vers="1.0.0-alpha.1.2.3"))

    assert metadata.vers == "1.0.0-alpha.1.2.3"
