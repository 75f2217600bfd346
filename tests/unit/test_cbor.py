"""Tests for the minimal metadata CBOR decoder."""

import cbor2
import pytest

from metacid.cbor import Leader, classify, decode_cbor
from metacid.errors import CBORDecodeError, TruncatedCBORError, UnsupportedCBORTypeError
from metacid.extract import extract_metadata_blob


def test_decode_solidity_metadata(solidity_bytecode):
    metadata = decode_cbor(extract_metadata_blob(solidity_bytecode))
    assert list(metadata) == ["ipfs", "solc"]
    assert len(metadata["ipfs"]) == 34
    assert metadata["ipfs"][:2] == b"\x12\x20"
    assert metadata["solc"] == b"\x00\x08\x04"


def test_decode_matches_reference_encoder(multihash):
    source = {
        "ipfs": multihash,
        "experimental": "true",
        "solc": bytes([0, 8, 19]),
    }
    assert decode_cbor(cbor2.dumps(source)) == source


def test_text_values():
    assert decode_cbor(cbor2.dumps({"solc": "0.8.4-nightly.2021.4.1"})) == {
        "solc": "0.8.4-nightly.2021.4.1"
    }


def test_byte_string_key_becomes_hex():
    blob = bytes([0xA1, 0x42, 0xDE, 0xAD, 0x61, 0x78])
    assert decode_cbor(blob) == {"dead": "x"}


def test_repeated_key_last_write_wins():
    blob = bytes([0xA2, 0x61, 0x61, 0x41, 0x01, 0x61, 0x61, 0x41, 0x02])
    assert decode_cbor(blob) == {"a": b"\x02"}


def test_empty_map():
    assert decode_cbor(bytes([0xA0])) == {}


def test_accepts_int_sequence():
    assert decode_cbor([0xA1, 0x61, 0x6B, 0x41, 0x07]) == {"k": b"\x07"}


@pytest.mark.parametrize(
    "leader, kind",
    [
        (0x40, Leader.BYTES),
        (0x57, Leader.BYTES),
        (0x58, Leader.BYTES_1N),
        (0x60, Leader.TEXT),
        (0x77, Leader.TEXT),
    ],
)
def test_classify(leader, kind):
    assert classify(leader) is kind


@pytest.mark.parametrize("leader", [0x00, 0x3F, 0x59, 0x5F, 0x78, 0x83, 0xA1, 0xFF])
def test_classify_rejects_everything_else(leader):
    with pytest.raises(ValueError):
        classify(leader)


def test_unsupported_leader():
    blob = bytes([0xA1, 0x61, 0x61, 0xFF, 0x00])
    with pytest.raises(UnsupportedCBORTypeError) as exc_info:
        decode_cbor(blob)
    assert exc_info.value.leader == 0xFF
    assert exc_info.value.offset == 3


def test_vyper_array_value_is_unsupported():
    blob = cbor2.dumps({"vyper": [0, 3, 7]})
    with pytest.raises(UnsupportedCBORTypeError):
        decode_cbor(blob)


def test_length_past_end():
    with pytest.raises(TruncatedCBORError):
        decode_cbor(bytes([0xA1, 0x64, 0x69, 0x70]))


def test_missing_one_byte_length():
    with pytest.raises(TruncatedCBORError):
        decode_cbor(bytes([0xA1, 0x61, 0x61, 0x58]))


def test_dangling_key():
    with pytest.raises(TruncatedCBORError):
        decode_cbor(bytes([0xA1, 0x61, 0x61]))


def test_empty_blob():
    with pytest.raises(TruncatedCBORError):
        decode_cbor(b"")


def test_invalid_utf8():
    with pytest.raises(CBORDecodeError):
        decode_cbor(bytes([0xA1, 0x61, 0xFF, 0x40]))


def test_unsupported_leader_has_no_chained_context():
    with pytest.raises(UnsupportedCBORTypeError) as exc_info:
        decode_cbor(bytes([0xA1, 0xFF]))
    assert exc_info.value.__cause__ is None
    assert exc_info.value.__suppress_context__
