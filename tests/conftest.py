"""Shared test fixtures."""

import cbor2
import pytest

ZERO_MULTIHASH = bytes([0x12, 0x20]) + bytes(32)

# Synthetic solc 0.8.4 style runtime code; the digest is arbitrary
SOLIDITY_DIGEST = "b2f8a37e5e1c1b0a9d1e0c6c3f3f5b8d2a4d6e8f0a1b2c3d4e5f60718293a4b5"
SOLIDITY_TRAILER = (
    "a2"
    "64" + "69706673"
    + "5822" + "1220" + SOLIDITY_DIGEST
    + "64" + "736f6c63"
    + "43" + "000804"
    + "0033"
)
SOLIDITY_BYTECODE = (
    "0x6080604052348015600f57600080fd5b50600436106028576000357c0100000000"
    "fe" + SOLIDITY_TRAILER
)


def build_bytecode(code_hex: str, metadata: dict, vyper: bool = False) -> str:
    """Append a CBOR metadata trailer the way solc (or vyper) does."""
    blob = cbor2.dumps(metadata)
    length = len(blob) + 2 if vyper else len(blob)
    return "0x" + code_hex + blob.hex() + length.to_bytes(2, "big").hex()


@pytest.fixture
def multihash() -> bytes:
    return bytes([0x12, 0x20]) + bytes(range(32))


@pytest.fixture
def solidity_bytecode() -> str:
    return SOLIDITY_BYTECODE


@pytest.fixture
def decoded_metadata(multihash) -> dict:
    return {"ipfs": multihash, "solc": bytes([0, 8, 4])}
