"""
Minimal CBOR decoder for compiler-emitted bytecode metadata.

This is NOT a general CBOR implementation. solc and vyper only emit a
single small map whose keys are short text strings and whose values are
byte strings or text strings, so only those leaders are understood:

    0x40-0x57   byte string, length in the low bits
    0x58        byte string, 1-byte length follows
    0x60-0x77   UTF-8 text string, length in the low bits

Any other leader is rejected rather than skipped, since a mis-parsed blob
would silently produce a wrong multihash.
"""

from enum import Enum
from typing import Dict, Optional, Union

from metacid.errors import CBORDecodeError, TruncatedCBORError, UnsupportedCBORTypeError
from metacid.logging import get_logger

log = get_logger(__name__)

Value = Union[bytes, str]


class Leader(Enum):
    BYTES = "bytes"
    BYTES_1N = "bytes_1n"
    TEXT = "text"


def classify(leader: int) -> Leader:
    if 0x40 <= leader <= 0x57:
        return Leader.BYTES
    if leader == 0x58:
        return Leader.BYTES_1N
    if 0x60 <= leader <= 0x77:
        return Leader.TEXT
    raise ValueError(leader)


class _Reader:
    """Read cursor over an immutable byte buffer."""

    def __init__(self, data: bytes):
        self.data = data
        self.pos = 0

    def remaining(self) -> int:
        return len(self.data) - self.pos

    def byte(self) -> int:
        if self.pos >= len(self.data):
            raise TruncatedCBORError(f"Unexpected end of CBOR data at offset {self.pos}")
        value = self.data[self.pos]
        self.pos += 1
        return value

    def take(self, length: int) -> bytes:
        if length > self.remaining():
            raise TruncatedCBORError(
                f"CBOR item at offset {self.pos} declares {length} bytes, "
                f"only {self.remaining()} remain"
            )
        chunk = self.data[self.pos : self.pos + length]
        self.pos += length
        return chunk


def _read_structure(reader: _Reader) -> Value:
    offset = reader.pos
    leader = reader.byte()
    try:
        kind = classify(leader)
    except ValueError:
        raise UnsupportedCBORTypeError(leader, offset) from None

    if kind is Leader.BYTES:
        return reader.take(leader - 0x40)
    if kind is Leader.BYTES_1N:
        return reader.take(reader.byte())

    raw = reader.take(leader - 0x60)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CBORDecodeError(f"Invalid UTF-8 text string at offset {offset}: {e}")


def _as_key(structure: Value) -> str:
    if isinstance(structure, str):
        return structure
    return structure.hex()


def decode_cbor(blob: bytes) -> Dict[str, Value]:
    """
    Decode solc/vyper metadata CBOR into a dictionary.

    The first byte is taken to be the map leader and its item count is not
    checked. Structures then alternate between key and value until the
    input is exhausted. Byte-string keys are converted to their hex form;
    a repeated key keeps the last value.

    Args:
        blob: CBOR bytes as returned by extract_metadata_blob

    Returns:
        Mapping of key to raw bytes or text, for example
        ``{"ipfs": b"\\x12\\x20...", "solc": b"\\x00\\x08\\x04"}``

    Raises:
        UnsupportedCBORTypeError: On a leader byte outside the supported set
        TruncatedCBORError: If a length runs past the end, or a key has no value
    """
    reader = _Reader(bytes(blob))
    reader.byte()

    output: Dict[str, Value] = {}
    key: Optional[str] = None
    while reader.remaining() > 0:
        structure = _read_structure(reader)
        if key is None:
            key = _as_key(structure)
        else:
            output[key] = structure
            key = None

    if key is not None:
        raise TruncatedCBORError(f"CBOR key '{key}' has no value")

    log.debug("cbor_decoded", keys=list(output))
    return output
