"""Exceptions raised while deriving a metadata CID from runtime bytecode."""

from typing import Optional


class MetadataError(Exception):
    """Base class for every failure in the bytecode -> CID pipeline."""


class MalformedBytecodeError(MetadataError):
    """The bytecode cannot hold the metadata trailer it declares."""


class CBORDecodeError(MetadataError):
    """The metadata blob is not valid compiler-emitted CBOR."""


class UnsupportedCBORTypeError(CBORDecodeError):
    def __init__(self, leader: int, offset: int):
        self.leader = leader
        self.offset = offset
        super().__init__(
            f"Unsupported CBOR leader byte 0x{leader:02x} at offset {offset}"
        )


class TruncatedCBORError(CBORDecodeError):
    """A declared length runs past the end of the blob, or a key has no value."""


class MissingFieldError(MetadataError):
    def __init__(self, field: str, reason: Optional[str] = None):
        self.field = field
        super().__init__(reason or f"Field '{field}' not found in metadata")
