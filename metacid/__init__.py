"""Recover the IPFS CID of a contract's compiler metadata from its runtime bytecode."""

from metacid.cbor import decode_cbor
from metacid.cid import (
    CIDResult,
    calculate_cid,
    multihash_to_cid_v0,
    multihash_to_cid_v1,
)
from metacid.errors import (
    CBORDecodeError,
    MalformedBytecodeError,
    MetadataError,
    MissingFieldError,
    TruncatedCBORError,
    UnsupportedCBORTypeError,
)
from metacid.extract import extract_cbor, extract_metadata_blob
from metacid.fetch import fetch_bytecode, fetch_cid, fetch_metadata, gateway_url
from metacid.language import CompilerFamily, detect_language
from metacid.pipeline import cid_from_bytecode

__version__ = "0.1.0"

__all__ = [
    "CBORDecodeError",
    "CIDResult",
    "CompilerFamily",
    "MalformedBytecodeError",
    "MetadataError",
    "MissingFieldError",
    "TruncatedCBORError",
    "UnsupportedCBORTypeError",
    "__version__",
    "calculate_cid",
    "cid_from_bytecode",
    "decode_cbor",
    "detect_language",
    "extract_cbor",
    "extract_metadata_blob",
    "fetch_bytecode",
    "fetch_cid",
    "fetch_metadata",
    "gateway_url",
    "multihash_to_cid_v0",
    "multihash_to_cid_v1",
]
