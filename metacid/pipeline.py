"""Bytecode -> CID in one call."""

from typing import Optional

from metacid.cbor import decode_cbor
from metacid.cid import CIDResult, calculate_cid
from metacid.extract import extract_metadata_blob
from metacid.language import CompilerFamily, detect_language


def cid_from_bytecode(
    bytecode: str, family: Optional[CompilerFamily] = None
) -> CIDResult:
    """Detect the compiler (unless given), extract and decode the metadata, and derive its CIDs."""
    if family is None:
        family = detect_language(bytecode)
    return calculate_cid(decode_cbor(extract_metadata_blob(bytecode, family)))
