"""Locate and slice the CBOR metadata trailer at the end of runtime bytecode."""

import re

from metacid.errors import MalformedBytecodeError
from metacid.language import CompilerFamily, strip_hex_prefix
from metacid.logging import get_logger

log = get_logger(__name__)

_HEX = re.compile(r"[0-9a-fA-F]*")

# Hex characters occupied by the big-endian length field at the very end.
LENGTH_FIELD_CHARS = 4

# Solidity does not count the length field in the declared CBOR length,
# Vyper does. Unknown bytecode is treated like Solidity.
TRAILER_ADJUSTMENT = {
    CompilerFamily.SOLIDITY: LENGTH_FIELD_CHARS,
    CompilerFamily.VYPER: 0,
    CompilerFamily.UNKNOWN: LENGTH_FIELD_CHARS,
}


def extract_metadata_blob(
    bytecode: str, family: CompilerFamily = CompilerFamily.SOLIDITY
) -> bytes:
    """
    Extract the CBOR-encoded metadata blob from the end of the bytecode.

    The compiler appends the metadata as ``<cbor><2-byte-length>``. The
    length is read from the last two bytes and the blob is sliced out of
    the hex string just before it.

    Args:
        bytecode: Runtime bytecode as a hex string, with or without ``0x``
        family: Compiler that produced the bytecode, selects the length convention

    Returns:
        The raw CBOR bytes, in bytecode order

    Raises:
        MalformedBytecodeError: If the bytecode is too short for the declared
            length or contains non-hex characters
    """
    family = CompilerFamily(family)
    code = strip_hex_prefix(bytecode)
    if not _HEX.fullmatch(code):
        raise MalformedBytecodeError("Bytecode contains non-hex characters")
    total = len(code)
    if total < LENGTH_FIELD_CHARS:
        raise MalformedBytecodeError(
            f"Bytecode too short to contain metadata ({total} hex chars)"
        )

    cbor_len = int(code[-LENGTH_FIELD_CHARS:], 16)

    start = total - TRAILER_ADJUSTMENT[family] - cbor_len * 2
    end = total - LENGTH_FIELD_CHARS
    if start < 0 or start > end:
        raise MalformedBytecodeError(
            f"Declared metadata length {cbor_len} does not fit in "
            f"{total // 2} bytes of {family.value} bytecode"
        )

    blob = bytes.fromhex(code[start:end])

    log.debug("metadata_extracted", family=family.value, cbor_len=cbor_len, size=len(blob))
    return blob


extract_cbor = extract_metadata_blob
