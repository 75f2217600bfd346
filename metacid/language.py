"""Compiler detection from the first bytes of runtime bytecode."""

from enum import Enum


class CompilerFamily(str, Enum):
    SOLIDITY = "solidity"
    VYPER = "vyper"
    UNKNOWN = "unknown"


# https://github.com/banteg/erigon-kv/blob/5584ada83c75b244e611641d100ccc647a7f6791/examples/compilers.py#L17
SIGNATURES = {
    "6060604052": CompilerFamily.SOLIDITY,
    "6080604052": CompilerFamily.SOLIDITY,
    "6004361015": CompilerFamily.VYPER,
    "341561000a": CompilerFamily.VYPER,
}

PREFIX_LENGTH = 10


def strip_hex_prefix(bytecode: str) -> str:
    if bytecode[:2] in ("0x", "0X"):
        return bytecode[2:]
    return bytecode


def detect_language(bytecode: str) -> CompilerFamily:
    """
    Determine which compiler produced a contract by inspecting the first
    five bytes of its runtime bytecode.

    Args:
        bytecode: Runtime bytecode as a hex string, with or without ``0x``

    Returns:
        The matching CompilerFamily, or CompilerFamily.UNKNOWN
    """
    prefix = strip_hex_prefix(bytecode)[:PREFIX_LENGTH]
    return SIGNATURES.get(prefix, CompilerFamily.UNKNOWN)
