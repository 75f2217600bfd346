"""
IPFS CID derivation from the multihash embedded in compiler metadata.

solc always embeds a sha2-256 dag-pb multihash, so both CID forms are
built directly from it:

    CIDv0  base58btc(<multihash>)                      Qm...
    CIDv1  "b" + base32(<0x01><0x70><multihash>)        bafy...

See https://github.com/multiformats/cid
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Union

from metacid.errors import MissingFieldError
from metacid.logging import get_logger

log = get_logger(__name__)

# The base58btc alphabet is from the Bitcoin client source code
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE32_ALPHABET = "abcdefghijklmnopqrstuvwxyz234567"  # RFC4648, lowercase

CID_V1 = 0x01
DAG_PB = 0x70
BASE32_MULTIBASE_PREFIX = "b"

BytesLike = Union[bytes, bytearray, Sequence[int]]


@dataclass(frozen=True)
class CIDResult:
    solc_version: str
    cid_v0: str
    cid_v1: str

    def to_dict(self) -> dict:
        return {
            "solcVersion": self.solc_version,
            "cidV0": self.cid_v0,
            "cidV1": self.cid_v1,
        }


def base58btc_encode(data: BytesLike) -> str:
    """
    Base58btc encode by long division over the input bytes.

    Each input byte, most significant first, is carried through every
    output digit produced so far. Leading zero bytes become leading ``1``.
    """
    data = bytes(data)
    zeros = len(data) - len(data.lstrip(b"\x00"))

    # least significant digit first
    digits: List[int] = []
    for byte in data[zeros:]:
        carry = byte
        for i in range(len(digits)):
            carry += digits[i] << 8
            digits[i] = carry % 58
            carry //= 58
        while carry:
            digits.append(carry % 58)
            carry //= 58

    return BASE58_ALPHABET[0] * zeros + "".join(
        BASE58_ALPHABET[d] for d in reversed(digits)
    )


def base32_encode(data: BytesLike) -> str:
    """RFC4648 base32, lowercase, no padding."""
    out = []
    bits = 0
    buffer = 0
    for byte in bytes(data):
        buffer = ((buffer << 8) | byte) & 0xFFFF
        bits += 8
        while bits >= 5:
            bits -= 5
            out.append(BASE32_ALPHABET[(buffer >> bits) & 0x1F])
    if bits:
        out.append(BASE32_ALPHABET[(buffer << (5 - bits)) & 0x1F])
    return "".join(out)


def multihash_to_cid_v0(multihash: BytesLike) -> str:
    """
    Transform a multihash into an IPFS CIDv0.

    Args:
        multihash: 34-byte sha2-256 multihash (``0x12 0x20 <digest>``)

    Returns:
        The bare base58btc CIDv0, starting with ``Q``
    """
    return base58btc_encode(multihash)


def multihash_to_cid_v1(multihash: BytesLike) -> str:
    """
    Transform a multihash into a base32 IPFS CIDv1.

    The version and content type are fixed to CIDv1 and dag-pb, which is
    all solc has ever embedded.

    Args:
        multihash: 34-byte sha2-256 multihash

    Returns:
        The multibase CIDv1, starting with ``b``
    """
    cid = bytes([CID_V1, DAG_PB]) + bytes(multihash)
    return BASE32_MULTIBASE_PREFIX + base32_encode(cid)


def format_compiler_version(solc: Any) -> str:
    # Release builds embed three bytes, prerelease builds a full version string
    if isinstance(solc, str):
        return solc
    if len(solc) < 3:
        raise MissingFieldError("solc", f"Field 'solc' is not a version triple: {bytes(solc).hex()}")
    return f"{solc[0]}.{solc[1]}.{solc[2]}"


def calculate_cid(metadata: Mapping[str, Any]) -> CIDResult:
    """
    Get the compiler version and both CIDs of the JSON metadata file.

    Args:
        metadata: Decoded bytecode metadata, must contain ``ipfs`` and ``solc``

    Returns:
        CIDResult with the ``solc`` version and the CIDv0/CIDv1 strings

    Raises:
        MissingFieldError: If ``ipfs`` or ``solc`` is absent
    """
    for field in ("ipfs", "solc"):
        if metadata.get(field) is None:
            raise MissingFieldError(field)

    ipfs = metadata["ipfs"]
    if isinstance(ipfs, str):
        raise MissingFieldError("ipfs", "Field 'ipfs' is not a byte string")

    result = CIDResult(
        solc_version=format_compiler_version(metadata["solc"]),
        cid_v0=multihash_to_cid_v0(ipfs),
        cid_v1=multihash_to_cid_v1(ipfs),
    )
    log.debug("cid_calculated", solc=result.solc_version, cid_v0=result.cid_v0)
    return result
