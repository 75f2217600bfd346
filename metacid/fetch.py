"""Network boundary: bytecode over Ethereum JSON-RPC, metadata over an IPFS gateway."""

from typing import Any, Optional
from urllib.parse import urlsplit

import requests
from web3 import Web3

from metacid.logging import get_logger

log = get_logger(__name__)


def fetch_bytecode(
    address: str, rpc_url: str, timeout: Optional[float] = None
) -> Optional[str]:
    """
    Fetch the runtime bytecode of a contract with ``eth_getCode``.

    Works on any chain whose node supports the standard Ethereum JSON-RPC
    method. No retries are attempted.
    The request id is assigned by the web3 provider.

    Args:
        address: Contract address, ``0x`` prefixed
        rpc_url: The RPC endpoint URL
        timeout: Request timeout in seconds, None to wait indefinitely

    Returns:
        The bytecode hex string from the ``result`` field, or None if the
        node returned no result (for example on a malformed address)

    Raises:
        requests.HTTPError: If the RPC responds with an HTTP error
    """
    request_kwargs = {"timeout": timeout} if timeout is not None else {}
    provider = Web3.HTTPProvider(rpc_url, request_kwargs=request_kwargs)

    log.debug("rpc_request", rpc=rpc_url, method="eth_getCode", address=address)
    response = provider.make_request("eth_getCode", [address, "latest"])

    result = response.get("result")
    if not isinstance(result, str):
        log.debug("rpc_no_result", address=address, error=response.get("error"))
        return None
    return result


def gateway_url(cid: str, gateway: str) -> str:
    """
    Build the gateway URL for a CID.

    CIDv0 (``Q...``) uses the path style ``{origin}/ipfs/{cid}``. CIDv1 is
    case-insensitive and uses the subdomain style ``{cid}.ipfs.{host}``; a
    gateway host whose first label is already ``ipfs`` is not repeated.
    """
    parts = urlsplit(gateway)
    query = f"?{parts.query}" if parts.query else ""

    if cid[0] == "Q":
        return f"{parts.scheme}://{parts.netloc}/ipfs/{cid}{query}"

    path = parts.path or "/"
    if parts.netloc.split(".")[0] == "ipfs":
        return f"{parts.scheme}://{cid}.{parts.netloc}{path}{query}"
    return f"{parts.scheme}://{cid}.ipfs.{parts.netloc}{path}{query}"


def fetch_cid(
    cid: str, gateway: str, timeout: Optional[float] = None
) -> requests.Response:
    """
    Query an IPFS gateway for a CID and return the raw response.

    The status code is not checked, that is left to the caller.
    """
    url = gateway_url(cid, gateway)
    log.debug("gateway_request", url=url)
    return requests.get(url, timeout=timeout)


def fetch_metadata(cid: str, gateway: str, timeout: Optional[float] = None) -> Any:
    """
    Fetch the metadata JSON file for a CID.

    Args:
        cid: CIDv0 or CIDv1 of the metadata file
        gateway: Base URL of an IPFS gateway
        timeout: Request timeout in seconds

    Returns:
        The parsed metadata JSON

    Raises:
        requests.HTTPError: On a non-2xx response
    """
    response = fetch_cid(cid, gateway, timeout=timeout)
    response.raise_for_status()
    return response.json()
