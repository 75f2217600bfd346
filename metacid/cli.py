"""
Contract Metadata CID CLI Tool
Recovers the IPFS CID of a contract's compiler metadata from its runtime bytecode,
and optionally fetches the metadata JSON from an IPFS gateway.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

import requests
from web3 import Web3

from metacid.cbor import decode_cbor
from metacid.cid import CIDResult, calculate_cid
from metacid.config import MetaCIDConfig, load_config
from metacid.errors import MetadataError
from metacid.extract import extract_metadata_blob
from metacid.fetch import fetch_bytecode, fetch_metadata, gateway_url
from metacid.language import CompilerFamily, detect_language, strip_hex_prefix
from metacid.logging import get_logger, setup_logging

log = get_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"

    @staticmethod
    def disable():
        Colors.HEADER = ""
        Colors.OKBLUE = ""
        Colors.OKGREEN = ""
        Colors.WARNING = ""
        Colors.FAIL = ""
        Colors.ENDC = ""
        Colors.BOLD = ""


def read_bytecode_from_file(filepath: str) -> str:
    """
    Read bytecode from a local file.

    Args:
        filepath: Path to the file containing bytecode

    Returns:
        The bytecode as a hex string, without ``0x`` prefix

    Raises:
        MetadataError: If the file cannot be read
    """
    try:
        with open(filepath, "r") as f:
            bytecode = "".join(f.read().split())
    except OSError as e:
        raise MetadataError(f"Error reading bytecode from file: {e}")

    return strip_hex_prefix(bytecode)


def load_bytecode(args: argparse.Namespace, config: MetaCIDConfig) -> str:
    if args.file:
        return read_bytecode_from_file(args.file)
    if args.bytecode:
        return strip_hex_prefix("".join(args.bytecode.split()))

    if not Web3.is_address(args.contract):
        raise MetadataError(f"Invalid contract address: {args.contract}")

    rpc_url = args.rpc or config.rpc.url
    bytecode = fetch_bytecode(args.contract, rpc_url, timeout=config.rpc.timeout)
    if not bytecode or strip_hex_prefix(bytecode) == "":
        raise MetadataError(f"No bytecode found at address: {args.contract}")
    return strip_hex_prefix(bytecode)


def format_value(value: Any) -> str:
    if isinstance(value, bytes):
        return f"0x{value.hex()}"
    return str(value)


def print_results(
    bytecode: str,
    language: CompilerFamily,
    metadata: Dict[str, Any],
    result: CIDResult,
    gateway: str,
    metadata_json: Optional[Any],
    fetched: bool,
):
    """
    Print the extraction results in a readable format with colorized output.

    Args:
        bytecode: The contract bytecode
        language: Compiler detected from the bytecode prefix
        metadata: The decoded CBOR metadata
        result: Compiler version and CIDs of the metadata file
        gateway: IPFS gateway base URL
        metadata_json: The metadata JSON from IPFS (if fetched)
        fetched: Whether a gateway fetch was attempted
    """
    print(f"\n{Colors.HEADER}{Colors.BOLD}" + "=" * 70)
    print("CONTRACT METADATA CID RESULTS")
    print("=" * 70 + f"{Colors.ENDC}")

    print(
        f"\n{Colors.BOLD}[*] Contract Bytecode Length:{Colors.ENDC} {len(bytecode) // 2} bytes ({len(bytecode)} hex chars)"
    )
    print(f"{Colors.BOLD}[*] Language:{Colors.ENDC} {language.value}")

    print(f"\n{Colors.BOLD}[*] CBOR Decoded Metadata:{Colors.ENDC}")
    for key, value in metadata.items():
        print(f"    {Colors.OKBLUE}{key}:{Colors.ENDC} {format_value(value)}")

    print(f"\n{Colors.BOLD}[*] Compiler Version:{Colors.ENDC} {result.solc_version}")

    print(f"\n{Colors.BOLD}[*] Metadata CIDv0:{Colors.ENDC} {result.cid_v0}")
    print(f"    {Colors.OKBLUE}Gateway URL:{Colors.ENDC} {gateway_url(result.cid_v0, gateway)}")
    print(f"{Colors.BOLD}[*] Metadata CIDv1:{Colors.ENDC} {result.cid_v1}")
    print(f"    {Colors.OKBLUE}Gateway URL:{Colors.ENDC} {gateway_url(result.cid_v1, gateway)}")

    if metadata_json is not None:
        print(f"\n{Colors.BOLD}[*] Metadata JSON from IPFS:{Colors.ENDC}")
        print(json.dumps(metadata_json, indent=2))
    elif fetched:
        print(
            f"\n{Colors.BOLD}[*] Metadata JSON from IPFS:{Colors.ENDC} {Colors.WARNING}Gateway returned no metadata{Colors.ENDC}"
        )

    print(f"\n{Colors.HEADER}{Colors.BOLD}" + "=" * 70 + f"{Colors.ENDC}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metacid",
        description="Recover the IPFS CID of a contract's compiler metadata from its bytecode",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fetch from RPC
  metacid --rpc https://eth.llamarpc.com --contract 0x1234...

  # Read from file, skip the gateway
  metacid --file bytecode.txt --no-ipfs
        """,
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        "--contract", type=str, help="Contract address to fetch bytecode for over RPC"
    )
    input_group.add_argument(
        "--file", type=str, help="Path to local file containing bytecode"
    )
    input_group.add_argument(
        "--bytecode", type=str, help="Runtime bytecode as a hex string"
    )

    parser.add_argument(
        "--rpc", type=str, help="RPC URL to fetch bytecode from (default: rpc.url in config)"
    )
    parser.add_argument(
        "--lang",
        choices=[CompilerFamily.SOLIDITY.value, CompilerFamily.VYPER.value],
        help="Compiler that produced the bytecode (default: detected)",
    )
    parser.add_argument(
        "--gateway", type=str, help="IPFS gateway base URL (default: gateway.url in config)"
    )
    parser.add_argument(
        "--no-ipfs", action="store_true", help="Skip fetching metadata JSON from IPFS"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output only the result as JSON (silent on success, errors still shown)",
    )
    parser.add_argument("--config", type=str, help="Path to metacid.yaml")
    parser.add_argument("--log-level", type=str, help="Log level (default: WARNING)")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(
        level=args.log_level or config.logging.level,
        json_output=args.log_json or config.logging.json_output,
    )

    if args.rpc and not args.contract:
        parser.error("--rpc can only be used with --contract")
    if args.contract and not (args.rpc or config.rpc.url):
        parser.error("--rpc is required when using --contract")

    if args.no_color or args.json or not sys.stdout.isatty():
        Colors.disable()

    gateway = args.gateway or config.gateway.url

    def step(n: int, message: str):
        if not args.json:
            print(f"\n{Colors.OKBLUE}[{n}/4]{Colors.ENDC} {message}")

    def done(message: str):
        if not args.json:
            print(f"      {Colors.OKGREEN}✓ {message}{Colors.ENDC}")

    try:
        step(1, "Loading bytecode...")
        bytecode = load_bytecode(args, config)
        done(f"Loaded {len(bytecode) // 2} bytes of bytecode")

        step(2, "Extracting CBOR metadata...")
        language = detect_language(bytecode)
        family = CompilerFamily(args.lang) if args.lang else language
        if family is CompilerFamily.UNKNOWN:
            log.warning("unknown_compiler", detail="assuming solidity metadata layout")
            family = CompilerFamily.SOLIDITY
        metadata = decode_cbor(extract_metadata_blob(bytecode, family))
        done(f"Decoded {family.value} metadata: {', '.join(metadata)}")

        step(3, "Calculating CIDs...")
        result = calculate_cid(metadata)
        done(f"CIDv0: {result.cid_v0}")

        step(4, "Fetching metadata JSON from IPFS...")
        metadata_json = None
        if not args.no_ipfs:
            metadata_json = fetch_metadata(result.cid_v0, gateway, timeout=config.gateway.timeout)
            done("Successfully fetched metadata from IPFS")
        elif not args.json:
            print("      Skipping IPFS fetch")

        if args.json:
            output = {"language": language.value, **result.to_dict(), "metadata": metadata_json}
            print(json.dumps(output))
        else:
            print_results(
                bytecode, language, metadata, result, gateway, metadata_json, not args.no_ipfs
            )
        return 0

    except (MetadataError, requests.RequestException) as e:
        print(
            f"\n{Colors.FAIL}{Colors.BOLD}[ERROR]{Colors.ENDC} {str(e)}",
            file=sys.stderr,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
