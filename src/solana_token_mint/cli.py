from __future__ import annotations

import argparse
import logging
from typing import Dict

import httpx

from .config import Settings
from .errors import MintError, RpcError
from .params import (
    TokenMetadata,
    TokenParameters,
    build_metadata,
    build_token,
    collect_answers,
    load_answers,
)
from .pipeline import run_mint
from .project_constants import EXPLORER_URL, NETWORKS
from .rpc import RpcClient
from .storage import MetadataPublisher


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def explorer_url(kind: str, value: str, network: str) -> str:
    url = f"{EXPLORER_URL}/{kind}/{value}"
    if network != "mainnet":
        url += f"?cluster={network}"
    return url


def infer_network(rpc_url: str) -> str:
    """Cluster name for explorer links; unknown endpoints count as mainnet."""
    url = rpc_url.rstrip("/")
    for name, endpoint in NETWORKS.items():
        if url == endpoint:
            return name
    if "devnet" in url.lower():
        return "devnet"
    return "mainnet"


def print_token_info(answers: Dict[str, str], token: TokenParameters, metadata: TokenMetadata) -> None:
    print("Token information:")
    print(f"- Name          : {metadata.name}")
    print(f"- Symbol        : {metadata.symbol}")
    print(f"- Image URL     : {metadata.image_url}")
    print(f"- Royalty       : {metadata.seller_fee_basis_points} basis points")
    print(f"- Decimals      : {token.decimals}")
    print(f"- Total Supply  : {token.total_supply}")
    print(f"- Quote Token   : {answers['quote']}")
    print(f"- Min Buy       : {answers['minBuy']}")
    print(f"- Min Tick      : {answers['minTick']}")
    print(f"- Mint Disabled : {'yes' if token.mint_disabled else 'no'}")
    print(f"- Renounced     : {'yes' if token.renounced else 'no'}")
    print(f"- Liquidity     : {token.liquidity_percent}%")
    print(f"- Burn          : {token.burn_percent}%")
    print(f"- Pull after    : {token.rugpull_delay_seconds}s")
    print()


def cmd_create(args: argparse.Namespace) -> int:
    settings = Settings.from_env(rpc_url_override=args.rpc_url)
    log = logging.getLogger("create")
    network = args.network or infer_network(settings.rpc_url)

    print(f"Current network   : {network}")
    print(f"Connecting to     : {settings.rpc_url}")
    print(f"User wallet       : {settings.wallet.pubkey()}")

    answers = load_answers(args.answers) if args.answers else collect_answers()
    token = build_token(answers)
    metadata = build_metadata(answers, token)
    print_token_info(answers, token, metadata)

    log.info("Hold on tight, creating your token...")
    rpc = RpcClient(settings.rpc_url, timeout_s=args.timeout)
    publisher = MetadataPublisher(
        settings.storage_url,
        settings.gateway_url,
        token=settings.storage_token,
        timeout_s=args.timeout,
    )
    try:
        result = run_mint(
            rpc,
            publisher,
            settings.wallet,
            token,
            metadata,
            commitment=args.commitment,
            poll_interval_s=args.poll_interval,
        )
    finally:
        publisher.close()
        rpc.close()

    print("========================================")
    print("TOKEN CREATED")
    print("========================================")
    print(f"Metadata URI  : {result.metadata_uri}")
    print(f"Token address : {result.mint}")
    print(f"Signature     : {result.signature}")
    print("----------------------------------------")
    print(f"View transaction: {explorer_url('tx', result.signature, network)}")
    print(f"View token      : {explorer_url('address', str(result.mint), network)}")
    if network == "mainnet":
        print(f"View on BirdEye : https://birdeye.so/token/{result.mint}?chain=solana")
    return 0


def cmd_status(args: argparse.Namespace) -> int:
    """Prints the current status of a submitted signature."""
    settings = Settings.from_env(rpc_url_override=args.rpc_url)
    rpc = RpcClient(settings.rpc_url, timeout_s=args.timeout)
    try:
        status = rpc.get_signature_statuses([args.signature], search_history=True)[0]
    finally:
        rpc.close()

    print(f"Signature     : {args.signature}")
    if status is None:
        print("Status        : not found")
        return 1
    print(f"Slot          : {status.get('slot')}")
    print(f"Commitment    : {status.get('confirmationStatus')}")
    print(f"Error         : {status.get('err')}")
    return 0 if status.get("err") is None else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="solana-token-mint",
        description="Create an SPL token with Metaplex metadata in one transaction.",
    )
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    p.add_argument("--rpc-url", default=None, help="Override RPC URL (else use env).")
    p.add_argument("--timeout", type=float, default=60.0, help="RPC/storage timeout seconds.")

    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("create", help="Upload metadata, mint the token and wait for confirmation.")
    c.add_argument(
        "--answers",
        default=None,
        help="JSON file with the token answers (skips the interactive prompts).",
    )
    c.add_argument(
        "--network",
        choices=sorted(NETWORKS),
        default=None,
        help="Cluster for explorer links (default: inferred from the RPC URL).",
    )
    c.add_argument(
        "--commitment",
        choices=["processed", "confirmed", "finalized"],
        default="finalized",
        help="Commitment to wait for.",
    )
    c.add_argument("--poll-interval", type=float, default=2.0, help="Seconds between status polls.")
    c.set_defaults(func=cmd_create)

    s = sub.add_parser("status", help="Show the status of a transaction signature.")
    s.add_argument("signature", help="Transaction signature (base58).")
    s.set_defaults(func=cmd_status)

    return p


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    try:
        code = args.func(args)
    except (MintError, RpcError, httpx.HTTPError) as e:
        logging.getLogger("solana_token_mint").error("%s: %s", type(e).__name__, e)
        code = 1
    raise SystemExit(code)
