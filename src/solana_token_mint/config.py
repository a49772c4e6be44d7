from __future__ import annotations

import os
from dataclasses import dataclass

import base58
from dotenv import load_dotenv
from solders.keypair import Keypair

from .errors import MissingSecret

DEFAULT_STORAGE_URL = "http://127.0.0.1:5001"
DEFAULT_GATEWAY_URL = "https://ipfs.io"


def decode_keypair(secret: str) -> Keypair:
    try:
        raw = base58.b58decode(secret.strip())
    except ValueError as e:
        raise MissingSecret(f"PRIVATE_KEY is not valid base58: {e}") from e
    if len(raw) != 64:
        raise MissingSecret(f"PRIVATE_KEY must decode to 64 bytes, got {len(raw)}.")
    try:
        return Keypair.from_bytes(raw)
    except ValueError as e:
        raise MissingSecret(f"PRIVATE_KEY is not a valid keypair: {e}") from e


@dataclass(frozen=True)
class Settings:
    rpc_url: str
    wallet: Keypair
    storage_url: str = DEFAULT_STORAGE_URL
    gateway_url: str = DEFAULT_GATEWAY_URL
    storage_token: str | None = None

    @staticmethod
    def from_env(rpc_url_override: str | None = None) -> "Settings":
        load_dotenv()

        private_key = os.getenv("PRIVATE_KEY", "").strip()
        if not private_key:
            raise MissingSecret("Missing PRIVATE_KEY. Put it in .env or export it.")

        # --rpc-url wins over the environment.
        rpc_url = (rpc_url_override or os.getenv("RPC_ENDPOINT", "")).strip()
        if not rpc_url:
            raise MissingSecret("Missing RPC_ENDPOINT (or --rpc-url). Put it in .env or export it.")

        return Settings(
            rpc_url=rpc_url,
            wallet=decode_keypair(private_key),
            storage_url=os.getenv("METADATA_STORAGE_URL", "").strip() or DEFAULT_STORAGE_URL,
            gateway_url=os.getenv("METADATA_GATEWAY_URL", "").strip() or DEFAULT_GATEWAY_URL,
            storage_token=os.getenv("METADATA_STORAGE_TOKEN", "").strip() or None,
        )
