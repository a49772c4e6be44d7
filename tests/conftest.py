from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import pytest
from solders.hash import Hash

from solana_token_mint.params import TokenMetadata, TokenParameters
from solana_token_mint.rpc import BlockReference

RENT_EXEMPT_MINT = 1_461_600


class FakeRpc:
    """In-memory stand-in for RpcClient; records every call that matters."""

    def __init__(
        self,
        statuses: Optional[List[Optional[Dict[str, Any]]]] = None,
        heights: Optional[List[int]] = None,
        last_valid_block_height: int = 1_000,
        send_error: Optional[Exception] = None,
    ) -> None:
        self.block_ref = BlockReference(Hash.new_unique(), last_valid_block_height)
        self.statuses = list(statuses or [])
        self.heights = list(heights or [])
        self.send_error = send_error
        self.rent_calls: List[int] = []
        self.sent: List[Any] = []
        self.status_calls = 0
        self.history_searches: List[bool] = []

    def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        self.rent_calls.append(size)
        return RENT_EXEMPT_MINT

    def get_latest_blockhash(self, commitment: str = "finalized") -> BlockReference:
        return self.block_ref

    def send_transaction(self, tx, skip_preflight=False, preflight_commitment="finalized") -> str:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(tx)
        return str(tx.signatures[0])

    def get_signature_statuses(self, signatures, search_history=False):
        self.status_calls += 1
        self.history_searches.append(search_history)
        status = self.statuses.pop(0) if self.statuses else None
        return [status]

    def get_block_height(self, commitment: str = "finalized") -> int:
        return self.heights.pop(0) if self.heights else 0


class FakePublisher:
    def __init__(self, uri: str = "https://ipfs.io/ipfs/bafkreitest", error: Optional[Exception] = None) -> None:
        self.uri = uri
        self.error = error
        self.published: List[TokenMetadata] = []

    def publish(self, metadata: TokenMetadata) -> str:
        if self.error is not None:
            raise self.error
        self.published.append(metadata)
        return self.uri


@pytest.fixture
def answers() -> Dict[str, str]:
    return {
        "network": "Y",
        "tokenName": "MyToken",
        "symbol": "MTK",
        "decimals": "9",
        "supply": "1000000",
        "image": "https://example.com/image.png",
        "description": "About token.",
        "royalty": "500",
        "quote": "SOL",
        "minBuy": "1",
        "minTick": "0.000001",
        "mint": "1",
        "renounced": "0",
        "liquidity": "70",
        "burn": "50",
        "rugpull": "60",
    }


@pytest.fixture
def token() -> TokenParameters:
    return TokenParameters(
        decimals=9,
        total_supply=Decimal("1000000"),
        mint_disabled=False,
        renounced=False,
        liquidity_percent=Decimal("70"),
        burn_percent=Decimal("50"),
        rugpull_delay_seconds=60,
    )


@pytest.fixture
def metadata(token: TokenParameters) -> TokenMetadata:
    return TokenMetadata(
        name="MyToken",
        symbol="MTK",
        image_url="https://example.com/image.png",
        description="About token.",
        seller_fee_basis_points=500,
        decimals=token.decimals,
        total_supply=token.total_supply,
    )
