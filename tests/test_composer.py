from __future__ import annotations

from dataclasses import replace
from decimal import Decimal

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID
from solders.system_program import decode_create_account

from solana_token_mint.addresses import associated_token_address, metadata_address
from solana_token_mint.composer import compose_mint_instructions, raw_supply
from solana_token_mint.errors import InvalidParameters
from solana_token_mint.project_constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    METADATA_PROGRAM_ID,
    MINT_LEN,
    TOKEN_PROGRAM_ID,
)

from conftest import RENT_EXEMPT_MINT, FakeRpc

URI = "https://ipfs.io/ipfs/bafkreitest"


def _compose(rpc, token, metadata, payer=None, mint=None):
    payer = payer or Pubkey.new_unique()
    mint = mint or Pubkey.new_unique()
    return compose_mint_instructions(
        rpc,
        token,
        metadata.with_uri(URI),
        payer=payer,
        mint=mint,
        destination_owner=payer,
        mint_authority=mint,
    )


def _mint_to_amount(ix) -> int:
    assert ix.data[0] == 7  # MintTo
    return int.from_bytes(bytes(ix.data[1:9]), "little")


def test_five_instructions_in_dependency_order(token, metadata) -> None:
    ixs = _compose(FakeRpc(), token, metadata)
    assert [ix.program_id for ix in ixs] == [
        SYS_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        ASSOCIATED_TOKEN_PROGRAM_ID,
        TOKEN_PROGRAM_ID,
        METADATA_PROGRAM_ID,
    ]
    assert ixs[1].data[0] == 0  # InitializeMint
    assert ixs[4].data[0] == 33  # CreateMetadataAccountV3


def test_scenario_a_supply_scaling(token, metadata) -> None:
    ixs = _compose(FakeRpc(), token, metadata)
    assert _mint_to_amount(ixs[3]) == 1_000_000_000_000_000


@pytest.mark.parametrize("decimals", range(0, 10))
def test_supply_scaling_is_exact(decimals: int, token, metadata) -> None:
    token = replace(token, decimals=decimals, total_supply=Decimal("123456.789"))
    if decimals < 3:
        with pytest.raises(InvalidParameters):
            raw_supply(token.total_supply, decimals)
        return
    ixs = _compose(FakeRpc(), token, metadata)
    assert _mint_to_amount(ixs[3]) == 123456789 * 10 ** (decimals - 3)


def test_raw_supply_rejects_u64_overflow() -> None:
    with pytest.raises(InvalidParameters):
        raw_supply(Decimal("18446744073709551616"), 0)
    assert raw_supply(Decimal("0"), 9) == 0


def test_rent_is_fetched_on_every_call(token, metadata) -> None:
    rpc = FakeRpc()
    ixs = _compose(rpc, token, metadata)
    _compose(rpc, token, metadata)
    assert rpc.rent_calls == [MINT_LEN, MINT_LEN]

    params = decode_create_account(ixs[0])
    assert params["lamports"] == RENT_EXEMPT_MINT
    assert params["space"] == MINT_LEN
    assert params["owner"] == TOKEN_PROGRAM_ID


def test_accounts_point_at_derived_addresses(token, metadata) -> None:
    payer = Pubkey.new_unique()
    mint = Keypair().pubkey()
    ixs = _compose(FakeRpc(), token, metadata, payer=payer, mint=mint)

    ata = associated_token_address(payer, mint)
    assert ixs[2].accounts[1].pubkey == ata
    assert ixs[3].accounts[1].pubkey == ata
    assert ixs[4].accounts[0].pubkey == metadata_address(mint)


def test_missing_input_fails_before_network(token, metadata) -> None:
    rpc = FakeRpc()
    with pytest.raises(InvalidParameters, match="payer"):
        compose_mint_instructions(
            rpc,
            token,
            metadata.with_uri(URI),
            payer=None,
            mint=Pubkey.new_unique(),
            destination_owner=Pubkey.new_unique(),
            mint_authority=Pubkey.new_unique(),
        )
    assert rpc.rent_calls == []


def test_metadata_without_uri_is_rejected(token, metadata) -> None:
    rpc = FakeRpc()
    mint = Pubkey.new_unique()
    with pytest.raises(InvalidParameters):
        compose_mint_instructions(rpc, token, metadata, Pubkey.new_unique(), mint, Pubkey.new_unique(), mint)
    assert rpc.rent_calls == []
