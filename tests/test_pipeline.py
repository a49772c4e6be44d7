from __future__ import annotations

import pytest
from solders.keypair import Keypair

from solana_token_mint.errors import ConfirmationFailed, MetadataUploadFailed, TransactionExpired
from solana_token_mint.pipeline import run_mint

from conftest import FakePublisher, FakeRpc

FINALIZED = {"confirmationStatus": "finalized", "err": None, "slot": 42}


def test_mint_end_to_end(token, metadata) -> None:
    rpc = FakeRpc(statuses=[FINALIZED])
    publisher = FakePublisher()
    payer = Keypair()
    mint = Keypair()

    result = run_mint(rpc, publisher, payer, token, metadata, mint_keypair=mint, poll_interval_s=0)

    assert result.mint == mint.pubkey()
    assert result.metadata_uri == publisher.uri
    assert len(rpc.sent) == 1
    tx = rpc.sent[0]
    assert result.signature == str(tx.signatures[0])
    assert list(tx.message.account_keys[:2]) == [payer.pubkey(), mint.pubkey()]
    # scenario A: 1,000,000 tokens at 9 decimals
    mint_to = tx.message.instructions[3]
    assert int.from_bytes(bytes(mint_to.data[1:9]), "little") == 10**15


def test_upload_failure_aborts_before_composition(token, metadata) -> None:
    rpc = FakeRpc()
    publisher = FakePublisher(error=MetadataUploadFailed("storage down"))

    with pytest.raises(MetadataUploadFailed):
        run_mint(rpc, publisher, Keypair(), token, metadata)

    assert rpc.rent_calls == []
    assert rpc.sent == []


def test_expired_confirmation_is_surfaced_without_resubmission(token, metadata) -> None:
    rpc = FakeRpc(statuses=[None, None], heights=[1_001], last_valid_block_height=1_000)

    with pytest.raises(TransactionExpired):
        run_mint(rpc, FakePublisher(), Keypair(), token, metadata, poll_interval_s=0)

    assert len(rpc.sent) == 1


def test_failed_confirmation_raises(token, metadata) -> None:
    rpc = FakeRpc(statuses=[{"confirmationStatus": "confirmed", "err": {"InstructionError": [4, "Custom"]}}])
    with pytest.raises(ConfirmationFailed):
        run_mint(rpc, FakePublisher(), Keypair(), token, metadata)
