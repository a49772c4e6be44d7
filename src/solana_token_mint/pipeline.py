from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .composer import compose_mint_instructions
from .errors import ConfirmationFailed, TransactionExpired
from .params import TokenMetadata, TokenParameters
from .storage import MetadataPublisher
from .submit import Outcome, confirm, submit
from .transaction import assemble, sign

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MintResult:
    mint: Pubkey
    signature: str
    metadata_uri: str


def run_mint(
    rpc,
    publisher: MetadataPublisher,
    payer: Keypair,
    token: TokenParameters,
    metadata: TokenMetadata,
    commitment: str = "finalized",
    poll_interval_s: float = 2.0,
    mint_keypair: Optional[Keypair] = None,
) -> MintResult:
    """
    Upload metadata, then create, sign, submit and confirm the token-creation
    transaction. The new mint key lives only for this call.
    """
    uri = publisher.publish(metadata)
    log.info("Metadata uploaded. URI: %s", uri)
    metadata = metadata.with_uri(uri)

    mint = mint_keypair or Keypair()
    log.info("Generated token address: %s", mint.pubkey())

    instructions = compose_mint_instructions(
        rpc,
        token,
        metadata,
        payer=payer.pubkey(),
        mint=mint.pubkey(),
        destination_owner=payer.pubkey(),
        mint_authority=mint.pubkey(),
    )

    # Fresh blockhash right before compiling; confirmation uses the same one.
    block_ref = rpc.get_latest_blockhash(commitment)
    message = assemble(instructions, payer.pubkey(), block_ref)
    tx = sign(message, [payer, mint])

    signature = submit(rpc, tx, preflight_commitment=commitment)
    result = confirm(rpc, signature, block_ref, commitment=commitment, poll_interval_s=poll_interval_s)

    if result.outcome is Outcome.EXPIRED:
        raise TransactionExpired(
            f"Transaction {signature} not {commitment} before block height "
            f"{block_ref.last_valid_block_height}; it may or may not have landed."
        )
    if result.outcome is Outcome.FAILED:
        raise ConfirmationFailed(f"Transaction {signature} failed: {result.reason}")

    return MintResult(mint=mint.pubkey(), signature=signature, metadata_uri=uri)
