from __future__ import annotations

from typing import List, Sequence

from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import MessageV0, to_bytes_versioned
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import VersionedTransaction

from .rpc import BlockReference


def assemble(
    instructions: Sequence[Instruction], payer: Pubkey, block_ref: BlockReference
) -> MessageV0:
    """Compiles a v0 message (no lookup tables) with `payer` as fee payer."""
    return MessageV0.try_compile(payer, list(instructions), [], block_ref.blockhash)


def required_signers(message: MessageV0) -> List[Pubkey]:
    return list(message.account_keys[: message.header.num_required_signatures])


def sign(message: MessageV0, keypairs: Sequence[Keypair]) -> VersionedTransaction:
    """
    Signs every required slot we hold a key for. Slots without a matching
    key keep the default signature and are rejected by the network on submit.
    """
    signers = required_signers(message)
    by_pubkey = {kp.pubkey(): kp for kp in keypairs}
    unknown = [str(pk) for pk in by_pubkey if pk not in signers]
    if unknown:
        raise ValueError(f"Keypair(s) not required by message: {', '.join(unknown)}")

    payload = to_bytes_versioned(message)
    signatures = [
        by_pubkey[pk].sign_message(payload) if pk in by_pubkey else Signature.default()
        for pk in signers
    ]
    return VersionedTransaction.populate(message, signatures)
