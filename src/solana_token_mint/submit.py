from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from solders.transaction import VersionedTransaction

from .errors import BlockhashExpired, MissingSignature, RpcError, SubmissionFailed
from .rpc import BlockReference

log = logging.getLogger(__name__)

# Commitment levels, weakest first
COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}

# JSON-RPC code for "Transaction signature verification failure"
SIGNATURE_VERIFICATION_FAILURE = -32003


class Outcome(enum.Enum):
    REACHED = "reached"
    EXPIRED = "expired"
    FAILED = "failed"


@dataclass(frozen=True)
class ConfirmationResult:
    outcome: Outcome
    signature: str
    reason: Optional[Any] = None
    slot: Optional[int] = None
    commitment: Optional[str] = None


def submit(
    rpc,
    tx: VersionedTransaction,
    skip_preflight: bool = False,
    preflight_commitment: str = "finalized",
) -> str:
    try:
        signature = rpc.send_transaction(
            tx, skip_preflight=skip_preflight, preflight_commitment=preflight_commitment
        )
    except RpcError as e:
        if "Blockhash not found" in e.message:
            raise BlockhashExpired(f"Blockhash expired before submission: {e.message}") from e
        if e.code == SIGNATURE_VERIFICATION_FAILURE or "signature verification" in e.message:
            raise MissingSignature(f"Transaction is missing a required signature: {e.message}") from e
        raise SubmissionFailed(f"Transaction rejected: {e.message}") from e
    log.info("Submitted transaction %s", signature)
    return signature


def reached(status: dict, commitment: str) -> bool:
    current = status.get("confirmationStatus")
    if current is None:
        return False
    return COMMITMENT_RANK.get(current, -1) >= COMMITMENT_RANK[commitment]


def confirm(
    rpc,
    signature: str,
    block_ref: BlockReference,
    commitment: str = "finalized",
    poll_interval_s: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> ConfirmationResult:
    """
    Polls until the signature reaches `commitment`, reports an error, or the
    block height passes `block_ref.last_valid_block_height`.

    EXPIRED is inconclusive: the transaction may still have landed.
    """
    if commitment not in COMMITMENT_RANK:
        raise ValueError(f"Unknown commitment: {commitment}")

    expired = False
    while True:
        status = rpc.get_signature_statuses([signature], search_history=expired)[0]
        if status is not None:
            if status.get("err") is not None:
                return ConfirmationResult(Outcome.FAILED, signature, status["err"], status.get("slot"))
            if reached(status, commitment):
                return ConfirmationResult(
                    Outcome.REACHED, signature, slot=status.get("slot"), commitment=status.get("confirmationStatus")
                )
            # Already in a block; the height ceiling no longer applies.
            log.debug("Signature %s at %s", signature, status.get("confirmationStatus"))
        elif expired:
            return ConfirmationResult(Outcome.EXPIRED, signature)
        else:
            height = rpc.get_block_height(commitment="confirmed")
            if height > block_ref.last_valid_block_height:
                # Re-check once with history search before giving up.
                expired = True
                continue

        sleep(poll_interval_s)
