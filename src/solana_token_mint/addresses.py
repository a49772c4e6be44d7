from __future__ import annotations

from solders.pubkey import Pubkey
from spl.token.instructions import get_associated_token_address

from .project_constants import METADATA_PROGRAM_ID, TOKEN_PROGRAM_ID


def associated_token_address(owner: Pubkey, mint: Pubkey) -> Pubkey:
    """
    Seeds: owner | token program | mint, under the associated token program.
    Same inputs always give the same address.
    """
    return get_associated_token_address(owner, mint, TOKEN_PROGRAM_ID)


def metadata_address(mint: Pubkey) -> Pubkey:
    return Pubkey.find_program_address(
        [b"metadata", bytes(METADATA_PROGRAM_ID), bytes(mint)], METADATA_PROGRAM_ID
    )[0]
