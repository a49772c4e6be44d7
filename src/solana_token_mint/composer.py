from __future__ import annotations

import logging
from decimal import Decimal, localcontext
from typing import List

from solders.instruction import Instruction
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.instructions import (
    InitializeMintParams,
    MintToParams,
    create_associated_token_account,
    initialize_mint,
    mint_to,
)

from .addresses import associated_token_address, metadata_address
from .errors import InvalidParameters
from .metadata import create_metadata_account_v3
from .params import TokenMetadata, TokenParameters
from .project_constants import MINT_LEN, TOKEN_PROGRAM_ID, U64_MAX

log = logging.getLogger(__name__)


def raw_supply(total_supply: Decimal, decimals: int) -> int:
    """total_supply * 10**decimals in base units, exact."""
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = Decimal(total_supply).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidParameters(
            f"Supply {total_supply} has more precision than {decimals} decimals allow."
        )
    amount = int(scaled)
    if amount < 0 or amount > U64_MAX:
        raise InvalidParameters(f"Supply {total_supply} scales to {amount} base units, outside u64.")
    return amount


def compose_mint_instructions(
    rpc,
    token: TokenParameters,
    metadata: TokenMetadata,
    payer: Pubkey,
    mint: Pubkey,
    destination_owner: Pubkey,
    mint_authority: Pubkey,
) -> List[Instruction]:
    """
    Builds the five token-creation instructions in dependency order:
    create mint account, initialize mint, create ATA, mint supply, create metadata.

    The rent-exempt minimum is fetched from `rpc` on every call.
    """
    required = {
        "rpc": rpc,
        "token": token,
        "metadata": metadata,
        "payer": payer,
        "mint": mint,
        "destination_owner": destination_owner,
        "mint_authority": mint_authority,
    }
    missing = [name for name, value in required.items() if value is None]
    if missing:
        raise InvalidParameters(f"Invalid input parameters: missing {', '.join(missing)}")

    # Validate everything local before touching the network.
    data = metadata.onchain_data()
    amount = raw_supply(token.total_supply, token.decimals)

    lamports = rpc.get_minimum_balance_for_rent_exemption(MINT_LEN)
    ata = associated_token_address(destination_owner, mint)
    metadata_pda = metadata_address(mint)
    log.debug("Rent-exempt minimum: %d lamports; ATA %s; metadata %s", lamports, ata, metadata_pda)

    return [
        create_account(
            CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=mint,
                lamports=lamports,
                space=MINT_LEN,
                owner=TOKEN_PROGRAM_ID,
            )
        ),
        initialize_mint(
            InitializeMintParams(
                decimals=token.decimals,
                program_id=TOKEN_PROGRAM_ID,
                mint=mint,
                mint_authority=mint_authority,
                freeze_authority=None,
            )
        ),
        create_associated_token_account(payer=payer, owner=destination_owner, mint=mint),
        mint_to(
            MintToParams(
                program_id=TOKEN_PROGRAM_ID,
                mint=mint,
                dest=ata,
                mint_authority=mint_authority,
                amount=amount,
            )
        ),
        create_metadata_account_v3(
            metadata=metadata_pda,
            mint=mint,
            mint_authority=mint_authority,
            payer=payer,
            update_authority=mint_authority,
            data=data,
            is_mutable=True,
        ),
    ]
