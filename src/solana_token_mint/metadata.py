from __future__ import annotations

from typing import Any, Dict

from borsh_construct import Bool, CStruct, Enum, Option, String, U8, U16, U64, Vec
from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import ID as SYS_PROGRAM_ID

from .project_constants import CREATE_METADATA_ACCOUNT_V3, METADATA_PROGRAM_ID

CreatorLayout = CStruct(
    "address" / U8[32],
    "verified" / Bool,
    "share" / U8,
)
CollectionLayout = CStruct(
    "verified" / Bool,
    "key" / U8[32],
)
UseMethodLayout = Enum("Burn" / CStruct(), "Multiple" / CStruct(), "Single" / CStruct(), enum_name="UseMethod")
UsesLayout = CStruct(
    "use_method" / UseMethodLayout,
    "remaining" / U64,
    "total" / U64,
)
DataV2Layout = CStruct(
    "name" / String,
    "symbol" / String,
    "uri" / String,
    "seller_fee_basis_points" / U16,
    "creators" / Option(Vec(CreatorLayout)),
    "collection" / Option(CollectionLayout),
    "uses" / Option(UsesLayout),
)
CollectionDetailsLayout = Enum("V1" / CStruct("size" / U64), enum_name="CollectionDetails")
CreateMetadataAccountArgsV3Layout = CStruct(
    "data" / DataV2Layout,
    "is_mutable" / Bool,
    "collection_details" / Option(CollectionDetailsLayout),
)


def encode_create_metadata_v3(data: Dict[str, Any], is_mutable: bool = True) -> bytes:
    """
    `data` holds the DataV2 fields: name, symbol, uri, seller_fee_basis_points,
    creators, collection, uses (the last three None for a plain fungible token).
    """
    body = CreateMetadataAccountArgsV3Layout.build(
        {
            "data": data,
            "is_mutable": is_mutable,
            "collection_details": None,
        }
    )
    return bytes([CREATE_METADATA_ACCOUNT_V3]) + body


def create_metadata_account_v3(
    metadata: Pubkey,
    mint: Pubkey,
    mint_authority: Pubkey,
    payer: Pubkey,
    update_authority: Pubkey,
    data: Dict[str, Any],
    is_mutable: bool = True,
) -> Instruction:
    accounts = [
        AccountMeta(metadata, is_signer=False, is_writable=True),
        AccountMeta(mint, is_signer=False, is_writable=False),
        AccountMeta(mint_authority, is_signer=True, is_writable=False),
        AccountMeta(payer, is_signer=True, is_writable=True),
        AccountMeta(update_authority, is_signer=False, is_writable=False),
        AccountMeta(SYS_PROGRAM_ID, is_signer=False, is_writable=False),
    ]
    return Instruction(
        METADATA_PROGRAM_ID,
        encode_create_metadata_v3(data, is_mutable=is_mutable),
        accounts,
    )
