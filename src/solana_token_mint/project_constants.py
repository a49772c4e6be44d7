"""
Fixed program ids and on-chain limits used when creating a token.

These mirror the values baked into the Solana and Metaplex programs.
Changing them produces transactions the network will reject.
"""

from solders.pubkey import Pubkey
from spl.token.constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    MINT_LEN,
    TOKEN_PROGRAM_ID,
)

# Metaplex Token Metadata program
METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

# CreateMetadataAccountV3 instruction discriminator
CREATE_METADATA_ACCOUNT_V3 = 33

# Metaplex DataV2 field limits (bytes)
MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200
MAX_BASIS_POINTS = 10_000

U64_MAX = 2**64 - 1

# Only SOL is accepted as quote token
QUOTE_TOKEN = "SOL"

EXPLORER_URL = "https://explorer.solana.com"

NETWORKS = {
    "mainnet": "https://api.mainnet-beta.solana.com",
    "devnet": "https://api.devnet.solana.com",
}

__all__ = [
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "CREATE_METADATA_ACCOUNT_V3",
    "EXPLORER_URL",
    "MAX_BASIS_POINTS",
    "MAX_NAME_LENGTH",
    "MAX_SYMBOL_LENGTH",
    "MAX_URI_LENGTH",
    "METADATA_PROGRAM_ID",
    "MINT_LEN",
    "NETWORKS",
    "QUOTE_TOKEN",
    "TOKEN_PROGRAM_ID",
    "U64_MAX",
]
