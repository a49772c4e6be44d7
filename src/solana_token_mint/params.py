from __future__ import annotations

import json
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import InvalidParameters
from .project_constants import (
    MAX_BASIS_POINTS,
    MAX_NAME_LENGTH,
    MAX_SYMBOL_LENGTH,
    MAX_URI_LENGTH,
    QUOTE_TOKEN,
)

Validator = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class TokenParameters:
    decimals: int
    total_supply: Decimal
    mint_disabled: bool
    renounced: bool
    liquidity_percent: Decimal
    burn_percent: Decimal
    rugpull_delay_seconds: int


@dataclass(frozen=True)
class TokenMetadata:
    name: str
    symbol: str
    image_url: str
    description: str
    seller_fee_basis_points: int
    decimals: int
    total_supply: Decimal
    uri: Optional[str] = None
    creators: None = None
    collection: None = None
    uses: None = None

    def with_uri(self, uri: str) -> "TokenMetadata":
        if len(uri.encode("utf-8")) > MAX_URI_LENGTH:
            raise InvalidParameters(f"Metadata URI longer than {MAX_URI_LENGTH} bytes: {uri}")
        return replace(self, uri=uri)

    def offchain_document(self) -> Dict[str, Any]:
        """JSON document uploaded to storage; the on-chain record points at it."""
        return {
            "name": self.name,
            "symbol": self.symbol,
            "description": self.description,
            "image": self.image_url,
            "seller_fee_basis_points": self.seller_fee_basis_points,
            "decimals": self.decimals,
            "total_supply": str(self.total_supply),
        }

    def onchain_data(self) -> Dict[str, Any]:
        """DataV2 fields for CreateMetadataAccountV3."""
        if self.uri is None:
            raise InvalidParameters("Metadata URI missing; publish metadata first.")
        return {
            "name": self.name,
            "symbol": self.symbol,
            "uri": self.uri,
            "seller_fee_basis_points": self.seller_fee_basis_points,
            "creators": self.creators,
            "collection": self.collection,
            "uses": self.uses,
        }


# --- field validators (return an error message, or None when valid) ---


def _non_empty(msg: str) -> Validator:
    return lambda v: None if v.strip() else msg


def _numeric(v: str) -> Optional[str]:
    try:
        d = Decimal(v.strip())
    except InvalidOperation:
        return "Please enter a valid number to proceed"
    if not d.is_finite():
        return "Please enter a valid number to proceed"
    return None


def _confirm_network(v: str) -> Optional[str]:
    if v.strip() in ("Y", "y"):
        return None
    return "Please make sure you are on the intended network & confirm back to proceed"


def _quote(v: str) -> Optional[str]:
    if v.strip() == QUOTE_TOKEN:
        return None
    return f"Please enter the quote token to proceed. Currently only supports {QUOTE_TOKEN} (case-sensitive)"


# (answer key, prompt, default, validator)
QUESTIONS: List[Tuple[str, str, Optional[str], Validator]] = [
    ("network", "Confirm the target network (Y/N):", None, _confirm_network),
    ("tokenName", "Token name (e.g., MyToken):", None, _non_empty("Please enter the token name to proceed")),
    ("symbol", "Token symbol (e.g., MTK):", None, _non_empty("Please enter the token symbol to proceed")),
    ("decimals", "Set the token decimals (e.g., 9):", None, _numeric),
    ("supply", "Set the total token supply (e.g., 10000000):", None, _numeric),
    (
        "image",
        "Token image URL (e.g., https://example.com/image.png):",
        "https://example.com/image.png",
        _non_empty("Please enter a valid image URL to proceed"),
    ),
    (
        "description",
        "Token description (e.g., About token. Telegram: ..., X: ..., Website: ...):",
        None,
        _non_empty("Please enter the token description to proceed"),
    ),
    ("royalty", "Set the royalty percentage (basis points, e.g., 500 for 5%):", None, _numeric),
    ("quote", f"Quote Token (e.g., {QUOTE_TOKEN}):", None, _quote),
    ("minBuy", "Min Order Size i.e. min buy (e.g., 1):", None, _numeric),
    ("minTick", "Min tick Size i.e. min price change (e.g., 0.000001):", None, _numeric),
    ("mint", 'Disable Mint ("1" for "Yes" & "0" for "No"):', None, _numeric),
    ("renounced", 'Renounce Ownership ("1" for "Yes" & "0" for "No"):', None, _numeric),
    ("liquidity", "Set the liquidity percentage (e.g., 70 for 70% of the Total Supply):", None, _numeric),
    ("burn", "Set the burn percentage (e.g., 50 for 50% of the Total liquidity):", None, _numeric),
    ("rugpull", 'Set the liquidity pull delay in seconds (e.g., "60" for "60s"):', None, _numeric),
]


def collect_answers(prompt: Callable[[str], str] = input) -> Dict[str, str]:
    """Asks every question in order, re-asking until the answer validates."""
    answers: Dict[str, str] = {}
    for key, message, default, validate in QUESTIONS:
        suffix = f" ({default})" if default else ""
        while True:
            value = prompt(f"{message}{suffix} ")
            if not value.strip() and default:
                value = default
            error = validate(value)
            if error is None:
                answers[key] = value.strip()
                break
            print(f">> {error}")
    return answers


def validate_answers(answers: Dict[str, Any]) -> Dict[str, str]:
    """Same checks as the interactive prompts, for answers loaded from a file."""
    out: Dict[str, str] = {}
    for key, _message, default, validate in QUESTIONS:
        raw = answers.get(key, default)
        if raw is None:
            raise InvalidParameters(f"Missing answer: {key}")
        value = str(raw)
        error = validate(value)
        if error is not None:
            raise InvalidParameters(f"{key}: {error}")
        out[key] = value.strip()
    return out


def load_answers(path: str) -> Dict[str, str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise InvalidParameters(f"Could not read answers file {path}: {e}") from e
    if not isinstance(raw, dict):
        raise InvalidParameters(f"Answers file {path} must contain a JSON object.")
    return validate_answers(raw)


def _decimal(answers: Dict[str, str], key: str) -> Decimal:
    try:
        d = Decimal(answers[key])
    except (KeyError, InvalidOperation) as e:
        raise InvalidParameters(f"{key} must be a number") from e
    if not d.is_finite():
        raise InvalidParameters(f"{key} must be a finite number")
    return d


def _integer(answers: Dict[str, str], key: str) -> int:
    d = _decimal(answers, key)
    if d != d.to_integral_value():
        raise InvalidParameters(f"{key} must be a whole number, got {answers[key]}")
    return int(d)


def _flag(answers: Dict[str, str], key: str) -> bool:
    v = _integer(answers, key)
    if v not in (0, 1):
        raise InvalidParameters(f'{key} must be "1" or "0", got {v}')
    return v == 1


def build_token(answers: Dict[str, str]) -> TokenParameters:
    decimals = _integer(answers, "decimals")
    if not 0 <= decimals <= 255:
        raise InvalidParameters(f"decimals must be within 0..255, got {decimals}")

    total_supply = _decimal(answers, "supply")
    if total_supply < 0:
        raise InvalidParameters(f"supply must not be negative, got {total_supply}")

    return TokenParameters(
        decimals=decimals,
        total_supply=total_supply,
        mint_disabled=_flag(answers, "mint"),
        renounced=_flag(answers, "renounced"),
        liquidity_percent=_decimal(answers, "liquidity"),
        burn_percent=_decimal(answers, "burn"),
        rugpull_delay_seconds=_integer(answers, "rugpull"),
    )


def build_metadata(answers: Dict[str, str], token: TokenParameters) -> TokenMetadata:
    name = answers.get("tokenName", "").strip()
    symbol = answers.get("symbol", "").strip()
    if not name or len(name.encode("utf-8")) > MAX_NAME_LENGTH:
        raise InvalidParameters(f"tokenName must be 1..{MAX_NAME_LENGTH} bytes, got {name!r}")
    if not symbol or len(symbol.encode("utf-8")) > MAX_SYMBOL_LENGTH:
        raise InvalidParameters(f"symbol must be 1..{MAX_SYMBOL_LENGTH} bytes, got {symbol!r}")

    royalty = _integer(answers, "royalty")
    if not 0 <= royalty <= MAX_BASIS_POINTS:
        raise InvalidParameters(f"royalty must be within 0..{MAX_BASIS_POINTS} basis points, got {royalty}")

    return TokenMetadata(
        name=name,
        symbol=symbol,
        image_url=answers.get("image", "").strip(),
        description=answers.get("description", "").strip(),
        seller_fee_basis_points=royalty,
        decimals=token.decimals,
        total_supply=token.total_supply,
    )
