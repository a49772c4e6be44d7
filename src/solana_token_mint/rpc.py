from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.transaction import VersionedTransaction

from .errors import RpcError


@dataclass(frozen=True)
class BlockReference:
    blockhash: Hash
    last_valid_block_height: int


class RpcClient:
    def __init__(
        self,
        rpc_url: str,
        timeout_s: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.client = client or httpx.Client(timeout=timeout_s)
        self._next_id = 0

    def close(self) -> None:
        self.client.close()

    def _post(self, method: str, params: List[Any]) -> Any:
        self._next_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._next_id,
            "method": method,
            "params": params,
        }
        resp = self.client.post(self.rpc_url, json=payload)
        resp.raise_for_status()
        try:
            data = resp.json()
        except json.JSONDecodeError as e:
            raise RpcError(None, f"Non-JSON response from {self.rpc_url}: {resp.text[:200]!r}") from e
        if "error" in data:
            err = data["error"]
            raise RpcError(err.get("code"), err.get("message", ""), err.get("data"))
        return data["result"]

    def get_slot(self, commitment: str = "finalized") -> int:
        return int(self._post("getSlot", [{"commitment": commitment}]))

    def get_block_height(self, commitment: str = "finalized") -> int:
        return int(self._post("getBlockHeight", [{"commitment": commitment}]))

    def get_balance(self, address: Pubkey, commitment: str = "finalized") -> int:
        """Returns the balance in lamports."""
        result = self._post("getBalance", [str(address), {"commitment": commitment}])
        return int(result["value"])

    def get_latest_blockhash(self, commitment: str = "finalized") -> BlockReference:
        result = self._post("getLatestBlockhash", [{"commitment": commitment}])
        value = result["value"]
        return BlockReference(
            blockhash=Hash.from_string(value["blockhash"]),
            last_valid_block_height=int(value["lastValidBlockHeight"]),
        )

    def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        return int(self._post("getMinimumBalanceForRentExemption", [size]))

    def send_transaction(
        self,
        tx: VersionedTransaction,
        skip_preflight: bool = False,
        preflight_commitment: str = "finalized",
    ) -> str:
        """Submits a signed transaction and returns its signature (base58)."""
        encoded = base64.b64encode(bytes(tx)).decode("ascii")
        return str(
            self._post(
                "sendTransaction",
                [
                    encoded,
                    {
                        "encoding": "base64",
                        "skipPreflight": skip_preflight,
                        "preflightCommitment": preflight_commitment,
                    },
                ],
            )
        )

    def get_signature_statuses(
        self, signatures: List[str], search_history: bool = False
    ) -> List[Optional[Dict[str, Any]]]:
        """
        Returns one entry per signature, None where the node has not seen it.
        Each entry carries 'confirmationStatus' and 'err'.
        """
        result = self._post(
            "getSignatureStatuses",
            [signatures, {"searchTransactionHistory": search_history}],
        )
        return list(result["value"])
