from __future__ import annotations

import json
import logging
from typing import Optional, Tuple

import httpx

from .errors import MetadataUploadFailed
from .params import TokenMetadata

log = logging.getLogger(__name__)


def parse_add_response(raw: str) -> Tuple[str, int]:
    """
    IPFS /api/v0/add returns NDJSON (one JSON object per line).
    The last object describes the uploaded file; returns (cid, size).
    """
    last_obj = None
    for line in raw.strip().splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            continue
        if isinstance(obj, dict):
            last_obj = obj

    if last_obj is None:
        raise MetadataUploadFailed(f"Storage returned no JSON object: {raw[:200]!r}")

    cid = str(last_obj.get("Hash") or "").strip()
    if not cid:
        raise MetadataUploadFailed(f"Storage response missing Hash: {last_obj!r}")
    try:
        size = int(last_obj.get("Size") or 0)
    except (TypeError, ValueError):
        size = 0
    return cid, size


class MetadataPublisher:
    """Uploads the off-chain metadata document to an IPFS HTTP API and pins it."""

    def __init__(
        self,
        api_url: str,
        gateway_url: str,
        token: Optional[str] = None,
        timeout_s: float = 60.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.gateway_url = gateway_url.rstrip("/")
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = client or httpx.Client(timeout=timeout_s, headers=headers)
        if client is not None and headers:
            self.client.headers.update(headers)

    def close(self) -> None:
        self.client.close()

    def gateway_uri(self, cid: str) -> str:
        return f"{self.gateway_url}/ipfs/{cid}"

    def publish(self, metadata: TokenMetadata) -> str:
        body = json.dumps(metadata.offchain_document(), separators=(",", ":")).encode("utf-8")
        files = {"file": ("metadata.json", body, "application/json")}
        try:
            resp = self.client.post(
                f"{self.api_url}/api/v0/add",
                params={"pin": "true", "wrap-with-directory": "false", "progress": "false"},
                files=files,
            )
            resp.raise_for_status()
        except httpx.HTTPError as e:
            raise MetadataUploadFailed(f"Metadata upload failed: {e}") from e

        cid, size = parse_add_response(resp.text)
        log.debug("Uploaded metadata %s (%d bytes)", cid, size)
        return self.gateway_uri(cid)
