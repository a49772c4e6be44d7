from __future__ import annotations

from typing import Any


class MintError(RuntimeError):
    """Base class for failures that abort the mint pipeline."""


class MissingSecret(MintError):
    pass


class InvalidParameters(MintError):
    pass


class MetadataUploadFailed(MintError):
    pass


class BlockhashExpired(MintError):
    pass


class TransactionExpired(MintError):
    """Block height passed lastValidBlockHeight; the transaction may or may not have landed."""


class SubmissionFailed(MintError):
    pass


class MissingSignature(SubmissionFailed):
    pass


class ConfirmationFailed(MintError):
    pass


class RpcError(RuntimeError):
    def __init__(self, code: int | None, message: str, data: Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data
