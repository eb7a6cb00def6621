"""Exception hierarchy for the OBX faucet."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from .types import FundingTransaction


class FaucetError(Exception):
    """Base exception for all faucet errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InitializationError(FaucetError):
    """Raised when the faucet cannot be constructed."""

    pass


class NetworkError(FaucetError):
    """Raised when network/connection issues occur."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class ValidationError(FaucetError):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value


class UnsupportedTokenError(FaucetError):
    """Raised when funding is requested for a token other than the native one."""

    def __init__(self, token: str, details: dict | None = None):
        super().__init__(f"Token '{token}' is not fundable", details)
        self.token = token


class FundingError(FaucetError):
    """Raised when a single funding call fails."""

    def __init__(self, message: str, recipient: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.recipient = recipient


class NonceFetchError(FundingError):
    """Raised when the account nonce cannot be read from the node."""

    pass


class SigningError(FundingError):
    """Raised when the funding transaction cannot be signed."""

    pass


class SubmissionError(FundingError):
    """Raised when the node does not accept the signed transaction."""

    def __init__(
        self,
        message: str,
        recipient: str | None = None,
        transaction: FundingTransaction | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, recipient, details)
        self.transaction = transaction


class FundingCancelledError(FundingError):
    """Raised when a funding call is interrupted by its caller or by shutdown."""

    pass


class TransactionError(FundingError):
    """Raised when a submitted transaction cannot be confirmed."""

    def __init__(
        self,
        message: str,
        tx_hash: str | None = None,
        recipient: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, recipient, details)
        self.tx_hash = tx_hash


class ReceiptQueryError(TransactionError):
    """Raised when the node fails a receipt lookup with an unexpected error."""

    pass


class TransactionRevertedError(TransactionError):
    """Raised when a transaction is included but did not execute successfully."""

    def __init__(
        self,
        message: str,
        tx_hash: str | None = None,
        recipient: str | None = None,
        receipt: dict[str, Any] | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, tx_hash, recipient, details)
        self.receipt = receipt
        self.status = None if receipt is None else receipt.get("status")


class ConfirmationTimeoutError(TransactionError):
    """Raised when no receipt shows up within the confirmation window."""

    def __init__(
        self,
        message: str,
        tx_hash: str | None = None,
        recipient: str | None = None,
        timeout: float | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, tx_hash, recipient, details)
        self.timeout = timeout
