"""OBX Faucet - native-token funding for testnet accounts.

Signs value transfers from a single prefunded account, serialising nonce
use across concurrent callers, and waits for each transfer to confirm.
"""

from .base import NodeClient
from .config import FaucetConfig, node_url
from .connections import Web3NodeClient
from .constants import NATIVE_TOKEN, Token
from .exceptions import (
    ConfirmationTimeoutError,
    FaucetError,
    FundingCancelledError,
    FundingError,
    InitializationError,
    NetworkError,
    NonceFetchError,
    ReceiptQueryError,
    SigningError,
    SubmissionError,
    TransactionError,
    TransactionRevertedError,
    UnsupportedTokenError,
    ValidationError,
)
from .faucet import Faucet
from .types import Address, FundingTransaction, FundResponse, Wei

__version__ = "0.1.0"

__all__ = [
    # Core
    "Faucet",
    "FaucetConfig",
    "NodeClient",
    "Web3NodeClient",
    "node_url",
    # Types and constants
    "Address",
    "FundingTransaction",
    "FundResponse",
    "NATIVE_TOKEN",
    "Token",
    "Wei",
    # Exceptions
    "FaucetError",
    "InitializationError",
    "NetworkError",
    "ValidationError",
    "UnsupportedTokenError",
    "FundingError",
    "NonceFetchError",
    "SigningError",
    "SubmissionError",
    "FundingCancelledError",
    "TransactionError",
    "ReceiptQueryError",
    "TransactionRevertedError",
    "ConfirmationTimeoutError",
]
