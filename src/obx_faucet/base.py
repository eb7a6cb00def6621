"""Remote node interface consumed by the faucet."""

from abc import ABC, abstractmethod
from typing import Any

from hexbytes import HexBytes


class NodeClient(ABC):
    """Chain node capability: nonces, raw submission and receipt lookups.

    Implementations raise ``NetworkError`` for transport or RPC failures.
    """

    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        pass

    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    def chain_id(self) -> int:
        pass

    @abstractmethod
    def get_nonce(self, address: str) -> int:
        pass

    @abstractmethod
    def send_raw_transaction(self, raw_transaction: bytes) -> HexBytes:
        pass

    @abstractmethod
    def get_transaction_receipt(self, tx_hash: bytes) -> dict[str, Any] | None:
        """Return the receipt, or ``None`` while it is not yet available."""
