"""Web3 backed node client for the faucet."""

from __future__ import annotations

import logging
from typing import Any

from hexbytes import HexBytes
from web3 import HTTPProvider, Web3
from web3.exceptions import TransactionNotFound

from .base import NodeClient
from .config import DEFAULT_REQUEST_TIMEOUT
from .exceptions import NetworkError
from .utils import serialise_receipt, tx_hash_hex

logger = logging.getLogger(__name__)


class Web3NodeClient(NodeClient):
    """Talk to the chain node through a web3 HTTP provider."""

    def __init__(self, rpc_url: str, *, request_timeout: float = DEFAULT_REQUEST_TIMEOUT):
        self.rpc_url = rpc_url
        self.request_timeout = request_timeout
        self._provider: HTTPProvider | None = None
        self._web3: Web3 | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def connect(self) -> None:
        provider = HTTPProvider(self.rpc_url, request_kwargs={"timeout": self.request_timeout})
        web3 = Web3(provider)
        if not web3.is_connected():
            raise NetworkError("Unable to connect to node RPC", endpoint=self.rpc_url)

        self._provider = provider
        self._web3 = web3
        logger.info("Connected to node RPC at %s", self.rpc_url)

    def disconnect(self) -> None:
        self._provider = None
        self._web3 = None

    def is_connected(self) -> bool:
        return self._web3 is not None

    @property
    def web3(self) -> Web3:
        if self._web3 is None:
            raise NetworkError("Node RPC provider not connected", endpoint=self.rpc_url)
        return self._web3

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def chain_id(self) -> int:
        try:
            return int(self.web3.eth.chain_id)
        except NetworkError:
            raise
        except Exception as exc:
            raise NetworkError(
                "Failed to read chain id", endpoint=self.rpc_url, details={"error": str(exc)}
            ) from exc

    def get_nonce(self, address: str) -> int:
        try:
            return int(self.web3.eth.get_transaction_count(Web3.to_checksum_address(address)))
        except NetworkError:
            raise
        except Exception as exc:
            raise NetworkError(
                f"Failed to fetch nonce for {address}",
                endpoint=self.rpc_url,
                details={"error": str(exc)},
            ) from exc

    def send_raw_transaction(self, raw_transaction: bytes) -> HexBytes:
        try:
            return HexBytes(self.web3.eth.send_raw_transaction(raw_transaction))
        except NetworkError:
            raise
        except Exception as exc:
            raise NetworkError(
                "Node rejected raw transaction",
                endpoint=self.rpc_url,
                details={"error": str(exc)},
            ) from exc

    def get_transaction_receipt(self, tx_hash: bytes) -> dict[str, Any] | None:
        try:
            receipt = self.web3.eth.get_transaction_receipt(HexBytes(tx_hash))
        except TransactionNotFound:
            return None
        except NetworkError:
            raise
        except Exception as exc:
            raise NetworkError(
                "Failed to fetch transaction receipt",
                endpoint=self.rpc_url,
                details={"tx_hash": tx_hash_hex(tx_hash), "error": str(exc)},
            ) from exc

        if receipt is None:
            return None
        return serialise_receipt(receipt)
