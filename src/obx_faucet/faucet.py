"""Native-token faucet bound to a single prefunded account.

Funding is split in two phases. Issuance (nonce check, build, sign, submit,
nonce update) runs under ``_fund_lock`` so only one call at a time touches
the cached nonce. Confirmation polling runs outside the lock, so a slow
confirmation never delays the next submission.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from .base import NodeClient
from .config import (
    DEFAULT_CONFIRMATION_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_TIMEOUT,
    FaucetConfig,
)
from .connections import Web3NodeClient
from .constants import FUNDING_AMOUNT, GAS_LIMIT, GAS_PRICE, NATIVE_TOKEN
from .exceptions import (
    ConfirmationTimeoutError,
    FundingCancelledError,
    InitializationError,
    NetworkError,
    NonceFetchError,
    ReceiptQueryError,
    SigningError,
    SubmissionError,
    TransactionRevertedError,
    UnsupportedTokenError,
    ValidationError,
)
from .types import FundingTransaction, FundResponse
from .utils import normalise_address, to_json

logger = logging.getLogger(__name__)


class Faucet:
    """Fund addresses with the native token from one signing account."""

    def __init__(
        self,
        rpc_url: str,
        chain_id: int,
        private_key: str,
        *,
        native_token: str = NATIVE_TOKEN,
        funding_amount: int = FUNDING_AMOUNT,
        gas_limit: int = GAS_LIMIT,
        gas_price: int = GAS_PRICE,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        node: NodeClient | None = None,
    ) -> None:
        config = FaucetConfig(
            rpc_url=rpc_url,
            private_key=private_key,
            chain_id=chain_id,
            native_token=native_token,
            funding_amount=funding_amount,
            gas_limit=gas_limit,
            gas_price=gas_price,
            confirmation_timeout=confirmation_timeout,
            poll_interval=poll_interval,
            request_timeout=request_timeout,
        )
        try:
            config.validated()
        except ValidationError as exc:
            raise InitializationError(
                f"Invalid faucet configuration: {exc.message}",
                details={"field": exc.field, "value": exc.value},
            ) from exc

        self._config = config
        self._account = self._load_account(private_key)
        if node is None:
            node = Web3NodeClient(rpc_url, request_timeout=request_timeout)
        self._node = node
        self._fund_lock = threading.Lock()
        self._shutdown = threading.Event()
        self._nonce = self._connect()

    @classmethod
    def from_config(cls, config: FaucetConfig, *, node: NodeClient | None = None) -> Faucet:
        return cls(
            config.rpc_url,
            config.chain_id,
            config.private_key,
            native_token=config.native_token,
            funding_amount=config.funding_amount,
            gas_limit=config.gas_limit,
            gas_price=config.gas_price,
            confirmation_timeout=config.confirmation_timeout,
            poll_interval=config.poll_interval,
            request_timeout=config.request_timeout,
            node=node,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @staticmethod
    def _load_account(private_key: str) -> LocalAccount:
        try:
            return Account.from_key(private_key)
        except Exception as exc:
            raise InitializationError(
                "Failed to derive signer account from provided private key",
                details={"error": str(exc)},
            ) from exc

    def _connect(self) -> int:
        """Connect to the node and return the account's on-chain nonce."""

        endpoint = self._config.rpc_url
        try:
            if not self._node.is_connected():
                self._node.connect()
            remote_chain_id = self._node.chain_id()
        except NetworkError as exc:
            raise InitializationError(
                "Unable to connect with the node",
                details={"endpoint": endpoint, "error": exc.message},
            ) from exc

        if remote_chain_id != self._config.chain_id:
            self._node.disconnect()
            raise InitializationError(
                "Node reports an unexpected chain id",
                details={"expected": self._config.chain_id, "actual": remote_chain_id},
            )

        try:
            nonce = self._node.get_nonce(self.address)
        except NetworkError as exc:
            self._node.disconnect()
            raise InitializationError(
                f"Unable to fetch {self.address} nonce",
                details={"endpoint": endpoint, "error": exc.message},
            ) from exc

        logger.info(
            "Faucet %s ready on chain %d with nonce %d", self.address, remote_chain_id, nonce
        )
        return nonce

    def close(self) -> None:
        """Wake any pending confirmation waits and drop the node connection."""

        self._shutdown.set()
        self._node.disconnect()

    def __enter__(self) -> Faucet:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def address(self) -> ChecksumAddress:
        return self._account.address

    @property
    def nonce(self) -> int:
        """Next nonce the faucet will sign with."""
        return self._nonce

    @property
    def config(self) -> FaucetConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._shutdown.is_set()

    # ------------------------------------------------------------------
    # Funding
    # ------------------------------------------------------------------
    def fund(
        self,
        address: str,
        token: str = NATIVE_TOKEN,
        *,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> FundResponse:
        """Send the funding amount of ``token`` to ``address`` and wait for it to land.

        ``timeout`` bounds the whole call (lock wait and confirmation) in
        seconds; the confirmation wait is additionally capped by the configured
        confirmation timeout. No transfer is signed once the deadline has passed.
        Setting ``cancel_event`` aborts the wait for the funding slot or for the
        confirmation within one poll interval.

        Raises:
            UnsupportedTokenError: ``token`` is not the native token.
            ValidationError: ``address`` is not an account address.
            FundingError: any per-call failure, see ``obx_faucet.exceptions``.
        """

        if token != self._config.native_token:
            raise UnsupportedTokenError(token, details={"native_token": self._config.native_token})

        recipient = normalise_address(address)

        deadline = None if timeout is None else time.monotonic() + timeout
        transaction = self._fund_native_token(recipient, deadline, cancel_event)
        logger.info("Funded address: %s - tx: %s", recipient, to_json(transaction.as_dict()))

        receipt = self._wait_for_receipt(transaction, deadline, cancel_event)
        return FundResponse(
            success=True,
            transaction_hash=transaction.hash_hex,
            recipient=recipient,
            amount=transaction.amount,
            nonce=transaction.nonce,
            block_number=receipt.get("blockNumber"),
            receipt=receipt,
        )

    def _acquire_fund_lock(
        self,
        recipient: ChecksumAddress,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> None:
        """Wait for the funding slot in poll-interval slices so cancellation is seen."""

        while True:
            self._check_cancelled(recipient, cancel_event)
            if deadline is None:
                wait = self._config.poll_interval
            else:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise FundingCancelledError(
                        "Timed out waiting for the funding slot", recipient=recipient
                    )
                wait = min(self._config.poll_interval, remaining)
            if self._fund_lock.acquire(timeout=wait):
                return

    def _check_cancelled(
        self, recipient: ChecksumAddress, cancel_event: threading.Event | None
    ) -> None:
        if self._shutdown.is_set():
            raise FundingCancelledError("Faucet is closed", recipient=recipient)
        if cancel_event is not None and cancel_event.is_set():
            raise FundingCancelledError("Funding cancelled by caller", recipient=recipient)

    def _fund_native_token(
        self,
        recipient: ChecksumAddress,
        deadline: float | None,
        cancel_event: threading.Event | None = None,
    ) -> FundingTransaction:
        # only one funding at a time
        self._acquire_fund_lock(recipient, deadline, cancel_event)

        try:
            # nothing is signed once the caller has given up or the faucet is closing
            self._check_cancelled(recipient, cancel_event)
            if deadline is not None and time.monotonic() >= deadline:
                raise FundingCancelledError(
                    "Deadline passed before the transfer was signed", recipient=recipient
                )

            try:
                onchain_nonce = self._node.get_nonce(self.address)
            except NetworkError as exc:
                self._check_cancelled(recipient, None)
                raise NonceFetchError(
                    f"Unable to fetch {self.address} nonce",
                    recipient=recipient,
                    details={"error": exc.message},
                ) from exc

            if onchain_nonce > self._nonce:
                logger.warning(
                    "On-chain nonce %d is ahead of cached nonce %d for %s, resynchronising",
                    onchain_nonce,
                    self._nonce,
                    self.address,
                )
                self._nonce = onchain_nonce

            transaction = self._sign_transfer(recipient, self._nonce)

            try:
                self._node.send_raw_transaction(transaction.raw_transaction)
            except NetworkError as exc:
                logger.warning(
                    "Submission failed for tx %s: %s", to_json(transaction.as_dict()), exc.message
                )
                raise SubmissionError(
                    f"Unable to submit tx {transaction.hash_hex}",
                    recipient=recipient,
                    transaction=transaction,
                    details={"error": exc.message},
                ) from exc

            # Advance from the local value; the on-chain count lags pending txs.
            self._nonce = transaction.nonce + 1
            return transaction
        finally:
            self._fund_lock.release()

    def _sign_transfer(self, recipient: ChecksumAddress, nonce: int) -> FundingTransaction:
        config = self._config
        tx = {
            "nonce": nonce,
            "gasPrice": config.gas_price,
            "gas": config.gas_limit,
            "to": recipient,
            "value": config.funding_amount,
            "data": b"",
            "chainId": config.chain_id,
        }

        try:
            signed = self._account.sign_transaction(tx)
        except Exception as exc:
            raise SigningError(
                "Failed to sign funding transaction",
                recipient=recipient,
                details={"nonce": nonce, "error": str(exc)},
            ) from exc

        return FundingTransaction(
            recipient=recipient,
            amount=config.funding_amount,
            nonce=nonce,
            gas=config.gas_limit,
            gas_price=config.gas_price,
            chain_id=config.chain_id,
            tx_hash=HexBytes(signed.hash),
            raw_transaction=HexBytes(signed.raw_transaction),
        )

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------
    def _wait_for_receipt(
        self,
        transaction: FundingTransaction,
        deadline: float | None,
        cancel_event: threading.Event | None,
    ) -> dict[str, Any]:
        """Poll for the receipt until it shows up or the confirmation window closes."""

        started = time.monotonic()
        expires = started + self._config.confirmation_timeout
        if deadline is not None:
            expires = min(expires, deadline)
        tx_hash = transaction.hash_hex
        recipient = transaction.recipient

        while True:
            self._check_cancelled(recipient, cancel_event)

            try:
                receipt = self._node.get_transaction_receipt(transaction.tx_hash)
            except NetworkError as exc:
                if self._shutdown.is_set():
                    raise FundingCancelledError(
                        f"Faucet closed while waiting for tx {tx_hash}", recipient=recipient
                    ) from exc
                raise ReceiptQueryError(
                    f"Could not retrieve receipt for tx {tx_hash}",
                    tx_hash=tx_hash,
                    recipient=recipient,
                    details={"error": exc.message},
                ) from exc

            if receipt is not None:
                logger.info("Receipt for tx %s: %s", tx_hash, to_json(receipt))
                if _receipt_status(receipt) != 1:
                    raise TransactionRevertedError(
                        f"Tx {tx_hash} status is not 0x1",
                        tx_hash=tx_hash,
                        recipient=recipient,
                        receipt=receipt,
                    )
                return receipt

            remaining = expires - time.monotonic()
            if remaining <= 0:
                break

            logger.debug("Receipt for tx %s not available yet", tx_hash)
            if self._shutdown.wait(min(self._config.poll_interval, remaining)):
                raise FundingCancelledError(
                    f"Faucet closed while waiting for tx {tx_hash}", recipient=recipient
                )

        waited = time.monotonic() - started
        raise ConfirmationTimeoutError(
            f"Unable to fetch receipt for tx {tx_hash} after {waited:.1f}s",
            tx_hash=tx_hash,
            recipient=recipient,
            timeout=max(expires - started, 0.0),
        )


def _receipt_status(receipt: dict[str, Any]) -> int | None:
    status = receipt.get("status")
    if isinstance(status, str):
        return int(status, 16)
    return status
