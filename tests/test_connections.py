from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import pytest
from hexbytes import HexBytes
from web3 import Web3
from web3.datastructures import AttributeDict
from web3.exceptions import TransactionNotFound

from obx_faucet.connections import Web3NodeClient
from obx_faucet.exceptions import NetworkError

RPC_URL = "http://node:13000"
ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TX_HASH = HexBytes("0x" + "ab" * 32)


def _raise(exc: Exception) -> Any:
    raise exc


def _client_with_eth(**eth: Any) -> Web3NodeClient:
    client = Web3NodeClient(RPC_URL, request_timeout=1.0)
    client._web3 = SimpleNamespace(eth=SimpleNamespace(**eth))  # type: ignore[assignment]
    return client


class OfflineWeb3(Web3):
    def is_connected(self, show_traceback: bool = False) -> bool:  # type: ignore[override]
        return False


class OnlineWeb3(Web3):
    def is_connected(self, show_traceback: bool = False) -> bool:  # type: ignore[override]
        return True


def test_connect_raises_when_node_unreachable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("obx_faucet.connections.Web3", OfflineWeb3)
    client = Web3NodeClient(RPC_URL)

    with pytest.raises(NetworkError) as excinfo:
        client.connect()

    assert excinfo.value.endpoint == RPC_URL
    assert not client.is_connected()


def test_connect_and_disconnect(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("obx_faucet.connections.Web3", OnlineWeb3)
    client = Web3NodeClient(RPC_URL, request_timeout=3.0)

    client.connect()
    assert client.is_connected()
    assert isinstance(client.web3, OnlineWeb3)

    client.disconnect()
    assert not client.is_connected()


def test_queries_require_connection() -> None:
    client = Web3NodeClient(RPC_URL)

    with pytest.raises(NetworkError, match="not connected"):
        client.get_nonce(ACCOUNT)


def test_get_nonce_and_chain_id() -> None:
    seen: list[str] = []

    def get_transaction_count(address: str) -> int:
        seen.append(address)
        return 7

    client = _client_with_eth(get_transaction_count=get_transaction_count, chain_id=777)

    assert client.get_nonce(ACCOUNT.lower()) == 7
    assert seen == [ACCOUNT]
    assert client.chain_id() == 777


def test_get_nonce_wraps_rpc_errors() -> None:
    client = _client_with_eth(
        get_transaction_count=lambda address: _raise(ConnectionError("reset"))
    )

    with pytest.raises(NetworkError) as excinfo:
        client.get_nonce(ACCOUNT)

    assert excinfo.value.details["error"] == "reset"
    assert isinstance(excinfo.value.__cause__, ConnectionError)


def test_send_raw_transaction_returns_hash() -> None:
    client = _client_with_eth(send_raw_transaction=lambda raw: TX_HASH)

    assert client.send_raw_transaction(b"\x01") == TX_HASH


def test_send_raw_transaction_wraps_rejection() -> None:
    client = _client_with_eth(
        send_raw_transaction=lambda raw: _raise(ValueError({"message": "nonce too low"}))
    )

    with pytest.raises(NetworkError, match="rejected"):
        client.send_raw_transaction(b"\x01")


def test_missing_receipt_is_reported_as_none() -> None:
    client = _client_with_eth(
        get_transaction_receipt=lambda tx_hash: _raise(TransactionNotFound("not found"))
    )

    assert client.get_transaction_receipt(TX_HASH) is None


def test_receipt_is_serialised() -> None:
    receipt = AttributeDict(
        {
            "transactionHash": TX_HASH,
            "blockNumber": 3,
            "status": 1,
            "logs": [],
        }
    )
    client = _client_with_eth(get_transaction_receipt=lambda tx_hash: receipt)

    result = client.get_transaction_receipt(TX_HASH)

    assert result == {
        "transactionHash": TX_HASH.to_0x_hex(),
        "blockNumber": 3,
        "status": 1,
        "logs": [],
    }


def test_other_receipt_errors_raise_network_error() -> None:
    client = _client_with_eth(
        get_transaction_receipt=lambda tx_hash: _raise(RuntimeError("internal error"))
    )

    with pytest.raises(NetworkError) as excinfo:
        client.get_transaction_receipt(TX_HASH)

    assert excinfo.value.details["tx_hash"] == TX_HASH.to_0x_hex()
