"""Utility functions for the OBX faucet."""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from eth_typing import ChecksumAddress
from hexbytes import HexBytes
from web3 import Web3

from .exceptions import ValidationError


def serialise_receipt(receipt: Any) -> Any:
    """Serialise web3 receipt objects into JSON-friendly structures."""
    if receipt is None:
        return None
    if isinstance(receipt, Mapping):
        return {key: serialise_receipt(value) for key, value in receipt.items()}
    if isinstance(receipt, Sequence) and not isinstance(
        receipt, str | bytes | bytearray | HexBytes
    ):
        return [serialise_receipt(item) for item in receipt]
    if isinstance(receipt, bytes | bytearray | HexBytes):
        return HexBytes(receipt).to_0x_hex()
    return receipt


def to_json(value: Any) -> str:
    """Render a serialised record as compact JSON for logging."""
    return json.dumps(serialise_receipt(value), sort_keys=True, default=str)


def normalise_address(address: str) -> ChecksumAddress:
    """Return the checksum form of ``address`` or raise ValidationError."""
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValidationError("Invalid recipient address", field="address", value=address)
    return Web3.to_checksum_address(address)


def tx_hash_hex(tx_hash: bytes | str) -> str:
    """Return a 0x-prefixed hex string for a transaction hash."""
    return HexBytes(tx_hash).to_0x_hex()
