"""Type definitions and data models for the OBX faucet."""

from dataclasses import dataclass, field
from typing import Any

from eth_typing import ChecksumAddress
from hexbytes import HexBytes

Address = str  # Hex encoded account address
Wei = int


@dataclass(frozen=True)
class FundingTransaction:
    """A signed native-token transfer issued by the faucet."""

    recipient: ChecksumAddress
    amount: Wei
    nonce: int
    gas: int
    gas_price: Wei
    chain_id: int
    tx_hash: HexBytes
    raw_transaction: HexBytes

    @property
    def hash_hex(self) -> str:
        return self.tx_hash.to_0x_hex()

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-friendly view used for log records."""

        return {
            "hash": self.hash_hex,
            "to": self.recipient,
            "value": self.amount,
            "nonce": self.nonce,
            "gas": self.gas,
            "gasPrice": self.gas_price,
            "chainId": self.chain_id,
            "raw": self.raw_transaction.to_0x_hex(),
        }


@dataclass
class FundResponse:
    """Outcome of a confirmed funding call."""

    success: bool
    transaction_hash: str
    recipient: Address
    amount: Wei
    nonce: int
    block_number: int | None = None
    receipt: dict[str, Any] = field(default_factory=dict)
