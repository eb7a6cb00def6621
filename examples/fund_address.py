"""Fund a testnet address with the native token.

This example demonstrates:
- Loading the faucet configuration from the environment / .env file
- Funding a single address and waiting for confirmation
- Handling the faucet's typed errors
"""

import logging
import sys

from dotenv import load_dotenv

from obx_faucet import (
    ConfirmationTimeoutError,
    Faucet,
    FaucetConfig,
    FaucetError,
    SubmissionError,
)

load_dotenv()


def example_fund(address: str) -> None:
    """Example of funding one address."""

    config = FaucetConfig.from_env()

    with Faucet.from_config(config) as faucet:
        print(f"Faucet account: {faucet.address} (next nonce {faucet.nonce})")

        try:
            response = faucet.fund(address, timeout=60)
        except SubmissionError as exc:
            print(f"❌ Node rejected the transfer: {exc.message}")
            if exc.transaction is not None:
                print(f"   Signed tx: {exc.transaction.as_dict()}")
            return
        except ConfirmationTimeoutError as exc:
            print(f"⏳ Transfer {exc.tx_hash} not confirmed after {exc.timeout:.0f}s")
            return
        except FaucetError as exc:
            print(f"❌ Funding failed: {exc.message}")
            return

        print("✅ Funding confirmed!")
        print(f"   Tx hash: {response.transaction_hash}")
        print(f"   Block: {response.block_number}")
        print(f"   Nonce: {response.nonce}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    if len(sys.argv) != 2:
        raise SystemExit("usage: fund_address.py <address>")
    example_fund(sys.argv[1])
