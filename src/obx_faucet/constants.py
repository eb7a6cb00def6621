"""Constants for the OBX faucet."""

from enum import Enum

from web3 import Web3


class Token(str, Enum):
    """Token identifiers accepted by the faucet front end."""

    OBX = "obx"
    WRAPPED_OBX = "wobx"
    WRAPPED_ETH = "weth"
    WRAPPED_USDC = "usdc"


NATIVE_TOKEN = Token.OBX.value

# Legacy transfer parameters; plain value transfers always cost 21000 gas
GAS_LIMIT = 21_000
GAS_PRICE = 225
FUNDING_AMOUNT = Web3.to_wei(100_000, "ether")

DEFAULT_CHAIN_ID = 777
DEFAULT_NODE_HOST = "http://testnet.obscu.ro"
DEFAULT_NODE_PORT = 13000
