"""Command-line front end: fund one address and exit."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Sequence

from dotenv import load_dotenv

from .config import (
    ENV_CHAIN_ID,
    ENV_NODE_HOST,
    ENV_NODE_PORT,
    ENV_PRIVATE_KEY,
    FaucetConfig,
    node_url,
    parse_int,
)
from .constants import DEFAULT_CHAIN_ID, DEFAULT_NODE_HOST, DEFAULT_NODE_PORT, NATIVE_TOKEN
from .exceptions import FaucetError, InitializationError, ValidationError
from .faucet import Faucet

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="obx-faucet", description="Fund a testnet address from the faucet account."
    )
    parser.add_argument("address", help="Recipient address")
    parser.add_argument(
        "--nodeHost",
        dest="node_host",
        default=os.getenv(ENV_NODE_HOST, DEFAULT_NODE_HOST),
        help=f"The host on which to connect to the node. Default: {DEFAULT_NODE_HOST}.",
    )
    parser.add_argument(
        "--nodePort",
        dest="node_port",
        type=int,
        default=None,
        help=f"The port on which to connect to the node via RPC over HTTP. "
        f"Default: ${ENV_NODE_PORT} or {DEFAULT_NODE_PORT}.",
    )
    parser.add_argument(
        "--pk",
        default=os.getenv(ENV_PRIVATE_KEY, ""),
        help="The prefunded PK used to fund other accounts. No default, must be set.",
    )
    parser.add_argument(
        "--chainId",
        dest="chain_id",
        type=int,
        default=None,
        help=f"Chain id the faucet signs for. Default: ${ENV_CHAIN_ID} or {DEFAULT_CHAIN_ID}.",
    )
    parser.add_argument("--token", default=NATIVE_TOKEN, help="Token to fund. Default: obx.")
    parser.add_argument(
        "--timeout", type=float, default=None, help="Overall deadline for the call in seconds."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        node_port = args.node_port
        if node_port is None:
            node_port = parse_int(os.getenv(ENV_NODE_PORT), DEFAULT_NODE_PORT, field=ENV_NODE_PORT)
        chain_id = args.chain_id
        if chain_id is None:
            chain_id = parse_int(os.getenv(ENV_CHAIN_ID), DEFAULT_CHAIN_ID, field=ENV_CHAIN_ID)

        config = FaucetConfig(
            rpc_url=node_url(args.node_host, node_port),
            private_key=args.pk,
            chain_id=chain_id,
        ).validated()
    except ValidationError as exc:
        logger.error("Invalid configuration: %s", exc.message)
        return 2

    logger.debug("Faucet configuration: %s", config.redacted())

    try:
        faucet = Faucet.from_config(config)
    except InitializationError as exc:
        logger.error("Unable to start faucet: %s %s", exc.message, exc.details)
        return 2

    with faucet:
        try:
            response = faucet.fund(args.address, args.token, timeout=args.timeout)
        except FaucetError as exc:
            logger.error("Funding %s failed: %s", args.address, exc.message)
            return 1

    print(f"Funded {response.recipient} in tx {response.transaction_hash}")
    return 0
