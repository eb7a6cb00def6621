"""Configuration containers for the OBX faucet."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import load_dotenv

from .constants import (
    DEFAULT_CHAIN_ID,
    DEFAULT_NODE_HOST,
    DEFAULT_NODE_PORT,
    FUNDING_AMOUNT,
    GAS_LIMIT,
    GAS_PRICE,
    NATIVE_TOKEN,
)
from .exceptions import ValidationError

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_CONFIRMATION_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 1.0

ENV_NODE_HOST = "FAUCET_NODE_HOST"
ENV_NODE_PORT = "FAUCET_NODE_PORT"
ENV_PRIVATE_KEY = "FAUCET_PK"
ENV_CHAIN_ID = "FAUCET_CHAIN_ID"


def node_url(host: str, port: int | str) -> str:
    """Compose the node RPC URL from a host (with or without scheme) and a port."""

    host = host.strip().rstrip("/")
    if "://" not in host:
        host = f"http://{host}"
    return f"{host}:{int(port)}"


@dataclass(frozen=True)
class FaucetConfig:
    """Aggregated configuration used to construct the faucet."""

    rpc_url: str
    private_key: str
    chain_id: int = DEFAULT_CHAIN_ID
    native_token: str = NATIVE_TOKEN
    funding_amount: int = FUNDING_AMOUNT
    gas_limit: int = GAS_LIMIT
    gas_price: int = GAS_PRICE
    confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, *, load_dotenv_file: bool = True
    ) -> FaucetConfig:
        """Build a config from ``FAUCET_*`` environment variables.

        A ``.env`` file in the working directory is loaded first unless
        ``load_dotenv_file`` is false. Values already present in the process
        environment win over the file.
        """

        if load_dotenv_file:
            load_dotenv()
        env = os.environ if environ is None else environ

        host = env.get(ENV_NODE_HOST) or DEFAULT_NODE_HOST
        port = parse_int(env.get(ENV_NODE_PORT), DEFAULT_NODE_PORT, field=ENV_NODE_PORT)
        chain_id = parse_int(env.get(ENV_CHAIN_ID), DEFAULT_CHAIN_ID, field=ENV_CHAIN_ID)

        return cls(
            rpc_url=node_url(host, port),
            private_key=env.get(ENV_PRIVATE_KEY, ""),
            chain_id=chain_id,
        ).validated()

    def validated(self) -> FaucetConfig:
        """Return ``self`` after checking the values are usable, else raise."""

        if not self.private_key:
            raise ValidationError("No faucet private key configured", field="private_key")
        if not self.rpc_url:
            raise ValidationError("No node RPC URL configured", field="rpc_url")
        if self.chain_id <= 0:
            raise ValidationError(
                "Chain id must be positive", field="chain_id", value=self.chain_id
            )
        for name in ("funding_amount", "gas_limit", "gas_price"):
            value = getattr(self, name)
            if value <= 0:
                raise ValidationError(f"{name} must be positive", field=name, value=value)
        if self.poll_interval <= 0:
            raise ValidationError(
                "Poll interval must be positive", field="poll_interval", value=self.poll_interval
            )
        if self.confirmation_timeout < self.poll_interval:
            raise ValidationError(
                "Confirmation timeout must cover at least one poll interval",
                field="confirmation_timeout",
                value=self.confirmation_timeout,
            )
        return self

    def redacted(self) -> dict[str, object]:
        """Return the config as a dict safe to log."""

        return {
            "rpc_url": self.rpc_url,
            "chain_id": self.chain_id,
            "native_token": self.native_token,
            "funding_amount": self.funding_amount,
            "gas_limit": self.gas_limit,
            "gas_price": self.gas_price,
            "confirmation_timeout": self.confirmation_timeout,
            "poll_interval": self.poll_interval,
            "request_timeout": self.request_timeout,
        }


def parse_int(raw: str | None, default: int, *, field: str) -> int:
    if raw is None or raw == "":
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ValidationError(f"{field} must be an integer", field=field, value=raw)
