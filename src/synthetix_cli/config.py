"""
Configuration for synthetix-cli commands.

Sources, highest precedence first: command-line option, environment,
``.env`` files (``./.env`` then ``~/.synthetix-cli/.env``), default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from .errors import ConfigError
from .pneuma.abi import parse_gwei
from .pneuma.rpc import FORK_RPC_URL

# Default config directory
CONFIG_DIR = Path.home() / ".synthetix-cli"
CONFIG_ENV = CONFIG_DIR / ".env"

DEFAULT_NETWORK = "mainnet"
DEFAULT_GAS_PRICE_GWEI = 1.0
DEFAULT_GAS_LIMIT = 8_000_000


def load_env(env_path: Optional[Path] = None) -> None:
    """Load ``.env`` files without overriding variables already set."""
    local_env = Path.cwd() / ".env"
    if local_env.exists():
        load_dotenv(local_env, override=False)

    env_path = env_path or CONFIG_ENV
    if env_path.exists():
        load_dotenv(env_path, override=False)


def resolve_provider_url(
    network: str,
    provider_url: Optional[str] = None,
    use_fork: bool = False,
    infura_only: bool = True,
) -> str:
    """
    Pick the JSON-RPC endpoint.

    Priority: local fork > --provider-url > PROVIDER_URL. The literal
    ``network`` in PROVIDER_URL is replaced by the network name; with
    ``infura_only`` only Infura URLs are rewritten.

    Raises:
        ConfigError: If no endpoint is configured
    """
    if use_fork:
        return FORK_RPC_URL
    if provider_url:
        return provider_url

    env_url = os.environ.get("PROVIDER_URL")
    if env_url:
        if infura_only and "infura" not in env_url:
            return env_url
        return env_url.replace("network", network)

    raise ConfigError("No provider configured. Pass --provider-url or set PROVIDER_URL.")


def resolve_private_key(private_key: Optional[str] = None) -> Optional[str]:
    """
    Signing key from the option or PRIVATE_KEY.

    Returns:
        0x-prefixed hex private key, or None for read-only sessions
    """
    private_key = private_key or os.environ.get("PRIVATE_KEY")
    if not private_key:
        return None

    # Ensure 0x prefix
    if not private_key.startswith("0x"):
        private_key = "0x" + private_key

    return private_key


@dataclass(frozen=True)
class SessionConfig:
    network: str = DEFAULT_NETWORK
    provider_url: str = ""
    use_ovm: bool = False
    use_fork: bool = False
    gas_price: float = DEFAULT_GAS_PRICE_GWEI
    gas_limit: int = DEFAULT_GAS_LIMIT
    deployment_path: Optional[Path] = None
    private_key: Optional[str] = None
    owner: Optional[str] = None

    @classmethod
    def from_options(
        cls,
        network: str = DEFAULT_NETWORK,
        provider_url: Optional[str] = None,
        use_ovm: bool = False,
        use_fork: bool = False,
        gas_price: float = DEFAULT_GAS_PRICE_GWEI,
        gas_limit: int = DEFAULT_GAS_LIMIT,
        deployment_path: Optional[str] = None,
        private_key: Optional[str] = None,
        owner: Optional[str] = None,
        infura_only: bool = True,
    ) -> "SessionConfig":
        """Merge command-line options with the environment."""
        network = network.lower()
        return cls(
            network=network,
            provider_url=resolve_provider_url(network, provider_url, use_fork, infura_only),
            use_ovm=use_ovm,
            use_fork=use_fork,
            gas_price=gas_price,
            gas_limit=gas_limit,
            deployment_path=Path(deployment_path) if deployment_path else None,
            private_key=resolve_private_key(private_key),
            owner=owner,
        )

    @property
    def overrides(self) -> dict[str, Any]:
        """Gas fields applied to every staged transaction."""
        return {"gas": self.gas_limit, "gasPrice": parse_gwei(self.gas_price)}
