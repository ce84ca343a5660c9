"""
Session context shared by the status reporter and the interactive driver.

Holds the provider, the optional signer and the deployment registry for one
command invocation. Nothing in a session is mutated after it is opened.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .codex.registry import ContractDescriptor, DeploymentRegistry
from .config import SessionConfig
from .pneuma.contract import Contract
from .pneuma.rpc import Provider
from .sigil.signer import Signer, UnlockedSigner, setup_provider


@dataclass(frozen=True)
class Session:
    config: SessionConfig
    provider: Provider
    registry: DeploymentRegistry
    signer: Optional[Signer] = None

    @classmethod
    def open(cls, config: SessionConfig, read_only: bool = False) -> "Session":
        """
        Build provider, signer and registry from a config.

        A read-only session never carries a signer, even if a key is configured.

        On a local fork without a private key, the configured owner (or the
        node's first unlocked account) signs through eth_sendTransaction.
        """
        registry = DeploymentRegistry.locate(
            config.network,
            use_ovm=config.use_ovm,
            deployment_path=config.deployment_path,
        )

        if read_only:
            provider, _ = setup_provider(config.provider_url)
            return cls(config=config, provider=provider, registry=registry)

        public_key = None
        if config.use_fork and not config.private_key:
            public_key = config.owner

        provider, signer = setup_provider(
            config.provider_url,
            private_key=config.private_key,
            public_key=public_key,
        )

        if signer is None and config.use_fork and not config.private_key:
            accounts = provider.accounts()
            if accounts:
                signer = UnlockedSigner(accounts[0])

        return cls(config=config, provider=provider, registry=registry, signer=signer)

    @property
    def overrides(self) -> dict[str, Any]:
        return self.config.overrides

    @property
    def is_read_only(self) -> bool:
        return self.signer is None

    def bind(self, descriptor: ContractDescriptor) -> Contract:
        return Contract(
            descriptor.address,
            descriptor.abi,
            self.provider,
            signer=self.signer,
            name=descriptor.name,
        )

    def contract(self, name: str, source: Optional[str] = None) -> Contract:
        return self.bind(self.registry.resolve(name, source=source))
