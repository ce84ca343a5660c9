"""
Deployment Registry - resolves contract names to addresses and ABIs.

Reads the Synthetix deployment layout:

    <root>/<network>[-ovm]/deployment.json
    {
      "targets": {"Synthetix": {"name": ..., "address": ..., "source": ...}},
      "sources": {"Synthetix": {"abi": [...], "bytecode": "0x..."}}
    }

An explicit deployment directory (``--deployment-path``) bypasses the
network lookup.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..errors import ContractNotFoundError, RegistryError, SourceNotFoundError

DEPLOYMENT_FILENAME = "deployment.json"

DEFAULT_DEPLOYMENTS_ROOT = Path.home() / ".synthetix-cli" / "deployments"

# Protocol's main contract, listed first in the contract picker
MAIN_CONTRACT = "Synthetix"


@dataclass(frozen=True)
class Target:
    name: str
    address: str
    source: str


@dataclass(frozen=True)
class Source:
    name: str
    abi: list[dict[str, Any]]
    bytecode: str

    @property
    def has_bytecode(self) -> bool:
        return self.bytecode not in ("", "0x")


@dataclass(frozen=True)
class ContractDescriptor:
    """A resolved contract: immutable for the lifetime of a selection."""

    name: str
    address: str
    abi: list[dict[str, Any]]
    source: str
    has_bytecode: bool


def get_deployments_root() -> Path:
    """Get the deployments root from environment or default."""
    env_root = os.environ.get("SYNTHETIX_DEPLOYMENTS")
    if env_root:
        return Path(env_root).expanduser()
    return DEFAULT_DEPLOYMENTS_ROOT


def network_dirname(network: str, use_ovm: bool = False) -> str:
    return f"{network}-ovm" if use_ovm else network


class DeploymentRegistry:
    def __init__(self, deployment_file: Path, network: str, use_ovm: bool = False) -> None:
        self.deployment_file = deployment_file
        self.network = network
        self.use_ovm = use_ovm
        self._data = self._load(deployment_file)

    @classmethod
    def locate(
        cls,
        network: str,
        use_ovm: bool = False,
        deployment_path: Optional[Path] = None,
        root: Optional[Path] = None,
    ) -> "DeploymentRegistry":
        """
        Find the deployment file for a network.

        Args:
            network: Network name (e.g., "mainnet", "kovan")
            use_ovm: Use the Optimism deployment of that network
            deployment_path: Explicit deployment directory, overrides lookup
            root: Deployments root (default: SYNTHETIX_DEPLOYMENTS or
                  ~/.synthetix-cli/deployments)

        Raises:
            RegistryError: If no deployment file exists
        """
        if deployment_path is not None:
            directory = Path(deployment_path).expanduser()
        else:
            directory = (root or get_deployments_root()) / network_dirname(network, use_ovm)

        deployment_file = directory / DEPLOYMENT_FILENAME
        if not deployment_file.is_file():
            raise RegistryError(
                f"Deployment not found: {deployment_file}. "
                f"Use --deployment-path or set SYNTHETIX_DEPLOYMENTS."
            )
        return cls(deployment_file, network, use_ovm)

    @staticmethod
    def _load(path: Path) -> dict[str, Any]:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise RegistryError(f"Malformed deployment file {path}: {exc}") from exc

        if not isinstance(data, dict) or "targets" not in data:
            raise RegistryError(f"Deployment file {path} has no 'targets' section")
        data.setdefault("sources", {})
        return data

    @property
    def directory(self) -> Path:
        return self.deployment_file.parent

    def target_names(self) -> list[str]:
        return list(self._data["targets"])

    def get_target(self, name: str) -> Target:
        """
        Raises:
            ContractNotFoundError: If the deployment has no such target
            RegistryError: If the target entry has no address
        """
        entry = self._data["targets"].get(name)
        if entry is None:
            raise ContractNotFoundError(
                f"Contract {name} not found in deployment {self.deployment_file}"
            )
        if not isinstance(entry, dict) or not entry.get("address"):
            raise RegistryError(f"Target {name} in {self.deployment_file} has no address")
        return Target(
            name=entry.get("name", name),
            address=entry["address"],
            source=entry.get("source", name),
        )

    def get_source(self, name: str) -> Source:
        """
        Raises:
            SourceNotFoundError: If the deployment has no such source
            RegistryError: If the source ABI is not a list
        """
        entry = self._data["sources"].get(name)
        if entry is None:
            raise SourceNotFoundError(
                f"Source {name} not found in deployment {self.deployment_file}"
            )
        if not isinstance(entry, dict) or not isinstance(entry.get("abi", []), list):
            raise RegistryError(f"Source {name} in {self.deployment_file} has no ABI list")
        return Source(name=name, abi=entry.get("abi", []), bytecode=entry.get("bytecode") or "")

    def resolve(self, name: str, source: Optional[str] = None) -> ContractDescriptor:
        """Resolve a contract name to its address and ABI."""
        target = self.get_target(name)
        src = self.get_source(source or target.source)
        return ContractDescriptor(
            name=name,
            address=target.address,
            abi=src.abi,
            source=src.name,
            has_bytecode=src.has_bytecode,
        )

