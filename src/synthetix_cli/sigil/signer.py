"""
Signing identities for synthetix-cli.

Two flavours of signer:
- LocalSigner:    a private key held in-process (eth-account), signs locally
                  and submits with eth_sendRawTransaction
- UnlockedSigner: an account unlocked on a local fork node, submitted with
                  eth_sendTransaction and signed by the node

Dependencies: eth-account (lightweight, no full web3.py needed)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..errors import ConfigError
from ..pneuma.abi import to_checksum_address
from ..pneuma.rpc import Provider


@dataclass(frozen=True)
class SignedTransaction:
    raw: str
    hash: str


class LocalSigner:
    is_local = True

    def __init__(self, account: LocalAccount) -> None:
        self._account = account

    @classmethod
    def from_key(cls, private_key: str) -> "LocalSigner":
        """
        Args:
            private_key: hex private key, with or without 0x prefix

        Raises:
            ConfigError: If the key cannot be parsed
        """
        if not private_key.startswith("0x"):
            private_key = "0x" + private_key
        try:
            return cls(Account.from_key(private_key))
        except (ValueError, TypeError) as exc:
            raise ConfigError(f"Invalid private key: {exc}") from exc

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, tx: dict[str, Any]) -> SignedTransaction:
        signed = self._account.sign_transaction(tx)
        return SignedTransaction(
            raw="0x" + bytes(signed.raw_transaction).hex(),
            hash="0x" + bytes(signed.hash).hex(),
        )

    def __str__(self) -> str:
        return self.address


class UnlockedSigner:
    is_local = False

    def __init__(self, address: str) -> None:
        self.address = to_checksum_address(address)

    def __str__(self) -> str:
        return f"{self.address} (unlocked)"


Signer = Union[LocalSigner, UnlockedSigner]


def setup_provider(
    provider_url: str,
    private_key: Optional[str] = None,
    public_key: Optional[str] = None,
    timeout: float = 30.0,
) -> tuple[Provider, Optional[Signer]]:
    """
    Build the provider and, if an identity is configured, the signer.

    A private key wins over a public key; a public key alone means the
    node holds the account unlocked (local forks).

    Returns:
        (provider, signer or None for read-only sessions)
    """
    provider = Provider(provider_url, timeout=timeout)

    signer: Optional[Signer] = None
    if private_key:
        signer = LocalSigner.from_key(private_key)
    elif public_key:
        signer = UnlockedSigner(public_key)

    return provider, signer
