"""
JSON-RPC Provider.

Lightweight alternative to web3.py: uses httpx for HTTP + eth-abi for encoding.
Supports read-only contract calls, code lookups, transaction submission and
receipt polling.
"""

from __future__ import annotations

import time
from typing import Any, Optional, Union

import httpx
from eth_hash.auto import keccak

from ..errors import RpcError

BlockTag = Union[int, str]

# Local fork endpoint (hardhat / anvil default)
FORK_RPC_URL = "http://localhost:8545"


def _keccak256(data: bytes) -> bytes:
    """Compute Keccak-256 hash (NOT the same as hashlib.sha3_256 / NIST SHA-3)."""
    return keccak(data)


def _block_param(block: BlockTag) -> str:
    if isinstance(block, int):
        return hex(block)
    return block


def _to_int(value: Optional[str]) -> int:
    if value is None:
        return 0
    return int(value, 16)


class Provider:
    """
    Read/write connection to a chain endpoint.

    Args:
        url: HTTP JSON-RPC endpoint
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._request_id = 0

    def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the node answers with an error object
            httpx.HTTPError: On transport failures
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self._request_id,
        }

        with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
            response = client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()

        if "error" in data:
            raise RpcError.from_response(data["error"])

        return data.get("result")

    # ---- reads ----

    def call(self, tx: dict, block: BlockTag = "latest") -> str:
        """Execute an eth_call and return the raw 0x-prefixed return data."""
        return self.request("eth_call", [tx, _block_param(block)])

    def get_code(self, address: str, block: BlockTag = "latest") -> str:
        return self.request("eth_getCode", [address, _block_param(block)])

    def get_nonce(self, address: str) -> int:
        return _to_int(self.request("eth_getTransactionCount", [address, "pending"]))

    def get_chain_id(self) -> int:
        return _to_int(self.request("eth_chainId", []))

    def accounts(self) -> list[str]:
        """Accounts unlocked on the node (local forks only)."""
        return self.request("eth_accounts", []) or []

    # ---- writes ----

    def send_raw_transaction(self, raw_tx: str) -> str:
        """
        Send a signed raw transaction.

        Args:
            raw_tx: 0x-prefixed hex encoded signed transaction

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        return self.request("eth_sendRawTransaction", [raw_tx])

    def send_transaction(self, tx: dict) -> str:
        """Send a transaction to be signed by an account unlocked on the node."""
        return self.request("eth_sendTransaction", [tx])

    def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return self.request("eth_getTransactionReceipt", [tx_hash])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: int = 120,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Args:
            tx_hash: Transaction hash
            timeout: Maximum wait time in seconds
            poll_interval: Polling interval in seconds

        Returns:
            Transaction receipt dict

        Raises:
            TimeoutError: If receipt not found within timeout
        """
        start = time.time()
        while time.time() - start < timeout:
            receipt = self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                return receipt
            time.sleep(poll_interval)

        raise TimeoutError(f"Transaction {tx_hash} not confirmed within {timeout}s")

    def describe(self) -> str:
        """Short provider label for session headers."""
        return f"{self.url[:25]}..." if len(self.url) > 25 else self.url
