"""Shared fixtures: an in-memory provider, a scripted prompter and a deployment."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest
from eth_abi import encode

from synthetix_cli.codex.registry import DeploymentRegistry
from synthetix_cli.config import SessionConfig
from synthetix_cli.pneuma.abi import FunctionDescriptor
from synthetix_cli.session import Session
from synthetix_cli.sigil.signer import LocalSigner

TEST_PRIVATE_KEY = "0x" + "11" * 32

EXCHANGE_RATES_ADDRESS = "0x" + "ab" * 20
SYNTHETIX_ADDRESS = "0x" + "cd" * 20
GHOST_ADDRESS = "0x" + "ef" * 20


def fn(
    name: str,
    inputs: list[tuple[str, str]] = (),
    outputs: list[tuple[str, str]] = (),
    mutability: str = "view",
) -> dict[str, Any]:
    """Build a function ABI entry from (type, name) pairs."""
    return {
        "type": "function",
        "name": name,
        "inputs": [{"type": t, "name": n} for t, n in inputs],
        "outputs": [{"type": t, "name": n} for t, n in outputs],
        "stateMutability": mutability,
    }


EXCHANGE_RATES_ABI: list[dict[str, Any]] = [
    {"type": "constructor", "inputs": [{"type": "address", "name": "_owner"}]},
    fn("rateForCurrency", [("bytes32", "currencyKey")], [("uint256", "")]),
    fn(
        "rateAndUpdatedTime",
        [("bytes32", "currencyKey")],
        [("uint256", "rate"), ("uint256", "time")],
    ),
    fn(
        "updateRates",
        [("bytes32[]", "currencyKeys"), ("uint256[]", "newRates"), ("uint256", "timeSent")],
        [("bool", "")],
        mutability="nonpayable",
    ),
    fn("owner", [], [("address", "")]),
    {
        "type": "event",
        "name": "RatesUpdated",
        "anonymous": False,
        "inputs": [
            {"type": "bytes32[]", "name": "currencyKeys", "indexed": False},
            {"type": "uint256[]", "name": "newRates", "indexed": False},
        ],
    },
]

SYNTHETIX_ABI: list[dict[str, Any]] = [
    fn("totalSupply", [], [("uint256", "")]),
    fn("transfer", [("address", "to"), ("uint256", "value")], [("bool", "")], mutability="nonpayable"),
]


def return_data(types: list[str], values: list[Any]) -> str:
    return "0x" + encode(types, values).hex()


class ScriptExhausted(Exception):
    """Raised by ScriptedPrompter once it runs out of answers."""


class ScriptedPrompter:
    """Prompter replaying canned answers in order."""

    def __init__(
        self,
        choices: Optional[list[str]] = None,
        texts: Optional[list[str]] = None,
        confirms: Optional[list[bool]] = None,
        exhausted: type[BaseException] = ScriptExhausted,
    ) -> None:
        self.choices = list(choices or [])
        self.texts = list(texts or [])
        self.confirms = list(confirms or [])
        self.exhausted = exhausted
        self.messages: list[str] = []
        self.listings: list[list[str]] = []

    def _next(self, queue: list) -> Any:
        if not queue:
            raise self.exhausted()
        return queue.pop(0)

    def choose(self, message: str, source) -> str:
        self.messages.append(message)
        self.listings.append(source(""))
        return self._next(self.choices)

    def text(self, message: str) -> str:
        self.messages.append(message)
        return self._next(self.texts)

    def confirm(self, message: str) -> bool:
        self.messages.append(message)
        return self._next(self.confirms)


class FakeProvider:
    """In-memory stand-in for pneuma.rpc.Provider."""

    url = "http://fake-node:8545"

    def __init__(self) -> None:
        self.results: dict[str, str] = {}
        self.calls: list[tuple[dict, Any]] = []
        self.call_error: Optional[BaseException] = None
        self.code = "0x"
        self.nonce = 7
        self.chain_id = 10
        self.unlocked: list[str] = []
        self.raw_sent: list[str] = []
        self.tx_sent: list[dict] = []
        self.waited: list[str] = []
        self.submit_error: Optional[BaseException] = None
        self.receipt_error: Optional[BaseException] = None
        self.receipt: dict[str, Any] = {
            "transactionHash": "0x" + "aa" * 32,
            "blockNumber": "0x10",
            "gasUsed": "0x5208",
            "status": "0x1",
            "logs": [],
        }

    def answer(self, descriptor: FunctionDescriptor, types: list[str], values: list[Any]) -> None:
        self.results["0x" + descriptor.selector.hex()] = return_data(types, values)

    def call(self, tx: dict, block: Any = "latest") -> str:
        self.calls.append((tx, block))
        if self.call_error is not None:
            raise self.call_error
        return self.results[tx["data"][:10]]

    def get_code(self, address: str, block: Any = "latest") -> str:
        return self.code

    def get_nonce(self, address: str) -> int:
        return self.nonce

    def get_chain_id(self) -> int:
        return self.chain_id

    def accounts(self) -> list[str]:
        return list(self.unlocked)

    def send_raw_transaction(self, raw_tx: str) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.raw_sent.append(raw_tx)
        return self.receipt["transactionHash"]

    def send_transaction(self, tx: dict) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.tx_sent.append(tx)
        return self.receipt["transactionHash"]

    def wait_for_receipt(self, tx_hash: str, timeout: int = 120, poll_interval: float = 2.0) -> dict:
        self.waited.append(tx_hash)
        if self.receipt_error is not None:
            raise self.receipt_error
        return self.receipt

    def describe(self) -> str:
        return self.url


def write_deployment(directory: Path, targets: dict, sources: dict) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "deployment.json"
    path.write_text(json.dumps({"targets": targets, "sources": sources}), encoding="utf-8")
    return path


@pytest.fixture()
def deployment_dir(tmp_path: Path) -> Path:
    """A deployment with ExchangeRates, Synthetix and a contract without bytecode."""
    directory = tmp_path / "deployments" / "mainnet"
    write_deployment(
        directory,
        targets={
            "ExchangeRates": {"name": "ExchangeRates", "address": EXCHANGE_RATES_ADDRESS, "source": "ExchangeRates"},
            "Synthetix": {"name": "Synthetix", "address": SYNTHETIX_ADDRESS, "source": "Synthetix"},
            "Ghost": {"name": "Ghost", "address": GHOST_ADDRESS, "source": "Ghost"},
            "Orphan": {"name": "Orphan", "address": GHOST_ADDRESS, "source": "Missing"},
        },
        sources={
            "ExchangeRates": {"abi": EXCHANGE_RATES_ABI, "bytecode": "0x6080"},
            "Synthetix": {"abi": SYNTHETIX_ABI, "bytecode": "0x6080"},
            "Ghost": {"abi": SYNTHETIX_ABI, "bytecode": ""},
        },
    )
    return directory


@pytest.fixture()
def registry(deployment_dir: Path) -> DeploymentRegistry:
    return DeploymentRegistry(deployment_dir / "deployment.json", "mainnet")


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture()
def signer() -> LocalSigner:
    return LocalSigner.from_key(TEST_PRIVATE_KEY)


@pytest.fixture()
def session(provider: FakeProvider, registry: DeploymentRegistry, signer: LocalSigner) -> Session:
    config = SessionConfig(network="mainnet", provider_url=provider.url, gas_price=2, gas_limit=500_000)
    return Session(config=config, provider=provider, registry=registry, signer=signer)


@pytest.fixture()
def read_only_session(provider: FakeProvider, registry: DeploymentRegistry) -> Session:
    config = SessionConfig(network="mainnet", provider_url=provider.url)
    return Session(config=config, provider=provider, registry=registry)
