__version__ = "1.0.0"

__all__ = [
    # Session
    "Session",
    "SessionConfig",
    # Registry
    "ContractDescriptor",
    "DeploymentRegistry",
    # Chain
    "Contract",
    "FunctionDescriptor",
    "Provider",
    "stage_tx",
    "run_tx",
    # Interactive driver
    "CallOutcome",
    "InteractiveSession",
    # Errors
    "SynthetixCliError",
    "ConfigError",
    "RegistryError",
    "ContractNotFoundError",
    "SourceNotFoundError",
    "RpcError",
    "ArgumentMismatchError",
    "SignerRequiredError",
    "TransactionError",
]

from .errors import (
    ArgumentMismatchError,
    ConfigError,
    ContractNotFoundError,
    RegistryError,
    RpcError,
    SignerRequiredError,
    SourceNotFoundError,
    SynthetixCliError,
    TransactionError,
)
from .pneuma.abi import FunctionDescriptor
from .pneuma.contract import Contract
from .pneuma.rpc import Provider
from .pneuma.tx import run_tx, stage_tx
from .codex.registry import ContractDescriptor, DeploymentRegistry
from .config import SessionConfig
from .session import Session
from .oracle.driver import CallOutcome, InteractiveSession
