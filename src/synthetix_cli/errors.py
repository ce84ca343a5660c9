"""
Error hierarchy for synthetix-cli.

Every error raised on purpose by the toolkit derives from
``SynthetixCliError`` and carries the process exit code used when it
escapes a command entry point.
"""

from __future__ import annotations

from typing import Any, Optional


class SynthetixCliError(RuntimeError):
    exit_code: int = 1


class ConfigError(SynthetixCliError):
    exit_code = 2


class RegistryError(SynthetixCliError):
    exit_code = 3


class ContractNotFoundError(RegistryError):
    pass


class SourceNotFoundError(RegistryError):
    pass


class RpcError(SynthetixCliError):
    """A JSON-RPC error object returned by the node."""

    exit_code = 4

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.data = data

    @classmethod
    def from_response(cls, error: Any) -> "RpcError":
        if isinstance(error, dict):
            return cls(
                str(error.get("message", "unknown error")),
                code=error.get("code"),
                data=error.get("data"),
            )
        return cls(str(error))

    def __str__(self) -> str:
        if self.code is None:
            return f"RPC error: {self.message}"
        return f"RPC error {self.code}: {self.message}"


class ArgumentMismatchError(SynthetixCliError):
    exit_code = 5


class SignerRequiredError(SynthetixCliError):
    exit_code = 6


class TransactionError(SynthetixCliError):
    exit_code = 7
