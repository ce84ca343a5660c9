"""
Contract binding - address + ABI + provider.

Reads go through ``eth_call``; writes are only built here and handed to
``pneuma.tx`` for staging and submission.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence, Union

from .abi import (
    EventDescriptor,
    FunctionDescriptor,
    decode_result,
    encode_call,
    events,
    find_function,
    name_outputs,
    to_checksum_address,
)
from .rpc import BlockTag, Provider

FunctionRef = Union[str, FunctionDescriptor]


class Contract:
    def __init__(
        self,
        address: str,
        abi: Sequence[dict[str, Any]],
        provider: Provider,
        signer: Any = None,
        name: Optional[str] = None,
    ) -> None:
        self.address = to_checksum_address(address)
        self.abi = list(abi)
        self.provider = provider
        self.signer = signer
        self.name = name or self.address

    def __repr__(self) -> str:
        return f"Contract({self.name!r}, {self.address})"

    @property
    def events(self) -> list[EventDescriptor]:
        return events(self.abi)

    def function(self, ref: FunctionRef) -> FunctionDescriptor:
        if isinstance(ref, FunctionDescriptor):
            return ref
        return find_function(self.abi, ref)

    def call(
        self,
        ref: FunctionRef,
        args: Sequence[Any] = (),
        block: BlockTag = "latest",
    ) -> Any:
        """
        Read from the contract (eth_call).

        Returns:
            Decoded return value(s): bare value for one output, tuple otherwise
        """
        fn = self.function(ref)
        tx: dict[str, Any] = {"to": self.address, "data": encode_call(fn, args)}
        if self.signer is not None:
            tx["from"] = self.signer.address
        return decode_result(fn, self.provider.call(tx, block=block))

    def call_named(
        self,
        ref: FunctionRef,
        args: Sequence[Any] = (),
        block: BlockTag = "latest",
    ) -> dict[str, Any]:
        """Like ``call`` but keyed by the declared output names."""
        fn = self.function(ref)
        return name_outputs(fn, self.call(fn, args, block=block))

    def build_transaction(
        self,
        ref: FunctionRef,
        args: Sequence[Any],
        overrides: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Build an unsigned transaction for a contract function.

        Args:
            ref: Function name or descriptor
            args: Coerced call arguments
            overrides: ``gas``/``gasPrice``/``value`` fields to apply

        Returns:
            Transaction dict without nonce/chainId (filled in when staging)
        """
        fn = self.function(ref)
        tx: dict[str, Any] = {
            "to": self.address,
            "data": encode_call(fn, args),
            "value": 0,
        }
        tx.update(overrides or {})
        return tx
