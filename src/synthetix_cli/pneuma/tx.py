"""
Transaction pipeline - stage, submit, await receipt.

Each phase reports its own outcome instead of raising, so the caller can
tell a staging failure from a rejected broadcast or an on-chain revert:

    staged = stage_tx(contract, fn, args, overrides)
    if staged.success:
        result = run_tx(staged.tx, provider)

Uses eth-account for signing and the httpx-based Provider for sending.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx
from eth_abi.exceptions import EncodingError

from ..errors import SignerRequiredError, SynthetixCliError, TransactionError
from .contract import Contract, FunctionRef
from .rpc import Provider

STAGE = "stage"
SUBMIT = "submit"
RECEIPT = "receipt"

# Failures a phase turns into a TxResult rather than raising
TX_ERRORS = (
    SynthetixCliError,
    httpx.HTTPError,
    EncodingError,
    ValueError,
    TypeError,
    TimeoutError,
)


@dataclass(frozen=True)
class StagedTransaction:
    """A transaction built (and signed, for local keys) but not yet broadcast."""

    tx: dict[str, Any]
    sender: str
    raw: Optional[str] = None
    hash: Optional[str] = None

    @property
    def is_signed(self) -> bool:
        return self.raw is not None


@dataclass(frozen=True)
class TxResult:
    success: bool
    tx: Optional[StagedTransaction] = None
    receipt: Optional[dict[str, Any]] = None
    error: Optional[BaseException] = None
    phase: Optional[str] = None


def receipt_status(receipt: dict[str, Any]) -> int:
    status = receipt.get("status", 1)
    return int(status, 16) if isinstance(status, str) else int(status)


def _rpc_quantities(tx: dict[str, Any]) -> dict[str, Any]:
    """Hex-encode integer fields for eth_sendTransaction."""
    return {k: hex(v) if isinstance(v, int) else v for k, v in tx.items()}


def stage_tx(
    contract: Contract,
    ref: FunctionRef,
    args: Sequence[Any],
    overrides: Optional[dict[str, Any]] = None,
) -> TxResult:
    """
    Construct the transaction against the current gas settings without
    broadcasting it.

    Args:
        contract: Bound contract (must carry a signer)
        ref: Function name or descriptor
        args: Coerced call arguments
        overrides: ``gas``/``gasPrice``/``value`` fields

    Returns:
        TxResult with ``tx`` on success, ``error`` and phase "stage" otherwise
    """
    signer = contract.signer
    try:
        if signer is None:
            raise SignerRequiredError(
                "No signer configured. Pass --private-key or set PRIVATE_KEY."
            )

        provider = contract.provider
        tx = contract.build_transaction(ref, args, overrides)
        tx["nonce"] = provider.get_nonce(signer.address)
        tx["chainId"] = provider.get_chain_id()

        if signer.is_local:
            signed = signer.sign_transaction(tx)
            staged = StagedTransaction(tx=tx, sender=signer.address, raw=signed.raw, hash=signed.hash)
        else:
            staged = StagedTransaction(tx=dict(tx, **{"from": signer.address}), sender=signer.address)
    except TX_ERRORS as exc:
        return TxResult(success=False, error=exc, phase=STAGE)

    return TxResult(success=True, tx=staged)


def run_tx(
    staged: StagedTransaction,
    provider: Provider,
    timeout: int = 120,
    poll_interval: float = 2.0,
) -> TxResult:
    """
    Broadcast a staged transaction and wait for its receipt.

    A failed broadcast is reported with phase "submit" and no receipt wait
    is attempted. Timeouts and reverted receipts (status 0) are reported
    with phase "receipt".
    """
    try:
        if staged.is_signed:
            tx_hash = provider.send_raw_transaction(staged.raw)
        else:
            tx_hash = provider.send_transaction(_rpc_quantities(staged.tx))
    except TX_ERRORS as exc:
        return TxResult(success=False, tx=staged, error=exc, phase=SUBMIT)

    try:
        receipt = provider.wait_for_receipt(tx_hash, timeout=timeout, poll_interval=poll_interval)
    except TX_ERRORS as exc:
        return TxResult(success=False, tx=staged, error=exc, phase=RECEIPT)

    if receipt_status(receipt) == 0:
        return TxResult(
            success=False,
            tx=staged,
            receipt=receipt,
            error=TransactionError(f"Transaction {tx_hash} reverted"),
            phase=RECEIPT,
        )

    return TxResult(success=True, tx=staged, receipt=receipt)
