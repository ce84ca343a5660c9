"""
Call Formatter - returned values, receipts and errors for the console.
"""

from __future__ import annotations

from typing import Any, Optional

import click

from ..errors import RpcError
from ..pneuma.abi import FunctionDescriptor, Param, decode_log, format_ether
from ..pneuma.contract import Contract
from ..pneuma.tx import receipt_status


def format_value(value: Any) -> str:
    """
    Presentation rule for a decoded value.

    Integers show raw and ether-scaled form, sequences are rendered element
    by element, bytes as 0x-hex.
    """
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, int):
        return f"{value} ({format_ether(value)})"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_format_item(item) for item in value) + "]"
    if isinstance(value, bytes):
        return "0x" + value.hex()
    return str(value)


def _format_item(item: Any) -> str:
    if isinstance(item, bytes):
        return "0x" + item.hex()
    if isinstance(item, bool):
        return str(item).lower()
    if isinstance(item, (list, tuple)):
        return "[" + ", ".join(_format_item(i) for i in item) + "]"
    return str(item)


def _output_label(param: Param) -> str:
    return click.style(f"  ↪{param.name}({param.type}):", fg="cyan")


def print_returned(fn: FunctionDescriptor, result: Any) -> None:
    """Print each output of a view call paired with its declared name and type."""
    if not fn.outputs:
        return

    if len(fn.outputs) > 1:
        for param, value in zip(fn.outputs, result):
            click.echo(f"{_output_label(param)} {format_value(value)}")
    else:
        click.echo(f"{_output_label(fn.outputs[0])} {format_value(result)}")


def _hex_int(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("0x"):
        return int(value, 16)
    return value


def log_receipt(receipt: dict[str, Any], contract: Optional[Contract] = None) -> None:
    """Receipt summary, with logs decoded against the contract's events."""
    status = receipt_status(receipt)
    if status == 1:
        click.secho("  ✓ Transaction confirmed", fg="green")
    else:
        click.secho("  ✗ Transaction reverted", fg="red")

    click.echo(f"    TX:       {receipt.get('transactionHash')}")
    click.echo(f"    Block:    {_hex_int(receipt.get('blockNumber'))}")
    click.echo(f"    Gas used: {_hex_int(receipt.get('gasUsed'))}")

    logs = receipt.get("logs") or []
    if not logs:
        return

    click.secho(f"    Logs ({len(logs)}):", dim=True)
    descriptors = contract.events if contract is not None else []
    for log in logs:
        decoded = decode_log(descriptors, log) if descriptors else None
        if decoded is None:
            topic = (log.get("topics") or ["anonymous"])[0]
            click.secho(f"      {log.get('address')} {topic}", dim=True)
            continue

        name, values = decoded
        click.echo(click.style(f"      {name}", fg="cyan"))
        for key, value in values.items():
            click.echo(f"        {key}: {_format_item(value)}")


def log_error(error: BaseException, phase: Optional[str] = None) -> None:
    """Structured error report: phase, error type, message, RPC detail."""
    heading = f"{phase.capitalize()} failed" if phase else "Error"
    click.secho(f"  ✗ {heading}: {type(error).__name__}", fg="red", bold=True)
    click.secho(f"    {error}", fg="red")

    if isinstance(error, RpcError):
        if error.code is not None:
            click.secho(f"    code: {error.code}", fg="red")
        if error.data is not None:
            click.secho(f"    data: {error.data}", fg="red")
