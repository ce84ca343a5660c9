"""
Input Coercion - free text to typed call arguments.

One rule per ABI base type, looked up in ``COERCION_RULES``. Array
parameters (``T[]``) take comma separated text and apply the rule to each
element. Rules never reject input: text a rule cannot convert is passed
through unchanged and the ABI encoder reports it when the call is made.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Sequence

import click

from ..errors import ArgumentMismatchError
from ..pneuma.abi import FunctionDescriptor, Param, to_bytes32, to_checksum_address

FIXED_WORD_MARKER = "bytes32"
ARRAY_MARKER = "[]"

Rule = Callable[[str], Any]


def _to_int(text: str) -> Any:
    stripped = text.strip()
    try:
        return int(stripped, 0)
    except ValueError:
        pass
    try:
        return int(stripped)
    except ValueError:
        return text


def _to_bool(text: str) -> Any:
    lowered = text.strip().lower()
    if lowered in ("true", "1", "yes", "y"):
        return True
    if lowered in ("false", "0", "no", "n", ""):
        return False
    return text


def _to_bytes(text: str) -> Any:
    stripped = text.strip()
    if stripped.startswith("0x"):
        try:
            return bytes.fromhex(stripped[2:])
        except ValueError:
            return text
    return text


def _to_address(text: str) -> str:
    stripped = text.strip()
    if re.fullmatch(r"0x[0-9a-fA-F]{40}", stripped):
        return to_checksum_address(stripped)
    return stripped


def _identity(text: str) -> str:
    return text


# Checked in order: first matching prefix wins
COERCION_RULES: dict[str, Rule] = {
    FIXED_WORD_MARKER: to_bytes32,
    "uint": _to_int,
    "int": _to_int,
    "bool": _to_bool,
    "bytes": _to_bytes,
    "address": _to_address,
    "string": _identity,
}


def is_fixed_word(param_type: str) -> bool:
    return FIXED_WORD_MARKER in param_type


def is_array(param_type: str) -> bool:
    return param_type.endswith(ARRAY_MARKER)


def element_type(param_type: str) -> str:
    return param_type[: -len(ARRAY_MARKER)] if is_array(param_type) else param_type


def rule_for(param_type: str) -> Rule:
    if is_fixed_word(param_type):
        return COERCION_RULES[FIXED_WORD_MARKER]
    base = element_type(param_type)
    for prefix, rule in COERCION_RULES.items():
        if base.startswith(prefix):
            return rule
    return _identity


def coerce(param_type: str, raw: str) -> Any:
    """
    Convert one raw text answer for a parameter of ``param_type``.

    Returns:
        A single value, or a list of values for array types
    """
    rule = rule_for(param_type)
    if is_array(param_type):
        if raw == "":
            return []
        return [rule(item) for item in raw.split(",")]
    return rule(raw)


def prompt_message(param: Param) -> str:
    message = param.label
    if is_fixed_word(param.type):
        hint = " - if array, use a,b,c syntax" if is_array(param.type) else ""
        message = f"{message} (uses toBytes32{hint})"
    return message


def collect_arguments(fn: FunctionDescriptor, ask: Callable[[str], str]) -> list[Any]:
    """
    Prompt for every input of ``fn`` in declared order and coerce the answers.

    Args:
        fn: Selected function
        ask: Prompt callable returning the raw text for a message

    Returns:
        CallArguments, positionally matched to ``fn.inputs``
    """
    args: list[Any] = []
    for param in fn.inputs:
        raw = ask(prompt_message(param))
        click.secho(f"  > raw inputs: {raw}", dim=True)

        processed = coerce(param.type, raw)
        count = len(processed) if isinstance(processed, list) else 1
        click.secho(f"  > processed inputs ({count}): {_preview(processed)}", dim=True)

        args.append(processed)
    return args


def _preview(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ", ".join(_preview(v) for v in value) + "]"
    if isinstance(value, bytes):
        return "0x" + value.hex()
    return str(value)


def check_arguments(fn: FunctionDescriptor, args: Sequence[Any]) -> None:
    """
    Verify CallArguments match the function's inputs in count and shape.

    Raises:
        ArgumentMismatchError: On a length mismatch or an array/scalar mismatch
    """
    if len(args) != len(fn.inputs):
        raise ArgumentMismatchError(
            f"{fn.name} expects {len(fn.inputs)} argument(s), got {len(args)}"
        )
    for index, (param, value) in enumerate(zip(fn.inputs, args)):
        if is_array(param.type) != isinstance(value, (list, tuple)):
            shape = "an array" if is_array(param.type) else "a single value"
            raise ArgumentMismatchError(
                f"Argument {index} ({param.label}: {param.type}) must be {shape}"
            )
