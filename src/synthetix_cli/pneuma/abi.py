"""
ABI helpers - descriptors, calldata encoding and result decoding.

Parses raw ABI JSON (as stored in the deployment registry) into immutable
descriptors and wraps eth-abi for the encode/decode round trips.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence

from eth_abi import decode, encode

from .rpc import _keccak256

WEI_PER_ETHER = 10**18

VIEW_MUTABILITIES = frozenset({"view", "pure"})


def _canonical_type(item: dict[str, Any]) -> str:
    """Expand ``tuple`` types into their ``(t1,t2)`` component form."""
    abi_type = item["type"]
    if not abi_type.startswith("tuple"):
        return abi_type
    inner = ",".join(_canonical_type(c) for c in item.get("components", []))
    return f"({inner}){abi_type[len('tuple'):]}"


@dataclass(frozen=True)
class Param:
    name: str
    type: str
    indexed: bool = False

    @classmethod
    def from_abi(cls, item: dict[str, Any]) -> "Param":
        return cls(
            name=item.get("name") or "",
            type=_canonical_type(item),
            indexed=bool(item.get("indexed", False)),
        )

    @property
    def label(self) -> str:
        return self.name or self.type


@dataclass(frozen=True)
class FunctionDescriptor:
    name: str
    inputs: tuple[Param, ...]
    outputs: tuple[Param, ...]
    state_mutability: str

    @classmethod
    def from_abi(cls, entry: dict[str, Any]) -> "FunctionDescriptor":
        mutability = entry.get("stateMutability")
        if mutability is None:
            # Pre-0.4.16 compiler output
            mutability = "view" if entry.get("constant") else "nonpayable"
        return cls(
            name=entry["name"],
            inputs=tuple(Param.from_abi(i) for i in entry.get("inputs", [])),
            outputs=tuple(Param.from_abi(o) for o in entry.get("outputs", [])),
            state_mutability=mutability,
        )

    @property
    def is_view(self) -> bool:
        return self.state_mutability in VIEW_MUTABILITIES

    @property
    def input_types(self) -> list[str]:
        return [p.type for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.type for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return _keccak256(self.signature.encode("utf-8"))[:4]


@dataclass(frozen=True)
class EventDescriptor:
    name: str
    inputs: tuple[Param, ...]
    anonymous: bool = False

    @classmethod
    def from_abi(cls, entry: dict[str, Any]) -> "EventDescriptor":
        return cls(
            name=entry["name"],
            inputs=tuple(Param.from_abi(i) for i in entry.get("inputs", [])),
            anonymous=bool(entry.get("anonymous", False)),
        )

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(p.type for p in self.inputs)})"

    @property
    def topic(self) -> str:
        return "0x" + _keccak256(self.signature.encode("utf-8")).hex()


def functions(abi: Sequence[dict[str, Any]]) -> list[FunctionDescriptor]:
    """All named ``function`` entries of an ABI, in ABI order."""
    return [
        FunctionDescriptor.from_abi(entry)
        for entry in abi
        if entry.get("type") == "function" and entry.get("name")
    ]


def events(abi: Sequence[dict[str, Any]]) -> list[EventDescriptor]:
    return [
        EventDescriptor.from_abi(entry)
        for entry in abi
        if entry.get("type") == "event" and entry.get("name")
    ]


def find_function(abi: Sequence[dict[str, Any]], name: str) -> FunctionDescriptor:
    """
    Look up a function by name.

    Raises:
        ValueError: If no function of that name exists in the ABI
    """
    for fn in functions(abi):
        if fn.name == name:
            return fn
    raise ValueError(f"Function {name} not found in ABI")


def encode_call(fn: FunctionDescriptor, args: Sequence[Any]) -> str:
    """
    ABI-encode a function call.

    Returns:
        0x-prefixed hex encoded calldata
    """
    if fn.inputs:
        encoded_args = encode(fn.input_types, list(args))
    else:
        encoded_args = b""
    return "0x" + fn.selector.hex() + encoded_args.hex()


def _hex_to_bytes(data: str) -> bytes:
    return bytes.fromhex(data[2:] if data.startswith("0x") else data)


def decode_result(fn: FunctionDescriptor, data: Optional[str]) -> Any:
    """
    ABI-decode a function call result.

    Returns:
        None for functions without outputs, the bare value for a single
        output, otherwise a tuple in declared output order
    """
    if not fn.outputs:
        return None
    if data is None or data == "0x":
        raise ValueError(f"{fn.name} returned no data")

    decoded = decode(fn.output_types, _hex_to_bytes(data))
    if len(decoded) == 1:
        return decoded[0]
    return decoded


def name_outputs(fn: FunctionDescriptor, result: Any) -> dict[str, Any]:
    """Pair decoded values with their declared output names (unnamed ones by index)."""
    values = result if len(fn.outputs) > 1 else (result,)
    return {
        (param.name or str(index)): value
        for index, (param, value) in enumerate(zip(fn.outputs, values))
    }


def decode_log(
    descriptors: Sequence[EventDescriptor], log: dict[str, Any]
) -> Optional[tuple[str, dict[str, Any]]]:
    """
    Decode a receipt log against known events.

    Returns:
        (event_name, {arg: value}) or None when no event topic matches
    """
    topics = log.get("topics") or []
    if not topics:
        return None

    for event in descriptors:
        if event.anonymous or event.topic != topics[0].lower():
            continue

        indexed = [p for p in event.inputs if p.indexed]
        plain = [p for p in event.inputs if not p.indexed]
        if len(topics) - 1 != len(indexed):
            continue

        values: dict[str, Any] = {}
        for param, topic in zip(indexed, topics[1:]):
            raw = _hex_to_bytes(topic)
            if param.type in ("string", "bytes") or param.type.endswith("]") or param.type.startswith("("):
                # Dynamic indexed values are only available as their hash
                values[param.label] = "0x" + raw.hex()
            else:
                values[param.label] = decode([param.type], raw)[0]

        data = log.get("data") or "0x"
        if plain:
            decoded = decode([p.type for p in plain], _hex_to_bytes(data))
            for param, value in zip(plain, decoded):
                values[param.label] = value

        return event.name, {p.label: values[p.label] for p in event.inputs}

    return None


# ---------------------------------------------------------------------------
# Value conversions
# ---------------------------------------------------------------------------

def to_bytes32(text: str) -> bytes:
    """
    Canonical fixed-word encoding of an identifier string.

    UTF-8 bytes right-padded with zeros to 32 bytes. Longer input is left
    as is so the ABI encoder rejects it when the call is attempted.
    """
    return text.encode("utf-8").ljust(32, b"\x00")


def from_bytes32(value: bytes) -> str:
    return value.rstrip(b"\x00").decode("utf-8", errors="replace")


def format_ether(wei: int) -> str:
    """Format a wei amount as ether, e.g. ``1500000000000000000 -> "1.5"``."""
    sign = "-" if wei < 0 else ""
    whole, fraction = divmod(abs(wei), WEI_PER_ETHER)
    fraction_str = f"{fraction:018d}".rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_str}"


def parse_gwei(amount: float) -> int:
    """Convert a gwei amount to wei."""
    return int(Decimal(str(amount)) * 10**9)


def to_checksum_address(address: str) -> str:
    """Convert an address to EIP-55 checksummed format.

    eth-account requires checksummed addresses in transaction fields.
    """
    addr = address.lower().replace("0x", "")
    addr_hash = _keccak256(addr.encode("utf-8")).hex()
    result = "0x"
    for i, c in enumerate(addr):
        if c in "abcdef":
            result += c.upper() if int(addr_hash[i], 16) >= 8 else c
        else:
            result += c
    return result
