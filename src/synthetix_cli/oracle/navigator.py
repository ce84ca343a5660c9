"""
Contract Navigator and Function Selector search.

Pure functions over names and ABI descriptors; the prompts that drive them
live in ``oracle.prompts``.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from rapidfuzz.distance import Levenshtein

from ..pneuma.abi import FunctionDescriptor, Param, functions

BACK_ITEM = "↩ BACK"


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings (insert/delete/substitute, cost 1)."""
    return Levenshtein.distance(a, b)


def order_contracts(names: Iterable[str], pinned: Optional[str] = None) -> list[str]:
    """Contract names with ``pinned`` moved to the front when present."""
    ordered = list(names)
    if pinned is not None and pinned in ordered:
        ordered.remove(pinned)
        ordered.insert(0, pinned)
    return ordered


def search_contracts(names: Sequence[str], query: str = "") -> list[str]:
    """Case-insensitive substring filter, preserving the given order."""
    needle = (query or "").lower()
    return [name for name in names if needle in name.lower()]


def search_functions(abi: Sequence[dict[str, Any]], query: str = "") -> list[FunctionDescriptor]:
    """
    Functions whose name contains the query, closest match first.

    Ranking is by edit distance to the query; the sort is stable so equal
    distances keep ABI order.
    """
    query = query or ""
    needle = query.lower()
    matches = [fn for fn in functions(abi) if needle in fn.name.lower()]
    return sorted(matches, key=lambda fn: levenshtein(fn.name, query))


def _combine(params: Sequence[Param]) -> list[str]:
    return [f"{p.type} {p.name}" if p.name else p.type for p in params]


def format_signature(fn: FunctionDescriptor) -> str:
    """``name(type name, ...)`` + `` view`` + `` returns(...)`` display form."""
    input_part = f"{fn.name}({', '.join(_combine(fn.inputs))})"

    outputs = _combine(fn.outputs)
    output_part = f" returns({', '.join(outputs)})" if outputs else ""
    if fn.state_mutability == "view":
        output_part = f" view{output_part}"

    return f"{input_part}{output_part}"


class FunctionMenu:
    """
    Display strings for a contract's functions, mapped back to descriptors.

    Overloaded functions get distinct display strings, so a selection always
    resolves to the exact descriptor that was shown.
    """

    def __init__(self, abi: Sequence[dict[str, Any]]) -> None:
        self.abi = abi
        self._by_label: dict[str, FunctionDescriptor] = {}
        for fn in functions(abi):
            self._by_label.setdefault(format_signature(fn), fn)

    def choices(self, query: str = "") -> list[str]:
        labels = [format_signature(fn) for fn in search_functions(self.abi, query)]
        if not query:
            labels.insert(0, BACK_ITEM)
        return labels

    def lookup(self, label: str) -> Optional[FunctionDescriptor]:
        return self._by_label.get(label)
