"""
Call Driver and the interactive session loop.

The session is a two-state loop:

    AT_CONTRACT_CHOICE --pick contract--> AT_FUNCTION_CHOICE
    AT_FUNCTION_CHOICE --pick function--> execute, AT_FUNCTION_CHOICE
    AT_FUNCTION_CHOICE --pick BACK------> AT_CONTRACT_CHOICE

There is no transition out of the loop; the operator leaves with Ctrl-C.
Every failure (resolution, call, stage, submit, receipt) is reported and
the loop carries on.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

import click
from eth_abi.exceptions import DecodingError

from ..codex.registry import MAIN_CONTRACT
from ..errors import ArgumentMismatchError, RegistryError
from ..pneuma.abi import FunctionDescriptor
from ..pneuma.contract import Contract
from ..pneuma.tx import TX_ERRORS, run_tx, stage_tx
from ..session import Session
from .coercion import check_arguments, collect_arguments
from .display import log_error, log_receipt, print_returned
from .navigator import BACK_ITEM, FunctionMenu, order_contracts, search_contracts
from .prompts import Prompter

RESOLVE = "resolve"
CALL = "call"

CALL_ERRORS = TX_ERRORS + (DecodingError,)


class State(enum.Enum):
    AT_CONTRACT_CHOICE = "contract"
    AT_FUNCTION_CHOICE = "function"


@dataclass(frozen=True)
class CallOutcome:
    """Result of one call: a view value, a receipt, or a failure with its phase."""

    value: Any = None
    receipt: Optional[dict[str, Any]] = None
    error: Optional[BaseException] = None
    phase: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_receipt(self) -> bool:
        return self.receipt is not None and self.ok

    @classmethod
    def failure(cls, error: BaseException, phase: Optional[str]) -> "CallOutcome":
        return cls(error=error, phase=phase)


def query(contract: Contract, fn: FunctionDescriptor, args: Sequence[Any]) -> CallOutcome:
    """Invoke a view function directly. No confirmation step."""
    click.secho("  > Querying...", dim=True)
    try:
        check_arguments(fn, args)
        return CallOutcome(value=contract.call(fn, args))
    except CALL_ERRORS as exc:
        return CallOutcome.failure(exc, CALL)


def transact(
    contract: Contract,
    fn: FunctionDescriptor,
    args: Sequence[Any],
    overrides: dict[str, Any],
) -> CallOutcome:
    """Stage, submit and await a mutating call; the first failing phase wins."""
    try:
        check_arguments(fn, args)
    except ArgumentMismatchError as exc:
        return CallOutcome.failure(exc, CALL)

    click.secho(f"  > Staging transaction... {datetime.now()}", dim=True)
    staged = stage_tx(contract, fn, args, overrides)
    if not staged.success:
        return CallOutcome.failure(staged.error, staged.phase)

    click.secho(f"  > Sending transaction... {staged.tx.hash or '(signed by node)'}", dim=True)
    result = run_tx(staged.tx, contract.provider)
    click.secho(f"  > Transaction sent... {datetime.now()}", dim=True)
    if not result.success:
        return CallOutcome(receipt=result.receipt, error=result.error, phase=result.phase)

    return CallOutcome(receipt=result.receipt)


def report(outcome: CallOutcome, fn: FunctionDescriptor, contract: Contract) -> None:
    if not outcome.ok:
        log_error(outcome.error, outcome.phase)
    elif outcome.is_receipt:
        log_receipt(outcome.receipt, contract)
    else:
        print_returned(fn, outcome.value)


class InteractiveSession:
    """Navigator → Selector → Coercion → Driver loop over one Session."""

    def __init__(self, session: Session, prompter: Prompter, pinned: str = MAIN_CONTRACT) -> None:
        self.session = session
        self.prompter = prompter
        self.pinned = pinned
        self.state = State.AT_CONTRACT_CHOICE
        self.contract: Optional[Contract] = None
        self.menu: Optional[FunctionMenu] = None

    def run(self) -> None:
        """Loop until interrupted."""
        while True:
            self.step()

    def step(self) -> None:
        if self.state is State.AT_CONTRACT_CHOICE:
            self.pick_contract()
        else:
            self.pick_function()

    # -----------------
    # Pick a contract
    # -----------------

    def pick_contract(self) -> None:
        registry = self.session.registry
        names = order_contracts(registry.target_names(), self.pinned)

        name = self.prompter.choose(
            "Pick a CONTRACT:",
            lambda query: search_contracts(names, query),
        )

        try:
            descriptor = registry.resolve(name)
        except RegistryError as exc:
            log_error(exc, RESOLVE)
            return

        click.secho(f"  > {name} => {descriptor.address}", dim=True)

        if not descriptor.has_bytecode:
            try:
                code = self.session.provider.get_code(descriptor.address)
                click.secho(f"  > No code at {descriptor.address}, code: {code}", fg="red")
            except CALL_ERRORS as exc:
                log_error(exc, RESOLVE)

        self.contract = self.session.bind(descriptor)
        self.menu = FunctionMenu(descriptor.abi)
        self.state = State.AT_FUNCTION_CHOICE

    # -----------------
    # Pick a function
    # -----------------

    def pick_function(self) -> None:
        label = self.prompter.choose(">>> Pick a FUNCTION:", self.menu.choices)

        if label == BACK_ITEM:
            self.state = State.AT_CONTRACT_CHOICE
            return

        fn = self.menu.lookup(label)
        if fn is None:
            click.secho(f"  > Unknown function: {label}", fg="yellow")
            return

        args = collect_arguments(fn, self.prompter.text)
        outcome = self.execute(fn, args)
        if outcome is not None:
            report(outcome, fn, self.contract)

    def execute(self, fn: FunctionDescriptor, args: Sequence[Any]) -> Optional[CallOutcome]:
        """
        Run the selected function.

        Returns:
            The outcome, or None when a transaction was declined at the
            confirmation prompt (nothing staged or sent)
        """
        if fn.is_view:
            return query(self.contract, fn, args)

        if not self.prompter.confirm("Send transaction?"):
            return None

        return transact(self.contract, fn, args, self.session.overrides)
