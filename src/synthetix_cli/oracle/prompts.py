"""
Interactive prompts for the contract-call driver.

The driver only talks to the ``Prompter`` protocol; ``QuestionaryPrompter``
implements it with questionary (prompt_toolkit underneath). Ctrl-C raises
KeyboardInterrupt out of every prompt, which is how a session ends.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Protocol

import click
import questionary
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

Source = Callable[[str], list[str]]


class Prompter(Protocol):
    def choose(self, message: str, source: Source) -> str:
        """Pick one entry from a list filtered live by the typed query."""
        ...

    def text(self, message: str) -> str:
        ...

    def confirm(self, message: str) -> bool:
        ...


class SourceCompleter(Completer):
    """Completions recomputed from ``source(query)`` on every keystroke."""

    def __init__(self, source: Source) -> None:
        self.source = source

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        query = document.text_before_cursor
        for label in self.source(query):
            yield Completion(label, start_position=-len(query))


def resolve_choice(answer: str, source: Source) -> Optional[str]:
    """
    Map the submitted text onto an entry of the list.

    An exact entry wins; otherwise the best ranked entry for the typed
    query is taken, as if it had been highlighted. None when nothing matches.
    """
    if answer in source(answer) or answer in source(""):
        return answer
    candidates = source(answer)
    return candidates[0] if candidates else None


class QuestionaryPrompter:
    def choose(self, message: str, source: Source) -> str:
        while True:
            answer = questionary.autocomplete(
                message,
                choices=source(""),
                completer=SourceCompleter(source),
            ).unsafe_ask()

            choice = resolve_choice(answer, source)
            if choice is not None:
                return choice
            click.secho(f"  > No match for '{answer}'", fg="yellow")

    def text(self, message: str) -> str:
        return questionary.text(message).unsafe_ask()

    def confirm(self, message: str) -> bool:
        return questionary.confirm(message, default=True).unsafe_ask()
