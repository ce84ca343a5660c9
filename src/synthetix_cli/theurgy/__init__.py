"""
Theurgy - Command implementations for synthetix-cli.

Each module corresponds to a top-level CLI command:
- status:   Dump protocol state for a network and block
- interact: Browse deployed contracts and call their functions
"""

from __future__ import annotations

import sys
import traceback

import click

from ..errors import SynthetixCliError


def fail(exc: BaseException) -> None:
    """Print an uncaught error with its trace and exit non-zero."""
    click.secho(f"ERROR: {exc}", fg="red")
    click.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    sys.exit(exc.exit_code if isinstance(exc, SynthetixCliError) else 1)


def print_banner() -> None:
    """Print the synthetix-cli banner with the installed version."""
    from .. import __version__

    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="green")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("      S Y N T H E T I X - C L I", fg="bright_white", bold=True)
        + click.style(f"    v{__version__}", dim=True)
    )
    click.secho("        ─── Deployed protocol toolkit ───", fg="green")
    click.echo()
    click.echo(border)
    click.echo()
