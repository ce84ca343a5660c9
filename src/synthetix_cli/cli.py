"""
synthetix-cli

Command-line toolkit for a deployed Synthetix protocol instance.

Commands:
  status    - Dump protocol state for a network and block
  interact  - Browse deployed contracts and call their functions
"""

from __future__ import annotations

import sys

import click

from . import __version__
from .config import load_env
from .theurgy import print_banner


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="synthetix-cli")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Query and interact with deployed Synthetix contracts."""
    load_env()
    if ctx.invoked_subcommand is None:
        print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .theurgy.interact import interact
from .theurgy.status import status

cli.add_command(status)
cli.add_command(interact)


# ============ Entry Points ============


def main() -> None:
    """synthetix-cli entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass  # Fallback: old Python or non-tty
    cli()


if __name__ == "__main__":
    main()
