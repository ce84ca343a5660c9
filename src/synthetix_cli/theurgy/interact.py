"""
Theurgy Interact - Interact with a deployed Synthetix instance.

Pick a contract, pick one of its functions, answer the argument prompts
and the call is executed: view functions are queried directly, anything
else is confirmed, staged, sent and awaited. The session loops until
Ctrl-C.
"""

from __future__ import annotations

from typing import Optional

import click

from ..config import DEFAULT_GAS_LIMIT, DEFAULT_GAS_PRICE_GWEI, DEFAULT_NETWORK, SessionConfig
from ..oracle.driver import InteractiveSession
from ..oracle.prompts import QuestionaryPrompter
from ..session import Session
from . import fail, print_banner

RULE = "=" * 80


def print_session_header(session: Session) -> None:
    """Review panel shown before any interaction."""
    config = session.config

    click.echo()
    click.secho("Please review this information before you interact with the system:", dim=True)
    click.secho(RULE, dim=True)
    click.secho(f"> Provider: {session.provider.describe()}", dim=True)
    click.secho(f"> Network: {config.network}", dim=True)
    click.secho(f"> Gas price: {config.gas_price}", dim=True)
    click.secho(f"> OVM: {config.use_ovm}", dim=True)
    click.secho(f"> Target deployment: {session.registry.directory}", fg="yellow")

    if session.signer is not None:
        click.secho(f"> Signer: {session.signer}", fg="yellow")
    else:
        click.secho("> Read only", dim=True)

    click.secho(RULE, dim=True)
    click.echo()


@click.command()
@click.option("-f", "--use-fork", is_flag=True, help="Use a local fork")
@click.option(
    "-g",
    "--gas-price",
    default=DEFAULT_GAS_PRICE_GWEI,
    type=float,
    show_default=True,
    help="Gas price in gwei to set when sending transactions",
)
@click.option("-k", "--private-key", default=None, help="Private key to use to sign txs")
@click.option(
    "-l",
    "--gas-limit",
    default=DEFAULT_GAS_LIMIT,
    type=int,
    show_default=True,
    help="Max gas to use when signing transactions",
)
@click.option("-n", "--network", default=DEFAULT_NETWORK, show_default=True, help="The network to run off")
@click.option(
    "-p",
    "--provider-url",
    default=None,
    help="The http provider to use for communicating with the blockchain",
)
@click.option("-y", "--deployment-path", default=None, help="Path to the deployment data directory")
@click.option("-z", "--use-ovm", is_flag=True, help="Use an Optimism chain")
@click.option("-o", "--owner", default=None, help="Unlocked account to send from on a local fork")
def interact(
    use_fork: bool,
    gas_price: float,
    private_key: Optional[str],
    gas_limit: int,
    network: str,
    provider_url: Optional[str],
    deployment_path: Optional[str],
    use_ovm: bool,
    owner: Optional[str],
) -> None:
    """
    Interact with a deployed Synthetix instance from the command line.

    Press Ctrl-C to leave.
    """
    try:
        config = SessionConfig.from_options(
            network=network,
            provider_url=provider_url,
            use_ovm=use_ovm,
            use_fork=use_fork,
            gas_price=gas_price,
            gas_limit=gas_limit,
            deployment_path=deployment_path,
            private_key=private_key,
            owner=owner,
        )
        session = Session.open(config)

        click.clear()
        print_banner()
        print_session_header(session)

        InteractiveSession(session, QuestionaryPrompter()).run()
    except click.exceptions.Abort:
        raise
    except Exception as exc:
        fail(exc)
