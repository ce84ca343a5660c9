"""
Theurgy Status - Query state of the system on any network.

Read-only dump of the deployed protocol at a given block:
- Synthetix supply and rate validity
- SynthetixState issuance data for selected addresses
- SupplySchedule (FixedSupplySchedule on Optimism)
- FeePool periods and per-address fee data
- FeePoolState debt entries
- AddressResolver / SystemSettings spot checks
- ExchangeRates for every available currency key
"""

from __future__ import annotations

import math
import time
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

import click

from ..config import DEFAULT_NETWORK, SessionConfig
from ..pneuma.abi import format_ether, from_bytes32, to_bytes32, to_checksum_address
from ..pneuma.rpc import BlockTag
from ..session import Session
from . import fail


def _as_text(value: Any) -> str:
    """Render decoded values the way ethers' toString() would."""
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return ",".join(_as_text(v) for v in value)
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _as_date(timestamp: int) -> str:
    return datetime.fromtimestamp(int(timestamp), tz=timezone.utc).isoformat()


def log_section(name: str) -> None:
    click.secho(f"\n=== {name}: ===", fg="green")


def log_item(name: str, value: Any = None, indent: int = 1, alert: bool = False) -> None:
    has_value = value is not None
    spaces = "  " * indent
    label = click.style(f"* {name}{':' if has_value else ''}", fg="cyan")
    text = _as_text(value) if has_value else ""

    if alert:
        click.echo(spaces + " " + click.style(f"{name}: {text}", bg="red", fg="white"))
    else:
        click.echo(f"{spaces} {label} {text}".rstrip())


def log_address(address: str) -> None:
    click.echo(click.style("  Address:", fg="green") + f" {address}")


class StatusReport:
    def __init__(self, session: Session, addresses: Sequence[str], block: BlockTag = "latest") -> None:
        self.session = session
        self.addresses = list(addresses)
        self.block = block

    @property
    def use_ovm(self) -> bool:
        return self.session.config.use_ovm

    def run(self) -> None:
        self.info()
        self.synthetix()
        self.synthetix_state()
        self.supply_schedule()
        self.fee_pool()
        self.fee_pool_state()
        self.address_resolver()
        self.system_settings()
        self.exchange_rates()

    def info(self) -> None:
        log_section("Info")
        config = self.session.config
        log_item("Network", config.network)
        log_item("Optimism", config.use_ovm)
        log_item("Block #", self.block)
        log_item("Provider", config.provider_url)

    def synthetix(self) -> None:
        log_section("Synthetix")
        synthetix = self.session.contract("Synthetix")

        invalid = synthetix.call("anySynthOrSNXRateIsInvalid", block=self.block)
        log_item("Synthetix.anySynthOrSNXRateIsInvalid", invalid, alert=bool(invalid))

        total_supply = synthetix.call("totalSupply", block=self.block)
        log_item("Synthetix.totalSupply", format_ether(total_supply))

    def synthetix_state(self) -> None:
        log_section("SynthetixState")
        state = self.session.contract("SynthetixState")

        for address in self.addresses:
            log_address(address)
            data = state.call("issuanceData", [address], block=self.block)
            log_item("SynthetixState.issuanceData(address)", data)

    def supply_schedule(self) -> None:
        log_section("SupplySchedule")
        source = "FixedSupplySchedule" if self.use_ovm else "SupplySchedule"
        schedule = self.session.contract("SupplySchedule", source=source)

        supply = schedule.call("mintableSupply", block=self.block)
        log_item("SupplySchedule.mintableSupply", format_ether(supply))

        if not self.use_ovm:
            return

        start = schedule.call("inflationStartDate", block=self.block)
        log_item("FixedSupplySchedule.inflationStartDate", _as_date(start))

        last_mint = schedule.call("lastMintEvent", block=self.block)
        log_item("FixedSupplySchedule.lastMintEvent", last_mint)
        mint_period = schedule.call("mintPeriodDuration", block=self.block)
        log_item("FixedSupplySchedule.mintPeriodDuration", mint_period)

        now = math.floor(time.time())
        remaining_hours = (last_mint + mint_period - now) / (60 * 60)
        log_item("Remaining hours until period ends", remaining_hours)

        log_item("FixedSupplySchedule.mintBuffer", schedule.call("mintBuffer", block=self.block))
        log_item(
            "FixedSupplySchedule.periodsSinceLastIssuance",
            schedule.call("periodsSinceLastIssuance", block=self.block),
        )

    def fee_pool(self) -> None:
        log_section("FeePool")
        fee_pool = self.session.contract("FeePool")

        log_item("FeePool.feePeriodDuration", fee_pool.call("feePeriodDuration", block=self.block))

        for index in (0, 1):
            period = fee_pool.call_named("recentFeePeriods", [index], block=self.block)
            log_item(f"feePeriod {index}:")
            for key, value in period.items():
                log_item(key, value, indent=2)
            if "startTime" in period:
                log_item("startTime (date)", _as_date(period["startTime"]), indent=2)

        for address in self.addresses:
            log_address(address)

            fees = fee_pool.call("feesByPeriod", [address], block=self.block)
            log_item(
                "FeePool.feesByPeriod(address)",
                "[" + ", ".join(f"[{_as_text(p)}]" for p in fees) + "]",
                indent=2,
            )

            last = fee_pool.call("getLastFeeWithdrawal", [address], block=self.block)
            log_item("FeePool.getLastFeeWithdrawal(address)", last, indent=2)

            ratio = fee_pool.call("effectiveDebtRatioForPeriod", [address, 1], block=self.block)
            log_item(f"FeePool.effectiveDebtRatioForPeriod({address}, 1)", ratio, indent=2)

    def fee_pool_state(self) -> None:
        log_section("FeePoolState")
        state = self.session.contract("FeePoolState")

        for address in self.addresses:
            log_address(address)
            entry = state.call("getAccountsDebtEntry", [address, 0], block=self.block)
            log_item("FeePoolState.getAccountsDebtEntry(address)", entry)

    def address_resolver(self) -> None:
        log_section("AddressResolver")
        resolver = self.session.contract("AddressResolver")

        for name in ("RewardsDistribution",):
            resolved = resolver.call("getAddress", [to_bytes32(name)], block=self.block)
            log_item(f"AddressResolver.getAddress({name})", resolved)

    def system_settings(self) -> None:
        log_section("SystemSettings")
        settings = self.session.contract("SystemSettings")
        log_item("rateStalePeriod", settings.call("rateStalePeriod", block=self.block))

    def exchange_rates(self) -> None:
        log_section("ExchangeRates")
        rates = self.session.contract("ExchangeRates")
        issuer = self.session.contract("Issuer")

        currency_keys = issuer.call("availableCurrencyKeys", block=self.block)
        now_minutes = math.floor(time.time() / 60)

        for key in currency_keys:
            currency = from_bytes32(key)
            rate = rates.call("rateForCurrency", [key], block=self.block)
            invalid = rates.call("rateIsInvalid", [key], block=self.block)
            updated = rates.call("lastRateUpdateTimes", [key], block=self.block)
            since_update = math.floor(now_minutes - updated / 60)

            log_item(
                f"{currency} rate",
                f"{format_ether(rate)} (Updated {since_update} minutes ago)",
                alert=bool(invalid),
            )


def parse_addresses(addresses: Optional[str]) -> list[str]:
    if not addresses:
        return []
    return [to_checksum_address(a.strip()) for a in addresses.split(",") if a.strip()]


def parse_block(block: Optional[str]) -> BlockTag:
    if block is None:
        return "latest"
    try:
        return int(block, 0)
    except ValueError:
        raise click.BadParameter(f"Invalid block number: {block}", param_hint="--block") from None


@click.command()
@click.option("-a", "--addresses", default=None, help="Comma separated addresses to perform particular checks on")
@click.option("-b", "--block", default=None, help="Block number to check against")
@click.option("-n", "--network", default=DEFAULT_NETWORK, show_default=True, help="The network to run off")
@click.option(
    "-p",
    "--provider-url",
    default=None,
    help="The http provider to use for communicating with the blockchain",
)
@click.option("-y", "--deployment-path", default=None, help="Path to the deployment data directory")
@click.option("-z", "--use-ovm", is_flag=True, help="Use an Optimism chain")
def status(
    addresses: Optional[str],
    block: Optional[str],
    network: str,
    provider_url: Optional[str],
    deployment_path: Optional[str],
    use_ovm: bool,
) -> None:
    """Query state of the system on any network."""
    block_tag = parse_block(block)

    try:
        config = SessionConfig.from_options(
            network=network,
            provider_url=provider_url,
            use_ovm=use_ovm,
            deployment_path=deployment_path,
            infura_only=False,
        )
        session = Session.open(config, read_only=True)
        StatusReport(session, parse_addresses(addresses), block=block_tag).run()
    except Exception as exc:
        fail(exc)
