"""
MWC Wallet CLI - keys, addresses, fee estimation and signed transactions.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from mwcwallet.config import Settings, get_settings
from mwcwallet.errors import WalletError
from mwcwallet.network import NetworkType
from mwcwallet.wallet.address import validate_address, wif_to_address
from mwcwallet.wallet.builder import create_signed_transaction
from mwcwallet.wallet.fees import estimate_fee, estimate_fee_from_utxos
from mwcwallet.wallet.keys import generate_wif
from mwcwallet.wallet.models import parse_utxos
from mwcwallet.wallet.script import ScriptType

app = typer.Typer(
    name="mwc-wallet",
    help="MWC Wallet - build and sign transactions",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )


def _settings(network: str | None, log_level: str | None) -> tuple[Settings, NetworkType]:
    settings = get_settings()
    setup_logging(log_level or settings.log_level)
    if network is None:
        return settings, settings.network
    try:
        return settings, NetworkType(network)
    except ValueError:
        logger.error(f"Invalid network: {network}")
        raise typer.Exit(1)


NetworkOption = Annotated[
    str | None, typer.Option("--network", "-n", help="mainnet or testnet (default from settings)")
]
LogLevelOption = Annotated[str | None, typer.Option("--log-level", "-l", help="Log level")]


@app.command("generate-key")
def generate_key(network: NetworkOption = None, log_level: LogLevelOption = None) -> None:
    """Generate a new compressed WIF private key."""
    _, network_type = _settings(network, log_level)
    typer.echo(generate_wif(network_type))


@app.command()
def address(
    wif: Annotated[str, typer.Option("--wif", envvar="MWC_WIF", help="WIF private key")],
    script_type: Annotated[
        ScriptType, typer.Option("--type", "-t", help="Address type")
    ] = ScriptType.P2PKH,
    network: NetworkOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Show the address owned by a WIF key."""
    _, network_type = _settings(network, log_level)
    try:
        typer.echo(wif_to_address(wif, network_type, script_type))
    except WalletError as e:
        logger.error(str(e))
        raise typer.Exit(1)


@app.command()
def validate(
    addr: Annotated[str, typer.Argument(help="Address to validate")],
    network: NetworkOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Check an address. Exits with code 1 if invalid."""
    _, network_type = _settings(network, log_level)
    if validate_address(addr, network_type):
        typer.echo("valid")
        return
    typer.echo("invalid")
    raise typer.Exit(1)


@app.command("estimate-fee")
def estimate_fee_command(
    rate: Annotated[int, typer.Option("--rate", "-r", help="Fee rate in sat/vB")],
    outputs: Annotated[
        list[str], typer.Option("--output", "-o", help="Output scriptPubKey hex (repeatable)")
    ],
    utxos_file: Annotated[
        Path | None,
        typer.Option("--utxos", "-u", exists=True, dir_okay=False, help="UTXO JSON file"),
    ] = None,
    inputs: Annotated[
        list[str] | None,
        typer.Option("--input", "-i", help="Input scriptPubKey hex (repeatable)"),
    ] = None,
    log_level: LogLevelOption = None,
) -> None:
    """Estimate the fee for spending the given inputs into the given outputs."""
    setup_logging(log_level or get_settings().log_level)
    try:
        if utxos_file is not None:
            fee = estimate_fee_from_utxos(parse_utxos(utxos_file.read_text()), outputs, rate)
        else:
            fee = estimate_fee(inputs or [], outputs, rate)
    except WalletError as e:
        logger.error(str(e))
        raise typer.Exit(1)
    typer.echo(str(fee))


@app.command("create-tx")
def create_tx(
    utxos_file: Annotated[
        Path, typer.Option("--utxos", "-u", exists=True, dir_okay=False, help="UTXO JSON file")
    ],
    to_address: Annotated[str, typer.Option("--to", help="Destination address")],
    amount: Annotated[int, typer.Option("--amount", "-a", help="Amount in sats")],
    fee: Annotated[int, typer.Option("--fee", "-f", help="Fee in sats")],
    wif: Annotated[str, typer.Option("--wif", envvar="MWC_WIF", help="WIF private key")],
    as_json: Annotated[bool, typer.Option("--json", help="Output result as JSON")] = False,
    network: NetworkOption = None,
    log_level: LogLevelOption = None,
) -> None:
    """Build and sign a transaction spending every UTXO in the file."""
    settings, network_type = _settings(network, log_level)
    try:
        result = create_signed_transaction(
            utxos_file.read_text(),
            to_address,
            amount,
            fee,
            wif,
            network=network_type,
            dust_threshold=settings.dust_threshold,
            change_script_type=ScriptType(settings.change_script_type),
            fee_rate=settings.fee_rate,
        )
    except WalletError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.echo(result.raw_tx)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
