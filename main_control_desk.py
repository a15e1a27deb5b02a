"""Mini README: Entry point CLI for the Station Clock control desk.

This script exposes a Typer CLI that starts the FastAPI desk with
configurable host, port and production flags, and offers counter-side
commands (status, start, stop, reset, watch) that work on the same ledger
file as the web interface. Settings come from ``STATIONCLOCK_`` environment
variables or a ``.env`` file.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
import uvicorn

from stationclock.configuration import get_settings
from stationclock.errors import InvalidPlayerCount, InvalidStationId
from stationclock.logging_utils import configure_root_logger
from stationclock.receipts import format_amount, format_hms, render_text_receipt
from stationclock.sessions import LedgerService, LiveSnapshot, LiveTicker, build_service

cli = typer.Typer(help="Run and operate the Station Clock control desk.")


def _service() -> LedgerService:
    configure_root_logger()
    return build_service(get_settings())


def _echo_snapshot(snapshot: LiveSnapshot) -> None:
    typer.echo(f"{snapshot.date_key}  revenue {format_amount(snapshot.revenue)}")
    for view in snapshot.stations:
        state = "RUN " if view.running else "stop"
        players = f" {view.player_count}P" if view.player_count else ""
        typer.echo(
            f"  #{view.station_id:<2} {state} {format_hms(view.elapsed_ms)}"
            f"  {format_amount(view.cost):>13}  @ {view.rate_per_minute:.2f}/min{players}"
        )


def _warn(warning: Optional[str]) -> None:
    if warning:
        typer.secho(warning, fg=typer.colors.YELLOW, err=True)


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI control desk using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger()

    # Browsers cannot open the 0.0.0.0 / :: wildcard addresses, so point at localhost.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting Station Clock ({settings.venue}) on {effective_host}:{effective_port}.\n"
        f"Open your browser at http://{browser_host}:{effective_port}"
    )
    uvicorn.run(
        "stationclock.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def status() -> None:
    """Print every station with its live elapsed time and cost."""

    _echo_snapshot(_service().snapshot())


@cli.command()
def start(
    station_id: int = typer.Argument(..., help="Station or table number."),
    players: Optional[int] = typer.Option(None, help="Player count for venues priced by players."),
) -> None:
    """Start a session on a station."""

    service = _service()
    try:
        outcome = service.start(station_id, players)
    except (InvalidStationId, InvalidPlayerCount) as error:
        typer.secho(str(error), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from error
    _warn(outcome.warning)
    if outcome.changed:
        typer.echo(f"Station {station_id} started.")


@cli.command()
def stop(station_id: int = typer.Argument(..., help="Station or table number.")) -> None:
    """Stop a station and print the receipt for its session."""

    service = _service()
    try:
        outcome = service.stop(station_id)
    except InvalidStationId as error:
        typer.secho(str(error), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from error
    _warn(outcome.warning)
    if outcome.receipt is None:
        typer.echo(f"Station {station_id} was not running; nothing billed.")
        return
    typer.echo(render_text_receipt(outcome.receipt, service.venue, service.zone))


@cli.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
) -> None:
    """Stop every station without billing and zero the revenue."""

    if not yes:
        typer.confirm("Reset all stations and revenue?", abort=True)
    outcome = _service().reset()
    _warn(outcome.warning)
    typer.echo(f"Ledger reset for {outcome.ledger.date_key}.")


@cli.command()
def watch(
    interval: float = typer.Option(None, help="Seconds between refreshes."),
    ticks: Optional[int] = typer.Option(None, help="Stop after this many refreshes."),
) -> None:
    """Refresh the station table until interrupted (Ctrl+C)."""

    service = _service()
    interval = interval or get_settings().refresh_interval_seconds

    async def _watch() -> None:
        ticker = LiveTicker(service.snapshot, _echo_snapshot, interval=interval, max_ticks=ticks)
        ticker.start()
        try:
            await ticker.wait()
        finally:
            await ticker.stop()

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        typer.echo("Stopped watching.")


if __name__ == "__main__":
    cli()
