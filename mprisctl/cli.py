"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
from enum import Enum

import typer

from mprisctl.core.errors import MprisctlError
from mprisctl.core.player import PLAYER_INTERFACE
from mprisctl.core.service import MprisService
from mprisctl.transports.dbus_session import DBusTransport

app = typer.Typer(help="Control running MPRIS media players with short text commands")


class BusKind(str, Enum):
    session = "session"
    system = "system"


@app.callback()
def main(
    ctx: typer.Context,
    bus: BusKind = typer.Option(BusKind.session, "--bus", help="D-Bus to use"),
    timeout: float = typer.Option(2.0, "--timeout", help="Per-call D-Bus timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = {"bus": bus.value, "timeout": timeout}


def _build_service(ctx: typer.Context, *, refresh: bool = True) -> MprisService:
    options = ctx.obj or {}
    service = MprisService(
        transport=DBusTransport(
            bus=options.get("bus", "session"),
            timeout_s=options.get("timeout", 2.0),
        )
    )
    for warning in getattr(service, "load_warnings", ()):
        typer.echo(f"Warning: {warning}", err=True)
    if refresh:
        service.refresh()
        for warning in getattr(service, "runtime_warnings", ()):
            typer.echo(f"Warning: {warning}", err=True)
    return service


@app.command("commands")
def list_commands(ctx: typer.Context) -> None:
    """List known commands in matching order."""
    try:
        service = _build_service(ctx, refresh=False)
        for command in service.list_commands():
            typer.echo(f"{command.id}: {command.title} ({command.method})")
    except MprisctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("players")
def list_players(ctx: typer.Context) -> None:
    """List running MPRIS players and their playback status."""
    try:
        service = _build_service(ctx)
        players = service.list_players()
        if not players:
            typer.echo("No MPRIS players found")
            return

        for player in players:
            status = player.read(f"{PLAYER_INTERFACE}.PlaybackStatus")
            shown = str(status.value) if status.ok else "<unknown>"
            typer.echo(f"{player.bus_id} {player.name} [{shown}]")
    except MprisctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("query")
def query(ctx: typer.Context, text: str = typer.Argument("")) -> None:
    """Show the matches TEXT produces, in evaluation order."""
    try:
        service = _build_service(ctx)
        items = service.items(text)
        if not items:
            typer.echo("No matches")
            return

        for item in items:
            typer.echo(f"{item.score:3d} {item.id} {item.title} - {item.subtext}")
    except MprisctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("run")
def run_command(
    ctx: typer.Context,
    text: str,
    player: str | None = typer.Option(None, "--player", help="Bus name or partial player name"),
) -> None:
    """Execute the best match for TEXT.

    Fails when TEXT is ambiguous; type more of the command or pass --player.
    """
    try:
        service = _build_service(ctx)
        match = service.run(text, player_hint=player)
        typer.echo(f"Sent {match.command.method} to {match.player.bus_id}")
    except MprisctlError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


def run() -> None:
    app()


if __name__ == "__main__":
    run()
