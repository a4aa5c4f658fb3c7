"""
Click-based CLI for portboard.

IMPORTANT: This module only ORCHESTRATES. It never reasons or makes decisions.
- Opens the settings store
- Invokes the port service
- Formats output
"""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler

from portboard import __version__
from portboard.actions.report import ReportAction
from portboard.errors import PortboardError
from portboard.model.ports import Protocol
from portboard.pipeline import PortService
from portboard.storage import db
from portboard.storage.repositories import SettingsRepository

console = Console()

PROTOCOL_CHOICE = click.Choice([p.value for p in Protocol], case_sensitive=False)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/] {error}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="portboard")
@click.option("--db", "db_path", type=click.Path(dir_okay=False), help="Path to the SQLite database")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, db_path: str | None, verbose: bool) -> None:
    """portboard: host ports, UFW rules and container bindings in one view."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    if db_path:
        db.set_db_path(Path(db_path).expanduser())
    db.init_db()
    SettingsRepository().seed_defaults()

    ctx.ensure_object(dict)
    ctx.obj["service"] = PortService()


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def ports(ctx: click.Context, as_json: bool) -> None:
    """List every known port with its socket, container and UFW state."""
    service: PortService = ctx.obj["service"]
    try:
        with console.status("[bold blue]Collecting ports...[/]"):
            view = service.list_ports()
    except PortboardError as e:
        _fail(e)

    if as_json:
        click.echo(json.dumps(view.to_dict(), indent=2))
        return
    ReportAction(console).report_ports(view)


@main.command()
@click.argument("port", type=click.IntRange(1, 65535))
@click.option("--protocol", "-p", type=PROTOCOL_CHOICE, default="any", show_default=True)
@click.pass_context
def allow(ctx: click.Context, port: int, protocol: str) -> None:
    """Add a UFW allow rule for PORT."""
    try:
        ctx.obj["service"].allow_port(port, protocol.lower())
    except (PortboardError, ValueError) as e:
        _fail(e)
    console.print(f"[bold green]Allowed[/] {port}/{protocol.lower()}")


@main.command()
@click.argument("rule_id", type=click.IntRange(min=1))
@click.pass_context
def delete(ctx: click.Context, rule_id: int) -> None:
    """Delete UFW rule RULE_ID.

    Rule numbers shift after every deletion; take RULE_ID from a listing
    made right before this command.
    """
    try:
        ctx.obj["service"].remove_rule(rule_id)
    except (PortboardError, ValueError) as e:
        _fail(e)
    console.print(f"[bold green]Deleted[/] rule {rule_id}")


@main.command()
@click.argument("port", type=click.IntRange(1, 65535))
@click.option("--protocol", "-p", type=PROTOCOL_CHOICE, default="any", show_default=True)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def block(ctx: click.Context, port: int, protocol: str, yes: bool) -> None:
    """Delete every UFW rule that opens PORT."""
    if not yes and not click.confirm(f"Delete all UFW rules for {port}/{protocol.lower()}?"):
        return
    try:
        deleted = ctx.obj["service"].block_port(port, protocol.lower())
    except (PortboardError, ValueError) as e:
        _fail(e)
    if not deleted:
        console.print(f"[yellow]No UFW rules found for[/] {port}/{protocol.lower()}")
        return
    console.print(f"[bold green]Deleted rules:[/] {', '.join(str(r) for r in deleted)}")


@main.command()
@click.argument("port", type=click.IntRange(1, 65535))
@click.argument("protocol", type=PROTOCOL_CHOICE)
@click.argument("name", required=False)
@click.pass_context
def label(ctx: click.Context, port: int, protocol: str, name: str | None) -> None:
    """Set the display NAME for PORT/PROTOCOL, or clear it when NAME is omitted."""
    ctx.obj["service"].set_custom_name(port, protocol.lower(), name)
    if name:
        console.print(f"[bold green]Labelled[/] {port}/{protocol.lower()} as {name}")
    else:
        console.print(f"[bold green]Cleared label[/] for {port}/{protocol.lower()}")


@main.group()
def settings() -> None:
    """Show or change connection settings."""


@settings.command("show")
@click.pass_context
def settings_show(ctx: click.Context) -> None:
    """Print current settings (secrets masked)."""
    values = ctx.obj["service"].settings_manager.to_public_dict()
    for key in sorted(values):
        console.print(f"[bold]{key}[/] = {values[key]}")


@settings.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def settings_set(ctx: click.Context, key: str, value: str) -> None:
    """Set KEY to VALUE (use an empty string to clear)."""
    try:
        ctx.obj["service"].settings_manager.update({key: value})
    except ValueError as e:
        _fail(e)
    console.print(f"[bold green]Saved[/] {key}")


@main.command()
@click.option("--port", default=8765, show_default=True, help="Port to listen on")
def web(port: int) -> None:
    """Serve the JSON API on 127.0.0.1."""
    from portboard.web.app import run_server

    run_server(port=port)


if __name__ == "__main__":
    main()
