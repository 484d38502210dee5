"""Command-line interface for flowvault."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from flowvault import __version__
from flowvault.config import settings
from flowvault.logger import setup_global_logger

console = Console()

MASK = "********"


def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text("utf-8")


@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Override LOG_LEVEL from the environment.")
def main(log_level: Optional[str]):
    """
    flowvault - grouped secrets and configuration for message flows.

    Seal vault stores, inspect them, and run a flow against a message.
    """
    setup_global_logger(log_level or settings.LOG_LEVEL)


@main.command()
@click.argument("store_file")
def seal(store_file: str):
    """Seal a JSON store file (or '-' for stdin) with SECRET_KEY."""
    from flowvault.utils.security import encrypt_string

    text = _read_text(store_file)
    try:
        data = json.loads(text)
    except ValueError as e:
        raise click.ClickException(f"Store is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise click.ClickException("Store must be a JSON object of groups")

    click.echo(encrypt_string(json.dumps(data)))


@main.command()
@click.argument("blob_file")
@click.option("--reveal", is_flag=True, help="Show password and cred values.")
def inspect(blob_file: str, reveal: bool):
    """Unseal a store and list its groups and properties."""
    from flowvault.utils.security import decrypt_string
    from flowvault.vault.decoder import decode_store
    from flowvault.vault.models import TypedValue

    errors = []
    store = decode_store(decrypt_string(_read_text(blob_file).strip()), on_error=errors.append)
    if errors:
        raise click.ClickException(errors[0])

    table = Table(title=f"{settings.PROJECT_NAME} store")
    table.add_column("Group", style="bold yellow")
    table.add_column("Property")
    table.add_column("Type", style="dim")
    table.add_column("Value")

    for group_name, group in store.items():
        if not isinstance(group, dict):
            table.add_row(group_name, "-", "invalid", repr(group))
            continue
        for prop, entry in group.items():
            if isinstance(entry, TypedValue):
                value = MASK if entry.is_secret and not reveal else json.dumps(entry.value)
                table.add_row(group_name, prop, entry.type, value)
            else:
                table.add_row(group_name, prop, "legacy", json.dumps(entry))

    console.print(table)


@main.command()
@click.argument("node_id")
@click.option("--flow-file", default=None, help="Flow definition JSON (defaults to FLOW_FILE).")
@click.option("--msg", "msg_json", default="{}", help="Message to inject, as JSON.")
def run(node_id: str, flow_file: Optional[str], msg_json: str):
    """Deploy a flow and inject one message into NODE_ID."""
    from flowvault.runtime.engine import FlowRuntime

    flow_file = flow_file or settings.FLOW_FILE
    if not flow_file:
        raise click.ClickException("No flow file given (use --flow-file or set FLOW_FILE)")

    try:
        definitions = json.loads(_read_text(flow_file))
        msg = json.loads(msg_json)
    except ValueError as e:
        raise click.ClickException(f"Invalid JSON: {e}")
    if not isinstance(msg, dict):
        raise click.ClickException("--msg must be a JSON object")

    runtime = FlowRuntime()
    try:
        runtime.deploy(definitions)
        result = asyncio.run(runtime.receive(node_id, msg))
    except ValueError as e:
        raise click.ClickException(str(e))
    finally:
        runtime.teardown()

    if result is None:
        for event in runtime.exec_logger.errors():
            console.print(f"[red]✗ {event['data']['node_id']}: {event['data']['error']}[/red]")
        sys.exit(1)

    console.print_json(json.dumps(result, default=str))


if __name__ == "__main__":
    main()
