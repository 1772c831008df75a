# armkit CLI: main entry point
"""armkit CLI — inspect resource IDs and wait on long-running operations."""

from __future__ import annotations

import json
from dataclasses import fields
from pathlib import Path
from typing import Optional

import click

from ..config import settings


@click.group()
@click.version_option(version=settings.app_version, prog_name="armkit")
def cli():
    """armkit — Azure Resource Manager IDs and long-running operations."""
    pass


# ---------------------------------------------------------------------------
# Resource ID commands
# ---------------------------------------------------------------------------


@cli.group("id")
def id_group():
    """Parse and format resource IDs."""
    pass


@id_group.command("parse")
@click.argument("resource_id")
@click.option("--type", "type_key", default=None, help="ID type key (see 'armkit id types'). Auto-detected if omitted.")
def id_parse(resource_id: str, type_key: Optional[str]):
    """Parse RESOURCE_ID strictly and show its fields."""
    from rich.table import Table

    from ..common import console, die
    from ..errors import MalformedIdentifier
    from ..ids import get_id_type, resolve_resource_id

    try:
        parsed = get_id_type(type_key).parse(resource_id) if type_key else resolve_resource_id(resource_id)
    except KeyError as e:
        die(e.args[0])
    except MalformedIdentifier as e:
        die(f"Invalid resource ID: {e}")

    table = Table(title=str(parsed))
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for f in fields(parsed):
        table.add_row(f.name, getattr(parsed, f.name))
    console.print(table)


@id_group.command("format")
@click.argument("type_key")
@click.option("--subscription", "subscription_id", default=lambda: settings.subscription_id,
              help="Subscription ID (defaults to ARMKIT_SUBSCRIPTION_ID).")
@click.option("--resource-group", required=True, help="Resource group name.")
@click.option("--set", "values", multiple=True, metavar="FIELD=VALUE",
              help="Named segment value, e.g. --set name=my-domain. Repeatable.")
def id_format(type_key: str, subscription_id: str, resource_group: str, values: tuple[str, ...]):
    """Build a TYPE_KEY resource ID and print its canonical path."""
    from ..common import die
    from ..errors import MalformedIdentifier
    from ..ids import get_id_type

    try:
        cls = get_id_type(type_key)
    except KeyError as e:
        die(e.args[0])

    kwargs: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep:
            die(f"--set expects FIELD=VALUE, got {item!r}")
        kwargs[key.strip()] = value

    expected = sorted(field_name for _, field_name in cls.segments)
    if sorted(kwargs) != expected:
        die(f"{type_key} needs --set for exactly: {', '.join(expected)}")

    try:
        resource_id = cls(subscription_id=subscription_id, resource_group=resource_group, **kwargs)
    except MalformedIdentifier as e:
        die(str(e))
    click.echo(resource_id.id())


@id_group.command("types")
def id_types():
    """List the registered resource ID types."""
    from rich.table import Table

    from ..common import console
    from ..ids import get_id_type, id_type_keys

    table = Table(title="Resource ID types")
    table.add_column("Key", style="cyan")
    table.add_column("Kind")
    table.add_column("Provider")
    table.add_column("Segments")
    for key in id_type_keys():
        cls = get_id_type(key)
        table.add_row(key, cls.kind, cls.provider, "/".join(k for k, _ in cls.segments))
    console.print(table)


# ---------------------------------------------------------------------------
# Long-running operation commands
# ---------------------------------------------------------------------------


@cli.group()
def operation():
    """Track long-running operations."""
    pass


@operation.command("wait")
@click.argument("polling_url", required=False)
@click.option("--state-file", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Resume from (and save progress to) a JSON state file.")
@click.option("--method", "polling_method", type=click.Choice(["azure-async-operation", "location", "body"]),
              default="azure-async-operation", show_default=True, help="How POLLING_URL reports status.")
@click.option("--resource-url", default=None, help="URL to GET for the result once the operation succeeds.")
@click.option("--interval", type=float, default=None, help="Seconds between polls (default ARMKIT_POLL_INTERVAL).")
@click.option("--timeout", type=float, default=None, help="Give up after this many seconds (default ARMKIT_POLL_TIMEOUT).")
def operation_wait(
    polling_url: Optional[str],
    state_file: Optional[Path],
    polling_method: str,
    resource_url: Optional[str],
    interval: Optional[float],
    timeout: Optional[float],
):
    """Poll POLLING_URL (or a saved operation) until it finishes."""
    from ..auth import authorizer_from_settings
    from ..common import console, die, init_logging, print_header, print_info, print_success
    from ..errors import ArmKitError, OperationFailed
    from ..polling import AsyncOperation, PollingMethod, wait_for_completion
    from ..transport import build_sender

    log_file = init_logging("armkit-wait")
    print_header("armkit operation wait")

    if state_file is not None and state_file.exists():
        op: AsyncOperation = AsyncOperation.from_json(state_file.read_text())
    elif polling_url:
        op = AsyncOperation(polling_url, PollingMethod(polling_method), resource_url=resource_url)
    else:
        die("Provide a POLLING_URL or an existing --state-file")

    try:
        sender = build_sender(authorizer_from_settings())
    except RuntimeError as e:
        die(str(e))

    print_info(f"Waiting on {op.polling_url} (log: {log_file})")
    try:
        result = wait_for_completion(op, sender, interval=interval, timeout=timeout)
    except OperationFailed as e:
        _save_state(state_file, op)
        die(str(e))
    except (ArmKitError, KeyboardInterrupt) as e:
        _save_state(state_file, op)
        die(f"Stopped waiting: {str(e) or 'interrupted'}")

    _save_state(state_file, op)
    print_success(f"Operation {op.status.value}")
    if result is not None:
        console.print_json(json.dumps(result))


def _save_state(state_file: Optional[Path], op) -> None:
    from ..common import print_warning

    if state_file is not None:
        state_file.write_text(op.to_json() + "\n")
        if not op.status.is_terminal:
            print_warning(f"Progress saved to {state_file}; rerun with --state-file to resume")


if __name__ == "__main__":
    cli()
