# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command line inspection of the effective configuration.

The CLI builds a ``Configuration`` from an optional INI file, ``--set``
overrides and the environment, then prints what the delivery subsystem
would see.

Example:
    ::

        aspirin-config show
        aspirin-config --config /etc/aspirin/config.ini show
        aspirin-config --set delivery.attempt.count=5 get delivery.attempt.count
        aspirin-config session
        aspirin-config stores
"""

from __future__ import annotations

import json
import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from .config import PARAMETERS, Configuration
from .config_loader import load_overrides
from .errors import TypeCoercionError
from .store import MAIL, QUEUE

console = Console()


def _parse_assignments(assignments: tuple[str, ...]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=VALUE, got '{item}'", param_hint="--set")
        overrides[name.strip()] = value
    return overrides


def _format(value: object) -> str:
    if value is None:
        return "[dim]-[/dim]"
    return str(value)


@click.group()
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False), help="INI file with an [aspirin] section.")
@click.option("--set", "-s", "assignments", multiple=True, metavar="NAME=VALUE", help="Override a parameter.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, assignments: tuple[str, ...], verbose: bool) -> None:
    """Inspect the Aspirin delivery configuration."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    overrides: dict[str, str] = {}
    if config_path:
        try:
            overrides.update(load_overrides(config_path))
        except FileNotFoundError as exc:
            raise click.ClickException(str(exc)) from exc
    overrides.update(_parse_assignments(assignments))

    for name, value in overrides.items():
        parameter = PARAMETERS.get(name)
        if parameter is None:
            continue
        try:
            parameter.coerce(value)
        except TypeCoercionError as exc:
            console.print(f"[yellow]Warning:[/yellow] {exc}; default used.")

    configuration = Configuration(overrides)
    for name, value in overrides.items():
        if name not in PARAMETERS:
            configuration.set_property(name, value)
    ctx.obj = configuration


@main.command("show")
@click.pass_obj
def show_cmd(configuration: Configuration) -> None:
    """Show every known parameter with its current value."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Value")
    table.add_column("Default")

    values = configuration.snapshot()
    for name, parameter in PARAMETERS.items():
        value = values.get(name)
        shown = _format(value)
        if value != parameter.default:
            shown = f"[bold green]{shown}[/bold green]"
        table.add_row(name, parameter.type.value, shown, _format(parameter.default))
    for name in configuration.extension_names():
        table.add_row(name, "[dim]extension[/dim]", _format(configuration.get_property(name)), "[dim]-[/dim]")

    console.print(table)


@main.command("get")
@click.argument("name")
@click.pass_obj
def get_cmd(configuration: Configuration, name: str) -> None:
    """Print the value of one parameter."""
    value = configuration.get_property(name)
    if value is None and name not in PARAMETERS:
        console.print(f"[red]Error:[/red] Unknown parameter '{name}'")
        sys.exit(1)
    click.echo("" if value is None else str(value))


@main.command("session")
@click.pass_obj
def session_cmd(configuration: Configuration) -> None:
    """Print the derived transport session as JSON."""
    click.echo(json.dumps(configuration.get_mail_session().model_dump(), indent=2))


@main.command("stores")
@click.pass_obj
def stores_cmd(configuration: Configuration) -> None:
    """Resolve the configured stores and show what was used."""
    resolved = {
        MAIL: (configuration.get_mail_store_class_name(), configuration.get_mail_store()),
        QUEUE: (configuration.get_queue_store_class_name(), configuration.get_queue_store()),
    }
    for kind, (identifier, store) in resolved.items():
        store_class = f"{type(store).__module__}.{type(store).__qualname__}"
        console.print(f"[bold]{kind}[/bold]: {identifier} -> {store_class}")
        error = configuration.stores.last_error(kind)
        if error is not None:
            console.print(f"  [yellow]fallback:[/yellow] {error.reason}")


__all__ = ["main"]
