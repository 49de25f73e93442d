"""simconsole command-line interface.

Commands:
    simconsole list KIND                       List resources of KIND.
    simconsole get KIND NAME                   Show one resource.
    simconsole apply KIND -f FILE              Create or update from YAML/JSON.
    simconsole delete KIND NAME                Delete one resource.
    simconsole pods-by-node                    Show pods grouped by node.
    simconsole scheduler-config get|apply      Read or replace the scheduler configuration.
    simconsole namespace get|create NAME       Global namespace operations.
    simconsole version                         Print version and exit.

All simulator-scoped commands need a simulator id (``--simulator`` or
``SIMCONSOLE_SIMULATOR_ID``). Every command goes through the same stores a
console view uses, so ``apply`` and ``delete`` print the re-listed collection.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click
import yaml
from pydantic import ValidationError

from simconsole import __version__
from simconsole.api.client import ResourceAPIError
from simconsole.api.schemas import SchedulerConfiguration
from simconsole.app import SimulatorConsole
from simconsole.config import load_config, load_log_config
from simconsole.models.resources import UNSCHEDULED, Resource, ResourceKind, resource_name
from simconsole.observability.logging import setup_logging
from simconsole.store.entity_store import EntityStore

_DEFAULT_API_URL = "http://localhost:1212/api/v1"

T = TypeVar("T")

_KIND_ALIASES: dict[str, ResourceKind] = {
    "node": ResourceKind.NODE,
    "nodes": ResourceKind.NODE,
    "no": ResourceKind.NODE,
    "pod": ResourceKind.POD,
    "pods": ResourceKind.POD,
    "po": ResourceKind.POD,
    "pv": ResourceKind.PERSISTENT_VOLUME,
    "persistentvolume": ResourceKind.PERSISTENT_VOLUME,
    "persistentvolumes": ResourceKind.PERSISTENT_VOLUME,
    "pvc": ResourceKind.PERSISTENT_VOLUME_CLAIM,
    "persistentvolumeclaim": ResourceKind.PERSISTENT_VOLUME_CLAIM,
    "persistentvolumeclaims": ResourceKind.PERSISTENT_VOLUME_CLAIM,
    "sc": ResourceKind.STORAGE_CLASS,
    "storageclass": ResourceKind.STORAGE_CLASS,
    "storageclasses": ResourceKind.STORAGE_CLASS,
}

_STATUS_COLORS: dict[str, str] = {
    "Bound": "green",
    "Available": "green",
    "Pending": "yellow",
    "Released": "yellow",
    "Lost": "red",
    "Failed": "red",
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_console(api_url: str) -> SimulatorConsole:
    """Build a console from the environment, pointed at *api_url*."""
    try:
        config = load_config(api_url=api_url)
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    return SimulatorConsole(config)


def _run(ctx: click.Context, action: Callable[[SimulatorConsole], Awaitable[T]]) -> T:
    """Run *action* against a fresh console, mapping API failures to ClickException."""

    async def _main() -> T:
        async with _build_console(ctx.obj["api_url"]) as console:
            return await action(console)

    try:
        return asyncio.run(_main())
    except ResourceAPIError as exc:
        raise click.ClickException(str(exc)) from exc


def _simulator_id(ctx: click.Context) -> str:
    simulator_id: str = ctx.obj["simulator_id"]
    if not simulator_id:
        raise click.UsageError("A simulator id is required: pass --simulator or set SIMCONSOLE_SIMULATOR_ID.")
    return simulator_id


def _resolve_kind(value: str) -> ResourceKind:
    kind = _KIND_ALIASES.get(value.lower())
    if kind is None:
        raise click.BadParameter(f"unknown kind {value!r}; expected one of {', '.join(sorted(_KIND_ALIASES))}")
    return kind


def _load_file(path: str) -> dict[str, Any]:
    """Parse a YAML (or JSON) manifest into a mapping."""
    try:
        with open(path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise click.ClickException(f"Cannot read {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise click.ClickException(f"{path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a single mapping")
    return data


def _extra_column(kind: ResourceKind, resource: Resource) -> str:
    """Kind-specific second column for ``list`` output."""
    spec = resource.get("spec") if isinstance(resource.get("spec"), dict) else {}
    status = resource.get("status") if isinstance(resource.get("status"), dict) else {}
    if kind == ResourceKind.POD:
        return str(spec.get("nodeName") or UNSCHEDULED)
    if kind in (ResourceKind.PERSISTENT_VOLUME, ResourceKind.PERSISTENT_VOLUME_CLAIM):
        phase = str(status.get("phase", ""))
        return click.style(phase, fg=_STATUS_COLORS.get(phase, "white")) if phase else ""
    if kind == ResourceKind.STORAGE_CLASS:
        return str(resource.get("provisioner", ""))
    return ""


def _print_items(store: EntityStore) -> None:
    kind = store.resource_kind
    click.echo(click.style(f"{kind.value}s ({len(store.items)}):", bold=True))
    for resource in store.items:
        name = resource_name(resource) or "<unnamed>"
        extra = _extra_column(kind, resource)
        padding = max(0, 40 - len(name)) * " "
        click.echo(f"  {name}{padding} {extra}".rstrip())


def _echo_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2))


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--api-url",
    default=_DEFAULT_API_URL,
    envvar="SIMCONSOLE_API_URL",
    show_default=True,
    help="Simulator REST API base URL.",
)
@click.option(
    "--simulator",
    "simulator_id",
    default="",
    envvar="SIMCONSOLE_SIMULATOR_ID",
    metavar="ID",
    help="Simulator instance id for scoped commands.",
)
@click.option(
    "--log-level",
    default=None,
    envvar="SIMCONSOLE_LOG_LEVEL",
    type=click.Choice(["debug", "info", "warning", "error", "critical"], case_sensitive=False),
    help="Log level for diagnostics written to stderr (default: SIMCONSOLE_LOG_LEVEL, then info).",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str, simulator_id: str, log_level: str | None) -> None:
    """simconsole - scheduler simulator console state from the command line."""
    try:
        log_config = load_log_config()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    setup_logging((log_level or log_config.level).lower(), json=log_config.json)
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url
    ctx.obj["simulator_id"] = simulator_id


@cli.command("version")
def cmd_version() -> None:
    """Print the simconsole version and exit."""
    click.echo(f"simconsole {__version__}")


# ---------------------------------------------------------------------------
# Resource commands
# ---------------------------------------------------------------------------


@cli.command("list")
@click.argument("kind")
@click.option("--json", "output_json", is_flag=True, default=False, help="Print raw JSON.")
@click.pass_context
def cmd_list(ctx: click.Context, kind: str, output_json: bool) -> None:
    """List resources of KIND (node, pod, pv, pvc, sc)."""
    resolved = _resolve_kind(kind)
    simulator_id = _simulator_id(ctx)

    async def _action(console: SimulatorConsole) -> EntityStore:
        store = console.store(resolved)
        await store.list(simulator_id)
        return store

    store = _run(ctx, _action)
    if output_json:
        _echo_json(list(store.items))
        return
    _print_items(store)


@cli.command("get")
@click.argument("kind")
@click.argument("name")
@click.pass_context
def cmd_get(ctx: click.Context, kind: str, name: str) -> None:
    """Show the resource NAME of KIND as JSON."""
    resolved = _resolve_kind(kind)
    simulator_id = _simulator_id(ctx)

    async def _action(console: SimulatorConsole) -> Resource:
        return await console.store(resolved).get(name, simulator_id)

    _echo_json(_run(ctx, _action))


@cli.command("apply")
@click.argument("kind")
@click.option(
    "-f",
    "--filename",
    "filename",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML or JSON manifest to apply.",
)
@click.option("--json", "output_json", is_flag=True, default=False, help="Print the re-listed collection as JSON.")
@click.pass_context
def cmd_apply(ctx: click.Context, kind: str, filename: str, output_json: bool) -> None:
    """Create or update a KIND resource from FILE, then show the collection."""
    resolved = _resolve_kind(kind)
    simulator_id = _simulator_id(ctx)
    resource = _load_file(filename)

    async def _action(console: SimulatorConsole) -> EntityStore:
        store = console.store(resolved)
        await store.apply(resource, simulator_id)
        return store

    store = _run(ctx, _action)
    if output_json:
        _echo_json(list(store.items))
        return
    name = resource_name(resource) or "<unnamed>"
    click.echo(click.style("Applied", fg="green", bold=True) + f" {resolved.value}/{name}")
    _print_items(store)


@cli.command("delete")
@click.argument("kind")
@click.argument("name")
@click.pass_context
def cmd_delete(ctx: click.Context, kind: str, name: str) -> None:
    """Delete the resource NAME of KIND, then show the collection."""
    resolved = _resolve_kind(kind)
    simulator_id = _simulator_id(ctx)

    async def _action(console: SimulatorConsole) -> EntityStore:
        store = console.store(resolved)
        await store.delete(name, simulator_id)
        return store

    store = _run(ctx, _action)
    click.echo(click.style("Deleted", fg="yellow", bold=True) + f" {resolved.value}/{name}")
    _print_items(store)


@cli.command("pods-by-node")
@click.option("--json", "output_json", is_flag=True, default=False, help="Print raw JSON.")
@click.pass_context
def cmd_pods_by_node(ctx: click.Context, output_json: bool) -> None:
    """Show pods grouped by the node they are scheduled on."""
    simulator_id = _simulator_id(ctx)

    async def _action(console: SimulatorConsole) -> dict[str, list[Resource]]:
        await console.pods.list(simulator_id)
        return {node: list(pods) for node, pods in console.pods.pods_by_node.items()}

    index = _run(ctx, _action)
    if output_json:
        _echo_json(index)
        return
    for node, pods in index.items():
        color = "yellow" if node == UNSCHEDULED else "cyan"
        click.echo(click.style(f"{node} ({len(pods)})", fg=color, bold=True))
        for pod in pods:
            click.echo(f"  {resource_name(pod) or '<unnamed>'}")


# ---------------------------------------------------------------------------
# Scheduler configuration
# ---------------------------------------------------------------------------


@cli.group("scheduler-config")
def scheduler_config() -> None:
    """Read or replace the simulator's scheduler configuration."""


@scheduler_config.command("get")
@click.pass_context
def cmd_scheduler_config_get(ctx: click.Context) -> None:
    """Print the current scheduler configuration as JSON."""
    simulator_id = _simulator_id(ctx)

    async def _action(console: SimulatorConsole) -> SchedulerConfiguration:
        return await console.api.scheduler_configuration.get(simulator_id)

    _echo_json(_run(ctx, _action).to_payload())


@scheduler_config.command("apply")
@click.option(
    "-f",
    "--filename",
    "filename",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="YAML or JSON scheduler configuration.",
)
@click.pass_context
def cmd_scheduler_config_apply(ctx: click.Context, filename: str) -> None:
    """Replace the scheduler configuration from FILE."""
    simulator_id = _simulator_id(ctx)
    try:
        config = SchedulerConfiguration.model_validate(_load_file(filename))
    except ValidationError as exc:
        raise click.ClickException(f"{filename} is not a scheduler configuration: {exc}") from exc

    async def _action(console: SimulatorConsole) -> SchedulerConfiguration | None:
        return await console.api.scheduler_configuration.apply(config, simulator_id)

    _run(ctx, _action)
    click.echo(click.style("Scheduler configuration applied", fg="green", bold=True))


# ---------------------------------------------------------------------------
# Namespaces
# ---------------------------------------------------------------------------


@cli.group("namespace")
def namespace() -> None:
    """Global namespace operations (not simulator-scoped)."""


@namespace.command("get")
@click.argument("name")
@click.pass_context
def cmd_namespace_get(ctx: click.Context, name: str) -> None:
    """Print namespace NAME as JSON."""

    async def _action(console: SimulatorConsole) -> Resource:
        return await console.api.namespaces.get(name)

    _echo_json(_run(ctx, _action))


@namespace.command("create")
@click.argument("name")
@click.pass_context
def cmd_namespace_create(ctx: click.Context, name: str) -> None:
    """Create namespace NAME."""

    async def _action(console: SimulatorConsole) -> Resource | None:
        return await console.api.namespaces.apply({"metadata": {"name": name}})

    _run(ctx, _action)
    click.echo(click.style("Created", fg="green", bold=True) + f" Namespace/{name}")


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
