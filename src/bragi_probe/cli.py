# src/bragi_probe/cli.py
"""
bragi-probe Command Line Interface (CLI).

This module implements the terminal query surface using `typer` and `rich`.

Features
--------
- **Status Spinner**: Visual feedback while environments are being probed.
- **Rich Rendering**: One table per probe run, with a nested index table per backend.
- **JSON Output**: `--json` prints the same camelCase contract the HTTP API serves.
- **Server**: `serve` starts the HTTP API with uvicorn.

Usage
-----
    # Probe every configured environment
    $ bragi-probe probe

    # Probe one environment and print JSON
    $ bragi-probe probe dev --json

    # List the configured environments
    $ bragi-probe envs
"""

from __future__ import annotations

import asyncio
import traceback
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from bragi_probe.core.contracts.snapshot import (
    AggregateSnapshot,
    EnvironmentInfo,
    EnvironmentStatus,
    ServerStatus,
)
from bragi_probe.core.environments import EnvironmentSpec, dump_environments, load_environments
from bragi_probe.core.errors import BragiProbeError
from bragi_probe.core.settings import load_settings
from bragi_probe.probes.coordinator import ProbeCoordinator

load_dotenv()

app = typer.Typer(
    help="bragi-probe: availability and index inventory of Bragi environments.",
    rich_markup_mode="markdown",
)
console = Console()

# Keyed by wire value: both status enums share "AVAILABLE".
_STATUS_STYLE = {
    "AVAILABLE": "green",
    "BRAGI_NOT_AVAILABLE": "red",
    "ELASTICSEARCH_NOT_AVAILABLE": "yellow",
    "NOT_AVAILABLE": "red",
}

EnvironmentsFile = Annotated[
    Path | None,
    typer.Option(
        "--file",
        "-f",
        help="Environments file (defaults to BRAGI_PROBE_ENVIRONMENTS_FILE or env.json).",
    ),
]


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _load(file: Path | None) -> list[EnvironmentSpec]:
    """Helper: read the environment list, exiting with code 1 on config errors."""
    path = file or load_settings().environments_file
    try:
        return load_environments(path)
    except BragiProbeError as e:
        console.print(f"[bold red]❌ Configuration Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e


def _styled(status: EnvironmentStatus | ServerStatus) -> str:
    style = _STATUS_STYLE[status.value]
    return f"[{style}]{status.value}[/{style}]"


def _render_environment(info: EnvironmentInfo) -> None:
    """Helper: print one environment, its backend and its indices."""
    console.rule(f"[bold]{info.label}[/bold] {_styled(info.status)}")
    console.print(f" Bragi: {info.url}  [dim]{info.version or '-'}[/dim]")

    es = info.elasticsearch
    if es is None:
        console.print(" Elasticsearch: [dim]unknown[/dim]\n")
        return
    console.print(
        f" Elasticsearch: {es.url} {_styled(es.status)} "
        f"[dim]{es.name or '-'} {es.version or '-'} prefix={es.index_prefix}[/dim]"
    )
    if not es.indices:
        console.print("")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Index")
    table.add_column("Type")
    table.add_column("Coverage")
    table.add_column("Private")
    table.add_column("Count", justify="right")
    table.add_column("Created")
    for index in es.indices:
        table.add_row(
            index.label,
            index.place_type,
            index.coverage,
            index.private.value,
            f"{index.count:,}",
            index.created_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)
    console.print("")


def _run_probe(coordinator: ProbeCoordinator, name: str | None) -> AggregateSnapshot:
    """Helper: run the coordinator behind a spinner and normalize to an aggregate."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(
            f"[cyan]Probing {name or f'{len(coordinator.environments)} environments'}...",
            total=None,
        )
        if name is None:
            return asyncio.run(coordinator.collect())
        return AggregateSnapshot.of([asyncio.run(coordinator.collect_one(name))])


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def probe(
    environment: Annotated[
        str | None,
        typer.Argument(help="Probe only this environment (default: all)."),
    ] = None,
    file: EnvironmentsFile = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Print the JSON snapshot instead of tables."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Probe configured environments and report availability and indices.

    Unreachable environments are reported, not treated as failures: the
    command exits 0 whenever a snapshot could be produced.
    """
    coordinator = ProbeCoordinator(_load(file))

    try:
        snapshot = _run_probe(coordinator, environment)
    except BragiProbeError as e:
        console.print(f"[bold red]❌ Environment Error:[/bold red] {e}")
        raise typer.Exit(code=1) from e
    except Exception as e:
        console.print(f"\n[bold red]❌ Probe Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    if as_json:
        console.print_json(snapshot.model_dump_json(by_alias=True))
        return

    for info in snapshot.environments:
        _render_environment(info)
    console.print(f"[bold]{snapshot.environments_count}[/bold] environment(s) probed.")


@app.command()  # type: ignore[misc]
def envs(
    file: EnvironmentsFile = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", "-j", help="Print the environments file contents."),
    ] = False,
) -> None:
    """List the configured environments without probing them."""
    environments = _load(file)
    if as_json:
        console.print_json(dump_environments(environments))
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Environment")
    table.add_column("Bragi URL")
    for spec in environments:
        table.add_row(spec.name, spec.base_url)
    console.print(table)


@app.command()  # type: ignore[misc]
def serve(
    host: Annotated[str | None, typer.Option("--host", "-h", help="Bind address.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Bind port.")] = None,
) -> None:
    """Serve the HTTP API (`GET /environments`) with uvicorn."""
    from bragi_probe.api.server import main as serve_api

    serve_api(host=host, port=port)


if __name__ == "__main__":
    app()
