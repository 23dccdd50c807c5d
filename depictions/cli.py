"""CLI entry point for depictions."""

import json
import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from depictions.core.exceptions import DepictionError
from depictions.core.models import Depiction
from depictions.core.notifier import ObserverRegistry
from depictions.core.provider import DepictionProvider
from depictions.core.routing import build_router, collection_address, item_address
from depictions.core.storage import DatabaseHelper, get_default_db_path

app = typer.Typer(
    name="depictions",
    help="Read and write the recently used depictions store.",
    no_args_is_help=True,
)
console = Console()

_MAX_DESCRIPTION_DISPLAY = 50


@app.callback()
def main(
    ctx: typer.Context,
    db: Annotated[Path | None, typer.Option("--db", help="Database file")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Read and write the recently used depictions store."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = db if db is not None else get_default_db_path(Path(".").resolve())


@contextmanager
def open_provider(ctx: typer.Context) -> Iterator[DepictionProvider]:
    """Open the store and yield a provider, reporting provider errors and exiting."""
    with DatabaseHelper(ctx.obj) as helper:
        provider = DepictionProvider(helper, ObserverRegistry(), build_router())
        try:
            yield provider
        except DepictionError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(code=1) from e


def format_depiction(depiction: Depiction) -> str:
    """Format a depiction as a single console line."""
    line = f"[cyan]{depiction.name}[/cyan] [dim](#{depiction.id})[/]"
    if depiction.entity_id:
        line += f" {depiction.entity_id}"
    if depiction.description:
        desc = depiction.description
        if len(desc) > _MAX_DESCRIPTION_DISPLAY:
            desc = desc[: _MAX_DESCRIPTION_DISPLAY - 3] + "..."
        line += f" [dim]- {desc}[/]"
    if depiction.times_used:
        line += f" [yellow]\\[used {depiction.times_used}x][/]"
    return line


def depiction_to_dict(depiction: Depiction) -> dict[str, Any]:
    return {
        "id": depiction.id,
        "name": depiction.name,
        "description": depiction.description,
        "entity_id": depiction.entity_id,
        "last_used": depiction.last_used,
        "times_used": depiction.times_used,
    }


@app.command("list")
def list_depictions(
    ctx: typer.Context,
    where: Annotated[str | None, typer.Option("--where", "-w", help="SQL selection")] = None,
    args: Annotated[
        list[str] | None, typer.Option("--arg", "-a", help="Value bound to a ? in --where")
    ] = None,
    order: Annotated[str | None, typer.Option("--order", "-o", help="SQL sort order")] = None,
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """List depictions, optionally filtered and sorted."""
    with open_provider(ctx) as provider:
        result = provider.query(
            collection_address(provider.router.authority),
            selection=where,
            selection_args=args or [],
            sort_order=order,
        )
        depictions = result.to_depictions()

        if output_json:
            print(json.dumps([depiction_to_dict(d) for d in depictions]))
            return
        if not depictions:
            console.print("[dim]No depictions stored[/]")
            return
        for depiction in depictions:
            console.print(format_depiction(depiction))


@app.command()
def show(
    ctx: typer.Context,
    row_id: Annotated[int, typer.Argument(help="Row id")],
    output_json: Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")] = False,
) -> None:
    """Show a single depiction."""
    with open_provider(ctx) as provider:
        result = provider.query(item_address(row_id, provider.router.authority))
        depictions = result.to_depictions()

        if output_json:
            print(json.dumps(depiction_to_dict(depictions[0]) if depictions else None))
            return
        if not depictions:
            console.print(f"No depiction with id [cyan]{row_id}[/cyan]")
            raise typer.Exit(code=1)
        console.print(format_depiction(depictions[0]))


@app.command()
def add(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Name of the depicted item")],
    description: Annotated[str | None, typer.Option("--description", "-d")] = None,
    entity_id: Annotated[str | None, typer.Option("--entity-id", "-e")] = None,
) -> None:
    """Add a depiction."""
    values = {
        "name": name,
        "description": description,
        "entity_id": entity_id,
        "last_used": int(time.time() * 1000),
    }
    with open_provider(ctx) as provider:
        address = provider.insert(collection_address(provider.router.authority), values)
        console.print(f"[green]Added[/green] {address}")


@app.command("import")
def import_depictions(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="JSON file holding a list of depictions")],
) -> None:
    """Add many depictions at once. Nothing is added if any of them fails."""
    try:
        rows = json.loads(file.read_text())
    except (OSError, ValueError) as e:
        console.print(f"[red]Error:[/red] Cannot read {file}: {e}")
        raise typer.Exit(code=1) from e
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        console.print("[red]Error:[/red] Expected a JSON list of objects")
        raise typer.Exit(code=1)

    with open_provider(ctx) as provider:
        count = provider.bulk_insert(collection_address(provider.router.authority), rows)
        console.print(f"[green]Imported {count} depiction(s)[/green]")


@app.command()
def update(
    ctx: typer.Context,
    row_id: Annotated[int, typer.Argument(help="Row id")],
    name: Annotated[str | None, typer.Option("--name", "-n")] = None,
    description: Annotated[str | None, typer.Option("--description", "-d")] = None,
    entity_id: Annotated[str | None, typer.Option("--entity-id", "-e")] = None,
    times_used: Annotated[int | None, typer.Option("--times-used", "-t")] = None,
) -> None:
    """Change fields of a depiction."""
    values = {
        key: value
        for key, value in {
            "name": name,
            "description": description,
            "entity_id": entity_id,
            "times_used": times_used,
        }.items()
        if value is not None
    }
    with open_provider(ctx) as provider:
        count = provider.update(item_address(row_id, provider.router.authority), values)
        if count:
            console.print(f"[green]Updated[/green] depiction {row_id}")
        else:
            console.print(f"No depiction with id [cyan]{row_id}[/cyan]")


@app.command()
def delete(
    ctx: typer.Context,
    row_id: Annotated[int, typer.Argument(help="Row id")],
) -> None:
    """Delete a depiction (disabled: nothing is removed)."""
    with open_provider(ctx) as provider:
        count = provider.delete(item_address(row_id, provider.router.authority))
        console.print(f"[dim]{count} row(s) deleted; deleting depictions is disabled[/]")


@app.command()
def address(
    row_id: Annotated[int | None, typer.Argument(help="Row id")] = None,
) -> None:
    """Print the address of the collection or of one row."""
    router = build_router()
    if row_id is None:
        print(collection_address(router.authority))
        return
    try:
        print(item_address(row_id, router.authority))
    except DepictionError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
