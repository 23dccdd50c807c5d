"""MCP server implementation for depictions."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from depictions.core.exceptions import DepictionError
from depictions.core.notifier import ObserverRegistry
from depictions.core.provider import DepictionProvider
from depictions.core.routing import build_router, collection_address, item_address
from depictions.core.storage import DatabaseHelper, get_default_db_path

server = Server("depictions")

_ROW_PROPERTIES = {
    "name": {"type": "string"},
    "description": {"type": "string"},
    "entity_id": {"type": "string"},
    "last_used": {"type": "integer", "description": "Epoch milliseconds"},
    "times_used": {"type": "integer"},
}


@contextmanager
def _open_provider() -> Iterator[DepictionProvider]:
    """Open the provider for the store in the current directory."""
    db_path = get_default_db_path(Path.cwd())
    with DatabaseHelper(db_path) as helper:
        yield DepictionProvider(helper, ObserverRegistry(), build_router())


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="depictions_query",
            description=(
                "List stored depictions. Accepts an optional SQL selection with bound "
                "arguments, a sort order, and the columns to return."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "columns": {"type": "array", "items": {"type": "string"}},
                    "selection": {"type": "string", "description": "SQL WHERE clause"},
                    "selection_args": {"type": "array", "items": {"type": "string"}},
                    "sort_order": {"type": "string", "description": "SQL ORDER BY clause"},
                },
            },
        ),
        Tool(
            name="depictions_get",
            description="Get a single depiction by its row id.",
            inputSchema={
                "type": "object",
                "properties": {"id": {"type": "integer"}},
                "required": ["id"],
            },
        ),
        Tool(
            name="depictions_insert",
            description="Add a depiction. Returns the address of the new row.",
            inputSchema={
                "type": "object",
                "properties": _ROW_PROPERTIES,
                "required": ["name"],
            },
        ),
        Tool(
            name="depictions_bulk_insert",
            description=(
                "Add many depictions in one transaction. If any row is rejected, "
                "none are added."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "rows": {
                        "type": "array",
                        "items": {"type": "object", "properties": _ROW_PROPERTIES},
                    },
                },
                "required": ["rows"],
            },
        ),
        Tool(
            name="depictions_update",
            description="Change fields of the depiction with the given row id.",
            inputSchema={
                "type": "object",
                "properties": {"id": {"type": "integer"}, **_ROW_PROPERTIES},
                "required": ["id"],
            },
        ),
        Tool(
            name="depictions_delete",
            description="Deleting is disabled; always reports zero deleted rows.",
            inputSchema={
                "type": "object",
                "properties": {"id": {"type": "integer"}},
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        with _open_provider() as provider:
            if name == "depictions_query":
                result = _handle_query(
                    provider,
                    arguments.get("columns"),
                    arguments.get("selection"),
                    arguments.get("selection_args"),
                    arguments.get("sort_order"),
                )
            elif name == "depictions_get":
                result = _handle_get(provider, arguments["id"])
            elif name == "depictions_insert":
                result = _handle_insert(provider, arguments)
            elif name == "depictions_bulk_insert":
                result = _handle_bulk_insert(provider, arguments["rows"])
            elif name == "depictions_update":
                values = {k: v for k, v in arguments.items() if k != "id"}
                result = _handle_update(provider, arguments["id"], values)
            elif name == "depictions_delete":
                result = _handle_delete(provider, arguments.get("id"))
            else:
                result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except DepictionError as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]
    except KeyError as e:
        return [TextContent(type="text", text=json.dumps({"error": f"Missing argument: {e}"}))]


def _handle_query(
    provider: DepictionProvider,
    columns: list[str] | None,
    selection: str | None,
    selection_args: list[str] | None,
    sort_order: str | None,
) -> dict[str, Any]:
    """Handle depictions_query tool."""
    result = provider.query(
        collection_address(provider.router.authority),
        projection=columns,
        selection=selection,
        selection_args=selection_args,
        sort_order=sort_order,
    )
    return {"results": result.as_dicts()}


def _handle_get(provider: DepictionProvider, row_id: int) -> dict[str, Any]:
    """Handle depictions_get tool."""
    result = provider.query(item_address(row_id, provider.router.authority))
    rows = result.as_dicts()
    if not rows:
        return {"error": f"No depiction with id {row_id}"}
    return {"result": rows[0]}


def _handle_insert(provider: DepictionProvider, values: dict[str, Any]) -> dict[str, Any]:
    """Handle depictions_insert tool."""
    address = provider.insert(collection_address(provider.router.authority), values)
    return {"address": address}


def _handle_bulk_insert(
    provider: DepictionProvider, rows: list[dict[str, Any]]
) -> dict[str, Any]:
    """Handle depictions_bulk_insert tool."""
    count = provider.bulk_insert(collection_address(provider.router.authority), rows)
    return {"inserted": count}


def _handle_update(
    provider: DepictionProvider, row_id: int, values: dict[str, Any]
) -> dict[str, Any]:
    """Handle depictions_update tool."""
    count = provider.update(item_address(row_id, provider.router.authority), values)
    return {"updated": count}


def _handle_delete(provider: DepictionProvider, row_id: int | None) -> dict[str, Any]:
    """Handle depictions_delete tool."""
    if row_id is None:
        address = collection_address(provider.router.authority)
    else:
        address = item_address(row_id, provider.router.authority)
    return {"deleted": provider.delete(address)}


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
