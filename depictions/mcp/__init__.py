"""
MCP server for depictions.

Exposes the depictions store to LLMs via the Model Context Protocol.

Tools:
    - depictions_query: List depictions with optional selection and sort
    - depictions_get: Get one depiction by row id
    - depictions_insert: Add a depiction
    - depictions_bulk_insert: Add many depictions in one transaction
    - depictions_update: Change fields of a depiction
    - depictions_delete: Disabled, always reports zero rows

Usage:
    Run: mcp-server-depictions
"""

import asyncio

from depictions.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
