"""
MCP server for java2graph.

Exposes type graph tools to LLMs via the Model Context Protocol.

Tools:
    - java2graph_render: Build and render the graph around seed types
    - java2graph_types: List the types available in jar archives

Usage:
    Install: pip install java2graph
    Run: mcp-server-java2graph
"""

import asyncio

from java2graph.mcp.server import serve as _serve


def serve() -> None:
    """Entry point for the MCP server."""
    asyncio.run(_serve())


__all__ = ["serve"]
