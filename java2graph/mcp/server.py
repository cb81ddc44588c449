"""MCP server implementation for java2graph."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from java2graph.classfile import ClassPath, collect_archives, split_classpath
from java2graph.core import FilterChain, Java2GraphError
from java2graph.core.builder import build_graph
from java2graph.core.graph import UNLIMITED, TraversalOptions, VisibilityPolicy
from java2graph.render import OutputFormat, render

server = Server("java2graph")

_BOOL_OPTIONS = {
    "use_interfaces": True,
    "use_implementors": True,
    "use_declared_types": True,
    "use_private_declared_types": False,
    "use_return_types": False,
    "use_argument_types": False,
}


def _roots(classpath: str | list[str]) -> list[Path]:
    """Accept a ':'-separated string or a list of paths."""
    values = [classpath] if isinstance(classpath, str) else classpath
    roots: list[Path] = []
    for value in values:
        roots.extend(split_classpath(value))
    return roots


def _bool_property(description: str, default: bool) -> dict[str, Any]:
    return {"type": "boolean", "description": description, "default": default}


@server.list_tools()  # type: ignore[no-untyped-call, untyped-decorator]
async def list_tools() -> list[Tool]:
    """List available tools."""
    classpath_schema = {
        "type": "string",
        "description": "Jar files or directories of jars, ':'-separated",
    }
    return [
        Tool(
            name="java2graph_render",
            description=(
                "Build the type graph (superclasses, interfaces, nested types and "
                "optionally method signature types) around seed Java types found in "
                "jar archives, and return it as Graphviz DOT or GEXF."
            ),
            inputSchema={
                "type": "object",
                "properties": {
                    "classpath": classpath_schema,
                    "seeds": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Seed type names (a.b.C) or jar files",
                    },
                    "format": {
                        "type": "string",
                        "enum": [f.value for f in OutputFormat],
                        "default": OutputFormat.DOT.value,
                    },
                    "max_distance": {
                        "type": "integer",
                        "description": "Max distance to the seeds (-1: unlimited)",
                        "default": UNLIMITED,
                    },
                    "exclude": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Type name prefixes to ignore",
                    },
                    "exclude_name": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Exact type names to ignore",
                    },
                    "regex": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Regular expressions matching type names to ignore",
                    },
                    "ignore_common": _bool_property("Ignore common JDK types", False),
                    "use_interfaces": _bool_property("Follow interfaces", True),
                    "use_implementors": _bool_property(
                        "Find known classes implementing interfaces", True
                    ),
                    "use_declared_types": _bool_property("Follow nested types", True),
                    "use_private_declared_types": _bool_property(
                        "Include private nested types", False
                    ),
                    "use_return_types": _bool_property("Follow method return types", False),
                    "use_argument_types": _bool_property(
                        "Follow method argument types", False
                    ),
                },
                "required": ["classpath", "seeds"],
            },
        ),
        Tool(
            name="java2graph_types",
            description="List the Java types available in jar archives. Supports partial matching.",
            inputSchema={
                "type": "object",
                "properties": {
                    "classpath": classpath_schema,
                    "query": {
                        "type": "string",
                        "description": "Search query (partial name match)",
                    },
                },
                "required": ["classpath"],
            },
        ),
    ]


@server.call_tool()  # type: ignore[untyped-decorator]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "java2graph_render":
            result = _handle_render(arguments)
        elif name == "java2graph_types":
            result = _handle_types(arguments["classpath"], arguments.get("query"))
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Java2GraphError as e:
        return [TextContent(type="text", text=json.dumps({"error": str(e)}))]
    except (KeyError, ValueError) as e:
        return [TextContent(type="text", text=json.dumps({"error": f"Bad arguments: {e}"}))]


def _handle_render(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handle java2graph_render tool."""
    options = TraversalOptions(
        **{key: bool(arguments.get(key, default)) for key, default in _BOOL_OPTIONS.items()}
    )
    filters = FilterChain.from_options(
        names=arguments.get("exclude_name", []),
        prefixes=arguments.get("exclude", []),
        patterns=arguments.get("regex", []),
        ignore_common=bool(arguments.get("ignore_common", False)),
    )
    policy = VisibilityPolicy(int(arguments.get("max_distance", UNLIMITED)))
    output_format = OutputFormat(arguments.get("format", OutputFormat.DOT.value))

    with ClassPath() as cp:
        graph, stats = build_graph(
            cp,
            _roots(arguments["classpath"]),
            arguments["seeds"],
            filters=filters,
            options=options,
        )
        return {
            "format": output_format.value,
            "content": render(output_format, graph, policy),
            "nodes": len(policy.visible_nodes(graph)),
            "edges": len(policy.visible_links(graph)),
            "errors": stats.errors,
        }


def _handle_types(classpath: str | list[str], query: str | None) -> dict[str, Any]:
    """Handle java2graph_types tool."""
    with ClassPath() as cp:
        for root in _roots(classpath):
            for archive in collect_archives(root):
                cp.add_archive(archive)
        names = sorted(n for n in cp.names() if not query or query in n)
        return {"results": names}


async def serve() -> None:
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
