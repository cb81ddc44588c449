"""
Renderers: Text output of the type graph.

Each renderer is a pure function of a TypeGraph and a VisibilityPolicy and
only emits the nodes and links the policy lets through.

Formats:
    - dot: Graphviz DOT source (render_dot)
    - gexf: GEXF 1.2 XML document (render_gexf)
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from java2graph.render.dot import render_dot
from java2graph.render.gexf import render_gexf

if TYPE_CHECKING:
    from java2graph.core.graph.base import TypeGraph
    from java2graph.core.graph.visibility import VisibilityPolicy


class OutputFormat(str, Enum):
    """Supported output formats."""

    DOT = "dot"
    GEXF = "gexf"


def render(fmt: OutputFormat, graph: TypeGraph, policy: VisibilityPolicy) -> str:
    """Render the graph in the requested format."""
    if OutputFormat(fmt) is OutputFormat.GEXF:
        return render_gexf(graph, policy)
    return render_dot(graph, policy)


__all__ = [
    "OutputFormat",
    "render",
    "render_dot",
    "render_gexf",
]
