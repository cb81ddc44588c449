"""Graphviz DOT output."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from graphviz import Digraph

from java2graph.core.models import Relation

if TYPE_CHECKING:
    from java2graph.core.graph.base import TypeGraph
    from java2graph.core.graph.visibility import VisibilityPolicy
    from java2graph.core.models import Link, TypeNode

logger = logging.getLogger(__name__)

INTERFACE_FILL = "khaki"
CLASS_FILL = "gray77"

_EDGE_STYLES: dict[Relation, dict[str, str]] = {
    Relation.IMPLEMENTS: {"color": "red", "fontcolor": "red", "arrowhead": "onormal"},
    Relation.DECLARES: {"color": "green", "fontcolor": "green"},
    Relation.SUPER: {"color": "black", "fontcolor": "black", "arrowhead": "normal"},
    Relation.RETURNS: {"color": "black", "fontcolor": "orange", "arrowhead": "normal"},
    Relation.ARGUMENT: {"color": "black", "fontcolor": "blue", "arrowhead": "normal"},
}


def node_id(node: TypeNode) -> str:
    return f"id{node.id}"


def edge_label(link: Link) -> str:
    """Method names for signature links, the relation name otherwise."""
    if link.relation.carries_methods:
        return " ".join(sorted(link.method_names))
    return link.relation.value


def _add_link(dot: Digraph, link: Link) -> None:
    style = _EDGE_STYLES.get(link.relation)
    if style is None:
        logger.warning("DOT style not handled for relation %r", link.relation)
        dot.edge(node_id(link.source), node_id(link.target))
        return
    dot.edge(node_id(link.source), node_id(link.target), label=edge_label(link), **style)


def build_digraph(graph: TypeGraph, policy: VisibilityPolicy) -> Digraph:
    """Build a graphviz Digraph of the visible part of the graph."""
    logger.info("Printing to dot")
    dot = Digraph(name="G")

    for node in policy.visible_nodes(graph):
        dot.node(
            node_id(node),
            label=node.name,
            shape="rectangle",
            style="filled",
            fillcolor=INTERFACE_FILL if node.is_interface else CLASS_FILL,
        )
    for link in policy.visible_links(graph):
        _add_link(dot, link)
    return dot


def render_dot(graph: TypeGraph, policy: VisibilityPolicy) -> str:
    """Render the visible part of the graph as DOT source."""
    return build_digraph(graph, policy).source
