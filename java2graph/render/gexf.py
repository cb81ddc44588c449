"""GEXF 1.2 output for Gephi and similar tools."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from java2graph import __version__

if TYPE_CHECKING:
    from java2graph.core.graph.base import TypeGraph
    from java2graph.core.graph.visibility import VisibilityPolicy
    from java2graph.core.models import TypeNode

logger = logging.getLogger(__name__)

GEXF_NS = "http://www.gexf.net/1.2draft"
VIZ_NS = "http://www.gexf.net/1.2draft/viz"

INTERFACE_COLOR = (161, 83, 83)
CLASS_COLOR = (83, 101, 161)
DEFAULT_PACKAGE = "(default)"

NODE_ATTRIBUTES = ("simpleName", "canonicalName", "defaultName", "package", "classOrInterface")


def _declare_attributes(graph_el: ET.Element) -> None:
    attributes = ET.SubElement(graph_el, "attributes", {"class": "node", "mode": "static"})
    for key in NODE_ATTRIBUTES:
        ET.SubElement(
            attributes,
            "attribute",
            {"id": key, "title": key.replace("_", " "), "type": "string"},
        )


def _attvalue(parent: ET.Element, key: str, value: str | None) -> None:
    if value is None:
        return
    ET.SubElement(parent, "attvalue", {"for": key, "value": value})


def _add_node(nodes_el: ET.Element, node: TypeNode) -> None:
    java_type = node.type
    node_el = ET.SubElement(
        nodes_el,
        "node",
        {"id": f"N{node.id}", "label": java_type.simple_name or java_type.name},
    )
    r, g, b = INTERFACE_COLOR if node.is_interface else CLASS_COLOR
    ET.SubElement(node_el, "viz:color", {"r": str(r), "g": str(g), "b": str(b)})

    attvalues = ET.SubElement(node_el, "attvalues")
    _attvalue(attvalues, "simpleName", java_type.simple_name)
    _attvalue(attvalues, "canonicalName", java_type.canonical_name)
    _attvalue(attvalues, "defaultName", java_type.name)
    _attvalue(attvalues, "package", java_type.package_name or DEFAULT_PACKAGE)
    _attvalue(attvalues, "classOrInterface", "interface" if node.is_interface else "class")


def build_document(graph: TypeGraph, policy: VisibilityPolicy) -> ET.Element:
    """Build the GEXF element tree of the visible part of the graph."""
    logger.info("Printing to gexf")
    root = ET.Element("gexf", {"xmlns": GEXF_NS, "xmlns:viz": VIZ_NS, "version": "1.2"})

    meta = ET.SubElement(root, "meta")
    ET.SubElement(meta, "creator").text = f"java2graph {__version__}"
    ET.SubElement(meta, "description").text = "java2graph type graph"

    graph_el = ET.SubElement(root, "graph", {"mode": "static", "defaultedgetype": "directed"})
    _declare_attributes(graph_el)

    nodes_el = ET.SubElement(graph_el, "nodes")
    for node in policy.visible_nodes(graph):
        _add_node(nodes_el, node)

    edges_el = ET.SubElement(graph_el, "edges")
    for i, link in enumerate(policy.visible_links(graph), start=1):
        ET.SubElement(
            edges_el,
            "edge",
            {
                "id": f"E{i}",
                "type": "directed",
                "source": f"N{link.source.id}",
                "target": f"N{link.target.id}",
                "label": link.relation.name,
            },
        )
    return root


def render_gexf(graph: TypeGraph, policy: VisibilityPolicy) -> str:
    """Render the visible part of the graph as a GEXF document."""
    root = build_document(graph, policy)
    ET.indent(root)
    data = ET.tostring(root, encoding="utf-8", xml_declaration=True)
    return data.decode("utf-8") + "\n"
