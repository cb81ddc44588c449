"""Distance-bounded visibility of nodes and links."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from java2graph.core.graph.base import TypeGraph
    from java2graph.core.models import Link, TypeNode

UNLIMITED = -1


class VisibilityPolicy:
    """Decides which visited nodes and links are rendered.

    A negative max_distance means no bound; 0 keeps only the seeds.
    """

    __slots__ = ("max_distance",)

    def __init__(self, max_distance: int = UNLIMITED) -> None:
        self.max_distance = max_distance

    @property
    def is_unlimited(self) -> bool:
        return self.max_distance < 0

    def _within_bound(self, node: TypeNode) -> bool:
        return self.is_unlimited or node.distance <= self.max_distance

    def is_node_visible(self, node: TypeNode) -> bool:
        return node.visited and self._within_bound(node)

    def is_link_visible(self, link: Link) -> bool:
        return self.is_node_visible(link.source) and self.is_node_visible(link.target)

    def visible_nodes(self, graph: TypeGraph) -> list[TypeNode]:
        return [n for n in graph.nodes if self.is_node_visible(n)]

    def visible_links(self, graph: TypeGraph) -> list[Link]:
        return [link for link in graph.links if self.is_link_visible(link)]

    def __repr__(self) -> str:
        bound = "unlimited" if self.is_unlimited else self.max_distance
        return f"VisibilityPolicy(max_distance={bound})"
