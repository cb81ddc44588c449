"""Core TypeGraph class holding nodes and links."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from java2graph.core.exceptions import ArchiveError, ClassFormatError, TypeNotFoundError
from java2graph.core.models import Link, Relation, TypeNode

if TYPE_CHECKING:
    from java2graph.classfile.base import TypeProvider
    from java2graph.classfile.classpath import JavaType

logger = logging.getLogger(__name__)


class TypeGraph:
    """Directed graph of types and their relationships.

    Holds at most one node per type and at most one link per ordered pair of
    nodes. Nodes and links iterate in creation order.
    """

    __slots__ = ("_provider", "_nodes", "_links", "_next_id")

    def __init__(self, provider: TypeProvider) -> None:
        self._provider = provider
        self._nodes: dict[str, TypeNode] = {}
        self._links: dict[tuple[int, int], Link] = {}
        self._next_id = 1

    def find_or_create_by_name(self, name: str) -> TypeNode | None:
        """Get the node for a binary name, loading the type if needed.

        Returns None if the type cannot be loaded; callers report it.
        """
        node = self._nodes.get(name)
        if node is not None:
            return node
        try:
            handle = self._provider.resolve(name)
        except (TypeNotFoundError, ClassFormatError, ArchiveError) as e:
            logger.debug("Cannot load %s: %s", name, e)
            return None
        logger.info("Adding type %s", name)
        return self.find_or_create_by_handle(handle)

    def find_or_create_by_handle(self, handle: JavaType) -> TypeNode:
        """Get the node wrapping a type handle, creating it if needed. O(1)."""
        node = self._nodes.get(handle.name)
        if node is None:
            node = TypeNode(id=self._next_id, type=handle)
            self._next_id += 1
            self._nodes[handle.name] = node
        return node

    def add_link(self, source: TypeNode, target: TypeNode, relation: Relation) -> Link:
        """Link two nodes unless they are already linked. O(1).

        The first relation recorded for an ordered pair wins; later attempts
        leave it untouched.

        Returns:
            The link stored for the pair.
        """
        key = (source.id, target.id)
        link = self._links.get(key)
        if link is None:
            link = Link(source=source, target=target, relation=relation)
            self._links[key] = link
        return link

    @property
    def provider(self) -> TypeProvider:
        return self._provider

    def get_node(self, name: str) -> TypeNode | None:
        """Get node by binary name. O(1)."""
        return self._nodes.get(name)

    def get_link(self, source: TypeNode, target: TypeNode) -> Link | None:
        """Get the link between an ordered pair. O(1)."""
        return self._links.get((source.id, target.id))

    @property
    def nodes(self) -> list[TypeNode]:
        return list(self._nodes.values())

    @property
    def links(self) -> list[Link]:
        return list(self._links.values())

    @property
    def num_nodes(self) -> int:
        return len(self._nodes)

    @property
    def num_edges(self) -> int:
        return len(self._links)

    def __repr__(self) -> str:
        return f"TypeGraph(nodes={self.num_nodes}, edges={self.num_edges})"
