"""Graph discovery: walk the type graph outward from seed types."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from java2graph.classfile.classpath import OBJECT
from java2graph.core.filters import FilterChain
from java2graph.core.models import Relation, TypeNode

if TYPE_CHECKING:
    from java2graph.classfile.classpath import JavaType
    from java2graph.classfile.models import TypeRef
    from java2graph.core.graph.base import TypeGraph

logger = logging.getLogger(__name__)

# Compiler-generated methods carry this character in their name.
SYNTHETIC_MARKER = "$"
STATIC_MARKER = "*"

IGNORED_SIGNATURE_TYPES = frozenset(
    {
        "java.lang.String",
        OBJECT,
        "java.lang.Short",
        "java.lang.Integer",
        "java.lang.Long",
        "java.lang.Byte",
        "java.lang.Boolean",
    }
)
RESERVED_PACKAGE_PREFIXES = ("java.", "javax.")


@dataclass
class TraversalOptions:
    """Which relationships the traversal follows."""

    use_interfaces: bool = True
    use_implementors: bool = True
    use_declared_types: bool = True
    use_private_declared_types: bool = False
    use_return_types: bool = False
    use_argument_types: bool = False

    @property
    def use_signatures(self) -> bool:
        return self.use_return_types or self.use_argument_types


class Traverser:
    """Discovers nodes and links reachable from seed types.

    Each node is expanded once; re-reaching a node only lowers its distance.
    Seeds are traversed one after the other, each breadth-first, so the first
    expansion of a node happens at its shortest distance from the seed being
    traversed. A later seed that was already expanded only gets its own
    distance lowered; nodes beyond it keep theirs.

    The reverse scans (implementers of an interface, subclasses of a class)
    only look at nodes already in the graph, so they depend on what was
    registered or discovered before.
    """

    def __init__(
        self,
        graph: TypeGraph,
        filters: FilterChain | None = None,
        options: TraversalOptions | None = None,
    ) -> None:
        self._graph = graph
        self._filters = filters if filters is not None else FilterChain()
        self._options = options if options is not None else TraversalOptions()

    def run(self, seed_names: Iterable[str]) -> list[TypeNode]:
        """Traverse from each seed in turn.

        Seeds that cannot be loaded are logged and skipped.

        Returns:
            The nodes of the seeds that were found.
        """
        seeds = []
        for name in seed_names:
            node = self._graph.find_or_create_by_name(name)
            if node is None:
                logger.warning("Cannot find type %s", name)
                continue
            node.is_seed = True
            seeds.append(node)
            self.visit(node, 0)
        return seeds

    def visit(self, node: TypeNode, distance: int) -> None:
        """Expand `node` at `distance`, then everything reachable from it."""
        queue: deque[tuple[TypeNode, int]] = deque([(node, distance)])
        while queue:
            current, depth = queue.popleft()
            for neighbor in self._expand(current, depth):
                queue.append((neighbor, depth + 1))

    def _expand(self, node: TypeNode, distance: int) -> list[TypeNode]:
        """Record the links of one node and return the neighbors to visit."""
        if not self._filters.accepts(node.type):
            return []
        if distance < node.distance:
            node.distance = distance
        if node.visited:
            return []

        logger.info("Running for %s", node.name)
        node.visited = True
        neighbors: dict[int, TypeNode] = {}

        self._add_superclass(node, neighbors)
        if self._options.use_interfaces:
            self._add_interfaces(node, neighbors)
            if self._options.use_implementors and node.is_interface:
                self._add_implementors(node, neighbors)
        if self._options.use_signatures:
            self._add_signature_types(node, neighbors)
        if self._options.use_declared_types:
            self._add_declared_types(node, neighbors)
        self._add_known_subclasses(node, neighbors)

        return list(neighbors.values())

    def _link(
        self,
        source: TypeNode,
        target: TypeNode,
        relation: Relation,
        neighbors: dict[int, TypeNode],
        queued: TypeNode,
    ) -> None:
        self._graph.add_link(source, target, relation)
        neighbors[queued.id] = queued

    def _add_superclass(self, node: TypeNode, neighbors: dict[int, TypeNode]) -> None:
        superclass = node.type.superclass
        if superclass is None or superclass.name == OBJECT:
            return
        parent = self._graph.find_or_create_by_handle(superclass)
        self._link(node, parent, Relation.SUPER, neighbors, parent)

    def _add_interfaces(self, node: TypeNode, neighbors: dict[int, TypeNode]) -> None:
        superclass = node.type.superclass
        inherited = superclass.interfaces if superclass is not None else ()
        relation = Relation.SUPER if node.is_interface else Relation.IMPLEMENTS

        for interface in node.type.interfaces:
            # Already implied by the superclass declaring it too.
            if any(interface is parent_interface for parent_interface in inherited):
                continue
            target = self._graph.find_or_create_by_handle(interface)
            self._link(node, target, relation, neighbors, target)

    def _add_implementors(self, node: TypeNode, neighbors: dict[int, TypeNode]) -> None:
        for other in self._graph.nodes:
            if any(interface is node.type for interface in other.type.interfaces):
                self._link(other, node, Relation.IMPLEMENTS, neighbors, other)

    def _signature_type(self, ref: TypeRef) -> JavaType | None:
        """The type a signature refers to, or None if it is not graphed."""
        element = ref.element
        if element.is_primitive or element.name in IGNORED_SIGNATURE_TYPES:
            return None
        package = element.name.rpartition(".")[0]
        if package.startswith(RESERVED_PACKAGE_PREFIXES):
            return None
        return self._graph.provider.lookup(element.name)

    def _add_signature_types(self, node: TypeNode, neighbors: dict[int, TypeNode]) -> None:
        passes: list[tuple[Relation, bool]] = [
            (Relation.RETURNS, self._options.use_return_types),
            (Relation.ARGUMENT, self._options.use_argument_types),
        ]
        for method in node.type.methods:
            if SYNTHETIC_MARKER in method.name or method.is_private:
                continue
            label = (STATIC_MARKER if method.is_static else "") + method.name

            for relation, enabled in passes:
                if not enabled:
                    continue
                refs = (
                    (method.return_type,)
                    if relation is Relation.RETURNS
                    else method.parameter_types
                )
                for ref in dict.fromkeys(refs):
                    java_type = self._signature_type(ref)
                    if java_type is None:
                        continue
                    target = self._graph.find_or_create_by_handle(java_type)
                    link = self._graph.add_link(node, target, relation)
                    if link.relation is relation:
                        link.method_names.add(label)
                    neighbors[target.id] = target

    def _add_declared_types(self, node: TypeNode, neighbors: dict[int, TypeNode]) -> None:
        include_private = self._options.use_private_declared_types
        for nested in node.type.nested_types(include_private=include_private):
            target = self._graph.find_or_create_by_handle(nested)
            self._link(node, target, Relation.DECLARES, neighbors, target)

    def _add_known_subclasses(self, node: TypeNode, neighbors: dict[int, TypeNode]) -> None:
        for other in self._graph.nodes:
            if other.type.superclass is node.type:
                self._link(other, node, Relation.SUPER, neighbors, other)
