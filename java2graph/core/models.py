"""Data models for java2graph."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from java2graph.classfile.classpath import JavaType


class Relation(Enum):
    """Kinds of relationships between two types."""

    SUPER = "super"
    IMPLEMENTS = "implements"
    DECLARES = "declares"
    RETURNS = "returns"
    ARGUMENT = "argument"

    @property
    def carries_methods(self) -> bool:
        """Whether links of this kind collect method names."""
        return self in (Relation.RETURNS, Relation.ARGUMENT)


@dataclass(eq=False)
class TypeNode:
    """A type in the graph.

    Nodes compare by identity; the graph keeps at most one node per type.
    """

    id: int
    type: JavaType
    visited: bool = False
    is_seed: bool = False
    distance: float = math.inf

    @property
    def name(self) -> str:
        return self.type.name

    @property
    def is_interface(self) -> bool:
        return self.type.is_interface

    def __repr__(self) -> str:
        return f"TypeNode(id={self.id}, name={self.name!r}, distance={self.distance})"


@dataclass(eq=False)
class Link:
    """A directed relationship between two nodes.

    Two links are equal when they join the same ordered pair of nodes,
    whatever their relation.
    """

    source: TypeNode
    target: TypeNode
    relation: Relation
    method_names: set[str] = field(default_factory=set)

    @property
    def key(self) -> tuple[int, int]:
        return (self.source.id, self.target.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Link):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"Link({self.source.name} -[{self.relation.name}]-> {self.target.name})"


class BuildStats:
    """Statistics from scanning the class path."""

    def __init__(self) -> None:
        self.archives: int = 0
        self.types: int = 0
        self.skipped: int = 0
        self.errors: list[str] = []

    def __repr__(self) -> str:
        return (
            f"BuildStats(archives={self.archives}, types={self.types}, "
            f"skipped={self.skipped}, errors={len(self.errors)})"
        )
