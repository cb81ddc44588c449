"""Protocol for type metadata providers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from java2graph.classfile.classpath import JavaType


class TypeProvider(Protocol):
    """Protocol for type metadata providers."""

    def resolve(self, name: str) -> JavaType:
        """Load a type by binary name, raising if it is unavailable."""
        ...

    def lookup(self, name: str, interface: bool = False) -> JavaType:
        """Get a handle for a referenced type, never raising."""
        ...
