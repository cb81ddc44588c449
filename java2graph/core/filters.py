"""Filters deciding which types may enter the graph."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Protocol

from java2graph.core.exceptions import ConfigError

if TYPE_CHECKING:
    from java2graph.classfile.classpath import JavaType

COMMON_IGNORE = (
    "java.lang.Comparable",
    "java.util.Comparator",
    "java.lang.Enum",
    "java.io.Serializable",
    "java.io.Closeable",
    "java.lang.Cloneable",
    "java.lang.Throwable",
    "java.lang.Exception",
    "java.lang.RuntimeException",
)


class TypeFilter(Protocol):
    """Protocol for type filters."""

    def accept(self, java_type: JavaType) -> bool:
        """Return False to keep the type out of the graph."""
        ...


class ExactNameFilter:
    """Rejects one type by binary name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def accept(self, java_type: JavaType) -> bool:
        return java_type.name != self.name

    def __repr__(self) -> str:
        return f"ExactNameFilter({self.name!r})"


class PackagePrefixFilter:
    """Rejects every type whose binary name starts with a prefix."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def accept(self, java_type: JavaType) -> bool:
        return not java_type.name.startswith(self.prefix)

    def __repr__(self) -> str:
        return f"PackagePrefixFilter({self.prefix!r})"


class RegexFilter:
    """Rejects every type whose binary name fully matches a pattern."""

    def __init__(self, pattern: str | re.Pattern[str]) -> None:
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as e:
                raise ConfigError(f"Invalid regular expression {pattern!r}: {e}") from e
        self.pattern = pattern

    def accept(self, java_type: JavaType) -> bool:
        return self.pattern.fullmatch(java_type.name) is None

    def __repr__(self) -> str:
        return f"RegexFilter({self.pattern.pattern!r})"


class FilterChain:
    """A type passes the chain only if every filter accepts it."""

    def __init__(self, filters: Iterable[TypeFilter] = ()) -> None:
        self._filters: list[TypeFilter] = list(filters)

    @classmethod
    def from_options(
        cls,
        names: Iterable[str] = (),
        prefixes: Iterable[str] = (),
        patterns: Iterable[str] = (),
        ignore_common: bool = False,
    ) -> FilterChain:
        """Build a chain from exclusion options."""
        chain = cls()
        for name in names:
            chain.add(ExactNameFilter(name))
        for prefix in prefixes:
            chain.add(PackagePrefixFilter(prefix))
        for pattern in patterns:
            chain.add(RegexFilter(pattern))
        if ignore_common:
            chain = chain.with_common_ignores()
        return chain

    def with_common_ignores(self) -> FilterChain:
        """Return a copy that also rejects the common JDK types."""
        return FilterChain([*self._filters, *(ExactNameFilter(n) for n in COMMON_IGNORE)])

    def add(self, type_filter: TypeFilter) -> None:
        self._filters.append(type_filter)

    def accepts(self, java_type: JavaType) -> bool:
        return all(f.accept(java_type) for f in self._filters)

    def __iter__(self) -> Iterator[TypeFilter]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"FilterChain({self._filters!r})"
