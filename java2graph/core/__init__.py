"""
Core module: data models, exceptions, filters and the type graph.

This module provides the foundational types of the graph engine:

Models (models.py):
    - TypeNode: A type discovered in the class path
    - Link: A relationship between two types
    - Relation: Enum of relationship kinds
    - BuildStats: Counts gathered while scanning archives

Exceptions (exceptions.py):
    - Java2GraphError: Base exception for all java2graph errors
    - TypeNotFoundError: Type is not on the class path
    - ClassFormatError: Class file could not be parsed
    - ArchiveError: Archive could not be read
    - ConfigError: Invalid option value

Filters (filters.py):
    - FilterChain: Exact-name, package-prefix and regex exclusions

Graph (graph/) and the GraphBuilder (builder.py) are imported from their
own modules.
"""

from java2graph.core.exceptions import (
    ArchiveError,
    ClassFormatError,
    ConfigError,
    Java2GraphError,
    TypeNotFoundError,
)
from java2graph.core.filters import (
    COMMON_IGNORE,
    ExactNameFilter,
    FilterChain,
    PackagePrefixFilter,
    RegexFilter,
    TypeFilter,
)
from java2graph.core.models import BuildStats, Link, Relation, TypeNode

__all__ = [
    # Models
    "TypeNode",
    "Link",
    "Relation",
    "BuildStats",
    # Exceptions
    "Java2GraphError",
    "TypeNotFoundError",
    "ClassFormatError",
    "ArchiveError",
    "ConfigError",
    # Filters
    "COMMON_IGNORE",
    "TypeFilter",
    "ExactNameFilter",
    "PackagePrefixFilter",
    "RegexFilter",
    "FilterChain",
]
