"""Builder that coordinates archive scanning and graph traversal."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path

from java2graph.classfile.archive import collect_archives, expand_seed, list_archive_types
from java2graph.classfile.classpath import ClassPath
from java2graph.core.exceptions import ArchiveError, ClassFormatError, TypeNotFoundError
from java2graph.core.filters import FilterChain
from java2graph.core.graph.base import TypeGraph
from java2graph.core.graph.traversal import TraversalOptions, Traverser
from java2graph.core.models import BuildStats

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]

_ARCHIVE_SUFFIX = ".jar"


class GraphBuilder:
    """Builds a TypeGraph from a class path and a set of seed types."""

    def __init__(
        self,
        classpath: ClassPath,
        filters: FilterChain | None = None,
        options: TraversalOptions | None = None,
    ) -> None:
        """Initialize with the class path that provides the types."""
        self._classpath = classpath
        self._filters = filters if filters is not None else FilterChain()
        self._options = options if options is not None else TraversalOptions()
        self._graph = TypeGraph(classpath)
        self._traverser = Traverser(self._graph, self._filters, self._options)
        self.stats = BuildStats()

    @property
    def graph(self) -> TypeGraph:
        return self._graph

    def add_root(self, root: Path) -> int:
        """Add a class path root (jar file or directory of jars).

        Unreadable archives are logged and recorded in stats.errors.

        Returns:
            Number of archives added.
        """
        added = 0
        for archive in collect_archives(root):
            try:
                self._classpath.add_archive(archive)
            except ArchiveError as e:
                logger.warning("%s", e)
                self.stats.errors.append(str(e))
                continue
            added += 1
        self.stats.archives += added
        return added

    def expand_seeds(self, arguments: Iterable[str]) -> list[str]:
        """Turn seed arguments into type names.

        A .jar argument is also added to the class path, and stands for all
        of its top-level types.
        """
        seeds: list[str] = []
        for argument in arguments:
            if argument.endswith(_ARCHIVE_SUFFIX):
                self.add_root(Path(argument))
            try:
                names = expand_seed(argument)
            except ArchiveError as e:
                logger.warning("%s", e)
                self.stats.errors.append(str(e))
                continue
            seeds.extend(n for n in names if n not in seeds)
        return seeds

    def scan(self, on_progress: ProgressCallback | None = None) -> BuildStats:
        """Register every accepted type of the class path archives as a node.

        Registered nodes are not expanded, but the traversal's reverse scans
        can find them as implementers or subclasses.

        Args:
            on_progress: Optional callback for progress updates (name, current, total)

        Returns:
            BuildStats with counts of archives/types processed
        """
        include_nested = self._options.use_declared_types
        candidates: list[str] = []
        for archive in self._classpath.archives:
            logger.info("Scanning %s", archive)
            try:
                candidates.extend(list_archive_types(archive, include_nested=include_nested))
            except ArchiveError as e:
                logger.warning("%s", e)
                self.stats.errors.append(str(e))

        total = len(candidates)
        for i, name in enumerate(candidates):
            try:
                handle = self._classpath.resolve(name)
            except (TypeNotFoundError, ClassFormatError, ArchiveError) as e:
                logger.warning("Cannot load %s: %s", name, e)
                self.stats.errors.append(str(e))
            else:
                if self._filters.accepts(handle):
                    self._graph.find_or_create_by_handle(handle)
                    self.stats.types += 1
                else:
                    self.stats.skipped += 1
            if on_progress:
                on_progress(name, i + 1, total)

        return self.stats

    def build(self, seed_names: Iterable[str]) -> TypeGraph:
        """Traverse from the seeds and return the graph."""
        seed_names = list(seed_names)
        logger.info("Running for %s", ", ".join(seed_names))
        self._traverser.run(seed_names)
        logger.info("COUNT(types): %d", self._graph.num_nodes)
        logger.info("COUNT(links): %d", self._graph.num_edges)
        return self._graph


def build_graph(
    classpath: ClassPath,
    roots: Iterable[Path],
    seed_arguments: Iterable[str],
    filters: FilterChain | None = None,
    options: TraversalOptions | None = None,
    on_progress: ProgressCallback | None = None,
) -> tuple[TypeGraph, BuildStats]:
    """Add roots to a class path, scan it and traverse from the seeds.

    The class path must stay open while the graph is rendered.
    """
    builder = GraphBuilder(classpath, filters, options)
    for root in roots:
        builder.add_root(root)
    seeds = builder.expand_seeds(seed_arguments)
    builder.scan(on_progress)
    graph = builder.build(seeds)
    return graph, builder.stats
