"""Archive enumeration: find jar files and the type names they contain."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from java2graph.core.exceptions import ArchiveError

logger = logging.getLogger(__name__)

_ARCHIVE_SUFFIX = ".jar"
_CLASS_SUFFIX = ".class"
_SOURCE_SUFFIX = ".java"


def split_classpath(value: str) -> list[Path]:
    """Split a colon-separated class path, ignoring blank entries."""
    return [Path(part.strip()) for part in value.split(":") if part.strip()]


def collect_archives(path: Path) -> list[Path]:
    """Expand a class path root into archive files.

    A directory is searched recursively for .jar files; any other existing
    file is taken as an archive. A missing path is logged and ignored.
    """
    if not path.exists():
        logger.warning("%s doesn't exist", path)
        return []
    if not path.is_dir():
        return [path]

    archives = []
    for child in sorted(path.iterdir()):
        if child.is_dir() or (child.is_file() and child.name.endswith(_ARCHIVE_SUFFIX)):
            logger.info("Adding %s", child)
            archives.extend(collect_archives(child))
    return archives


def _is_anonymous(name: str) -> bool:
    marker = name.find("$")
    return marker != -1 and name[marker + 1 : marker + 2].isdigit()


def list_archive_types(path: Path, include_nested: bool = True) -> list[str]:
    """List candidate binary type names held by an archive.

    Entries with a '-' in their name (module-info, package-info) and
    anonymous classes are skipped, as are all nested types unless
    include_nested is set.

    Raises:
        ArchiveError: If the archive cannot be read.
    """
    try:
        with zipfile.ZipFile(path) as zf:
            entries = zf.namelist()
    except (OSError, zipfile.BadZipFile) as e:
        raise ArchiveError(f"Cannot open archive {path}: {e}") from e

    names = []
    for entry in entries:
        if not entry.endswith(_CLASS_SUFFIX):
            continue
        name = entry[: -len(_CLASS_SUFFIX)].replace("/", ".")
        if "-" in name:
            continue
        if "$" in name and (not include_nested or _is_anonymous(name)):
            continue
        names.append(name)
    return names


def expand_seed(argument: str) -> list[str]:
    """Turn a seed argument into binary type names.

    A .jar argument stands for every top-level type in that archive. A
    path-like argument (a/b/C.java) is converted to a.b.C. Anything else is
    taken as a binary name.
    """
    if argument.endswith(_ARCHIVE_SUFFIX):
        logger.info("Using all classes from %s", argument)
        return list_archive_types(Path(argument), include_nested=False)

    name = argument
    if "/" in name:
        if name.endswith(_SOURCE_SUFFIX):
            name = name[: -len(_SOURCE_SUFFIX)]
        name = name.replace("/", ".")
    return [name]
