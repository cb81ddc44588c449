"""Type handles and the class path that provides them."""

from __future__ import annotations

import logging
import zipfile
import zlib
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType

from java2graph.classfile.models import ClassFile, InnerClassInfo, MethodInfo
from java2graph.classfile.reader import parse_class
from java2graph.core.exceptions import (
    ArchiveError,
    ClassFormatError,
    TypeNotFoundError,
)

logger = logging.getLogger(__name__)

OBJECT = "java.lang.Object"
_CLASS_SUFFIX = ".class"


class JavaType:
    """Handle on a Java type.

    A ClassPath hands out exactly one JavaType per binary name, so handles
    can be compared by identity. A handle is unresolved when the type is
    referenced by some class but its own class file is not on the class path
    (typically JDK types); such a handle has a name but no supertypes,
    methods or members.
    """

    __slots__ = ("_classpath", "_classfile", "_interface_hint", "name")

    def __init__(
        self,
        classpath: ClassPath,
        name: str,
        classfile: ClassFile | None = None,
    ) -> None:
        self._classpath = classpath
        self._classfile = classfile
        self._interface_hint = False
        self.name = name

    @property
    def is_resolved(self) -> bool:
        return self._classfile is not None

    @property
    def classfile(self) -> ClassFile | None:
        return self._classfile

    @property
    def is_interface(self) -> bool:
        if self._classfile is None:
            return self._interface_hint
        return self._classfile.is_interface

    @property
    def package_name(self) -> str | None:
        package, _, _ = self.name.rpartition(".")
        return package or None

    def _own_entry(self) -> InnerClassInfo | None:
        if self._classfile is None:
            return None
        return self._classfile.inner_entry(self.name)

    @property
    def simple_name(self) -> str:
        entry = self._own_entry()
        if entry is not None:
            return entry.simple_name or ""
        return self.name.rpartition(".")[2].rpartition("$")[2]

    @property
    def canonical_name(self) -> str | None:
        """Source-level name, or None for anonymous and local types."""
        entry = self._own_entry()
        if entry is None:
            if self.is_resolved:
                return self.name
            return self.name.replace("$", ".")
        if entry.outer_name is None or entry.simple_name is None:
            return None
        outer = self._classpath.lookup(entry.outer_name).canonical_name
        return f"{outer}.{entry.simple_name}" if outer else None

    @property
    def superclass(self) -> JavaType | None:
        """Direct superclass; None for interfaces and java.lang.Object."""
        if self._classfile is None or self._classfile.super_name is None:
            return None
        if self._classfile.is_interface:
            return None
        return self._classpath.lookup(self._classfile.super_name)

    @property
    def interfaces(self) -> tuple[JavaType, ...]:
        """Interfaces this type declares directly, in declaration order."""
        if self._classfile is None:
            return ()
        return tuple(
            self._classpath.lookup(name, interface=True)
            for name in self._classfile.interface_names
        )

    @property
    def methods(self) -> list[MethodInfo]:
        """Declared methods, without constructors and static initializers."""
        if self._classfile is None:
            return []
        return [m for m in self._classfile.methods if not m.is_initializer]

    def _member_entries(self) -> list[InnerClassInfo]:
        if self._classfile is None:
            return []
        return [
            entry
            for entry in self._classfile.inner_classes
            if entry.outer_name == self.name and entry.simple_name
        ]

    def nested_types(self, include_private: bool = False) -> list[JavaType]:
        """Member types of this type.

        With include_private, every member type declared here regardless of
        access. Otherwise the public member types declared here or inherited
        from a superclass.
        """
        if include_private:
            return [self._classpath.lookup(e.inner_name) for e in self._member_entries()]

        result: list[JavaType] = []
        seen_names: set[str] = set()
        seen_types: set[str] = set()
        current: JavaType | None = self
        while current is not None and current.name not in seen_types:
            seen_types.add(current.name)
            for entry in current._member_entries():
                if entry.is_public and entry.inner_name not in seen_names:
                    seen_names.add(entry.inner_name)
                    result.append(self._classpath.lookup(entry.inner_name))
            current = current.superclass
        return result

    def __repr__(self) -> str:
        state = "" if self.is_resolved else ", unresolved"
        return f"JavaType({self.name!r}{state})"


class ClassPath:
    """Provides JavaType handles from .jar archives and in-memory class files.

    Archives are searched in the order they were added; the first archive
    holding a class wins.
    """

    def __init__(self, archives: Iterable[Path] = ()) -> None:
        self._archives: list[Path] = []
        self._zips: dict[Path, zipfile.ZipFile] = {}
        self._entries: dict[str, tuple[Path, str]] = {}
        self._types: dict[str, JavaType] = {}
        for archive in archives:
            self.add_archive(archive)

    def __enter__(self) -> ClassPath:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close all open archives."""
        for zf in self._zips.values():
            zf.close()
        self._zips.clear()

    @property
    def archives(self) -> list[Path]:
        return list(self._archives)

    def add_archive(self, path: Path) -> list[str]:
        """Index the classes of an archive.

        Returns:
            Binary names of every class entry in the archive, in entry order.

        Raises:
            ArchiveError: If the archive cannot be opened.
        """
        path = Path(path)
        if path in self._zips:
            return [name for name, (owner, _) in self._entries.items() if owner == path]
        try:
            zf = zipfile.ZipFile(path)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(f"Cannot open archive {path}: {e}") from e

        self._archives.append(path)
        self._zips[path] = zf
        names = []
        for entry in zf.namelist():
            if not entry.endswith(_CLASS_SUFFIX):
                continue
            name = entry[: -len(_CLASS_SUFFIX)].replace("/", ".")
            names.append(name)
            self._entries.setdefault(name, (path, entry))
        logger.info("Indexed %d classes from %s", len(names), path)
        return names

    def __contains__(self, name: object) -> bool:
        return name in self._entries or (
            isinstance(name, str) and name in self._types and self._types[name].is_resolved
        )

    def names(self) -> list[str]:
        """Binary names of every class the class path can load."""
        defined = [n for n, t in self._types.items() if t.is_resolved and n not in self._entries]
        return list(self._entries) + defined

    def define(self, classfile: ClassFile) -> JavaType:
        """Register an already parsed class file."""
        existing = self._types.get(classfile.name)
        if existing is not None:
            existing._classfile = classfile
            return existing
        handle = JavaType(self, classfile.name, classfile)
        self._types[classfile.name] = handle
        return handle

    def resolve(self, name: str) -> JavaType:
        """Load a type from the class path.

        Raises:
            TypeNotFoundError: If no archive holds the type.
            ClassFormatError: If its class file cannot be parsed.
            ArchiveError: If the archive cannot be read.
        """
        cached = self._types.get(name)
        if cached is not None and cached.is_resolved:
            return cached

        location = self._entries.get(name)
        if location is None:
            raise TypeNotFoundError(f"Type not found on class path: {name}")

        archive, entry = location
        try:
            data = self._zips[archive].read(entry)
        except (
            OSError,
            KeyError,
            ValueError,
            EOFError,
            RuntimeError,
            zipfile.BadZipFile,
            zlib.error,
        ) as e:
            raise ArchiveError(f"Cannot read {entry} from {archive}: {e}") from e

        try:
            classfile = parse_class(data)
        except ClassFormatError as e:
            raise ClassFormatError(f"Cannot parse {entry} from {archive}: {e}") from e
        if classfile.name != name:
            raise ClassFormatError(f"{entry} in {archive} declares {classfile.name}, not {name}")
        return self.define(classfile)

    def lookup(self, name: str, interface: bool = False) -> JavaType:
        """Get the handle for a referenced type.

        Never raises: a type that cannot be loaded gets an unresolved handle.
        `interface` records that the referrer uses the type as an interface,
        which is all that is known about an unresolved type.
        """
        handle = self._types.get(name)
        if handle is None:
            try:
                handle = self.resolve(name)
            except TypeNotFoundError:
                pass
            except (ClassFormatError, ArchiveError) as e:
                logger.warning("Cannot load %s: %s", name, e)
            if handle is None:
                handle = JavaType(self, name)
                self._types[name] = handle
        if interface and not handle.is_resolved:
            handle._interface_hint = True
        return handle

    def __repr__(self) -> str:
        return f"ClassPath(archives={len(self._archives)}, classes={len(self._entries)})"
