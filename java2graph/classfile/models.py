"""Data models for parsed class files."""

from __future__ import annotations

from dataclasses import dataclass, field

ACC_PUBLIC = 0x0001
ACC_PRIVATE = 0x0002
ACC_STATIC = 0x0008
ACC_INTERFACE = 0x0200
ACC_ABSTRACT = 0x0400

PRIMITIVES = frozenset(
    {"boolean", "byte", "char", "short", "int", "long", "float", "double", "void"}
)


@dataclass(frozen=True)
class TypeRef:
    """A type mentioned in a descriptor (before resolution)."""

    name: str
    dimensions: int = 0

    @property
    def is_array(self) -> bool:
        return self.dimensions > 0

    @property
    def is_primitive(self) -> bool:
        return self.dimensions == 0 and self.name in PRIMITIVES

    @property
    def element(self) -> TypeRef:
        """The innermost element type of an array, or the type itself."""
        return TypeRef(self.name) if self.is_array else self

    def __str__(self) -> str:
        return self.name + "[]" * self.dimensions


@dataclass
class MethodInfo:
    """A method declared by a class."""

    name: str
    access_flags: int
    return_type: TypeRef
    parameter_types: tuple[TypeRef, ...] = ()

    @property
    def is_static(self) -> bool:
        return bool(self.access_flags & ACC_STATIC)

    @property
    def is_private(self) -> bool:
        return bool(self.access_flags & ACC_PRIVATE)

    @property
    def is_initializer(self) -> bool:
        return self.name.startswith("<")


@dataclass
class InnerClassInfo:
    """One entry of the InnerClasses attribute."""

    inner_name: str
    outer_name: str | None
    simple_name: str | None
    access_flags: int

    @property
    def is_public(self) -> bool:
        return bool(self.access_flags & ACC_PUBLIC)


@dataclass
class ClassFile:
    """The parts of a class file needed to build the type graph."""

    name: str
    access_flags: int
    super_name: str | None
    interface_names: tuple[str, ...] = ()
    methods: list[MethodInfo] = field(default_factory=list)
    inner_classes: list[InnerClassInfo] = field(default_factory=list)
    major_version: int = 52

    @property
    def is_interface(self) -> bool:
        return bool(self.access_flags & ACC_INTERFACE)

    def inner_entry(self, name: str) -> InnerClassInfo | None:
        """Get the InnerClasses entry describing `name`, if any."""
        for entry in self.inner_classes:
            if entry.inner_name == name:
                return entry
        return None
