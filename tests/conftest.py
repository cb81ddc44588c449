"""Shared fixtures: class file assembly and in-memory class paths."""

import struct
import tempfile
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from java2graph.classfile import ClassFile, ClassPath, InnerClassInfo, JavaType, MethodInfo
from java2graph.classfile.descriptors import parse_method_descriptor
from java2graph.classfile.models import ACC_ABSTRACT, ACC_INTERFACE, ACC_PUBLIC

ACC_SUPER = 0x0020
OBJECT_INTERNAL = "java/lang/Object"


def modified_utf8(value: str) -> bytes:
    """Encode like a class file: NUL as C0 80, supplementary characters as surrogates."""
    units = value.encode("utf-16-le")
    halves = "".join(
        chr(int.from_bytes(units[i : i + 2], "little")) for i in range(0, len(units), 2)
    )
    return halves.encode("utf-8", "surrogatepass").replace(b"\x00", b"\xc0\x80")


class _PoolBuilder:
    """Builds a constant pool, reusing identical entries."""

    def __init__(self) -> None:
        self.data = bytearray()
        self.next_index = 1
        self._index: dict[tuple[str, object], int] = {}

    def _add(self, key: tuple[str, object], payload: bytes, slots: int = 1) -> int:
        if key not in self._index:
            self._index[key] = self.next_index
            self.data += payload
            self.next_index += slots
        return self._index[key]

    def utf8(self, value: str) -> int:
        raw = modified_utf8(value)
        return self._add(("utf8", value), b"\x01" + struct.pack(">H", len(raw)) + raw)

    def class_ref(self, binary_name: str) -> int:
        name_index = self.utf8(binary_name.replace(".", "/"))
        return self._add(("class", binary_name), b"\x07" + struct.pack(">H", name_index))

    def long(self, value: int) -> int:
        return self._add(("long", value), b"\x05" + struct.pack(">q", value), slots=2)

    def integer(self, value: int) -> int:
        return self._add(("int", value), b"\x03" + struct.pack(">i", value))


def assemble_class(
    name: str,
    super_name: str | None = "java.lang.Object",
    interfaces: tuple[str, ...] = (),
    methods: tuple[tuple[str, str, int], ...] = (),
    inner_classes: tuple[tuple[str, str | None, str | None, int], ...] = (),
    access: int = ACC_PUBLIC | ACC_SUPER,
) -> bytes:
    """Assemble the bytes of a class file.

    Names are binary names (a.b.C$D); methods are (name, descriptor, flags);
    inner classes are (inner, outer, simple name, flags).
    """
    pool = _PoolBuilder()
    this_index = pool.class_ref(name)
    super_index = pool.class_ref(super_name) if super_name else 0
    interface_indexes = [pool.class_ref(i) for i in interfaces]
    pool.long(1 << 40)
    pool.integer(42)

    body = bytearray()
    body += struct.pack(">HHH", access, this_index, super_index)
    body += struct.pack(">H", len(interface_indexes))
    for index in interface_indexes:
        body += struct.pack(">H", index)

    # One field with a ConstantValue attribute.
    body += struct.pack(">H", 1)
    body += struct.pack(">HHHH", 0x0019, pool.utf8("VALUE"), pool.utf8("I"), 1)
    body += struct.pack(">HIH", pool.utf8("ConstantValue"), 2, pool.integer(42))

    body += struct.pack(">H", len(methods))
    for method_name, descriptor, flags in methods:
        body += struct.pack(">HHHH", flags, pool.utf8(method_name), pool.utf8(descriptor), 1)
        code = b"\x00\x01\x00\x01\x00\x00\x00\x01\xb1\x00\x00\x00\x00"
        body += struct.pack(">HI", pool.utf8("Code"), len(code)) + code

    attributes = bytearray()
    count = 1
    attributes += struct.pack(">HIH", pool.utf8("SourceFile"), 2, pool.utf8("Gen.java"))
    if inner_classes:
        count += 1
        entries = bytearray(struct.pack(">H", len(inner_classes)))
        for inner, outer, simple, flags in inner_classes:
            entries += struct.pack(
                ">HHHH",
                pool.class_ref(inner),
                pool.class_ref(outer) if outer else 0,
                pool.utf8(simple) if simple else 0,
                flags,
            )
        attributes += struct.pack(">HI", pool.utf8("InnerClasses"), len(entries)) + entries
    body += struct.pack(">H", count) + attributes

    header = struct.pack(">IHHH", 0xCAFEBABE, 0, 52, pool.next_index)
    return header + bytes(pool.data) + bytes(body)


def write_jar(path: Path, classes: dict[str, bytes], extra: dict[str, bytes] | None = None) -> Path:
    """Write a jar holding the given classes (keyed by binary name)."""
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("META-INF/MANIFEST.MF", "Manifest-Version: 1.0\n")
        for name, data in classes.items():
            zf.writestr(name.replace(".", "/") + ".class", data)
        for entry, data in (extra or {}).items():
            zf.writestr(entry, data)
    return path


DefineClass = Callable[..., JavaType]


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as td:
        yield Path(td)


@pytest.fixture
def class_bytes() -> Callable[..., bytes]:
    """Factory assembling class file bytes."""
    return assemble_class


@pytest.fixture
def jar_writer() -> Callable[..., Path]:
    """Factory writing jar archives."""
    return write_jar


@pytest.fixture
def classpath() -> Iterator[ClassPath]:
    """An empty class path for in-memory definitions."""
    with ClassPath() as cp:
        yield cp


@pytest.fixture
def define(classpath: ClassPath) -> DefineClass:
    """Factory registering an in-memory class on the `classpath` fixture."""

    def _define(
        name: str,
        super_name: str | None = "java.lang.Object",
        interfaces: tuple[str, ...] = (),
        methods: tuple[tuple[str, str, int], ...] = (),
        inner_classes: tuple[tuple[str, str | None, str | None, int], ...] = (),
        interface: bool = False,
        access: int = ACC_PUBLIC,
    ) -> JavaType:
        flags = access | (ACC_INTERFACE | ACC_ABSTRACT if interface else 0)
        method_infos = []
        for method_name, descriptor, method_flags in methods:
            params, return_type = parse_method_descriptor(descriptor)
            method_infos.append(MethodInfo(method_name, method_flags, return_type, params))
        return classpath.define(
            ClassFile(
                name=name,
                access_flags=flags,
                super_name=None if interface else super_name,
                interface_names=interfaces,
                methods=method_infos,
                inner_classes=[InnerClassInfo(*entry) for entry in inner_classes],
            )
        )

    return _define
