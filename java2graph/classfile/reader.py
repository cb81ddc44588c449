"""Reader for compiled Java class files.

Only the parts needed for the type graph are decoded: the constant pool,
access flags, this/super class, interfaces, method signatures and the
InnerClasses attribute. Fields and every other attribute are skipped.
"""

from __future__ import annotations

import struct

from java2graph.classfile.descriptors import internal_to_binary, parse_method_descriptor
from java2graph.classfile.models import ClassFile, InnerClassInfo, MethodInfo
from java2graph.core.exceptions import ClassFormatError

MAGIC = 0xCAFEBABE

_CONSTANT_UTF8 = 1
_CONSTANT_CLASS = 7
_CONSTANT_LONG = 5
_CONSTANT_DOUBLE = 6

# Payload sizes of the fixed-width constant pool entries.
_CONSTANT_SIZES = {
    3: 4,  # Integer
    4: 4,  # Float
    5: 8,  # Long
    6: 8,  # Double
    7: 2,  # Class
    8: 2,  # String
    9: 4,  # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}

_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")


class _ByteReader:
    """Cursor over a byte buffer that fails with ClassFormatError."""

    __slots__ = ("_data", "pos")

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.pos = 0

    def _need(self, size: int) -> None:
        if self.pos + size > len(self._data):
            raise ClassFormatError(
                f"Truncated class file: needed {size} bytes at offset {self.pos}"
            )

    def u1(self) -> int:
        self._need(1)
        value = self._data[self.pos]
        self.pos += 1
        return value

    def u2(self) -> int:
        self._need(2)
        (value,) = _U2.unpack_from(self._data, self.pos)
        self.pos += 2
        return value

    def u4(self) -> int:
        self._need(4)
        (value,) = _U4.unpack_from(self._data, self.pos)
        self.pos += 4
        return value

    def read(self, size: int) -> bytes:
        self._need(size)
        value = self._data[self.pos : self.pos + size]
        self.pos += size
        return value

    def skip(self, size: int) -> None:
        self._need(size)
        self.pos += size


def _decode_modified_utf8(raw: bytes) -> str:
    # NUL is encoded as C0 80; supplementary characters as surrogate pairs.
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", errors="surrogatepass")
    return text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")


class _ConstantPool:
    """Constant pool with just enough structure to resolve names."""

    def __init__(self, reader: _ByteReader) -> None:
        count = reader.u2()
        self._utf8: dict[int, str] = {}
        self._classes: dict[int, int] = {}

        index = 1
        while index < count:
            tag = reader.u1()
            if tag == _CONSTANT_UTF8:
                length = reader.u2()
                try:
                    self._utf8[index] = _decode_modified_utf8(reader.read(length))
                except UnicodeDecodeError as e:
                    raise ClassFormatError(f"Bad UTF-8 constant #{index}: {e}") from e
            elif tag == _CONSTANT_CLASS:
                self._classes[index] = reader.u2()
            elif tag in _CONSTANT_SIZES:
                reader.skip(_CONSTANT_SIZES[tag])
            else:
                raise ClassFormatError(f"Unknown constant pool tag {tag} at #{index}")
            index += 2 if tag in (_CONSTANT_LONG, _CONSTANT_DOUBLE) else 1

    def utf8(self, index: int) -> str:
        try:
            return self._utf8[index]
        except KeyError:
            raise ClassFormatError(f"Constant #{index} is not a UTF-8 entry") from None

    def class_name(self, index: int) -> str:
        """Binary name of the Class constant at `index`."""
        try:
            name_index = self._classes[index]
        except KeyError:
            raise ClassFormatError(f"Constant #{index} is not a Class entry") from None
        return internal_to_binary(self.utf8(name_index))

    def optional_class_name(self, index: int) -> str | None:
        return self.class_name(index) if index else None

    def optional_utf8(self, index: int) -> str | None:
        return self.utf8(index) if index else None


def _skip_attributes(reader: _ByteReader) -> None:
    for _ in range(reader.u2()):
        reader.u2()
        reader.skip(reader.u4())


def _read_inner_classes(reader: _ByteReader, pool: _ConstantPool) -> list[InnerClassInfo]:
    entries = []
    for _ in range(reader.u2()):
        inner_index = reader.u2()
        outer_index = reader.u2()
        name_index = reader.u2()
        flags = reader.u2()
        entries.append(
            InnerClassInfo(
                inner_name=pool.class_name(inner_index),
                outer_name=pool.optional_class_name(outer_index),
                simple_name=pool.optional_utf8(name_index),
                access_flags=flags,
            )
        )
    return entries


def parse_class(data: bytes) -> ClassFile:
    """Parse the bytes of a .class file.

    Raises:
        ClassFormatError: If the data is not a well-formed class file.
    """
    reader = _ByteReader(data)
    if reader.u4() != MAGIC:
        raise ClassFormatError("Bad magic number, not a class file")
    reader.u2()  # minor version
    major = reader.u2()

    pool = _ConstantPool(reader)

    access_flags = reader.u2()
    name = pool.class_name(reader.u2())
    super_name = pool.optional_class_name(reader.u2())
    interfaces = tuple(pool.class_name(reader.u2()) for _ in range(reader.u2()))

    # Fields
    for _ in range(reader.u2()):
        reader.skip(6)
        _skip_attributes(reader)

    methods = []
    for _ in range(reader.u2()):
        flags = reader.u2()
        method_name = pool.utf8(reader.u2())
        params, return_type = parse_method_descriptor(pool.utf8(reader.u2()))
        _skip_attributes(reader)
        methods.append(
            MethodInfo(
                name=method_name,
                access_flags=flags,
                return_type=return_type,
                parameter_types=params,
            )
        )

    inner_classes: list[InnerClassInfo] = []
    for _ in range(reader.u2()):
        attribute_name = pool.utf8(reader.u2())
        length = reader.u4()
        if attribute_name == "InnerClasses":
            start = reader.pos
            inner_classes = _read_inner_classes(reader, pool)
            if reader.pos - start != length:
                raise ClassFormatError(f"InnerClasses attribute length mismatch in {name}")
        else:
            reader.skip(length)

    return ClassFile(
        name=name,
        access_flags=access_flags,
        super_name=super_name,
        interface_names=interfaces,
        methods=methods,
        inner_classes=inner_classes,
        major_version=major,
    )
