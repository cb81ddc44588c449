"""Field and method descriptor parsing."""

from __future__ import annotations

from java2graph.classfile.models import TypeRef
from java2graph.core.exceptions import ClassFormatError

_BASE_TYPES = {
    "B": "byte",
    "C": "char",
    "D": "double",
    "F": "float",
    "I": "int",
    "J": "long",
    "S": "short",
    "Z": "boolean",
    "V": "void",
}


def internal_to_binary(name: str) -> str:
    """Convert an internal name (a/b/C$D) to a binary name (a.b.C$D)."""
    return name.replace("/", ".")


def _parse_type(descriptor: str, pos: int) -> tuple[TypeRef, int]:
    dimensions = 0
    while pos < len(descriptor) and descriptor[pos] == "[":
        dimensions += 1
        pos += 1
    if pos >= len(descriptor):
        raise ClassFormatError(f"Truncated descriptor: {descriptor!r}")

    code = descriptor[pos]
    if code in _BASE_TYPES:
        return TypeRef(_BASE_TYPES[code], dimensions), pos + 1
    if code == "L":
        end = descriptor.find(";", pos)
        if end == -1:
            raise ClassFormatError(f"Unterminated class name in descriptor: {descriptor!r}")
        return TypeRef(internal_to_binary(descriptor[pos + 1 : end]), dimensions), end + 1
    raise ClassFormatError(f"Bad descriptor character {code!r} in {descriptor!r}")


def parse_method_descriptor(descriptor: str) -> tuple[tuple[TypeRef, ...], TypeRef]:
    """Parse a method descriptor into (parameter types, return type)."""
    if not descriptor.startswith("("):
        raise ClassFormatError(f"Bad method descriptor: {descriptor!r}")

    params: list[TypeRef] = []
    pos = 1
    while pos < len(descriptor) and descriptor[pos] != ")":
        ref, pos = _parse_type(descriptor, pos)
        params.append(ref)
    if pos >= len(descriptor):
        raise ClassFormatError(f"Unterminated parameter list: {descriptor!r}")

    return_type, end = _parse_type(descriptor, pos + 1)
    if end != len(descriptor):
        raise ClassFormatError(f"Trailing characters in descriptor: {descriptor!r}")
    return tuple(params), return_type
