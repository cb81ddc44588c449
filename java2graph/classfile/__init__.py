"""
Class files: Type metadata read from compiled Java archives.

This module provides the provider layer that turns .class entries of .jar
archives into type handles the graph engine can query.

Components:
    - parse_class(): Binary reader for the class file format
    - ClassFile, MethodInfo, InnerClassInfo, TypeRef: Parsed data
    - JavaType: Handle exposing names, supertypes, methods and member types
    - ClassPath: Provider handing out one JavaType per binary name
    - archive: Finding jar files and the type names they contain

Only the structural parts of a class file are decoded: constant pool,
supertypes, method descriptors and the InnerClasses attribute.
"""

from java2graph.classfile.archive import (
    collect_archives,
    expand_seed,
    list_archive_types,
    split_classpath,
)
from java2graph.classfile.base import TypeProvider
from java2graph.classfile.classpath import OBJECT, ClassPath, JavaType
from java2graph.classfile.models import ClassFile, InnerClassInfo, MethodInfo, TypeRef
from java2graph.classfile.reader import parse_class

__all__ = [
    "OBJECT",
    "ClassFile",
    "ClassPath",
    "InnerClassInfo",
    "JavaType",
    "MethodInfo",
    "TypeProvider",
    "TypeRef",
    "collect_archives",
    "expand_seed",
    "list_archive_types",
    "parse_class",
    "split_classpath",
]
