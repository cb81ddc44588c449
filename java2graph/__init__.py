"""
java2graph: Type hierarchy graphs for compiled Java archives.

java2graph reads .class files out of .jar archives and builds a graph of the
types reachable from one or more seed types, enabling you to:
- See superclass and interface hierarchies around a type
- Find nested types and the types used in method signatures
- Render the result as Graphviz DOT or GEXF

Usage:
    from pathlib import Path

    from java2graph.classfile import ClassPath
    from java2graph.core.builder import GraphBuilder
    from java2graph.core.graph import VisibilityPolicy
    from java2graph.render import render_dot

    with ClassPath([Path("app.jar")]) as classpath:
        builder = GraphBuilder(classpath)
        builder.scan()
        graph = builder.build(["com.example.App"])
        print(render_dot(graph, VisibilityPolicy(max_distance=2)))
"""

__version__ = "0.1.0"
