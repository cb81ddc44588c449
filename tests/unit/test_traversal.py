"""Unit tests for graph traversal."""

import logging

import pytest

from java2graph.classfile import ClassPath
from java2graph.classfile.models import ACC_PRIVATE, ACC_PUBLIC, ACC_STATIC
from java2graph.core.filters import ExactNameFilter, FilterChain
from java2graph.core.graph import TraversalOptions, Traverser, TypeGraph, VisibilityPolicy
from java2graph.core.models import Relation


def edges(graph: TypeGraph) -> set[tuple[str, str, Relation]]:
    """All links as (source, target, relation) triples."""
    return {(l.source.name, l.target.name, l.relation) for l in graph.links}


def visited(graph: TypeGraph) -> set[str]:
    return {n.name for n in graph.nodes if n.visited}


@pytest.fixture
def graph(classpath: ClassPath) -> TypeGraph:
    return TypeGraph(classpath)


@pytest.fixture
def shapes(define) -> None:
    """Base implements Shape; Derived extends Base."""
    define("App.Shape", interface=True)
    define("App.Base", interfaces=("App.Shape",))
    define("App.Derived", super_name="App.Base")


class TestHierarchy:
    """Superclass, interface and reverse scans."""

    def test_base_scenario(self, graph: TypeGraph, shapes) -> None:
        graph.find_or_create_by_name("App.Derived")  # registered by the archive scan
        seeds = Traverser(graph).run(["App.Base"])

        assert [s.name for s in seeds] == ["App.Base"]
        assert seeds[0].is_seed
        assert visited(graph) == {"App.Base", "App.Derived", "App.Shape"}
        assert edges(graph) == {
            ("App.Derived", "App.Base", Relation.SUPER),
            ("App.Base", "App.Shape", Relation.IMPLEMENTS),
        }

    def test_superclass_edge(self, graph: TypeGraph, shapes) -> None:
        Traverser(graph).run(["App.Derived"])
        assert ("App.Derived", "App.Base", Relation.SUPER) in edges(graph)
        assert graph.get_node("App.Base").distance == 1
        assert graph.get_node("App.Shape").distance == 2

    def test_object_is_not_a_superclass(self, graph: TypeGraph, define) -> None:
        define("app.Plain")
        Traverser(graph).run(["app.Plain"])
        assert graph.get_node("java.lang.Object") is None
        assert graph.num_edges == 0

    def test_unresolved_superclass(self, graph: TypeGraph, define) -> None:
        define("app.Worker", super_name="java.lang.Thread")
        Traverser(graph).run(["app.Worker"])

        thread = graph.get_node("java.lang.Thread")
        assert thread is not None
        assert thread.visited
        assert not thread.type.is_resolved
        assert edges(graph) == {("app.Worker", "java.lang.Thread", Relation.SUPER)}

    def test_interface_extends_interface(self, graph: TypeGraph, define) -> None:
        define("app.I", interface=True)
        define("app.J", interfaces=("app.I",), interface=True)
        Traverser(graph).run(["app.J"])
        assert edges(graph) == {("app.J", "app.I", Relation.SUPER)}

    def test_interface_declared_by_superclass_is_suppressed(
        self, graph: TypeGraph, define
    ) -> None:
        define("app.I", interface=True)
        define("app.B", interfaces=("app.I",))
        define("app.C", super_name="app.B", interfaces=("app.I",))

        options = TraversalOptions(use_implementors=False)
        Traverser(graph, options=options).run(["app.C"])

        assert edges(graph) == {
            ("app.C", "app.B", Relation.SUPER),
            ("app.B", "app.I", Relation.IMPLEMENTS),
        }

    def test_implementor_scan_links_redeclaring_subclass(self, graph: TypeGraph, define) -> None:
        define("app.I", interface=True)
        define("app.B", interfaces=("app.I",))
        define("app.C", super_name="app.B", interfaces=("app.I",))

        Traverser(graph).run(["app.C"])

        # C's own expansion skips I; the reverse scan from I finds C later.
        assert ("app.C", "app.I", Relation.IMPLEMENTS) in edges(graph)

    def test_implementors_found_among_known_nodes(self, graph: TypeGraph, define) -> None:
        define("app.Shape", interface=True)
        define("app.Circle", interfaces=("app.Shape",))
        define("app.Square", interfaces=("app.Shape",))
        graph.find_or_create_by_name("app.Circle")

        Traverser(graph).run(["app.Shape"])

        assert edges(graph) == {("app.Circle", "app.Shape", Relation.IMPLEMENTS)}
        assert graph.get_node("app.Square") is None
        assert graph.get_node("app.Circle").distance == 1

    def test_no_implementors_option(self, graph: TypeGraph, define) -> None:
        define("app.Shape", interface=True)
        define("app.Circle", interfaces=("app.Shape",))
        graph.find_or_create_by_name("app.Circle")

        Traverser(graph, options=TraversalOptions(use_implementors=False)).run(["app.Shape"])

        assert graph.num_edges == 0
        assert visited(graph) == {"app.Shape"}

    def test_no_interfaces_option(self, graph: TypeGraph, shapes) -> None:
        Traverser(graph, options=TraversalOptions(use_interfaces=False)).run(["App.Base"])
        assert graph.num_edges == 0
        assert graph.get_node("App.Shape") is None

    def test_known_subclasses(self, graph: TypeGraph, shapes, define) -> None:
        define("App.Other", super_name="App.Base")
        graph.find_or_create_by_name("App.Derived")

        Traverser(graph, options=TraversalOptions(use_interfaces=False)).run(["App.Base"])

        assert edges(graph) == {("App.Derived", "App.Base", Relation.SUPER)}
        assert graph.get_node("App.Other") is None

    def test_cycles_terminate(self, graph: TypeGraph, define) -> None:
        define(
            "app.Outer",
            inner_classes=(("app.Outer$Inner", "app.Outer", "Inner", ACC_PUBLIC),),
        )
        define(
            "app.Outer$Inner",
            super_name="app.Outer",
            inner_classes=(("app.Outer$Inner", "app.Outer", "Inner", ACC_PUBLIC),),
        )
        options = TraversalOptions(use_private_declared_types=True)
        Traverser(graph, options=options).run(["app.Outer"])

        assert edges(graph) == {
            ("app.Outer", "app.Outer$Inner", Relation.DECLARES),
            ("app.Outer$Inner", "app.Outer", Relation.SUPER),
        }


class TestDeclaredTypes:
    """Nested type discovery."""

    @pytest.fixture
    def outer(self, define) -> None:
        define(
            "app.Outer",
            inner_classes=(
                ("app.Outer$Api", "app.Outer", "Api", ACC_PUBLIC),
                ("app.Outer$Impl", "app.Outer", "Impl", ACC_PRIVATE),
            ),
        )

    def test_public_only(self, graph: TypeGraph, outer) -> None:
        Traverser(graph).run(["app.Outer"])
        assert edges(graph) == {("app.Outer", "app.Outer$Api", Relation.DECLARES)}

    def test_private_included(self, graph: TypeGraph, outer) -> None:
        options = TraversalOptions(use_private_declared_types=True)
        Traverser(graph, options=options).run(["app.Outer"])
        assert edges(graph) == {
            ("app.Outer", "app.Outer$Api", Relation.DECLARES),
            ("app.Outer", "app.Outer$Impl", Relation.DECLARES),
        }

    def test_disabled(self, graph: TypeGraph, outer) -> None:
        options = TraversalOptions(use_declared_types=False)
        Traverser(graph, options=options).run(["app.Outer"])
        assert graph.num_edges == 0


class TestSignatures:
    """Method return and argument types."""

    @pytest.fixture
    def options(self) -> TraversalOptions:
        return TraversalOptions(use_return_types=True, use_argument_types=True)

    def test_primitive_and_string_ignored(self, graph: TypeGraph, define, options) -> None:
        define("app.Worker", methods=(("compute", "(Ljava/lang/String;)I", ACC_PUBLIC),))
        Traverser(graph, options=options).run(["app.Worker"])

        assert not [l for l in graph.links if l.relation.carries_methods]
        assert graph.num_nodes == 1

    def test_jdk_and_boxed_types_ignored(self, graph: TypeGraph, define, options) -> None:
        define(
            "app.Worker",
            methods=(
                ("all", "(Ljava/lang/Integer;)Ljava/util/List;", ACC_PUBLIC),
                ("names", "()[Ljava/lang/String;", ACC_PUBLIC),
                ("raw", "(Ljavax/swing/JPanel;[[J)Ljava/lang/Object;", ACC_PUBLIC),
            ),
        )
        Traverser(graph, options=options).run(["app.Worker"])
        assert graph.num_edges == 0

    def test_return_and_argument_edges(self, graph: TypeGraph, define, options) -> None:
        define("app.Result")
        define("app.Task")
        define(
            "app.Worker",
            methods=(
                ("run", "(Lapp/Task;[Lapp/Task;)Lapp/Result;", ACC_PUBLIC),
                ("make", "()Lapp/Result;", ACC_PUBLIC | ACC_STATIC),
                ("hidden", "(Lapp/Secret;)Lapp/Secret;", ACC_PRIVATE),
                ("access$000", "(Lapp/Synthetic;)V", ACC_STATIC),
            ),
        )
        Traverser(graph, options=options).run(["app.Worker"])

        assert edges(graph) == {
            ("app.Worker", "app.Result", Relation.RETURNS),
            ("app.Worker", "app.Task", Relation.ARGUMENT),
        }
        worker = graph.get_node("app.Worker")
        returns = graph.get_link(worker, graph.get_node("app.Result"))
        arguments = graph.get_link(worker, graph.get_node("app.Task"))
        assert returns.method_names == {"run", "*make"}
        assert arguments.method_names == {"run"}
        assert graph.get_node("app.Result").distance == 1

    def test_return_only(self, graph: TypeGraph, define) -> None:
        define("app.Worker", methods=(("run", "(Lapp/Task;)Lapp/Result;", ACC_PUBLIC),))
        Traverser(graph, options=TraversalOptions(use_return_types=True)).run(["app.Worker"])
        assert edges(graph) == {("app.Worker", "app.Result", Relation.RETURNS)}

    def test_argument_only(self, graph: TypeGraph, define) -> None:
        define("app.Worker", methods=(("run", "(Lapp/Task;)Lapp/Result;", ACC_PUBLIC),))
        Traverser(graph, options=TraversalOptions(use_argument_types=True)).run(["app.Worker"])
        assert edges(graph) == {("app.Worker", "app.Task", Relation.ARGUMENT)}

    def test_return_wins_over_argument(self, graph: TypeGraph, define, options) -> None:
        define("app.Worker", methods=(("next", "(Lapp/Task;)Lapp/Task;", ACC_PUBLIC),))
        Traverser(graph, options=options).run(["app.Worker"])

        [link] = graph.links
        assert link.relation is Relation.RETURNS
        assert link.method_names == {"next"}

    def test_first_relation_wins_over_declares(self, graph: TypeGraph, define, options) -> None:
        define(
            "app.Outer",
            methods=(("inner", "()Lapp/Outer$Inner;", ACC_PUBLIC),),
            inner_classes=(("app.Outer$Inner", "app.Outer", "Inner", ACC_PUBLIC),),
        )
        Traverser(graph, options=options).run(["app.Outer"])

        [link] = graph.links
        assert link.relation is Relation.RETURNS

    def test_disabled_by_default(self, graph: TypeGraph, define) -> None:
        define("app.Worker", methods=(("run", "(Lapp/Task;)Lapp/Result;", ACC_PUBLIC),))
        Traverser(graph).run(["app.Worker"])
        assert graph.num_edges == 0


class TestVisit:
    """Distances, idempotence and filters."""

    @pytest.fixture
    def chain(self, define) -> None:
        """app.A extends app.B extends app.C."""
        define("app.C")
        define("app.B", super_name="app.C")
        define("app.A", super_name="app.B")

    def test_idempotent_visit(self, graph: TypeGraph, chain) -> None:
        traverser = Traverser(graph)
        node = graph.find_or_create_by_name("app.A")

        traverser.visit(node, 3)
        links_after_first = graph.links
        traverser.visit(node, 1)
        traverser.visit(node, 2)

        assert graph.links == links_after_first
        assert graph.num_edges == 2
        assert node.distance == 1

    def test_distances_from_multiple_seeds(self, graph: TypeGraph, chain) -> None:
        Traverser(graph).run(["app.A", "app.C"])
        assert graph.get_node("app.A").distance == 0
        assert graph.get_node("app.B").distance == 1
        assert graph.get_node("app.C").distance == 0

    def test_later_seed_lowers_only_its_own_distance(self, graph: TypeGraph, chain) -> None:
        Traverser(graph).run(["app.A", "app.B"])
        assert graph.get_node("app.A").distance == 0
        assert graph.get_node("app.B").distance == 0
        assert graph.get_node("app.C").distance == 2

    def test_shortest_distance_wins(self, graph: TypeGraph, define) -> None:
        # Seed -> Far -> Mid -> Target, and Seed -> Target directly via an interface.
        define("app.Target", interface=True)
        define("app.Mid", interfaces=("app.Target",))
        define("app.Far", super_name="app.Mid")
        define("app.Seed", super_name="app.Far", interfaces=("app.Target",))

        Traverser(graph, options=TraversalOptions(use_implementors=False)).run(["app.Seed"])

        assert graph.get_node("app.Target").distance == 1

    def test_missing_seed_is_skipped(
        self, graph: TypeGraph, chain, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING):
            seeds = Traverser(graph).run(["app.Missing", "app.C"])

        assert [s.name for s in seeds] == ["app.C"]
        assert "app.Missing" in caplog.text

    def test_filtered_node_not_visited(self, graph: TypeGraph, chain) -> None:
        filters = FilterChain([ExactNameFilter("app.B")])
        Traverser(graph, filters).run(["app.A"])

        b = graph.get_node("app.B")
        assert not b.visited
        assert graph.get_node("app.C") is None
        assert edges(graph) == {("app.A", "app.B", Relation.SUPER)}
        assert VisibilityPolicy().visible_links(graph) == []

    def test_filtered_seed(self, graph: TypeGraph, chain) -> None:
        filters = FilterChain([ExactNameFilter("app.A")])
        seeds = Traverser(graph, filters).run(["app.A"])

        assert seeds[0].is_seed
        assert not seeds[0].visited
        assert graph.num_edges == 0

    def test_max_distance_hides_far_nodes(self, graph: TypeGraph, chain) -> None:
        Traverser(graph).run(["app.A"])
        policy = VisibilityPolicy(1)

        assert graph.get_node("app.C").visited
        assert [n.name for n in policy.visible_nodes(graph)] == ["app.A", "app.B"]
        assert [(l.source.name, l.target.name) for l in policy.visible_links(graph)] == [
            ("app.A", "app.B")
        ]

    def test_max_distance_zero(self, graph: TypeGraph, chain) -> None:
        Traverser(graph).run(["app.A"])
        policy = VisibilityPolicy(0)

        assert [n.name for n in policy.visible_nodes(graph)] == ["app.A"]
        assert policy.visible_links(graph) == []
