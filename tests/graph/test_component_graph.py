"""Tests for ComponentGraph."""

import pytest

from driftgraph.errors import GraphFrozenError
from driftgraph.graph.component_graph import ComponentGraph, GraphEdge, GraphMetadata
from driftgraph.graph.node_types import ComponentType, DependencyType, GraphSource

A = "core/sys-flows/a@1.0.0"
B = "core/sys-flows/b@1.0.0"
C = "core/sys-flows/c@1.0.0"
D = "core/sys-flows/d@1.0.0"
SCHEMA = "core/sys-schemas/customer@1.0.0"
GHOST = "core/sys-flows/ghost@1.0.0"


def _edge(edge_id, from_id, to_id, dep_type=DependencyType.WORKFLOW):
    return GraphEdge(id=edge_id, from_id=from_id, to_id=to_id, type=dep_type)


class TestPopulation:
    def test_add_and_get_node(self, node_factory):
        graph = ComponentGraph()
        node = node_factory(A, label="A")
        graph.add_node(node)

        assert graph.node(A) is node
        assert graph.has_node(A)
        assert A in graph
        assert len(graph) == 1

    def test_add_node_replaces_same_id(self, node_factory):
        graph = ComponentGraph()
        graph.add_node(node_factory(A, label="old"))
        graph.add_node(node_factory(A, label="new"))

        assert len(graph) == 1
        assert graph.node(A).label == "new"

    def test_edge_appears_in_both_indices(self, node_factory):
        graph = ComponentGraph()
        graph.add_node(node_factory(A))
        graph.add_node(node_factory(B))
        edge = _edge("e1", A, B)
        graph.add_edge(edge)

        assert graph.outgoing(A) == (edge,)
        assert graph.incoming(B) == (edge,)
        assert graph.outgoing(B) == ()
        assert graph.incoming(A) == ()

    def test_edge_to_unknown_target_is_kept(self, node_factory):
        graph = ComponentGraph()
        graph.add_node(node_factory(A))
        graph.add_edge(_edge("e1", A, GHOST))

        assert len(graph.outgoing(A)) == 1
        assert len(graph.incoming(GHOST)) == 1
        assert graph.node(GHOST) is None
        assert graph.dependencies(A) == []

    def test_parallel_edges_of_different_kinds(self, node_factory):
        graph = ComponentGraph()
        graph.add_node(node_factory(A))
        graph.add_node(node_factory(SCHEMA))
        graph.add_edge(_edge("e1", A, SCHEMA, DependencyType.SCHEMA))
        graph.add_edge(_edge("e2", A, SCHEMA, DependencyType.VIEW))

        assert len(graph.outgoing(A)) == 2
        assert graph.fan_in(SCHEMA) == 2
        assert graph.graph.number_of_edges(A, SCHEMA) == 2

    def test_unknown_ids_give_empty_results(self):
        graph = ComponentGraph()

        assert graph.node("x") is None
        assert graph.outgoing("x") == ()
        assert graph.incoming("x") == ()
        assert graph.fan_in("x") == 0
        assert graph.dependents("x") == []

    def test_frozen_graph_rejects_mutation(self, node_factory):
        graph = ComponentGraph().freeze()

        assert graph.frozen
        with pytest.raises(GraphFrozenError):
            graph.add_node(node_factory(A))
        with pytest.raises(GraphFrozenError):
            graph.add_edge(_edge("e1", A, B))

    def test_stored_node_metadata_is_read_only(self, graph_factory, node_factory):
        source = {"owner": "team-a"}
        graph = graph_factory([node_factory(A, metadata=source, definition={"k": [1]})])
        source["owner"] = "team-b"

        node = graph.node(A)
        with pytest.raises(TypeError):
            node.metadata["x"] = 1
        assert graph.node(A).metadata == {"owner": "team-a"}

    def test_nodes_and_edges_are_hashable(self, node_factory):
        node = node_factory(A, metadata={"owner": "team-a"}, definition={"k": [1]})
        edge = GraphEdge(
            id="e1", from_id=A, to_id=B, type=DependencyType.WORKFLOW, metadata={"x": 1}
        )

        assert node in {node}
        assert {edge: "e1"}[edge] == "e1"
        with pytest.raises(TypeError):
            edge.metadata["x"] = 2

    def test_returned_edges_do_not_expose_indices(self, node_factory):
        graph = ComponentGraph()
        graph.add_node(node_factory(A))
        graph.add_edge(_edge("e1", A, B))

        assert isinstance(graph.outgoing(A), tuple)


class TestQueries:
    def test_dependencies_and_dependents(self, chain_graph):
        assert [n.id for n in chain_graph.dependencies(B)] == [A]
        assert [n.id for n in chain_graph.dependents(B)] == [C]

    def test_iteration_order(self, chain_graph):
        assert chain_graph.node_ids == [A, B, C, D]
        assert [n.id for n in chain_graph.iter_nodes()] == [A, B, C, D]
        assert [(e.from_id, e.to_id) for e in chain_graph.iter_edges()] == [
            (B, A),
            (C, B),
            (D, C),
        ]

    def test_find_nodes_by_key(self, graph_factory):
        graph = graph_factory([A, "core/sys-flows/a@2.0.0", B])

        found = graph.find_nodes_by_key("core", "sys-flows", "a")

        assert sorted(n.ref.version for n in found) == ["1.0.0", "2.0.0"]

    def test_source_from_metadata(self):
        graph = ComponentGraph(GraphMetadata(source=GraphSource.RUNTIME, environment_id="dev"))

        assert graph.source == GraphSource.RUNTIME
        assert graph.metadata.environment_id == "dev"

    def test_stats(self, graph_factory):
        graph = graph_factory([A, B, SCHEMA], [(A, SCHEMA), (B, SCHEMA), (B, GHOST)])

        stats = graph.stats()

        assert stats.node_count == 3
        assert stats.edge_count == 3
        assert stats.unresolved_edge_count == 1
        assert stats.nodes_by_type == {"workflow": 2, "schema": 1}
        assert stats.nodes_by_source == {"local": 3}

    def test_display_name(self, node_factory):
        assert node_factory(A, label="Flow A").display_name == "Flow A"
        assert node_factory(A).display_name == A

    def test_node_type_inferred_in_fixture(self, node_factory):
        assert node_factory(SCHEMA).type == ComponentType.SCHEMA


class TestDeploymentOrder:
    def test_dependencies_first(self, chain_graph):
        order = chain_graph.deployment_order([D, B, C, A])

        assert [n.id for n in order] == [A, B, C, D]

    def test_only_requested_nodes(self, chain_graph):
        order = chain_graph.deployment_order([C, B])

        assert [n.id for n in order] == [B, C]

    def test_independent_nodes_keep_input_order(self, graph_factory):
        graph = graph_factory([A, B, C])

        assert [n.id for n in graph.deployment_order([C, A, B])] == [C, A, B]

    def test_cycle_members_kept_together(self, graph_factory):
        # D depends on the A-B-C cycle
        graph = graph_factory([A, B, C, D], [(A, B), (B, C), (C, A), (D, A)])

        order = [n.id for n in graph.deployment_order([D, C, B, A])]

        assert order[-1] == D
        assert order[:3] == [C, B, A]

    def test_unknown_ids_are_dropped(self, chain_graph):
        order = chain_graph.deployment_order([B, GHOST, A])

        assert [n.id for n in order] == [A, B]
