"""Shared fixtures for tests."""

from pathlib import Path

import pytest

from driftgraph.graph.builder import build_graph
from driftgraph.graph.component_graph import ComponentGraph, GraphEdge, GraphMetadata, GraphNode
from driftgraph.graph.identifiers import decode_component_id
from driftgraph.graph.node_types import (
    ComponentType,
    DependencyType,
    GraphSource,
    component_type_for_flow,
)
from driftgraph.schema.loader import parse_snapshot_from_string


def make_node(
    node_id: str,
    source: GraphSource = GraphSource.LOCAL,
    **fields,
) -> GraphNode:
    """Create a node from its id, inferring the type from the flow."""
    ref = decode_component_id(node_id)
    fields.setdefault("type", component_type_for_flow(ref.flow) or ComponentType.WORKFLOW)
    return GraphNode(id=node_id, ref=ref, source=source, **fields)


def make_graph(
    nodes: list[str | GraphNode],
    edges: list[tuple] = (),
    source: GraphSource = GraphSource.LOCAL,
) -> ComponentGraph:
    """Build a frozen graph from node ids and ``(from, to[, range])`` tuples."""
    graph = ComponentGraph(GraphMetadata(source=source))
    for node in nodes:
        graph.add_node(node if isinstance(node, GraphNode) else make_node(node, source))

    for index, (from_id, to_id, *rest) in enumerate(edges):
        graph.add_edge(
            GraphEdge(
                id=f"e{index}",
                from_id=from_id,
                to_id=to_id,
                type=DependencyType.WORKFLOW,
                version_range=rest[0] if rest else None,
            )
        )
    return graph.freeze()


def graph_from_yaml(text: str) -> ComponentGraph:
    """Parse snapshot YAML and build its graph."""
    return build_graph(parse_snapshot_from_string(text)).graph


A = "core/sys-flows/a@1.0.0"
B = "core/sys-flows/b@1.0.0"
C = "core/sys-flows/c@1.0.0"
D = "core/sys-flows/d@1.0.0"


@pytest.fixture
def examples_dir() -> Path:
    """Return the path to the examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def chain_graph() -> ComponentGraph:
    """A <- B <- C <- D: each component depends on the previous one."""
    return make_graph([A, B, C, D], [(B, A), (C, B), (D, C)])


@pytest.fixture
def cyclic_graph() -> ComponentGraph:
    """A -> B -> C -> A."""
    return make_graph([A, B, C], [(A, B), (B, C), (C, A)])


@pytest.fixture
def minimal_snapshot_yaml() -> str:
    """Return a minimal valid snapshot YAML string."""
    return """
components:
  - id: core/sys-schemas/customer@1.0.0
    type: schema
    label: Customer
  - id: core/sys-flows/onboarding@1.0.0
    label: Onboarding
    dependencies:
      - target: core/sys-schemas/customer@1.0.0
        type: schema
"""


@pytest.fixture
def local_graph(examples_dir) -> ComponentGraph:
    """The example workspace graph."""
    return graph_from_yaml((examples_dir / "local_snapshot.yaml").read_text(encoding="utf-8"))


@pytest.fixture
def node_factory():
    """Return a factory for nodes: ``node_factory(id, **fields)``."""
    return make_node


@pytest.fixture
def graph_factory():
    """Return a factory for frozen graphs: ``graph_factory(nodes, edges)``."""
    return make_graph


@pytest.fixture
def yaml_graph():
    """Return a function building a graph from snapshot YAML."""
    return graph_from_yaml
