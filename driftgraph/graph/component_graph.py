"""ComponentGraph: the in-memory dependency multigraph."""

import logging
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterator, Mapping

import networkx as nx

from ..errors import GraphFrozenError
from .identifiers import ComponentRef
from .node_types import ComponentType, DependencyType, GraphSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphNode:
    """One component instance in a graph."""

    id: str
    ref: ComponentRef
    type: ComponentType
    source: GraphSource
    label: str | None = None
    definition: Any = field(default=None, hash=False)
    api_hash: str | None = None
    config_hash: str | None = None
    tags: tuple[str, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    @property
    def display_name(self) -> str:
        """The label if set, otherwise the id."""
        return self.label or self.id


@dataclass(frozen=True)
class GraphEdge:
    """One dependency from ``from_id`` to ``to_id``.

    ``to_id`` does not have to resolve to a node in the graph; an
    unresolved target is reported as a missing dependency by the diff.
    """

    id: str
    from_id: str
    to_id: str
    type: DependencyType
    version_range: str | None = None
    required: bool = True
    metadata: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


@dataclass
class GraphMetadata:
    """Provenance of a graph snapshot."""

    source: GraphSource | None = None
    timestamp: float = field(default_factory=time.time)
    environment_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GraphStats:
    """Summary counts for a graph."""

    node_count: int
    edge_count: int
    unresolved_edge_count: int
    nodes_by_type: dict[str, int]
    nodes_by_source: dict[str, int]


class ComponentGraph:
    """A directed multigraph of components and their dependencies.

    Nodes are kept in an id-keyed mapping. Edges are kept in two ordered,
    append-only indices (outgoing by ``from_id``, incoming by ``to_id``) so
    every edge appears exactly once in each. A networkx MultiDiGraph mirror
    is maintained for structural algorithms.

    A graph is populated once and then frozen; analyses never mutate it.
    """

    def __init__(self, metadata: GraphMetadata | None = None):
        """Initialize an empty graph."""
        self.metadata = metadata or GraphMetadata()
        self._nodes: dict[str, GraphNode] = {}
        self._outgoing: dict[str, list[GraphEdge]] = {}
        self._incoming: dict[str, list[GraphEdge]] = {}
        self._edge_count = 0
        self._frozen = False
        self._graph = nx.MultiDiGraph()

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    @property
    def source(self) -> GraphSource | None:
        """The snapshot source (local or runtime)."""
        return self.metadata.source

    @property
    def frozen(self) -> bool:
        """Whether the build phase has ended."""
        return self._frozen

    def freeze(self) -> "ComponentGraph":
        """End the build phase; later mutations raise GraphFrozenError."""
        self._frozen = True
        return self

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # -------------------------------------------------------------------------
    # Population
    # -------------------------------------------------------------------------

    def add_node(self, node: GraphNode) -> None:
        """Insert a node, replacing any node with the same id.

        Args:
            node: The node to insert.

        Raises:
            GraphFrozenError: If the graph has been frozen.
        """
        self._check_mutable()

        if node.id in self._nodes:
            logger.debug("Replacing node %s", node.id)

        self._nodes[node.id] = node
        self._graph.add_node(
            node.id,
            component_type=node.type,
            source=node.source,
            resolved=True,
        )

    def add_edge(self, edge: GraphEdge) -> None:
        """Append an edge to both indices.

        The target does not need to exist; an unresolved target is kept so
        the diff can report it.

        Args:
            edge: The edge to add.

        Raises:
            GraphFrozenError: If the graph has been frozen.
        """
        self._check_mutable()

        self._outgoing.setdefault(edge.from_id, []).append(edge)
        self._incoming.setdefault(edge.to_id, []).append(edge)
        self._edge_count += 1

        self._graph.add_edge(
            edge.from_id,
            edge.to_id,
            key=edge.id,
            dependency_type=edge.type,
            version_range=edge.version_range,
        )

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphFrozenError()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def node(self, node_id: str) -> GraphNode | None:
        """Get a node by id, or None if it is not in the graph."""
        return self._nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        """Check if a node exists."""
        return node_id in self._nodes

    def outgoing(self, node_id: str) -> tuple[GraphEdge, ...]:
        """Edges from a node, in insertion order. Empty for unknown ids."""
        return tuple(self._outgoing.get(node_id, ()))

    def incoming(self, node_id: str) -> tuple[GraphEdge, ...]:
        """Edges into a node, in insertion order. Empty for unknown ids."""
        return tuple(self._incoming.get(node_id, ()))

    @property
    def node_ids(self) -> list[str]:
        """All node ids in insertion order."""
        return list(self._nodes)

    def iter_nodes(self) -> Iterator[GraphNode]:
        """Iterate over nodes in insertion order."""
        yield from self._nodes.values()

    def iter_edges(self) -> Iterator[GraphEdge]:
        """Iterate over all edges, grouped by source."""
        for edges in self._outgoing.values():
            yield from edges

    def dependencies(self, node_id: str) -> list[GraphNode]:
        """Nodes this node depends on (resolved targets only)."""
        return [
            self._nodes[edge.to_id]
            for edge in self.outgoing(node_id)
            if edge.to_id in self._nodes
        ]

    def dependents(self, node_id: str) -> list[GraphNode]:
        """Nodes that depend on this node."""
        return [
            self._nodes[edge.from_id]
            for edge in self.incoming(node_id)
            if edge.from_id in self._nodes
        ]

    def fan_in(self, node_id: str) -> int:
        """Number of incoming dependency edges."""
        if not self._graph.has_node(node_id):
            return 0
        return self._graph.in_degree(node_id)

    def find_nodes_by_key(self, domain: str, flow: str, key: str) -> list[GraphNode]:
        """Find every version of a component."""
        return [
            node
            for node in self._nodes.values()
            if (node.ref.domain, node.ref.flow, node.ref.key) == (domain, flow, key)
        ]

    def stats(self) -> GraphStats:
        """Compute node and edge counts."""
        nodes_by_type: dict[str, int] = {}
        nodes_by_source: dict[str, int] = {}

        for node in self._nodes.values():
            nodes_by_type[node.type.value] = nodes_by_type.get(node.type.value, 0) + 1
            nodes_by_source[node.source.value] = (
                nodes_by_source.get(node.source.value, 0) + 1
            )

        unresolved = sum(
            1 for edge in self.iter_edges() if edge.to_id not in self._nodes
        )

        return GraphStats(
            node_count=len(self._nodes),
            edge_count=self._edge_count,
            unresolved_edge_count=unresolved,
            nodes_by_type=nodes_by_type,
            nodes_by_source=nodes_by_source,
        )

    def deployment_order(self, node_ids: list[str]) -> list[GraphNode]:
        """Order nodes so dependencies come before their dependents.

        Only dependencies inside ``node_ids`` are considered. Members of a
        dependency cycle are kept together in their input order instead of
        failing.

        Args:
            node_ids: Ids of the components to deploy.

        Returns:
            The resolved nodes in deployment order.
        """
        selected = [node_id for node_id in dict.fromkeys(node_ids) if node_id in self._nodes]
        position = {node_id: index for index, node_id in enumerate(selected)}

        subgraph = nx.DiGraph()
        subgraph.add_nodes_from(selected)
        for node_id in selected:
            for edge in self.outgoing(node_id):
                if edge.to_id in position:
                    subgraph.add_edge(node_id, edge.to_id)

        # Collapse cycles, then order with dependencies first
        condensed = nx.condensation(subgraph)
        ordered_components = nx.lexicographical_topological_sort(
            condensed.reverse(copy=True),
            key=lambda c: min(position[m] for m in condensed.nodes[c]["members"]),
        )

        order: list[GraphNode] = []
        for component in ordered_components:
            members = sorted(condensed.nodes[component]["members"], key=position.get)
            order.extend(self._nodes[node_id] for node_id in members)
        return order
