"""Graph layer: identifiers, the component graph and content hashing.

The snapshot builder lives in :mod:`driftgraph.graph.builder` and is not
re-exported here, since it depends on the schema layer.
"""

from .component_graph import (
    ComponentGraph,
    GraphEdge,
    GraphMetadata,
    GraphNode,
    GraphStats,
)
from .identifiers import (
    ComponentRef,
    MalformedIdentifier,
    component_key,
    decode_component_id,
    encode_component_id,
)
from .node_types import ComponentType, DependencyType, GraphSource

__all__ = [
    "ComponentGraph",
    "GraphEdge",
    "GraphMetadata",
    "GraphNode",
    "GraphStats",
    "ComponentRef",
    "MalformedIdentifier",
    "component_key",
    "decode_component_id",
    "encode_component_id",
    "ComponentType",
    "DependencyType",
    "GraphSource",
]
