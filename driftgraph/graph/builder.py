"""Builder for converting a GraphSnapshot to a ComponentGraph."""

import logging
import time
from dataclasses import dataclass, field, replace

from ..schema.models import ComponentRecord, GraphSnapshot
from .component_graph import ComponentGraph, GraphEdge, GraphMetadata, GraphNode
from .hashing import compute_hash, extract_api_signature, extract_config, extract_label
from .identifiers import MalformedIdentifier, decode_component_id

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """A built graph plus the records that had to be skipped."""

    graph: ComponentGraph
    malformed: list[MalformedIdentifier] = field(default_factory=list)


def build_graph(snapshot: GraphSnapshot, compute_hashes: bool = True) -> BuildResult:
    """Build a frozen ComponentGraph from a snapshot.

    Components whose id cannot be decoded, and dependencies whose target
    cannot be decoded, are skipped and reported in the result rather than
    aborting the build.

    Args:
        snapshot: The parsed snapshot.
        compute_hashes: Derive missing api/config hashes from definitions.

    Returns:
        A BuildResult holding the frozen graph.
    """
    graph = ComponentGraph(
        GraphMetadata(
            source=snapshot.source,
            timestamp=snapshot.timestamp if snapshot.timestamp is not None else time.time(),
            environment_id=snapshot.environment_id,
        )
    )
    result = BuildResult(graph=graph)

    # Add all nodes first
    accepted: list[tuple[str, ComponentRecord]] = []
    for record in snapshot.components:
        node_id = record.component_id()
        ref = decode_component_id(node_id)
        if isinstance(ref, MalformedIdentifier):
            logger.warning("Skipping component with malformed id %r: %s", ref.value, ref.reason)
            result.malformed.append(ref)
            continue

        # An explicit version field wins over the one embedded in the id
        if record.id is not None and record.version and record.version != ref.version:
            ref = replace(ref, version=record.version)

        graph.add_node(_make_node(node_id, ref, record, snapshot, compute_hashes))
        accepted.append((node_id, record))

    # Add dependencies (after all nodes exist)
    edge_ids: dict[str, int] = {}
    for node_id, record in accepted:
        for dependency in record.dependencies:
            target_id = dependency.target_id()
            target_ref = decode_component_id(target_id)
            if isinstance(target_ref, MalformedIdentifier):
                logger.warning(
                    "Skipping dependency of %s with malformed target %r: %s",
                    node_id,
                    target_ref.value,
                    target_ref.reason,
                )
                result.malformed.append(target_ref)
                continue

            edge_id = f"{node_id}->{target_id}#{dependency.type.value}"
            seen = edge_ids.get(edge_id, 0)
            edge_ids[edge_id] = seen + 1
            if seen:
                edge_id = f"{edge_id}#{seen}"

            graph.add_edge(
                GraphEdge(
                    id=edge_id,
                    from_id=node_id,
                    to_id=target_id,
                    type=dependency.type,
                    version_range=dependency.version_range,
                    required=dependency.required,
                    metadata=dict(dependency.metadata),
                )
            )

    logger.debug(
        "Built %s graph with %d nodes, %d skipped records",
        snapshot.source.value,
        len(graph),
        len(result.malformed),
    )
    graph.freeze()
    return result


def _make_node(node_id, ref, record: ComponentRecord, snapshot, compute_hashes) -> GraphNode:
    component_type = record.component_type()
    definition = record.definition

    api_hash = record.api_hash
    config_hash = record.config_hash
    if compute_hashes and definition is not None:
        if api_hash is None:
            api_hash = compute_hash(extract_api_signature(definition, component_type))
        if config_hash is None:
            config_hash = compute_hash(extract_config(definition, component_type))

    return GraphNode(
        id=node_id,
        ref=ref,
        type=component_type,
        source=snapshot.source,
        label=record.label or extract_label(definition),
        definition=definition,
        api_hash=api_hash,
        config_hash=config_hash,
        tags=tuple(record.tags),
        metadata=dict(record.metadata),
    )
