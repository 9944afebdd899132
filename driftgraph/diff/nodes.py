"""Node-level comparison of a local and a runtime graph."""

from ..graph.component_graph import ComponentGraph, GraphNode
from ..graph.identifiers import component_key
from .violations import (
    ApiDriftDetails,
    ConfigDriftDetails,
    NodeAddedDetails,
    NodeChangedDetails,
    NodeRemovedDetails,
    VersionDriftDetails,
    Violation,
    ViolationKind,
)


def check_node_differences(
    local: ComponentGraph, runtime: ComponentGraph
) -> list[Violation]:
    """Compare the nodes of two graphs.

    Iterates the union of node ids. Ids present on one side only are
    reported as added or removed; ids present on both sides are checked for
    hash drift, version drift and other field changes.

    Args:
        local: The workspace graph.
        runtime: The deployed graph.

    Returns:
        The node-level violations, in detection order.
    """
    violations: list[Violation] = []

    for node in local.iter_nodes():
        runtime_node = runtime.node(node.id)
        if runtime_node is None:
            violations.append(
                Violation.create(
                    ViolationKind.NODE_ADDED,
                    [node.id],
                    f"Component {node.ref.short_name} exists in local but not in runtime",
                    NodeAddedDetails(ref=node.ref, component_type=node.type.value),
                )
            )
        else:
            violations.extend(compare_nodes(node, runtime_node))

    for node in runtime.iter_nodes():
        if not local.has_node(node.id):
            violations.append(
                Violation.create(
                    ViolationKind.NODE_REMOVED,
                    [node.id],
                    f"Component {node.ref.short_name} exists in runtime but not in local",
                    NodeRemovedDetails(ref=node.ref, component_type=node.type.value),
                )
            )

    return violations


def compare_nodes(local: GraphNode, runtime: GraphNode) -> list[Violation]:
    """Compare two nodes that share an id.

    Hashes are only compared when both sides carry one; a missing hash
    means the digest was not computed, not that the content is empty.
    """
    violations: list[Violation] = []
    name = local.ref.short_name

    api_drift = (
        local.api_hash is not None
        and runtime.api_hash is not None
        and local.api_hash != runtime.api_hash
    )
    if api_drift:
        violations.append(
            Violation.create(
                ViolationKind.API_DRIFT,
                [local.id],
                f"API breaking change detected in {name}",
                ApiDriftDetails(
                    ref=local.ref,
                    local_hash=local.api_hash,
                    runtime_hash=runtime.api_hash,
                ),
            )
        )

    config_drift = (
        local.config_hash is not None
        and runtime.config_hash is not None
        and local.config_hash != runtime.config_hash
    )
    if config_drift and not api_drift:
        violations.append(
            Violation.create(
                ViolationKind.CONFIG_DRIFT,
                [local.id],
                f"Configuration drift detected in {name}",
                ConfigDriftDetails(
                    ref=local.ref,
                    local_hash=local.config_hash,
                    runtime_hash=runtime.config_hash,
                ),
            )
        )

    same_component = component_key(local.ref) == component_key(runtime.ref)
    if same_component and local.ref.version != runtime.ref.version:
        violations.append(
            Violation.create(
                ViolationKind.VERSION_DRIFT,
                [local.id],
                f"Version drift for {local.ref.key}: local has "
                f"{local.ref.version}, runtime has {runtime.ref.version}",
                VersionDriftDetails(
                    ref=local.ref,
                    local_version=local.ref.version,
                    runtime_version=runtime.ref.version,
                ),
            )
        )

    changes = detect_field_changes(local, runtime)
    if changes:
        violations.append(
            Violation.create(
                ViolationKind.NODE_CHANGED,
                [local.id],
                f"Component {name} has changes: {', '.join(changes)}",
                NodeChangedDetails(ref=local.ref, changes=tuple(changes)),
            )
        )

    return violations


def detect_field_changes(local: GraphNode, runtime: GraphNode) -> list[str]:
    """Names of structural fields that differ, other than hashes and version."""
    changes = []

    if component_key(local.ref) != component_key(runtime.ref):
        changes.append("ref")

    if local.type != runtime.type:
        changes.append("type")

    if local.label != runtime.label:
        changes.append("label")

    if set(local.tags) != set(runtime.tags):
        changes.append("tags")

    return changes
