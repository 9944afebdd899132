"""Dependency checks over the edges of the local graph."""

import logging

from nodesemver import satisfies

from ..graph.component_graph import ComponentGraph, GraphNode
from ..graph.identifiers import ComponentRef, MalformedIdentifier, decode_component_id
from .violations import (
    MissingDependencyDetails,
    SemverViolationDetails,
    Violation,
    ViolationKind,
)

logger = logging.getLogger(__name__)


def satisfies_range(version: str, version_range: str) -> bool:
    """Check a version against an npm-style range (``^2.0.0``, ``>=1.2 <2``).

    An unparseable version or range is treated as not satisfied.
    """
    try:
        return bool(satisfies(version, version_range))
    except ValueError:
        logger.debug("Cannot evaluate %r against range %r", version, version_range)
        return False


def resolve_target(
    node_id: str, local: ComponentGraph, runtime: ComponentGraph
) -> GraphNode | None:
    """Find a node in the combined view, preferring the local graph."""
    return local.node(node_id) or runtime.node(node_id)


def dependent_ref(node_id: str, local: ComponentGraph) -> ComponentRef | None:
    """The ref of an edge source, decoded from its id if it is not a node."""
    node = local.node(node_id)
    if node is not None:
        return node.ref
    ref = decode_component_id(node_id)
    if isinstance(ref, MalformedIdentifier):
        return None
    return ref


def check_missing_dependencies(
    local: ComponentGraph, runtime: ComponentGraph
) -> list[Violation]:
    """Report local edges whose target exists in neither graph.

    Args:
        local: The workspace graph; its edges are the source of truth.
        runtime: The deployed graph, consulted to resolve targets.

    Returns:
        One missing-dependency error per unresolved edge.
    """
    violations: list[Violation] = []

    for edge in local.iter_edges():
        if resolve_target(edge.to_id, local, runtime) is not None:
            continue

        dependent = dependent_ref(edge.from_id, local)
        if dependent is None:
            continue

        missing_ref = decode_component_id(edge.to_id)
        if isinstance(missing_ref, MalformedIdentifier):
            missing_ref = None
        missing_name = missing_ref.short_name if missing_ref else edge.to_id

        violations.append(
            Violation.create(
                ViolationKind.MISSING_DEPENDENCY,
                [edge.from_id, edge.to_id],
                f"{dependent.key} depends on {missing_name}, which does not exist",
                MissingDependencyDetails(
                    dependent=dependent,
                    missing_id=edge.to_id,
                    missing_ref=missing_ref,
                    dependency_type=edge.type.value,
                ),
            )
        )

    return violations


def check_semver_violations(
    local: ComponentGraph, runtime: ComponentGraph
) -> list[Violation]:
    """Report local edges whose resolved target falls outside the version range.

    Args:
        local: The workspace graph.
        runtime: The deployed graph, consulted to resolve targets.

    Returns:
        One semver-violation error per unsatisfied edge.
    """
    violations: list[Violation] = []

    for edge in local.iter_edges():
        if not edge.version_range:
            continue

        target = resolve_target(edge.to_id, local, runtime)
        dependent = dependent_ref(edge.from_id, local)
        if target is None or dependent is None:
            continue

        actual_version = target.ref.version
        if satisfies_range(actual_version, edge.version_range):
            continue

        violations.append(
            Violation.create(
                ViolationKind.SEMVER_VIOLATION,
                [edge.from_id, edge.to_id],
                f"{dependent.key} requires {target.ref.key}@{edge.version_range}, "
                f"but found {actual_version}",
                SemverViolationDetails(
                    dependent=dependent,
                    dependency=target.ref,
                    required_range=edge.version_range,
                    actual_version=actual_version,
                ),
            )
        )

    return violations
