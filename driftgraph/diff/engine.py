"""Diff engine that runs every check over a local and a runtime graph."""

import logging

from ..errors import InvalidArgumentError
from ..graph.component_graph import ComponentGraph
from .cycles import check_circular_dependencies
from .dependencies import check_missing_dependencies, check_semver_violations
from .nodes import check_node_differences
from .violations import DeltaMetadata, GraphDelta, Violation

logger = logging.getLogger(__name__)


def diff_graphs(local: ComponentGraph, runtime: ComponentGraph) -> GraphDelta:
    """Compare a local graph against a runtime graph.

    Detected problems are returned as violations, never raised. The result
    is deterministic for equal inputs.

    Args:
        local: The workspace graph; its edges define what should exist.
        runtime: The deployed graph.

    Returns:
        A GraphDelta with sorted violations and aggregate stats.

    Raises:
        InvalidArgumentError: If either graph is missing.
    """
    if local is None:
        raise InvalidArgumentError("local graph is required", "local")
    if runtime is None:
        raise InvalidArgumentError("runtime graph is required", "runtime")

    violations: list[Violation] = []

    # Node-level comparison first
    violations.extend(check_node_differences(local, runtime))

    # Edge-level checks on the local graph
    violations.extend(check_missing_dependencies(local, runtime))
    violations.extend(check_semver_violations(local, runtime))
    violations.extend(check_circular_dependencies(local))

    delta = GraphDelta.from_violations(
        violations,
        metadata=DeltaMetadata(
            local_source=_source_name(local),
            runtime_source=_source_name(runtime),
            environment_id=runtime.metadata.environment_id,
        ),
    )

    logger.debug(
        "Diff complete: %d violation(s), %d error(s), %d warning(s)",
        delta.stats.total_violations,
        delta.stats.error_count,
        delta.stats.warning_count,
    )
    return delta


def _source_name(graph: ComponentGraph) -> str | None:
    return graph.source.value if graph.source is not None else None
