"""Impact cone computation by reverse breadth-first traversal."""

import logging
from collections import deque
from typing import Iterable

import networkx as nx

from ..errors import InvalidArgumentError
from ..graph.component_graph import ComponentGraph, GraphNode
from .models import DependencyPath, ImpactCone, ImpactStats

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10
PATH_ARROW = " → "


def impact_cone(
    graph: ComponentGraph,
    seed_ids: Iterable[str],
    max_depth: int | None = DEFAULT_MAX_DEPTH,
    include_paths: bool = False,
    include_types: Iterable[str] | None = None,
) -> ImpactCone:
    """Find every component affected by a change to the seeds.

    Walks the reverse dependency relation: the dependents of a component
    are the sources of its incoming edges. A component is visited at most
    once, so cycles terminate. Seeds are only reported as affected when a
    cycle leads back to them from a non-seed component.

    Args:
        graph: The graph to traverse.
        seed_ids: Ids of the changed components.
        max_depth: Components at this depth are not expanded further;
            None means unbounded.
        include_paths: Reconstruct the shortest path to each affected
            component.
        include_types: Only report affected components of these types;
            traversal still passes through the others.

    Returns:
        The ImpactCone.

    Raises:
        InvalidArgumentError: If the graph is missing, no seeds are given
            or max_depth is negative.
    """
    if graph is None:
        raise InvalidArgumentError("graph is required", "graph")

    seeds = tuple(dict.fromkeys(seed_ids))
    if not seeds:
        raise InvalidArgumentError("at least one seed id is required", "seed_ids")

    if max_depth is not None and max_depth < 0:
        raise InvalidArgumentError("max_depth must not be negative", "max_depth")

    type_filter = {str(getattr(t, "value", t)) for t in include_types} if include_types else None
    seed_set = set(seeds)

    visited: set[str] = set(seeds)
    parent: dict[str, str] = {}
    depth_of: dict[str, int] = {}
    affected_order: list[str] = []

    queue: deque[tuple[str, int]] = deque((seed, 0) for seed in seeds)
    max_reached = 0

    while queue:
        current, depth = queue.popleft()

        if max_depth is not None and depth >= max_depth:
            continue

        for edge in graph.incoming(current):
            dependent = edge.from_id

            if dependent in seed_set:
                # A cycle leading back to a seed from outside the seed set
                if current not in seed_set and dependent not in depth_of:
                    parent[dependent] = current
                    depth_of[dependent] = depth + 1
                    affected_order.append(dependent)
                    max_reached = max(max_reached, depth + 1)
                continue

            if dependent in visited:
                continue

            visited.add(dependent)
            parent[dependent] = current
            depth_of[dependent] = depth + 1
            affected_order.append(dependent)
            max_reached = max(max_reached, depth + 1)
            queue.append((dependent, depth + 1))

    if type_filter is not None:
        affected_order = [
            node_id
            for node_id in affected_order
            if _type_of(graph.node(node_id)) in type_filter
        ]

    affected_nodes = tuple(
        node for node in (graph.node(node_id) for node_id in affected_order) if node
    )

    by_type: dict[str, int] = {}
    for node_id in affected_order:
        node_type = _type_of(graph.node(node_id))
        by_type[node_type] = by_type.get(node_type, 0) + 1

    paths: tuple[DependencyPath, ...] = ()
    if include_paths:
        paths = tuple(
            _reconstruct_path(graph, node_id, parent, seed_set, depth_of[node_id])
            for node_id in affected_order
        )

    logger.debug(
        "Impact of %d seed(s): %d affected, depth %d",
        len(seeds),
        len(affected_order),
        max_reached,
    )

    return ImpactCone(
        seed_ids=seeds,
        affected=frozenset(affected_order),
        affected_nodes=affected_nodes,
        stats=ImpactStats(
            total_affected=len(affected_order),
            max_depth=max_reached,
            by_type=by_type,
        ),
        paths=paths,
    )


def _type_of(node: GraphNode | None) -> str:
    return node.type.value if node is not None else "unknown"


def _reconstruct_path(
    graph: ComponentGraph,
    node_id: str,
    parent: dict[str, str],
    seed_set: set[str],
    depth: int,
) -> DependencyPath:
    """Walk parent links from a node back to the seed that discovered it."""
    path = [node_id]
    current = parent[node_id]
    while current not in seed_set:
        path.append(current)
        current = parent[current]
    path.append(current)
    path.reverse()

    return DependencyPath(
        target=node_id,
        path=tuple(path),
        depth=depth,
        path_string=PATH_ARROW.join(_display_name(graph, step) for step in path),
    )


def _display_name(graph: ComponentGraph, node_id: str) -> str:
    node = graph.node(node_id)
    return node.display_name if node is not None else node_id


def direct_dependents(graph: ComponentGraph, component_id: str) -> list[GraphNode]:
    """Components that depend directly on a component."""
    return graph.dependents(component_id)


def all_dependents(graph: ComponentGraph, component_id: str) -> list[GraphNode]:
    """Every component that depends on a component, at any depth."""
    cone = impact_cone(graph, [component_id], max_depth=None)
    return [node for node in cone.affected_nodes if node.id != component_id]


def find_shortest_path(
    graph: ComponentGraph, from_id: str, to_id: str
) -> list[str] | None:
    """Shortest chain of dependents leading from one component to another.

    ``from_id`` is the changed component; each step moves to a component
    that depends on the previous one.

    Returns:
        The ids along the path, or None if ``to_id`` is not reachable.
    """
    try:
        return nx.shortest_path(graph.graph.reverse(copy=False), from_id, to_id)
    except (nx.NetworkXNoPath, nx.NodeNotFound):
        return None
