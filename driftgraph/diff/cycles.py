"""Circular dependency detection."""

from ..graph.component_graph import ComponentGraph
from ..graph.identifiers import ComponentRef, decode_component_id
from .violations import CircularDependencyDetails, Violation, ViolationKind

CYCLE_ARROW = " → "


def find_cycles(graph: ComponentGraph) -> list[list[str]]:
    """Find dependency cycles with a depth-first search.

    Follows outgoing edges from every node, keeping the current path as a
    recursion stack. An edge back onto the stack closes a cycle, so one cycle
    is reported per back edge the search meets. Nodes are expanded only
    once, which means this is not an enumeration of every elementary cycle:
    a cycle through a chord of an already reported one can go unreported.
    The same node set is never reported twice.

    Args:
        graph: The graph to search.

    Returns:
        Cycles as lists of node ids in dependency order, without the
        closing repeat of the first id.
    """
    visited: set[str] = set()
    on_stack: set[str] = set()
    seen: set[frozenset[str]] = set()
    cycles: list[list[str]] = []

    for start in graph.node_ids:
        if start in visited:
            continue

        visited.add(start)
        on_stack.add(start)
        path = [start]
        stack = [(start, iter(graph.outgoing(start)))]

        while stack:
            node_id, edges = stack[-1]
            edge = next(edges, None)

            if edge is None:
                stack.pop()
                path.pop()
                on_stack.discard(node_id)
                continue

            target = edge.to_id
            if target in on_stack:
                cycle = path[path.index(target):]
                key = frozenset(cycle)
                if key not in seen:
                    seen.add(key)
                    cycles.append(cycle)
            elif target not in visited:
                visited.add(target)
                on_stack.add(target)
                path.append(target)
                stack.append((target, iter(graph.outgoing(target))))

    return cycles


def format_cycle_path(cycle: list[str]) -> str:
    """Render a cycle as ``A → B → C → A``."""
    return CYCLE_ARROW.join(cycle + cycle[:1])


def check_circular_dependencies(graph: ComponentGraph) -> list[Violation]:
    """Report each distinct dependency cycle in a graph.

    Args:
        graph: The local graph.

    Returns:
        One circular-dependency error per cycle.
    """
    violations: list[Violation] = []

    for cycle in find_cycles(graph):
        refs: list[ComponentRef] = []
        for node_id in cycle:
            node = graph.node(node_id)
            ref = node.ref if node is not None else decode_component_id(node_id)
            if isinstance(ref, ComponentRef):
                refs.append(ref)

        cycle_path = format_cycle_path(cycle)
        violations.append(
            Violation.create(
                ViolationKind.CIRCULAR_DEPENDENCY,
                cycle,
                f"Circular dependency detected: {cycle_path}",
                CircularDependencyDetails(cycle=tuple(refs), cycle_path=cycle_path),
            )
        )

    return violations
