"""Critical-component ranking and deployment risk estimation."""

from typing import Iterable

from ..config import AnalysisSettings, CriticalityStrategy
from ..graph.component_graph import ComponentGraph, GraphNode
from .cone import impact_cone
from .models import CriticalComponent, DeploymentRisk, RiskLevel


def find_critical_components(
    graph: ComponentGraph, settings: AnalysisSettings | None = None
) -> list[CriticalComponent]:
    """Rank components by how much of the graph depends on them.

    The score depends on ``settings.critical_strategy``:

    - ``fan_in``: number of direct incoming dependency edges.
    - ``type_weighted``: fan-in multiplied by the component type's weight.
    - ``transitive``: number of components in the unbounded impact cone.
    - ``exposed``: number of direct dependents that nothing depends on, so
      a change reaches them with nothing downstream to absorb it.

    Components scoring zero or below ``settings.critical_threshold`` are
    dropped.

    Args:
        graph: The graph to rank.
        settings: Analysis settings, defaults if omitted.

    Returns:
        Critical components, highest score first, ties broken by id.
    """
    settings = settings or AnalysisSettings()
    ranked: list[CriticalComponent] = []

    for node in graph.iter_nodes():
        fan_in = graph.fan_in(node.id)
        if fan_in == 0:
            continue

        exposed = len(
            {d.id for d in graph.dependents(node.id) if graph.fan_in(d.id) == 0}
        )
        score = _score(graph, node, fan_in, exposed, settings)
        if score == 0 or score < settings.critical_threshold:
            continue

        ranked.append(
            CriticalComponent(
                node=node,
                score=score,
                dependent_count=fan_in,
                exposed_count=exposed,
            )
        )

    ranked.sort(key=lambda c: (-c.score, c.id))
    return ranked


def _score(
    graph: ComponentGraph,
    node: GraphNode,
    fan_in: int,
    exposed: int,
    settings: AnalysisSettings,
) -> float:
    strategy = settings.critical_strategy

    if strategy == CriticalityStrategy.TYPE_WEIGHTED:
        return fan_in * settings.weight_for(node.type)

    if strategy == CriticalityStrategy.TRANSITIVE:
        return impact_cone(graph, [node.id], max_depth=None).stats.total_affected

    if strategy == CriticalityStrategy.EXPOSED:
        return exposed

    return fan_in


def estimate_deployment_risk(
    graph: ComponentGraph,
    component_ids: Iterable[str],
    settings: AnalysisSettings | None = None,
) -> DeploymentRisk:
    """Estimate the risk of deploying components from their impact cone size.

    Args:
        graph: The local graph.
        component_ids: Components about to be deployed.
        settings: Analysis settings holding depth bound and thresholds.

    Returns:
        The DeploymentRisk.
    """
    settings = settings or AnalysisSettings()
    thresholds = settings.risk_thresholds

    cone = impact_cone(graph, component_ids, max_depth=settings.impact_max_depth)
    count = cone.stats.total_affected

    if count <= thresholds.low:
        return DeploymentRisk(RiskLevel.LOW, count, f"Only {count} component(s) affected")
    if count <= thresholds.medium:
        return DeploymentRisk(RiskLevel.MEDIUM, count, f"{count} components affected")
    if count <= thresholds.high:
        return DeploymentRisk(
            RiskLevel.HIGH, count, f"{count} components affected - significant impact"
        )
    return DeploymentRisk(
        RiskLevel.CRITICAL, count, f"{count} components affected - very high impact"
    )
