"""Data models for impact analysis."""

from dataclasses import dataclass, field
from enum import Enum

from ..graph.component_graph import GraphNode


@dataclass(frozen=True)
class DependencyPath:
    """How one affected component is reached from a seed."""

    target: str
    path: tuple[str, ...]  # seed first, target last
    depth: int
    path_string: str  # e.g. "Customer Schema → Onboarding → Loan Flow"


@dataclass(frozen=True)
class ImpactStats:
    """Summary of an impact cone."""

    total_affected: int
    max_depth: int
    by_type: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class ImpactCone:
    """Components affected by a change to the seed components."""

    seed_ids: tuple[str, ...]
    affected: frozenset[str]
    affected_nodes: tuple[GraphNode, ...]  # BFS order, resolved nodes only
    stats: ImpactStats
    paths: tuple[DependencyPath, ...] = ()

    def path_to(self, node_id: str) -> DependencyPath | None:
        """Get the recorded path to an affected component."""
        for path in self.paths:
            if path.target == node_id:
                return path
        return None


class RiskLevel(str, Enum):
    """Deployment risk derived from the impact cone size."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class DeploymentRisk:
    """Risk estimate for deploying a set of components."""

    level: RiskLevel
    affected_count: int
    reason: str


@dataclass(frozen=True)
class CriticalComponent:
    """A component ranked by how much depends on it."""

    node: GraphNode
    score: float
    dependent_count: int  # Direct incoming edges
    exposed_count: int  # Direct dependents with no dependents of their own

    @property
    def id(self) -> str:
        return self.node.id
