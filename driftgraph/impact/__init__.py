"""Impact analysis: impact cones, critical components and deployment risk."""

from .cone import (
    DEFAULT_MAX_DEPTH,
    all_dependents,
    direct_dependents,
    find_shortest_path,
    impact_cone,
)
from .models import (
    CriticalComponent,
    DependencyPath,
    DeploymentRisk,
    ImpactCone,
    ImpactStats,
    RiskLevel,
)
from .risk import estimate_deployment_risk, find_critical_components

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "all_dependents",
    "direct_dependents",
    "find_shortest_path",
    "impact_cone",
    "CriticalComponent",
    "DependencyPath",
    "DeploymentRisk",
    "ImpactCone",
    "ImpactStats",
    "RiskLevel",
    "estimate_deployment_risk",
    "find_critical_components",
]
