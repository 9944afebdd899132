"""Diff engine for comparing local and runtime component graphs."""

from .cycles import check_circular_dependencies, find_cycles
from .dependencies import (
    check_missing_dependencies,
    check_semver_violations,
    satisfies_range,
)
from .engine import diff_graphs
from .nodes import check_node_differences
from .violations import (
    DeltaMetadata,
    DeltaStats,
    GraphDelta,
    Severity,
    Violation,
    ViolationKind,
)

__all__ = [
    "check_circular_dependencies",
    "find_cycles",
    "check_missing_dependencies",
    "check_semver_violations",
    "satisfies_range",
    "diff_graphs",
    "check_node_differences",
    "DeltaMetadata",
    "DeltaStats",
    "GraphDelta",
    "Severity",
    "Violation",
    "ViolationKind",
]
