"""Violation records and the GraphDelta result of a diff."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from ..graph.identifiers import ComponentRef


class Severity(str, Enum):
    """Severity level of a violation."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ViolationKind(str, Enum):
    """Kinds of differences the diff engine reports."""

    NODE_ADDED = "node-added"  # In local, not in runtime
    NODE_REMOVED = "node-removed"  # In runtime, not in local
    NODE_CHANGED = "node-changed"  # In both, label/tags/type differ
    VERSION_DRIFT = "version-drift"
    SEMVER_VIOLATION = "semver-violation"
    MISSING_DEPENDENCY = "missing-dependency"
    CIRCULAR_DEPENDENCY = "circular-dependency"
    API_DRIFT = "api-drift"  # Breaking change
    CONFIG_DRIFT = "config-drift"


# -----------------------------------------------------------------------------
# Kind-specific details
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeAddedDetails:
    ref: ComponentRef
    component_type: str


@dataclass(frozen=True)
class NodeRemovedDetails:
    ref: ComponentRef
    component_type: str


@dataclass(frozen=True)
class NodeChangedDetails:
    ref: ComponentRef
    changes: tuple[str, ...]


@dataclass(frozen=True)
class VersionDriftDetails:
    ref: ComponentRef
    local_version: str
    runtime_version: str


@dataclass(frozen=True)
class SemverViolationDetails:
    dependent: ComponentRef
    dependency: ComponentRef
    required_range: str
    actual_version: str


@dataclass(frozen=True)
class MissingDependencyDetails:
    dependent: ComponentRef
    missing_id: str
    missing_ref: ComponentRef | None
    dependency_type: str


@dataclass(frozen=True)
class CircularDependencyDetails:
    cycle: tuple[ComponentRef, ...]
    cycle_path: str  # "A → B → C → A"


@dataclass(frozen=True)
class ApiDriftDetails:
    ref: ComponentRef
    local_hash: str
    runtime_hash: str


@dataclass(frozen=True)
class ConfigDriftDetails:
    ref: ComponentRef
    local_hash: str
    runtime_hash: str


ViolationDetails = Union[
    NodeAddedDetails,
    NodeRemovedDetails,
    NodeChangedDetails,
    VersionDriftDetails,
    SemverViolationDetails,
    MissingDependencyDetails,
    CircularDependencyDetails,
    ApiDriftDetails,
    ConfigDriftDetails,
]

DETAILS_BY_KIND: dict[ViolationKind, type] = {
    ViolationKind.NODE_ADDED: NodeAddedDetails,
    ViolationKind.NODE_REMOVED: NodeRemovedDetails,
    ViolationKind.NODE_CHANGED: NodeChangedDetails,
    ViolationKind.VERSION_DRIFT: VersionDriftDetails,
    ViolationKind.SEMVER_VIOLATION: SemverViolationDetails,
    ViolationKind.MISSING_DEPENDENCY: MissingDependencyDetails,
    ViolationKind.CIRCULAR_DEPENDENCY: CircularDependencyDetails,
    ViolationKind.API_DRIFT: ApiDriftDetails,
    ViolationKind.CONFIG_DRIFT: ConfigDriftDetails,
}

DEFAULT_SEVERITY: dict[ViolationKind, Severity] = {
    ViolationKind.NODE_ADDED: Severity.INFO,
    ViolationKind.NODE_REMOVED: Severity.WARNING,
    ViolationKind.NODE_CHANGED: Severity.INFO,
    ViolationKind.VERSION_DRIFT: Severity.WARNING,
    ViolationKind.SEMVER_VIOLATION: Severity.ERROR,
    ViolationKind.MISSING_DEPENDENCY: Severity.ERROR,
    ViolationKind.CIRCULAR_DEPENDENCY: Severity.ERROR,
    ViolationKind.API_DRIFT: Severity.ERROR,
    ViolationKind.CONFIG_DRIFT: Severity.WARNING,
}


@dataclass(frozen=True)
class Violation:
    """A single finding of the diff engine."""

    kind: ViolationKind
    severity: Severity
    component_ids: tuple[str, ...]
    message: str
    details: ViolationDetails

    def __post_init__(self) -> None:
        expected = DETAILS_BY_KIND[self.kind]
        if not isinstance(self.details, expected):
            raise TypeError(
                f"{self.kind.value} violation requires {expected.__name__}, "
                f"got {type(self.details).__name__}"
            )
        if not self.component_ids:
            raise ValueError("violation must name at least one component")

    @classmethod
    def create(
        cls,
        kind: ViolationKind,
        component_ids: tuple[str, ...] | list[str],
        message: str,
        details: ViolationDetails,
    ) -> "Violation":
        """Create a violation with the default severity for its kind."""
        return cls(
            kind=kind,
            severity=DEFAULT_SEVERITY[kind],
            component_ids=tuple(component_ids),
            message=message,
            details=details,
        )

    @property
    def primary_id(self) -> str:
        """The component the violation is reported against."""
        return self.component_ids[0]

    def __str__(self) -> str:
        return f"{self.severity.value.upper()}: {self.kind.value} [{self.primary_id}] - {self.message}"


# -----------------------------------------------------------------------------
# Diff result
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class DeltaStats:
    """Aggregate counts over a delta's violations."""

    total_violations: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    nodes_added: int = 0
    nodes_removed: int = 0
    nodes_changed: int = 0


@dataclass(frozen=True)
class DeltaMetadata:
    """Provenance of the two graphs that were compared."""

    local_source: str | None = None
    runtime_source: str | None = None
    environment_id: str | None = None


@dataclass(frozen=True)
class GraphDelta:
    """Result of comparing a local graph with a runtime graph."""

    violations: tuple[Violation, ...]
    by_severity: dict[Severity, tuple[Violation, ...]]
    stats: DeltaStats
    timestamp: float
    metadata: DeltaMetadata = field(default_factory=DeltaMetadata)

    @classmethod
    def from_violations(
        cls,
        violations: list[Violation],
        metadata: DeltaMetadata | None = None,
        timestamp: float | None = None,
    ) -> "GraphDelta":
        """Sort violations and compute the severity partition and stats.

        Violations are ordered by (kind, primary component id); the sort is
        stable so equal keys keep detection order.
        """
        ordered = tuple(sorted(violations, key=lambda v: (v.kind.value, v.primary_id)))

        by_severity = {
            severity: tuple(v for v in ordered if v.severity == severity)
            for severity in Severity
        }

        def count(kind: ViolationKind) -> int:
            return sum(1 for v in ordered if v.kind == kind)

        stats = DeltaStats(
            total_violations=len(ordered),
            error_count=len(by_severity[Severity.ERROR]),
            warning_count=len(by_severity[Severity.WARNING]),
            info_count=len(by_severity[Severity.INFO]),
            nodes_added=count(ViolationKind.NODE_ADDED),
            nodes_removed=count(ViolationKind.NODE_REMOVED),
            nodes_changed=count(ViolationKind.NODE_CHANGED),
        )

        return cls(
            violations=ordered,
            by_severity=by_severity,
            stats=stats,
            timestamp=timestamp if timestamp is not None else time.time(),
            metadata=metadata or DeltaMetadata(),
        )

    @property
    def errors(self) -> tuple[Violation, ...]:
        """Get all error-level violations."""
        return self.by_severity[Severity.ERROR]

    @property
    def warnings(self) -> tuple[Violation, ...]:
        """Get all warning-level violations."""
        return self.by_severity[Severity.WARNING]

    @property
    def infos(self) -> tuple[Violation, ...]:
        """Get all info-level violations."""
        return self.by_severity[Severity.INFO]

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def is_clean(self) -> bool:
        """Check if the graphs are in sync (no violations at all)."""
        return not self.violations

    def of_kind(self, kind: ViolationKind) -> list[Violation]:
        """Get all violations of one kind."""
        return [v for v in self.violations if v.kind == kind]
