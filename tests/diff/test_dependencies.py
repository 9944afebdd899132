"""Tests for dependency checks."""

import pytest

from driftgraph.diff.dependencies import (
    check_missing_dependencies,
    check_semver_violations,
    resolve_target,
    satisfies_range,
)
from driftgraph.diff.violations import Severity, ViolationKind
from driftgraph.graph.node_types import GraphSource

SVC = "core/sys-flows/svc@1.0.0"
DEP = "core/sys-flows/dep@1.5.0"
GHOST = "core/sys-flows/ghost@1.0.0"


class TestSatisfiesRange:
    @pytest.mark.parametrize(
        "version,version_range,expected",
        [
            ("2.3.1", "^2.0.0", True),
            ("1.9.0", "^2.0.0", False),
            ("1.2.5", "~1.2.0", True),
            ("1.3.0", "~1.2.0", False),
            ("1.5.0", ">=1.0.0 <2.0.0", True),
            ("1.5.0", "1.x", True),
            ("3.0.0", "^1.0.0 || ^3.0.0", True),
        ],
    )
    def test_ranges(self, version, version_range, expected):
        assert satisfies_range(version, version_range) is expected

    def test_unparseable_version_is_not_satisfied(self):
        assert satisfies_range("latest", "^1.0.0") is False


class TestMissingDependencies:
    def test_missing_dependency(self, graph_factory):
        local = graph_factory([SVC], [(SVC, GHOST)])
        runtime = graph_factory([], source=GraphSource.RUNTIME)

        violations = check_missing_dependencies(local, runtime)

        assert len(violations) == 1
        violation = violations[0]
        assert violation.kind == ViolationKind.MISSING_DEPENDENCY
        assert violation.severity == Severity.ERROR
        assert violation.component_ids == (SVC, GHOST)
        assert violation.details.missing_id == GHOST
        assert violation.details.missing_ref.key == "ghost"
        assert violation.details.dependent.key == "svc"

    def test_target_resolved_from_runtime(self, graph_factory):
        local = graph_factory([SVC], [(SVC, DEP)])
        runtime = graph_factory([DEP], source=GraphSource.RUNTIME)

        assert check_missing_dependencies(local, runtime) == []

    def test_resolve_prefers_local(self, graph_factory, node_factory):
        local = graph_factory([node_factory(DEP, label="local")])
        runtime = graph_factory([node_factory(DEP, label="runtime")], source=GraphSource.RUNTIME)

        assert resolve_target(DEP, local, runtime).label == "local"

    def test_runtime_edges_are_not_checked(self, graph_factory):
        local = graph_factory([])
        runtime = graph_factory([SVC], [(SVC, GHOST)], source=GraphSource.RUNTIME)

        assert check_missing_dependencies(local, runtime) == []


class TestSemverViolations:
    def test_semver_violation(self, graph_factory):
        local = graph_factory([SVC, DEP], [(SVC, DEP, "^2.0.0")])
        runtime = graph_factory([], source=GraphSource.RUNTIME)

        violations = check_semver_violations(local, runtime)

        assert len(violations) == 1
        violation = violations[0]
        assert violation.kind == ViolationKind.SEMVER_VIOLATION
        assert violation.severity == Severity.ERROR
        assert violation.details.required_range == "^2.0.0"
        assert violation.details.actual_version == "1.5.0"
        assert violation.details.dependency.key == "dep"

    def test_satisfied_range(self, graph_factory):
        local = graph_factory([SVC, DEP], [(SVC, DEP, "^1.0.0")])

        assert check_semver_violations(local, graph_factory([])) == []

    def test_no_range_no_check(self, graph_factory):
        local = graph_factory([SVC, DEP], [(SVC, DEP)])

        assert check_semver_violations(local, graph_factory([])) == []

    def test_unresolved_target_not_checked(self, graph_factory):
        local = graph_factory([SVC], [(SVC, GHOST, "^2.0.0")])

        assert check_semver_violations(local, graph_factory([])) == []

    def test_invalid_range_is_a_violation(self, graph_factory):
        local = graph_factory([SVC, DEP], [(SVC, DEP, "not a range")])

        violations = check_semver_violations(local, graph_factory([]))

        assert [v.kind for v in violations] == [ViolationKind.SEMVER_VIOLATION]
