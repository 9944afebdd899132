"""Output formatting for diff and impact results."""

import json
from dataclasses import asdict
from typing import Literal, Sequence

from ..diff.violations import GraphDelta, Severity, Violation
from ..graph.identifiers import MalformedIdentifier
from ..impact.models import CriticalComponent, DeploymentRisk, ImpactCone

OutputFormat = Literal["text", "json"]

_SYMBOLS = {
    Severity.ERROR: "✘",
    Severity.WARNING: "⚠",
    Severity.INFO: "ℹ",
}


def format_delta(
    delta: GraphDelta,
    format: OutputFormat = "text",
    skipped: Sequence[MalformedIdentifier] = (),
) -> str:
    """Format a diff result for output.

    Args:
        delta: The diff result to format.
        format: Output format ("text" or "json").
        skipped: Records dropped while building the graphs.

    Returns:
        Formatted string representation.
    """
    if format == "json":
        return _format_delta_json(delta, skipped)
    return _format_delta_text(delta, skipped)


def _format_delta_text(delta: GraphDelta, skipped: Sequence[MalformedIdentifier]) -> str:
    lines: list[str] = []

    for title, violations in (
        ("ERRORS:", delta.errors),
        ("WARNINGS:", delta.warnings),
        ("INFO:", delta.infos),
    ):
        lines.append(title)
        if violations:
            for violation in violations:
                lines.append(f"  {_format_violation_text(violation)}")
        else:
            lines.append("  (none)")
        lines.append("")

    if skipped:
        lines.append("SKIPPED RECORDS:")
        for record in skipped:
            lines.append(f"  ℹ malformed-id: {record.value} ({record.reason})")
        lines.append("")

    stats = delta.stats
    lines.append(
        f"Nodes: {stats.nodes_added} added, {stats.nodes_removed} removed, "
        f"{stats.nodes_changed} changed"
    )
    if delta.is_clean:
        lines.append("Graphs are in sync")
    elif delta.has_errors:
        lines.append(
            f"Drift detected: {stats.error_count} error(s), "
            f"{stats.warning_count} warning(s), {stats.info_count} info"
        )
    else:
        lines.append(
            f"Drift detected with no errors: {stats.warning_count} warning(s), "
            f"{stats.info_count} info"
        )

    return "\n".join(lines)


def _format_violation_text(violation: Violation) -> str:
    symbol = _SYMBOLS[violation.severity]
    return f"{symbol} {violation.kind.value}: [{violation.primary_id}] {violation.message}"


def _format_delta_json(delta: GraphDelta, skipped: Sequence[MalformedIdentifier]) -> str:
    data = {
        "in_sync": delta.is_clean,
        "timestamp": delta.timestamp,
        "metadata": asdict(delta.metadata),
        "stats": asdict(delta.stats),
        "violations": [
            {
                "kind": v.kind.value,
                "severity": v.severity.value,
                "component_ids": list(v.component_ids),
                "message": v.message,
                "details": asdict(v.details),
            }
            for v in delta.violations
        ],
        "skipped": [asdict(record) for record in skipped],
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_impact(
    cone: ImpactCone,
    format: OutputFormat = "text",
    risk: DeploymentRisk | None = None,
) -> str:
    """Format an impact cone, optionally with a risk estimate."""
    if format == "json":
        data = {
            "seed_ids": list(cone.seed_ids),
            "affected": sorted(cone.affected),
            "stats": asdict(cone.stats),
            "paths": [
                {
                    "target": p.target,
                    "path": list(p.path),
                    "depth": p.depth,
                    "path_string": p.path_string,
                }
                for p in cone.paths
            ],
        }
        if risk is not None:
            data["risk"] = {
                "level": risk.level.value,
                "affected_count": risk.affected_count,
                "reason": risk.reason,
            }
        return json.dumps(data, indent=2, ensure_ascii=False)

    lines = [f"Impact of changing: {', '.join(cone.seed_ids)}", ""]

    lines.append("AFFECTED:")
    if cone.affected:
        for node_id in sorted(cone.affected):
            lines.append(f"  • {node_id}")
    else:
        lines.append("  (none)")

    if cone.paths:
        lines.append("")
        lines.append("PATHS:")
        for path in cone.paths:
            lines.append(f"  [{path.depth}] {path.path_string}")

    lines.append("")
    by_type = ", ".join(f"{t}: {n}" for t, n in sorted(cone.stats.by_type.items()))
    lines.append(
        f"{cone.stats.total_affected} component(s) affected, "
        f"max depth {cone.stats.max_depth}" + (f" ({by_type})" if by_type else "")
    )
    if risk is not None:
        lines.append(f"Deployment risk: {risk.level.value.upper()} - {risk.reason}")

    return "\n".join(lines)


def format_critical(
    components: Sequence[CriticalComponent], format: OutputFormat = "text"
) -> str:
    """Format a critical-component ranking."""
    if format == "json":
        data = [
            {
                "id": c.id,
                "type": c.node.type.value,
                "score": c.score,
                "dependent_count": c.dependent_count,
                "exposed_count": c.exposed_count,
            }
            for c in components
        ]
        return json.dumps(data, indent=2, ensure_ascii=False)

    if not components:
        return "No critical components found"

    lines = ["CRITICAL COMPONENTS:"]
    for rank, c in enumerate(components, start=1):
        lines.append(
            f"  {rank}. {c.id} [{c.node.type.value}] score={c.score:g} "
            f"dependents={c.dependent_count} exposed={c.exposed_count}"
        )
    return "\n".join(lines)
