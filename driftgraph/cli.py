"""Command-line interface for DriftGraph."""

import json
import logging
import sys

import click

from .config import ConfigError, CriticalityStrategy, DriftGraphConfig, load_config
from .diff.engine import diff_graphs
from .graph.builder import BuildResult, build_graph
from .graph.node_types import ComponentType, GraphSource
from .impact.cone import impact_cone
from .impact.risk import estimate_deployment_risk, find_critical_components
from .output.formatter import format_critical, format_delta, format_impact
from .schema.errors import SnapshotLoadError, SnapshotValidationError
from .schema.loader import parse_snapshot

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)


@click.group()
@click.version_option(package_name="driftgraph")
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    envvar="DRIFTGRAPH_CONFIG",
    help="Path to a YAML config file (defaults to DRIFTGRAPH_CONFIG env var)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool):
    """DriftGraph: compare component dependency graphs and analyze impact."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    ctx.obj = {"config_path": config_path}


def _load_config(ctx: click.Context) -> DriftGraphConfig:
    """Load configuration once per invocation, exiting 2 on errors."""
    if "config" not in ctx.obj:
        try:
            ctx.obj["config"] = load_config(ctx.obj["config_path"])
        except ConfigError as e:
            click.echo(f"Config error: {e}", err=True)
            for err in e.errors:
                click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
            sys.exit(2)
    return ctx.obj["config"]


def _load_graph(
    path: str,
    source: GraphSource | None = None,
    environment_id: str | None = None,
) -> BuildResult:
    """Parse a snapshot file and build its graph, exiting 2 on errors."""
    try:
        snapshot = parse_snapshot(path)
    except SnapshotLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except SnapshotValidationError as e:
        click.echo(f"Schema validation error in {e.path or path}: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
        sys.exit(2)

    if source is not None:
        snapshot.source = source
    if environment_id is not None:
        snapshot.environment_id = environment_id

    return build_graph(snapshot)


@main.command()
@click.argument("local_file", type=click.Path(exists=True))
@click.argument("runtime_file", type=click.Path(exists=True))
@click.option(
    "--environment",
    "-e",
    "environment_id",
    help="Configured environment the runtime snapshot was taken from",
)
@FORMAT_OPTION
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors",
)
@click.pass_context
def diff(
    ctx: click.Context,
    local_file: str,
    runtime_file: str,
    environment_id: str | None,
    output_format: str,
    strict: bool,
):
    """Compare a local snapshot against a runtime snapshot.

    LOCAL_FILE and RUNTIME_FILE are YAML or JSON graph snapshots.

    Exit codes:
      0 - Graphs in sync (or only non-error drift)
      1 - Error-level drift found (or warnings with --strict)
      2 - File, schema or config error
    """
    if environment_id is not None:
        config = _load_config(ctx)
        if config.get_environment(environment_id) is None:
            click.echo(f"Config error: unknown environment '{environment_id}'", err=True)
            sys.exit(2)

    local = _load_graph(local_file, GraphSource.LOCAL)
    runtime = _load_graph(runtime_file, GraphSource.RUNTIME, environment_id)

    delta = diff_graphs(local.graph, runtime.graph)

    output = format_delta(
        delta, output_format, skipped=local.malformed + runtime.malformed  # type: ignore
    )
    click.echo(output)

    # Determine exit code
    if delta.has_errors:
        sys.exit(1)
    elif strict and delta.has_warnings:
        sys.exit(1)
    else:
        sys.exit(0)


@main.command()
@click.argument("graph_file", type=click.Path(exists=True))
@click.argument("seed_ids", nargs=-1, required=True)
@click.option(
    "--max-depth",
    type=click.IntRange(min=0),
    default=None,
    help="Stop expanding at this depth (defaults to the configured depth)",
)
@click.option(
    "--paths",
    "include_paths",
    is_flag=True,
    default=False,
    help="Show the path to each affected component",
)
@click.option(
    "--type",
    "include_types",
    type=click.Choice([t.value for t in ComponentType]),
    multiple=True,
    help="Only report affected components of this type (repeatable)",
)
@FORMAT_OPTION
@click.pass_context
def impact(
    ctx: click.Context,
    graph_file: str,
    seed_ids: tuple[str, ...],
    max_depth: int | None,
    include_paths: bool,
    include_types: tuple[str, ...],
    output_format: str,
):
    """Show which components are affected by changing SEED_IDS.

    GRAPH_FILE is a YAML or JSON graph snapshot.

    Exit codes:
      0 - Success
      2 - File, schema or config error
    """
    settings = _load_config(ctx).analysis
    if max_depth is not None:
        settings = settings.model_copy(update={"impact_max_depth": max_depth})

    result = _load_graph(graph_file)
    graph = result.graph

    for seed_id in seed_ids:
        if not graph.has_node(seed_id):
            click.echo(f"Warning: {seed_id} is not in the graph", err=True)

    cone = impact_cone(
        graph,
        seed_ids,
        max_depth=settings.impact_max_depth,
        include_paths=include_paths,
        include_types=include_types or None,
    )
    risk = estimate_deployment_risk(graph, seed_ids, settings)

    click.echo(format_impact(cone, output_format, risk=risk))  # type: ignore
    sys.exit(0)


@main.command()
@click.argument("graph_file", type=click.Path(exists=True))
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in CriticalityStrategy]),
    default=None,
    help="Scoring strategy (defaults to the configured strategy)",
)
@click.option(
    "--threshold",
    type=click.FloatRange(min=0),
    default=None,
    help="Minimum score to report (defaults to the configured threshold)",
)
@FORMAT_OPTION
@click.pass_context
def critical(
    ctx: click.Context,
    graph_file: str,
    strategy: str | None,
    threshold: float | None,
    output_format: str,
):
    """Rank the components of GRAPH_FILE that most others depend on.

    Exit codes:
      0 - Success
      2 - File, schema or config error
    """
    settings = _load_config(ctx).analysis
    overrides: dict = {}
    if strategy is not None:
        overrides["critical_strategy"] = CriticalityStrategy(strategy)
    if threshold is not None:
        overrides["critical_threshold"] = threshold
    if overrides:
        settings = settings.model_copy(update=overrides)

    graph = _load_graph(graph_file).graph
    components = find_critical_components(graph, settings)

    click.echo(format_critical(components, output_format))  # type: ignore
    sys.exit(0)


@main.command()
@click.argument("graph_file", type=click.Path(exists=True))
@click.argument("component_ids", nargs=-1)
def order(graph_file: str, component_ids: tuple[str, ...]):
    """Print components in deployment order, dependencies first.

    Orders COMPONENT_IDS, or every component in GRAPH_FILE when none are
    given.
    """
    graph = _load_graph(graph_file).graph
    ids = list(component_ids) or graph.node_ids

    for index, node in enumerate(graph.deployment_order(ids), start=1):
        click.echo(f"{index}. {node.id}")
    sys.exit(0)


@main.command()
@FORMAT_OPTION
@click.pass_context
def environments(ctx: click.Context, output_format: str):
    """List configured runtime environments.

    Exit codes:
      0 - Success
      2 - Config error
    """
    config = _load_config(ctx)

    try:
        active_id = config.active().id
    except ConfigError:
        active_id = None

    if output_format == "json":
        data = [
            {
                "id": env.id,
                "name": env.display_name,
                "base_url": env.base_url,
                "auth": env.auth.type,
                "active": env.id == active_id,
            }
            for env in config.environments.values()
        ]
        click.echo(json.dumps(data, indent=2))
        sys.exit(0)

    if not config.environments:
        click.echo("No environments configured")
        sys.exit(0)

    for env in config.environments.values():
        marker = "*" if env.id == active_id else " "
        click.echo(f"{marker} {env.id}: {env.display_name} ({env.base_url})")
    sys.exit(0)


if __name__ == "__main__":
    main()
