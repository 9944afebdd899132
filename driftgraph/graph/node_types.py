"""Component, dependency and source type definitions."""

from enum import Enum


class ComponentType(str, Enum):
    """Kinds of components in a dependency graph."""

    TASK = "task"
    SCHEMA = "schema"
    VIEW = "view"
    FUNCTION = "function"
    EXTENSION = "extension"
    WORKFLOW = "workflow"


class DependencyType(str, Enum):
    """Kinds of dependency edges."""

    FUNCTION = "function"
    EXTENSION = "extension"
    SCHEMA = "schema"
    WORKFLOW = "workflow"
    SUBFLOW = "subflow"
    TASK = "task"
    VIEW = "view"


class GraphSource(str, Enum):
    """Where a graph snapshot came from."""

    LOCAL = "local"  # Authored in the workspace
    RUNTIME = "runtime"  # Deployed to a remote environment


# Each component type is deployed through its own system flow
COMPONENT_FLOWS: dict[ComponentType, str] = {
    ComponentType.TASK: "sys-tasks",
    ComponentType.SCHEMA: "sys-schemas",
    ComponentType.VIEW: "sys-views",
    ComponentType.FUNCTION: "sys-functions",
    ComponentType.EXTENSION: "sys-extensions",
    ComponentType.WORKFLOW: "sys-flows",
}

FLOW_COMPONENTS: dict[str, ComponentType] = {
    flow: component_type for component_type, flow in COMPONENT_FLOWS.items()
}


def component_type_for_flow(flow: str) -> ComponentType | None:
    """Get the component type deployed through a system flow."""
    return FLOW_COMPONENTS.get(flow)
