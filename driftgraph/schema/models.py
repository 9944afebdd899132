"""Pydantic models for graph snapshot documents."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..graph.identifiers import ComponentRef, decode_component_id, encode_component_id
from ..graph.node_types import (
    COMPONENT_FLOWS,
    ComponentType,
    DependencyType,
    GraphSource,
    component_type_for_flow,
)


class DependencyRecord(BaseModel):
    """A dependency of a component, by target id or by ref fields."""

    model_config = ConfigDict(populate_by_name=True)

    target: str | None = None
    domain: str | None = None
    flow: str | None = None
    key: str | None = None
    version: str | None = None
    type: DependencyType = DependencyType.WORKFLOW
    version_range: str | None = Field(default=None, alias="versionRange")
    required: bool = True
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_target(cls, data: Any) -> Any:
        """Allow a bare id string as shorthand for ``{target: id}``."""
        if isinstance(data, str):
            return {"target": data}
        return data

    @model_validator(mode="after")
    def check_target(self) -> "DependencyRecord":
        """Require either a target id or a full set of ref fields."""
        if self.target is None and not all(
            (self.domain, self.flow, self.key, self.version)
        ):
            raise ValueError(
                "dependency needs a target id or domain, flow, key and version"
            )
        return self

    def target_id(self) -> str:
        """The id of the component this dependency points to."""
        if self.target is not None:
            return self.target
        return encode_component_id(
            ComponentRef(
                domain=self.domain or "",
                flow=self.flow or "",
                key=self.key or "",
                version=self.version or "",
            )
        )


class ComponentRecord(BaseModel):
    """One component as written by a scanner or runtime fetcher."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    domain: str | None = None
    flow: str | None = None
    key: str | None = None
    version: str | None = None
    type: ComponentType | None = None
    label: str | None = None
    definition: Any = None
    api_hash: str | None = Field(default=None, alias="apiHash")
    config_hash: str | None = Field(default=None, alias="configHash")
    tags: list[str] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)
    dependencies: list[DependencyRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_identity(self) -> "ComponentRecord":
        """Require either an id or domain, key and version."""
        if self.id is None and not all((self.domain, self.key, self.version)):
            raise ValueError("component needs an id or domain, key and version")
        if self.id is None and not self.flow and self.type is None:
            raise ValueError("component needs a flow or a type to derive one")
        return self

    def component_type(self) -> ComponentType:
        """The declared type, else the type implied by the flow or id."""
        if self.type is not None:
            return self.type
        flow = self.flow
        if flow is None and self.id is not None:
            ref = decode_component_id(self.id)
            flow = ref.flow if isinstance(ref, ComponentRef) else None
        if flow:
            inferred = component_type_for_flow(flow)
            if inferred is not None:
                return inferred
        return ComponentType.WORKFLOW

    def component_id(self) -> str:
        """The id given, or the id encoded from the ref fields."""
        if self.id is not None:
            return self.id
        flow = self.flow or COMPONENT_FLOWS[self.component_type()]
        return encode_component_id(
            ComponentRef(
                domain=self.domain or "",
                flow=flow,
                key=self.key or "",
                version=self.version or "",
            )
        )


class GraphSnapshot(BaseModel):
    """Root model for a graph snapshot document."""

    model_config = ConfigDict(populate_by_name=True)

    source: GraphSource = GraphSource.LOCAL
    environment_id: str | None = Field(default=None, alias="environmentId")
    timestamp: float | None = None
    components: list[ComponentRecord] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_components(cls, data: Any) -> Any:
        """Accept components as a mapping keyed by component id."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        components = data.get("components")
        if isinstance(components, dict):
            normalized = []
            for component_id, record in components.items():
                record = dict(record or {})
                record.setdefault("id", component_id)
                normalized.append(record)
            data["components"] = normalized

        return data

    def get_component(self, component_id: str) -> ComponentRecord | None:
        """Get a component record by id."""
        for record in self.components:
            if record.component_id() == component_id:
                return record
        return None
