"""Configuration: runtime environments and analysis settings.

Configuration is read from an optional YAML file and then overridden by
environment variables:

    DRIFTGRAPH_ACTIVE_ENVIRONMENT=dev
    DRIFTGRAPH_ENV_DEV_URL=https://dev.example.com
    DRIFTGRAPH_ENV_DEV_TOKEN=xxx
    DRIFTGRAPH_IMPACT_MAX_DEPTH=10
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .graph.node_types import ComponentType
from .schema.errors import SnapshotLoadError
from .schema.loader import load_document, validation_errors

logger = logging.getLogger(__name__)

ENV_PREFIX = "DRIFTGRAPH_"
_ENV_FIELDS = {
    "URL": "baseUrl",
    "NAME": "name",
    "TOKEN": "token",
}


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is inconsistent."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)


class CriticalityStrategy(str, Enum):
    """How critical components are scored."""

    FAN_IN = "fan_in"  # Direct incoming edge count
    TYPE_WEIGHTED = "type_weighted"  # Fan-in times a per-type weight
    TRANSITIVE = "transitive"  # Size of the full impact cone
    EXPOSED = "exposed"  # Direct dependents that nothing else depends on


class AuthConfig(BaseModel):
    """Credentials for a runtime environment."""

    type: Literal["bearer", "basic", "none"] = "none"
    token: str | None = None
    username: str | None = None
    password: str | None = None


class EnvironmentConfig(BaseModel):
    """A runtime environment whose deployed graph can be fetched."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = ""  # Set from the key
    name: str | None = None
    base_url: str = Field(alias="baseUrl")
    auth: AuthConfig = Field(default_factory=AuthConfig)
    headers: dict[str, str] = Field(default_factory=dict)
    timeout_ms: int = Field(default=30000, alias="timeoutMs", gt=0)
    verify_ssl: bool = Field(default=True, alias="verifySsl")

    @property
    def display_name(self) -> str:
        return self.name or self.id


class CacheSettings(BaseModel):
    """Caching of fetched runtime graphs by the fetch collaborator."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    ttl_ms: int = Field(default=300000, alias="ttlMs", ge=0)


class RiskThresholds(BaseModel):
    """Upper bounds of affected components for each risk level."""

    low: int = 5
    medium: int = 15
    high: int = 30

    @model_validator(mode="after")
    def check_order(self) -> "RiskThresholds":
        if not 0 <= self.low <= self.medium <= self.high:
            raise ValueError("risk thresholds must satisfy 0 <= low <= medium <= high")
        return self


class AnalysisSettings(BaseModel):
    """Defaults for impact analysis and critical-component ranking."""

    impact_max_depth: int | None = Field(default=10, ge=0)
    critical_strategy: CriticalityStrategy = CriticalityStrategy.FAN_IN
    critical_threshold: float = Field(default=5, ge=0)
    type_weights: dict[ComponentType, float] = Field(default_factory=dict)
    risk_thresholds: RiskThresholds = Field(default_factory=RiskThresholds)

    def weight_for(self, component_type: ComponentType) -> float:
        """Weight of a component type, 1.0 unless configured."""
        return self.type_weights.get(component_type, 1.0)


class DriftGraphConfig(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(populate_by_name=True)

    environments: dict[str, EnvironmentConfig] = Field(default_factory=dict)
    active_environment: str | None = Field(default=None, alias="activeEnvironment")
    cache: CacheSettings = Field(default_factory=CacheSettings)
    analysis: AnalysisSettings = Field(default_factory=AnalysisSettings)

    @model_validator(mode="before")
    @classmethod
    def normalize_environments(cls, data: Any) -> Any:
        """Set environment ids from their keys."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        environments = data.get("environments")
        if isinstance(environments, dict):
            data["environments"] = {
                env_id: {**env_data, "id": env_id} if isinstance(env_data, dict) else env_data
                for env_id, env_data in environments.items()
            }

        return data

    def get_environment(self, env_id: str) -> EnvironmentConfig | None:
        """Get an environment by id."""
        return self.environments.get(env_id)

    def active(self) -> EnvironmentConfig:
        """Select the environment to diff against.

        Uses ``active_environment`` when set, otherwise the only configured
        environment.

        Raises:
            ConfigError: If no environment can be selected.
        """
        if self.active_environment:
            env = self.get_environment(self.active_environment)
            if env is None:
                raise ConfigError(
                    f"Active environment '{self.active_environment}' is not configured"
                )
            return env

        if len(self.environments) == 1:
            return next(iter(self.environments.values()))

        if not self.environments:
            raise ConfigError("No environments configured")

        raise ConfigError(
            "Multiple environments configured but no active environment selected: "
            + ", ".join(sorted(self.environments))
        )


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DriftGraphConfig:
    """Load configuration from a file and environment variables.

    Environment variables take precedence over the file, which takes
    precedence over defaults.

    Args:
        path: Optional YAML config file.
        environ: Environment mapping, defaults to ``os.environ``.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file cannot be read or the result is invalid.
    """
    data: dict[str, Any] = {}
    if path is not None:
        try:
            data = load_document(path)
        except SnapshotLoadError as e:
            raise ConfigError(f"Cannot load config: {e}") from e
        logger.debug("Loaded config file %s", path)

    apply_env_overrides(data, os.environ if environ is None else environ)

    try:
        return DriftGraphConfig.model_validate(data)
    except ValidationError as e:
        errors = validation_errors(e)
        raise ConfigError(
            f"Config validation failed with {len(errors)} error(s)", errors
        ) from e


def apply_env_overrides(data: dict[str, Any], environ: Mapping[str, str]) -> None:
    """Merge ``DRIFTGRAPH_*`` variables into raw config data in place."""
    for name, value in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        setting = name[len(ENV_PREFIX):]

        if setting == "ACTIVE_ENVIRONMENT":
            data["active_environment"] = value
            data.pop("activeEnvironment", None)
        elif setting == "IMPACT_MAX_DEPTH":
            data.setdefault("analysis", {})["impact_max_depth"] = value
        elif setting.startswith("ENV_"):
            env_name, _, field_name = setting[len("ENV_"):].rpartition("_")
            if not env_name or field_name not in _ENV_FIELDS:
                continue

            environments = data.get("environments")
            if not isinstance(environments, dict):
                environments = data["environments"] = {}

            # Reuse an environment from the file whatever the case of its id
            env_id = next(
                (key for key in environments if str(key).lower() == env_name.lower()),
                env_name.lower(),
            )
            env_data = environments.setdefault(env_id, {})
            if field_name == "TOKEN":
                env_data["auth"] = {
                    **env_data.get("auth", {}),
                    "type": "bearer",
                    "token": value,
                }
            else:
                key = _ENV_FIELDS[field_name]
                env_data.pop("base_url" if key == "baseUrl" else key, None)
                env_data[key] = value
            logger.debug("Environment %s: %s set from %s", env_id, field_name.lower(), name)
