"""Content hashing for drift detection.

Two digests are kept per component: an API hash over the parts of the
definition that other components depend on, and a config hash over its
runtime configuration. A differing API hash is a breaking change; a
differing config hash is drift that callers may tolerate.
"""

import hashlib
import json
from typing import Any

from .node_types import ComponentType


def compute_hash(obj: Any) -> str | None:
    """Compute a stable SHA-256 digest of a JSON-compatible value.

    Keys are sorted at every level so equal values hash equally regardless
    of key order.

    Args:
        obj: The value to hash.

    Returns:
        The hex digest, or None for an empty value.
    """
    if obj is None or obj == {} or obj == []:
        return None

    stable = json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(stable.encode("utf-8")).hexdigest()


def extract_api_signature(definition: Any, component_type: ComponentType) -> Any:
    """Extract the parts of a definition that form its public API."""
    if not isinstance(definition, dict):
        return None

    if component_type == ComponentType.WORKFLOW:
        start = definition.get("startTransition")
        return {
            "states": [
                {
                    "key": state.get("key"),
                    "stateType": state.get("stateType"),
                    "transitions": [
                        {
                            "key": t.get("key"),
                            "target": t.get("target"),
                            "triggerType": t.get("triggerType"),
                        }
                        for t in state.get("transitions") or []
                    ],
                }
                for state in definition.get("states") or []
            ],
            "startTransition": (
                {"key": start.get("key"), "target": start.get("target")}
                if isinstance(start, dict)
                else None
            ),
        }

    if component_type == ComponentType.TASK:
        return {
            "parameters": definition.get("parameters"),
            "output": definition.get("output"),
        }

    if component_type == ComponentType.SCHEMA:
        return definition.get("schema") or definition.get("properties")

    if component_type == ComponentType.VIEW:
        return definition.get("view") or definition.get("components")

    return None


def extract_config(definition: Any, component_type: ComponentType) -> Any:
    """Extract the runtime configuration of a definition."""
    if not isinstance(definition, dict):
        return None

    config: dict[str, Any] = {}
    for name in ("timeout", "features", "extensions"):
        if definition.get(name):
            config[name] = definition[name]

    if component_type == ComponentType.WORKFLOW:
        config["type"] = definition.get("type")
        config["functions"] = definition.get("functions")
    elif component_type == ComponentType.TASK:
        config["taskType"] = definition.get("taskType")
        config["config"] = definition.get("config")

    return config


def extract_label(definition: Any) -> str | None:
    """Get a display label from a definition.

    Prefers an English entry in a multi-language ``labels`` list, then a
    ``label`` string, then a ``name`` string.
    """
    if not isinstance(definition, dict):
        return None

    labels = definition.get("labels")
    if isinstance(labels, list) and labels:
        for entry in labels:
            if isinstance(entry, dict) and entry.get("language") in ("en-US", "en"):
                if entry.get("label"):
                    return entry["label"]
        first = labels[0]
        if isinstance(first, dict) and first.get("label"):
            return first["label"]

    for name in ("label", "name"):
        value = definition.get(name)
        if isinstance(value, str) and value:
            return value

    return None
