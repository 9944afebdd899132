"""Reading graph snapshot documents from YAML or JSON."""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import SnapshotLoadError, SnapshotValidationError
from .models import GraphSnapshot


def load_document(path: str | Path) -> dict:
    """Read a YAML or JSON document whose root is a mapping.

    Files ending in ``.json`` are decoded as JSON; anything else is read as
    YAML.

    Args:
        path: Path to the document.

    Returns:
        The decoded mapping, empty for an empty document.

    Raises:
        SnapshotLoadError: If the file cannot be read or decoded.
    """
    path = Path(path)

    if not path.exists():
        raise SnapshotLoadError(f"File not found: {path}", str(path))

    if not path.is_file():
        raise SnapshotLoadError(f"Not a file: {path}", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SnapshotLoadError(f"Cannot read file: {e}", str(path)) from e

    return _decode(text, as_json=path.suffix.lower() == ".json", path=str(path))


def parse_snapshot(path: str | Path) -> GraphSnapshot:
    """Load and validate a snapshot file.

    Raises:
        SnapshotLoadError: If the file cannot be read or decoded.
        SnapshotValidationError: If the document is not a valid snapshot.
    """
    return _validate(load_document(path), path=str(path))


def parse_snapshot_from_string(text: str) -> GraphSnapshot:
    """Validate a snapshot given as YAML (or JSON) text."""
    return _validate(_decode(text, as_json=False))


def validation_errors(error: ValidationError) -> list[dict]:
    """Flatten pydantic errors to ``{loc, msg, type}`` with dotted locations."""
    return [
        {
            "loc": ".".join(str(part) for part in err["loc"]),
            "msg": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def _decode(text: str, as_json: bool, path: str | None = None) -> dict:
    try:
        data = json.loads(text) if as_json else yaml.safe_load(text)
    except json.JSONDecodeError as e:
        raise SnapshotLoadError(f"Invalid JSON: {e}", path) from e
    except yaml.YAMLError as e:
        raise SnapshotLoadError(f"Invalid YAML: {e}", path) from e

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise SnapshotLoadError(
            f"Expected a mapping at the document root, got {type(data).__name__}", path
        )
    return data


def _validate(data: dict, path: str | None = None) -> GraphSnapshot:
    try:
        return GraphSnapshot.model_validate(data)
    except ValidationError as e:
        errors = validation_errors(e)
        raise SnapshotValidationError(
            f"Snapshot validation failed with {len(errors)} error(s)", errors, path
        ) from e
