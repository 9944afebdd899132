"""Schema layer for parsing and validating graph snapshot documents."""

from .errors import SnapshotLoadError, SnapshotValidationError
from .models import ComponentRecord, DependencyRecord, GraphSnapshot
from .loader import (
    load_document,
    parse_snapshot,
    parse_snapshot_from_string,
    validation_errors,
)

__all__ = [
    "SnapshotLoadError",
    "SnapshotValidationError",
    "ComponentRecord",
    "DependencyRecord",
    "GraphSnapshot",
    "load_document",
    "parse_snapshot",
    "parse_snapshot_from_string",
    "validation_errors",
]
