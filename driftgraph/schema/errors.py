"""Errors raised while reading snapshot documents."""


class SnapshotLoadError(Exception):
    """A snapshot document could not be read or decoded."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class SnapshotValidationError(Exception):
    """A decoded document is not a valid snapshot.

    ``errors`` holds one ``{loc, msg, type}`` entry per pydantic error.
    """

    def __init__(
        self,
        message: str,
        errors: list[dict] | None = None,
        path: str | None = None,
    ):
        self.errors = errors or []
        self.path = path
        super().__init__(message)
