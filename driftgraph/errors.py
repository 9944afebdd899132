"""Exceptions for caller-contract violations."""


class DriftGraphError(Exception):
    """Base exception for driftgraph."""

    pass


class InvalidArgumentError(DriftGraphError, ValueError):
    """Raised when an analysis is called with an invalid argument."""

    def __init__(self, message: str, argument: str | None = None):
        self.argument = argument
        super().__init__(message)


class GraphFrozenError(DriftGraphError):
    """Raised when a frozen graph is mutated."""

    def __init__(self, message: str = "Graph is frozen and cannot be modified"):
        super().__init__(message)
