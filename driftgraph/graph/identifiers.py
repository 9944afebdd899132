"""Canonical component identifiers.

A component is identified by the string ``domain/flow/key@version``. The
string form is used as the key for every graph index and in violation
messages, so encoding and decoding must round-trip exactly.
"""

import re
from dataclasses import dataclass

_ID_PATTERN = re.compile(r"^([^/]+)/([^/]+)/([^@]+)@(.+)$")


@dataclass(frozen=True)
class ComponentRef:
    """Structured reference to one versioned component."""

    domain: str
    flow: str
    key: str
    version: str

    def __str__(self) -> str:
        return encode_component_id(self)

    @property
    def short_name(self) -> str:
        """The ``key@version`` form used in messages."""
        return f"{self.key}@{self.version}"


@dataclass(frozen=True)
class MalformedIdentifier:
    """Returned by :func:`decode_component_id` for an unparseable id."""

    value: str
    reason: str

    def __bool__(self) -> bool:
        return False


def encode_component_id(ref: ComponentRef) -> str:
    """Format a reference as ``domain/flow/key@version``."""
    return f"{ref.domain}/{ref.flow}/{ref.key}@{ref.version}"


def decode_component_id(component_id: str) -> ComponentRef | MalformedIdentifier:
    """Parse a component id back into a reference.

    Args:
        component_id: The id string.

    Returns:
        The parsed ComponentRef, or a MalformedIdentifier describing why
        the id could not be parsed.
    """
    if not isinstance(component_id, str):
        return MalformedIdentifier(
            value=repr(component_id),
            reason=f"expected a string, got {type(component_id).__name__}",
        )

    match = _ID_PATTERN.match(component_id)
    if not match:
        return MalformedIdentifier(
            value=component_id,
            reason="expected the form domain/flow/key@version",
        )

    domain, flow, key, version = match.groups()
    return ComponentRef(domain=domain, flow=flow, key=key, version=version)


def is_malformed(value: ComponentRef | MalformedIdentifier) -> bool:
    """Check whether a decode result is a failure."""
    return isinstance(value, MalformedIdentifier)


def component_key(ref: ComponentRef) -> str:
    """Versionless ``domain/flow/key`` used for partial matching."""
    return f"{ref.domain}/{ref.flow}/{ref.key}"


def short_label(component_id: str) -> str:
    """Render an id as ``key@version``, falling back to the raw id."""
    ref = decode_component_id(component_id)
    if isinstance(ref, MalformedIdentifier):
        return component_id
    return ref.short_name
