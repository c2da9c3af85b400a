"""Index an operation's declared parameters by name.

The :class:`ParameterRegistry` is built once per operation and answers the
only question the serializers ask: *which style and explode flag apply to
the parameter called* ``name``?  While the registry is built, every
parameter's style is made concrete through :func:`resolve_style`, which
consults the per-location :data:`DEFAULT_STYLES` table.  A parameter with
no style, or with a style that is not defined for its location, gets the
location default.

OpenAPI forbids two parameters with the same name and location; the
registry assumes a valid document and does not re-validate.  Parameters
are keyed by name alone, so a later declaration replaces an earlier one
with the same name (logged at debug level when the locations differ).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from tryout.exceptions import MissingParameterDefinition
from tryout.models import OperationSchema, ParameterLocation, ParameterSchema

logger = logging.getLogger(__name__)

DEFAULT_STYLES: Mapping[ParameterLocation, str] = MappingProxyType({
    ParameterLocation.PATH: "simple",
    ParameterLocation.QUERY: "form",
    ParameterLocation.HEADER: "simple",
    ParameterLocation.COOKIE: "form",
})
"""Style applied when a parameter declares none (or one its location lacks)."""

SUPPORTED_STYLES: Mapping[ParameterLocation, frozenset[str]] = MappingProxyType({
    ParameterLocation.PATH: frozenset({"simple", "label", "matrix"}),
    ParameterLocation.QUERY: frozenset(
        {"form", "spaceDelimited", "pipeDelimited", "deepObject"}
    ),
    ParameterLocation.HEADER: frozenset({"simple"}),
    ParameterLocation.COOKIE: frozenset({"form"}),
})
"""Styles each location understands."""


def resolve_style(location: ParameterLocation, style: str | None) -> str:
    """Return the effective style for a parameter at *location*.

    Example::

        >>> resolve_style(ParameterLocation.QUERY, None)
        'form'
        >>> resolve_style(ParameterLocation.HEADER, "matrix")
        'simple'
    """
    if style and style in SUPPORTED_STYLES[location]:
        return style
    return DEFAULT_STYLES[location]


class ParameterRegistry(Mapping[str, ParameterSchema]):
    """Read-only mapping from parameter name to its :class:`ParameterSchema`.

    Every stored schema carries a concrete style.  The registry never
    aliases the caller's objects in a way that could be mutated: it holds
    frozen pydantic models behind a read-only mapping view.

    Args:
        parameters: Parameter declarations in document order.

    Example::

        registry = ParameterRegistry.from_operation(operation)
        registry.lookup("petId", ParameterLocation.PATH).style  # 'simple'
    """

    def __init__(self, parameters: Iterable[ParameterSchema] = ()) -> None:
        entries: dict[str, ParameterSchema] = {}
        for param in parameters:
            style = resolve_style(param.location, param.style)
            if style != param.style:
                logger.debug(
                    "Parameter '%s' (%s): style %r -> %r",
                    param.name, param.location.value, param.style or None, style,
                )
                param = param.model_copy(update={"style": style})
            previous = entries.get(param.name)
            if previous is not None and previous.location != param.location:
                logger.debug(
                    "Parameter '%s': %s declaration replaces %s declaration",
                    param.name, param.location.value, previous.location.value,
                )
            entries[param.name] = param
        self._entries: Mapping[str, ParameterSchema] = MappingProxyType(entries)

    @classmethod
    def from_operation(cls, operation: OperationSchema) -> ParameterRegistry:
        return cls(operation.parameters)

    def lookup(self, name: str, location: ParameterLocation) -> ParameterSchema:
        """Return the declaration for *name*, which must live at *location*.

        Raises:
            MissingParameterDefinition: If no parameter called *name* is
                declared, or it is declared at a different location.
        """
        param = self._entries.get(name)
        if param is None or param.location != location:
            raise MissingParameterDefinition(name, location.value)
        return param

    def __getitem__(self, name: str) -> ParameterSchema:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ParameterRegistry({list(self._entries)!r})"
