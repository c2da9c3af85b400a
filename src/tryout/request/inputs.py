"""Turn user-typed text into typed parameter values.

Command-line values arrive as strings (``-Q limit=10``).  Before they can be
serialized they are converted to the JSON value the parameter's schema
describes, so that ``limit`` becomes the integer ``10`` and
``ids=[1,2]`` becomes a list that the ``style`` rules can expand.

Conversion follows the schema's ``type`` after ``$ref`` resolution:

========================================= =================================
schema                                    conversion (empty text)
========================================= =================================
``oneOf`` / ``allOf`` / ``anyOf``         JSON (``None``)
``number``                                ``float`` (``0.0``)
``integer``                               ``int`` (``0``)
``boolean``                               true/false/1/0/yes/no
``null``                                  ``None``
``string``                                kept verbatim
``array``, ``object``, unknown types      JSON (``None``)
no ``type``                               JSON, else the text itself
========================================= =================================
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Optional

from tryout.exceptions import InvalidUsageError
from tryout.models import OperationSchema, ParameterLocation, RequestValues
from tryout.parser.resolver import resolve
from tryout.request.registry import ParameterRegistry

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


def parse_assignment(text: str) -> tuple[str, str]:
    """Split ``name=value`` at the first ``=``.

    Raises:
        InvalidUsageError: If there is no ``=`` or the name is empty.
    """
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise InvalidUsageError(f"Expected NAME=VALUE, got '{text}'")
    return name, value


def coerce_value(raw: str, schema: Optional[dict[str, Any]], root: dict[str, Any]) -> Any:
    """Convert *raw* text into the value *schema* describes.

    Raises:
        InvalidUsageError: If the text cannot be read as the schema's type.
    """
    schema = resolve(schema or {}, root)
    if any(key in schema for key in ("oneOf", "allOf", "anyOf")):
        return _parse_json(raw)

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = next((t for t in schema_type if t != "null"), None)

    if schema_type == "string":
        return raw
    if schema_type == "number":
        return _parse_number(raw, float)
    if schema_type == "integer":
        return _parse_number(raw, int)
    if schema_type == "boolean":
        lowered = raw.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise InvalidUsageError(f"Expected a boolean, got '{raw}'")
    if schema_type == "null":
        return None
    if schema_type is None:
        try:
            return _parse_json(raw)
        except InvalidUsageError:
            return raw
    return _parse_json(raw)


def coerce_values(
    assignments: Iterable[str],
    location: ParameterLocation,
    registry: ParameterRegistry,
    root: dict[str, Any],
) -> dict[str, Any]:
    """Parse ``name=value`` assignments for one location into typed values.

    Raises:
        MissingParameterDefinition: If a name is not declared at *location*.
        InvalidUsageError: If an assignment or value is malformed.
    """
    values: dict[str, Any] = {}
    for text in assignments:
        name, raw = parse_assignment(text)
        param = registry.lookup(name, location)
        values[name] = coerce_value(raw, param.schema_, root)
    return values


def _parse_number(raw: str, kind: type) -> Any:
    if not raw.strip():
        return kind(0)
    try:
        return kind(raw)
    except ValueError:
        raise InvalidUsageError(f"Expected {kind.__name__}, got '{raw}'") from None


def _parse_json(raw: str) -> Any:
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"Invalid JSON value '{raw}': {exc}") from exc


def read_body(text: Optional[str]) -> Any:
    """Decode a ``--body`` argument: inline JSON, or ``@path`` to a JSON file.

    Returns ``None`` when no body was given.

    Raises:
        InvalidUsageError: If the file cannot be read or the JSON is invalid.
    """
    if text is None:
        return None
    if text.startswith("@"):
        path = Path(text[1:]).expanduser()
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InvalidUsageError(f"Cannot read body file {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidUsageError(f"Request body is not valid JSON: {exc}") from exc


def collect_values(
    operation: OperationSchema,
    root: dict[str, Any],
    path: Iterable[str] = (),
    query: Iterable[str] = (),
    header: Iterable[str] = (),
    cookie: Iterable[str] = (),
    body: Any = None,
) -> RequestValues:
    """Build :class:`~tryout.models.RequestValues` from ``name=value`` assignments.

    Raises:
        MissingParameterDefinition: If a name is not declared at its location.
        InvalidUsageError: If an assignment or value is malformed.
    """
    registry = ParameterRegistry.from_operation(operation)
    return RequestValues(
        path=coerce_values(path, ParameterLocation.PATH, registry, root),
        query=coerce_values(query, ParameterLocation.QUERY, registry, root),
        header=coerce_values(header, ParameterLocation.HEADER, registry, root),
        cookie=coerce_values(cookie, ParameterLocation.COOKIE, registry, root),
        body=body,
    )


def missing_required(operation: OperationSchema, values: RequestValues) -> list[str]:
    """Names of required parameters (``location.name``) that have no value."""
    return [
        f"{param.location.value}.{param.name}"
        for param in operation.parameters
        if param.required and param.name not in values.for_location(param.location)
    ]
