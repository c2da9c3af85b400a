"""Representative example values for OpenAPI schemas.

:func:`build_example` turns a schema, which may be a ``$ref`` or a
``oneOf`` / ``allOf`` / ``anyOf`` composition, into a JSON-shaped value
that documents what the schema describes.  Leaves are descriptive strings
rather than sample data::

    {"type": "integer", "format": "int64", "minimum": 1}
        -> "integer (int64): greater than 1 (inclusive)"

    {"type": "array", "items": {"type": "boolean"}}
        -> ["true | false"]

Resolution is a pure function of the schema and the root document.  A
schema the resolver does not understand becomes ``{}`` ("anything") rather
than an error.  A ``$ref`` that leads back into itself while being
expanded raises :class:`~tryout.exceptions.CyclicReferenceError`.
"""

from __future__ import annotations

import json
from typing import Any

from tryout.exceptions import CyclicReferenceError
from tryout.models import OperationSchema
from tryout.parser.resolver import is_ref, resolve
from tryout.values import format_scalar


def build_example(schema: Any, root: dict[str, Any]) -> Any:
    """Build the example value for *schema*.

    Args:
        schema: A schema node of *root* (or a free-standing schema dict).
        root: The document ``$ref`` pointers are resolved against.

    Returns:
        A string, list or dict describing the schema.

    Raises:
        CyclicReferenceError: If expanding the schema re-enters a ``$ref``
            that is already being expanded.
    """
    return _example(schema, root, ())


def _example(schema: Any, root: dict[str, Any], active: tuple[str, ...]) -> Any:
    if not isinstance(schema, dict) or not schema:
        return {}

    if is_ref(schema):
        pointer = schema["$ref"]
        if pointer in active:
            raise CyclicReferenceError(pointer, active)
        return _example(resolve(schema, root), root, (*active, pointer))

    if "oneOf" in schema:
        return _alternatives("One of the following:\n", schema["oneOf"], root, active)
    if "allOf" in schema:
        return merge_first_writer_wins(
            _example(sub, root, active) for sub in schema["allOf"] or []
        )
    if "anyOf" in schema:
        return _alternatives("Any of the following:\n", schema["anyOf"], root, active)

    schema_type = _schema_type(schema)
    if schema_type == "string":
        if schema.get("format"):
            return f"string ({schema['format']}){_string_constraints(schema)}"
        return "string"
    if schema_type in ("number", "integer"):
        if schema.get("format"):
            return f"{schema_type} ({schema['format']}){_numeric_constraints(schema)}"
        return schema_type
    if schema_type == "boolean":
        return "true | false"
    if schema_type == "array":
        if schema.get("items") is not None:
            return [_example(schema["items"], root, active)]
        return []
    if schema_type == "null":
        return "<null>"
    if schema_type == "object":
        return _object_example(schema, root, active)

    # Anything goes.
    return {}


def merge_first_writer_wins(examples: Any) -> dict[str, Any]:
    """Union the keys of mapping *examples* left to right; the first value for a key wins.

    Non-mapping examples contribute no keys.

    Example::

        >>> merge_first_writer_wins([{"a": 1}, {"a": 2, "b": 3}])
        {'a': 1, 'b': 3}
    """
    merged: dict[str, Any] = {}
    for example in examples:
        if not isinstance(example, dict):
            continue
        for key, value in example.items():
            merged.setdefault(key, value)
    return merged


def _alternatives(heading: str, schemas: Any, root: dict[str, Any], active: tuple[str, ...]) -> str:
    lines = [_as_text(_example(sub, root, active)) for sub in schemas or []]
    return heading + "\n".join(lines)


def _as_text(example: Any) -> str:
    if isinstance(example, str):
        return example
    return json.dumps(example, ensure_ascii=False)


def _schema_type(schema: dict[str, Any]) -> Any:
    """Return ``type``, taking the first non-null entry of an OpenAPI 3.1 type list."""
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        non_null = [t for t in schema_type if t != "null"]
        return non_null[0] if non_null else "null"
    return schema_type


def _object_example(schema: dict[str, Any], root: dict[str, Any], active: tuple[str, ...]) -> dict[str, Any]:
    """Resolve ``properties`` then mapping-valued ``additionalProperties`` entries."""
    example: dict[str, Any] = {}
    for name, prop in (schema.get("properties") or {}).items():
        example[name] = _example(prop, root, active)

    additional = schema.get("additionalProperties")
    if isinstance(additional, dict):
        for name, prop in additional.items():
            if isinstance(prop, dict):
                example[name] = _example(prop, root, active)
    return example


def _exclusivity(schema: dict[str, Any], flag: str) -> str:
    return "exclusive" if schema.get(flag) else "inclusive"


def _numeric_constraints(schema: dict[str, Any]) -> str:
    constraints = []
    minimum, maximum = schema.get("minimum"), schema.get("maximum")
    if minimum is not None and maximum is not None:
        constraints.append(
            f"between {format_scalar(minimum)} ({_exclusivity(schema, 'exclusiveMinimum')}) "
            f"and {format_scalar(maximum)} ({_exclusivity(schema, 'exclusiveMaximum')})"
        )
    elif minimum is not None:
        constraints.append(
            f"greater than {format_scalar(minimum)} ({_exclusivity(schema, 'exclusiveMinimum')})"
        )
    elif maximum is not None:
        constraints.append(
            f"less than {format_scalar(maximum)} ({_exclusivity(schema, 'exclusiveMaximum')})"
        )
    if schema.get("multipleOf") is not None:
        constraints.append(f"multiple of {format_scalar(schema['multipleOf'])}")
    return ": " + ", ".join(constraints) if constraints else ""


def _string_constraints(schema: dict[str, Any]) -> str:
    if schema.get("pattern"):
        return f": matching {schema['pattern']}"
    return ""


# ---------------------------------------------------------------------------
# Operation bundle
# ---------------------------------------------------------------------------


def example_for_operation(operation: OperationSchema, root: dict[str, Any]) -> dict[str, Any]:
    """Collect the examples shown for one operation.

    Returns:
        A dict with three keys:

        * ``parameters`` -- ``{location: {name: example}}`` for every
          declared parameter, locations in declaration order.
        * ``request_body`` -- ``{media type: example}`` (empty when the
          operation takes no body).
        * ``responses`` -- ``{status code: {media type: example}}``.
    """
    parameters: dict[str, dict[str, Any]] = {}
    for param in operation.parameters:
        parameters.setdefault(param.location.value, {})[param.name] = build_example(
            param.schema_, root
        )

    request_body: dict[str, Any] = {}
    if operation.request_body is not None:
        request_body = {
            media_type: build_example(schema, root)
            for media_type, schema in operation.request_body.content.items()
        }

    responses = {
        response.status_code: {
            media_type: build_example(schema, root)
            for media_type, schema in response.content.items()
        }
        for response in operation.responses
    }

    return {
        "parameters": parameters,
        "request_body": request_body,
        "responses": responses,
    }
