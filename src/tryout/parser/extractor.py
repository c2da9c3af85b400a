"""Extract API metadata, servers and operations from an OpenAPI document.

This module walks a raw OpenAPI document and builds a
:class:`~tryout.models.ParsedSpec`.  Unlike a whole-document inliner it
only dereferences the objects it must read fields from: parameter,
request-body and response objects given as ``$ref``.  Schemas stay exactly
as written so that :mod:`tryout.examples` and :mod:`tryout.request.inputs`
can follow their references against ``ParsedSpec.raw_spec`` later.

The single public entry point is :func:`extract_spec`.

Parameter merging follows the OpenAPI specification: path-level parameters
provide defaults, and operation-level parameters override them when they
share the same ``name`` and ``in`` values.
"""

from __future__ import annotations

from typing import Any

from tryout.models import (
    APIInfo,
    HTTPMethod,
    OperationSchema,
    ParameterLocation,
    ParameterSchema,
    ParsedSpec,
    RequestBodyInfo,
    ResponseInfo,
    ServerInfo,
)
from tryout.parser.resolver import resolve

# Declaration order of an OpenAPI path item
_HTTP_METHODS = tuple(m.value for m in HTTPMethod)


def extract_spec(raw_spec: dict[str, Any], openapi_version: str) -> ParsedSpec:
    """Extract a :class:`~tryout.models.ParsedSpec` from a raw OpenAPI dict.

    Args:
        raw_spec: The decoded document, as returned by
            :func:`~tryout.parser.loader.load_spec`.  It is not modified and
            becomes ``ParsedSpec.raw_spec``.
        openapi_version: The validated version string, as returned by
            :func:`~tryout.parser.loader.validate_openapi_version`.

    Raises:
        SpecParseError: If a parameter, body or response ``$ref`` is
            external or dangling.
        CyclicReferenceError: If such a ``$ref`` chain loops.

    Example::

        raw = load_spec("petstore.yaml")
        parsed = extract_spec(raw, validate_openapi_version(raw))
        for op in parsed.operations:
            print(f"{op.method.value.upper()} {op.path}")
    """
    return ParsedSpec(
        info=_extract_info(raw_spec),
        servers=_extract_servers(raw_spec),
        operations=_extract_operations(raw_spec),
        openapi_version=openapi_version,
        raw_spec=raw_spec,
    )


def _extract_info(spec: dict[str, Any]) -> APIInfo:
    info = spec.get("info") or {}
    contact = info.get("contact") or {}
    license_info = info.get("license") or {}

    return APIInfo(
        title=info.get("title", "Untitled API"),
        version=str(info.get("version", "0.0.0")),
        description=info.get("description"),
        terms_of_service=info.get("termsOfService"),
        contact_name=contact.get("name"),
        contact_email=contact.get("email"),
        contact_url=contact.get("url"),
        license_name=license_info.get("name"),
        license_url=license_info.get("url"),
    )


def _extract_servers(spec: dict[str, Any]) -> list[ServerInfo]:
    """Extract ``servers`` entries with each variable's default value."""
    servers: list[ServerInfo] = []
    for server in spec.get("servers") or []:
        if not isinstance(server, dict):
            continue
        variables = {
            name: str(var.get("default", ""))
            for name, var in (server.get("variables") or {}).items()
            if isinstance(var, dict)
        }
        servers.append(
            ServerInfo(
                url=server.get("url", "/"),
                description=server.get("description"),
                variables=variables,
            )
        )
    return servers


def _extract_operations(spec: dict[str, Any]) -> list[OperationSchema]:
    """Extract every path + method combination from ``paths``.

    Path items given as ``$ref`` are dereferenced first.  Operations are
    listed in document order of paths, then in the OpenAPI order of methods.
    """
    operations: list[OperationSchema] = []

    for path, path_item in (spec.get("paths") or {}).items():
        path_item = resolve(path_item, spec)
        if not isinstance(path_item, dict):
            continue

        path_params = _deref_list(path_item.get("parameters"), spec)

        for method in _HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue

            op_params = _deref_list(operation.get("parameters"), spec)
            operations.append(
                OperationSchema(
                    path=path,
                    method=HTTPMethod(method),
                    operation_id=operation.get("operationId"),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    tags=operation.get("tags") or [],
                    parameters=_extract_parameters(_merge_parameters(path_params, op_params)),
                    request_body=_extract_request_body(operation.get("requestBody"), spec),
                    responses=_extract_responses(operation.get("responses") or {}, spec),
                    deprecated=bool(operation.get("deprecated", False)),
                )
            )

    return operations


def _deref_list(items: Any, spec: dict[str, Any]) -> list[dict[str, Any]]:
    return [
        resolved
        for resolved in (resolve(item, spec) for item in items or [])
        if isinstance(resolved, dict)
    ]


def _merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    ``(name, in)``.  Surviving path-level parameters keep their position
    ahead of the operation-level ones.
    """
    overridden = {(p.get("name", ""), p.get("in", "")) for p in op_params}
    merged = [
        p for p in path_params
        if (p.get("name", ""), p.get("in", "")) not in overridden
    ]
    merged.extend(op_params)
    return merged


def _extract_parameters(params: list[dict[str, Any]]) -> list[ParameterSchema]:
    """Convert raw parameter objects into :class:`~tryout.models.ParameterSchema`.

    The declared ``style`` is kept verbatim (empty when absent); the request
    registry applies location defaults.  Path parameters are always
    required.  Parameters with unrecognised ``in`` locations are skipped.
    """
    parameters: list[ParameterSchema] = []

    for param in params:
        try:
            location = ParameterLocation(param.get("in", ""))
        except ValueError:
            continue

        schema = param.get("schema")
        parameters.append(
            ParameterSchema(
                name=param.get("name", ""),
                location=location,
                required=location == ParameterLocation.PATH or bool(param.get("required", False)),
                style=param.get("style") or "",
                explode=bool(param.get("explode", False)),
                schema=schema if isinstance(schema, dict) else {},
                description=param.get("description"),
            )
        )

    return parameters


def _extract_content(content: Any) -> dict[str, dict[str, Any]]:
    """Map each media type to its raw schema (``{}`` when none is declared)."""
    result: dict[str, dict[str, Any]] = {}
    for media_type, media in (content or {}).items():
        schema = media.get("schema") if isinstance(media, dict) else None
        result[media_type] = schema if isinstance(schema, dict) else {}
    return result


def _extract_request_body(body: Any, spec: dict[str, Any]) -> RequestBodyInfo | None:
    if body is None:
        return None
    body = resolve(body, spec)
    if not isinstance(body, dict):
        return None

    return RequestBodyInfo(
        required=bool(body.get("required", False)),
        description=body.get("description"),
        content=_extract_content(body.get("content")),
    )


def _extract_responses(responses: dict[str, Any], spec: dict[str, Any]) -> list[ResponseInfo]:
    result: list[ResponseInfo] = []

    for status_code, response in responses.items():
        response = resolve(response, spec)
        if not isinstance(response, dict):
            continue
        result.append(
            ResponseInfo(
                status_code=str(status_code),
                description=response.get("description"),
                content=_extract_content(response.get("content")),
            )
        )

    return result
