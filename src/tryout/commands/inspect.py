"""Inspect commands -- examine an OpenAPI document.

Read-only commands that load a document (file path, URL, or ``-`` for
stdin) and present its contents:

* ``tryout info SPEC`` -- API metadata and servers.
* ``tryout operations SPEC`` -- one row per operation.
* ``tryout example SPEC OPERATION`` -- example values for the operation's
  parameters, request body and responses.
"""

from __future__ import annotations

from typing import Any

import typer

from tryout.commands.common import find_operation, open_spec, reported_errors
from tryout.output import format_response, get_output


def info_command(
    spec_source: str = typer.Argument(..., metavar="SPEC", help="OpenAPI file, URL or '-'."),
) -> None:
    """Show API title, version, description, terms, contact, license and servers.

    Example::

        tryout info petstore.yaml
        tryout --json info https://petstore3.swagger.io/api/v3/openapi.json
    """
    with reported_errors():
        spec = open_spec(spec_source)

    api = spec.info
    data: dict[str, Any] = {
        "title": api.title,
        "version": api.version,
        "openapi": spec.openapi_version,
        "description": api.description,
        "terms_of_service": api.terms_of_service,
        "contact": {
            "name": api.contact_name,
            "email": api.contact_email,
            "url": api.contact_url,
        },
        "license": {"name": api.license_name, "url": api.license_url},
        "servers": [
            {"url": server.resolved_url(), "description": server.description}
            for server in spec.servers
        ],
    }
    format_response(data)


def operations_command(
    spec_source: str = typer.Argument(..., metavar="SPEC", help="OpenAPI file, URL or '-'."),
) -> None:
    """List every operation: method, path, operationId and summary.

    Example::

        tryout operations petstore.yaml
        tryout --plain operations petstore.yaml | grep pets
    """
    with reported_errors():
        spec = open_spec(spec_source)

    rows = [
        [
            op.method.value.upper(),
            op.path,
            op.operation_id or "-",
            (op.summary or "") + (" (deprecated)" if op.deprecated else ""),
        ]
        for op in spec.operations
    ]
    get_output().print_table(
        ["Method", "Path", "Operation ID", "Summary"],
        rows,
        title=f"{spec.info.title} -- Operations ({len(rows)})",
    )


def example_command(
    spec_source: str = typer.Argument(..., metavar="SPEC", help="OpenAPI file, URL or '-'."),
    operation_key: str = typer.Argument(
        ..., metavar="OPERATION", help="operationId or 'METHOD /path'."
    ),
) -> None:
    """Print example values for an operation's parameters, body and responses.

    Example::

        tryout example petstore.yaml addPet
        tryout example petstore.yaml "GET /pets/{petId}"
    """
    from tryout.examples import example_for_operation

    with reported_errors():
        spec = open_spec(spec_source)
        operation = find_operation(spec, operation_key)
        bundle = example_for_operation(operation, spec.raw_spec)
    format_response(bundle)
