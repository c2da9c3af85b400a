"""Request commands -- build an operation's request from command-line values.

* ``tryout curl SPEC OPERATION ...`` prints the equivalent curl command.
* ``tryout call SPEC OPERATION ...`` sends the request once and prints the
  status line (stderr) and the response body (stdout).

Parameter values are given as repeatable ``NAME=VALUE`` options, one option
per location, and are typed with the parameter's schema before the
``style`` / ``explode`` rules expand them (see :mod:`tryout.request.inputs`)::

    tryout curl petstore.yaml findPets -Q tags='["cat","dog"]' -Q limit=5
    tryout call petstore.yaml addPet --body @pet.json --host http://localhost:8080

A value for a parameter the operation does not declare at that location is
an error (exit code 8), reported before anything is sent.
"""

from __future__ import annotations

from typing import Optional

import typer

from tryout.commands.common import find_operation, open_spec, reported_errors
from tryout.exit_codes import EXIT_CONNECTION_ERROR
from tryout.models import OperationSchema, ParsedSpec, RequestValues
from tryout.output import get_output, suggest, warning
from tryout.request.inputs import collect_values, missing_required, read_body

_SPEC_ARG = typer.Argument(..., metavar="SPEC", help="OpenAPI file, URL or '-'.")
_OPERATION_ARG = typer.Argument(
    ..., metavar="OPERATION", help="operationId or 'METHOD /path'."
)
_HOST_OPT = typer.Option(
    None, "--host", help="Base URL; overrides TRYOUT_HOST, config and the document's servers."
)
_PATH_OPT = typer.Option(None, "--path", "-P", help="Path parameter NAME=VALUE (repeatable).")
_QUERY_OPT = typer.Option(None, "--query", "-Q", help="Query parameter NAME=VALUE (repeatable).")
_HEADER_OPT = typer.Option(None, "--header", "-H", help="Header parameter NAME=VALUE (repeatable).")
_COOKIE_OPT = typer.Option(None, "--cookie", "-C", help="Cookie parameter NAME=VALUE (repeatable).")
_BODY_OPT = typer.Option(None, "--body", "-d", help="JSON request body, or @FILE to read it from a file.")

_LOCATION_FLAGS = {"path": "-P", "query": "-Q", "header": "-H", "cookie": "-C"}


def _prepare(
    spec_source: str,
    operation_key: str,
    path: Optional[list[str]],
    query: Optional[list[str]],
    header: Optional[list[str]],
    cookie: Optional[list[str]],
    body: Optional[str],
) -> tuple[ParsedSpec, OperationSchema, RequestValues]:
    spec = open_spec(spec_source)
    operation = find_operation(spec, operation_key)
    values = collect_values(
        operation,
        spec.raw_spec,
        path=path or [],
        query=query or [],
        header=header or [],
        cookie=cookie or [],
        body=read_body(body),
    )
    for name in missing_required(operation, values):
        warning(f"Required parameter '{name}' has no value")
        location, _, param = name.partition(".")
        suggest(f"Set it with {_LOCATION_FLAGS[location]} {param}=VALUE")
    return spec, operation, values


def curl_command(
    spec_source: str = _SPEC_ARG,
    operation_key: str = _OPERATION_ARG,
    host: Optional[str] = _HOST_OPT,
    path: Optional[list[str]] = _PATH_OPT,
    query: Optional[list[str]] = _QUERY_OPT,
    header: Optional[list[str]] = _HEADER_OPT,
    cookie: Optional[list[str]] = _COOKIE_OPT,
    body: Optional[str] = _BODY_OPT,
) -> None:
    """Print the curl command for an operation.

    Example::

        tryout curl petstore.yaml getPetById -P petId=7
        tryout curl petstore.yaml "GET /pets" -Q tags='["cat"]' -H X-Request-Id=abc
    """
    from tryout.config import resolve_config, select_host
    from tryout.request import build_curl_text

    with reported_errors():
        spec, operation, values = _prepare(
            spec_source, operation_key, path, query, header, cookie, body
        )
        base = select_host(spec, host, resolve_config())
        text = build_curl_text(operation.method.value, base, operation.path, operation, values)

    get_output().print_code(text, "bash")


def call_command(
    spec_source: str = _SPEC_ARG,
    operation_key: str = _OPERATION_ARG,
    host: Optional[str] = _HOST_OPT,
    path: Optional[list[str]] = _PATH_OPT,
    query: Optional[list[str]] = _QUERY_OPT,
    header: Optional[list[str]] = _HEADER_OPT,
    cookie: Optional[list[str]] = _COOKIE_OPT,
    body: Optional[str] = _BODY_OPT,
    timeout: Optional[float] = typer.Option(
        None, "--timeout", "-t", help="Seconds to wait for the response."
    ),
) -> None:
    """Send an operation's request once and print the response.

    Any HTTP status, 4xx and 5xx included, is a successful call: the status
    is printed and the exit code is 0.  Only a transport failure (no
    response at all) exits non-zero.

    Example::

        tryout call petstore.yaml getPetById -P petId=7 --host http://localhost:8080
        tryout --json call petstore.yaml addPet --body @pet.json --timeout 5
    """
    from tryout.client import SyncClient
    from tryout.client.response import format_api_response
    from tryout.config import resolve_config, select_host
    from tryout.request import build_request

    with reported_errors():
        spec, operation, values = _prepare(
            spec_source, operation_key, path, query, header, cookie, body
        )
        config = resolve_config(cli_timeout=timeout)
        base = select_host(spec, host, config)
        descriptor = build_request(
            operation.method.value, base, operation.path, operation, values
        )

    with SyncClient(config.request) as client:
        response = client.send(descriptor, timeout=timeout)

    format_api_response(response)
    if response.error is not None:
        raise typer.Exit(code=EXIT_CONNECTION_ERROR)
