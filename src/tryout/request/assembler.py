"""Assemble serialized parameters and a body into a :class:`RequestDescriptor`.

:func:`build_request` is the single entry point.  It builds the operation's
:class:`~tryout.request.registry.ParameterRegistry`, serializes path, query
and header values, substitutes the path template and encodes the body.
Every failure happens here, before anything touches the network.

:func:`prepare_request` exposes the intermediate :class:`PreparedRequest`
so that :mod:`tryout.request.curl` renders exactly the same URL.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from tryout.models import (
    OperationSchema,
    RequestDescriptor,
    RequestValues,
)
from tryout.request.registry import ParameterRegistry
from tryout.request.serializers import (
    serialize_cookie_params,
    serialize_header_params,
    serialize_path_params,
    serialize_query_params,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreparedRequest:
    """Serialized pieces of one request, shared by the descriptor and curl renderings."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    body: Any = None


def substitute_path(template: str, fragments: Mapping[str, str]) -> str:
    """Replace ``{name}`` tokens in *template* with their serialized fragments.

    Tokens are replaced in the insertion order of *fragments*, and only the
    first occurrence of each token is replaced.

    Example::

        >>> substitute_path("/pets/{petId}", {"petId": "7"})
        '/pets/7'
    """
    path = template
    for name, fragment in fragments.items():
        path = path.replace("{" + name + "}", fragment, 1)
    return path


def build_url(host: str, path: str, query: list[str]) -> str:
    """Concatenate host, path and query; ``?`` is only added for a non-empty query."""
    url = f"{host}{path}"
    if query:
        url += "?" + "&".join(query)
    return url


def encode_body(body: Any) -> Optional[str]:
    """Encode *body* as compact JSON, or ``None`` when there is no body."""
    if body is None:
        return None
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def prepare_request(
    method: str,
    host: str,
    path_template: str,
    operation: OperationSchema,
    values: RequestValues,
) -> PreparedRequest:
    """Serialize every location of *values* against *operation*'s declarations.

    Raises:
        MissingParameterDefinition: If a value is supplied for a parameter the
            operation does not declare at that location.
        MalformedValueShape: If a value's shape does not fit its style.
    """
    registry = ParameterRegistry.from_operation(operation)

    path = substitute_path(path_template, serialize_path_params(registry, values.path))
    query = serialize_query_params(registry, values.query)
    headers = serialize_header_params(registry, values.header)
    cookies = serialize_cookie_params(registry, values.cookie)

    return PreparedRequest(
        method=method.upper(),
        url=build_url(host, path, query),
        headers=headers,
        cookies=cookies,
        body=values.body,
    )


def build_request(
    method: str,
    host: str,
    path_template: str,
    operation: OperationSchema,
    values: RequestValues,
) -> RequestDescriptor:
    """Build the executable request for *operation* from user *values*.

    The body is JSON-encoded whatever the operation's declared media type.
    Cookie values are validated against the operation but are not part of
    the descriptor.

    Args:
        method: HTTP method, any case.
        host: URL prefix (scheme, host and optional base path).
        path_template: The operation path with ``{name}`` tokens.
        operation: The operation whose parameters are declared.
        values: User-supplied values keyed by location and name.

    Returns:
        An immutable :class:`~tryout.models.RequestDescriptor`.

    Raises:
        MissingParameterDefinition: For a value with no declaration.
        MalformedValueShape: For a value whose shape does not fit its style.

    Example::

        values = RequestValues(path={"id": [1, 2]}, query={"q": "cat"})
        build_request("get", "https://api.example.com", "/items/{id}", op, values)
        # RequestDescriptor(method='GET', url='https://api.example.com/items/1,2?q=cat', ...)
    """
    prepared = prepare_request(method, host, path_template, operation, values)
    descriptor = RequestDescriptor(
        method=prepared.method,
        url=prepared.url,
        headers=prepared.headers,
        body_text=encode_body(prepared.body),
    )
    logger.debug(
        "Assembled %s %s (%d header(s), body=%s)",
        descriptor.method,
        descriptor.url,
        len(descriptor.headers),
        descriptor.body_text is not None,
    )
    return descriptor
