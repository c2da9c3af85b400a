"""Conversion between httpx objects and :class:`~tryout.models.ApiResponse`.

Responses are data: every HTTP status, including 4xx and 5xx, becomes an
:class:`~tryout.models.ApiResponse` with ``status_code`` set, and every
transport failure becomes one with ``error`` set.  This module also renders
such a response through the output system (:func:`format_api_response`).

See Also:
    :mod:`tryout.output` -- the output manager that renders data.
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from tryout.models import ApiResponse, RequestDescriptor
from tryout.output import get_output

FIXED_HEADERS: dict[str, str] = {"Cache-Control": "no-cache"}
"""Sent with every request unless the descriptor overrides them."""


def request_headers(descriptor: RequestDescriptor) -> dict[str, str]:
    """Headers to send for *descriptor*, with the fixed request policy applied.

    ``Content-Type: application/json`` is added when there is a body and the
    descriptor does not set a content type itself.
    """
    headers = {**FIXED_HEADERS, **descriptor.headers}
    if descriptor.body_text is not None and not any(
        key.lower() == "content-type" for key in headers
    ):
        headers["Content-Type"] = "application/json"
    return headers


def build_httpx_request(client: httpx.Client | httpx.AsyncClient, descriptor: RequestDescriptor) -> httpx.Request:
    """Build the :class:`httpx.Request` for *descriptor* on *client*."""
    return client.build_request(
        method=descriptor.method,
        url=descriptor.url,
        headers=request_headers(descriptor),
        content=descriptor.body_text.encode("utf-8") if descriptor.body_text is not None else None,
    )


def to_api_response(descriptor: RequestDescriptor, response: httpx.Response) -> ApiResponse:
    """Wrap a received :class:`httpx.Response`, whatever its status."""
    try:
        elapsed_ms = response.elapsed.total_seconds() * 1000
    except RuntimeError:
        elapsed_ms = 0.0

    return ApiResponse(
        method=descriptor.method,
        url=descriptor.url,
        status_code=response.status_code,
        reason=response.reason_phrase or "",
        headers=dict(response.headers),
        text=response.text,
        elapsed_ms=elapsed_ms,
    )


def failure_response(descriptor: RequestDescriptor, exc: httpx.HTTPError) -> ApiResponse:
    """Describe a transport failure (connect, timeout, protocol) as data."""
    kind = "Timed out" if isinstance(exc, httpx.TimeoutException) else "Request failed"
    return ApiResponse(
        method=descriptor.method,
        url=descriptor.url,
        error=f"{kind}: {exc}",
    )


def format_api_response(response: ApiResponse) -> None:
    """Print an :class:`ApiResponse` using the global output system.

    Writes the status line (``HTTP 200 OK``) or the transport error to
    stderr, then the body to stdout via
    :meth:`~tryout.output.OutputManager.format_response`.
    """
    output = get_output()

    if response.error is not None:
        output.error(response.error)
        return

    status_line = f"HTTP {response.status_code} {response.reason}".rstrip()
    if response.ok:
        output.info(status_line)
    else:
        output.warning(status_line)
    output.debug(f"{response.method} {response.url} took {response.elapsed_ms:.0f} ms")

    data = extract_response_data(response)
    if data is not None:
        content_type = response.headers.get("content-type", "application/json")
        output.format_response(data, content_type)


def extract_response_data(response: ApiResponse) -> Any:
    """Decode the body as JSON when possible, else return the raw text.

    Returns ``None`` for an empty body.
    """
    if not response.text:
        return None
    try:
        return json.loads(response.text)
    except ValueError:
        return response.text
