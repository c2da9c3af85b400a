"""Synchronous execution of an assembled request.

This module provides :class:`SyncClient`, the blocking client used by the
``tryout call`` command.  It wraps :class:`httpx.Client` and sends one
:class:`~tryout.models.RequestDescriptor` per :meth:`SyncClient.send`:

- **Single attempt** -- a request is sent exactly once, never retried.
- **Caller timeout** -- ``send(..., timeout=...)`` overrides the
  configured timeout for that request.
- **Responses as data** -- any HTTP status, and any transport failure, is
  returned as an :class:`~tryout.models.ApiResponse` instead of raised.

See Also:
    :class:`~tryout.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

from typing import Optional

import httpx

from tryout.client.response import build_httpx_request, failure_response, to_api_response
from tryout.models import ApiResponse, RequestConfig, RequestDescriptor
from tryout.output import get_output


class SyncClient:
    """Synchronous client that executes :class:`RequestDescriptor` values.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        config: Timeout and SSL settings.  Defaults to :class:`RequestConfig`.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`.

    Example::

        with SyncClient(RequestConfig(timeout=5)) as client:
            response = client.send(descriptor)
            print(response.status_code, response.text)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def send(
        self,
        descriptor: RequestDescriptor,
        timeout: Optional[float] = None,
    ) -> ApiResponse:
        """Send *descriptor* once and report the outcome as data.

        Args:
            descriptor: The request to execute.
            timeout: Seconds for this request, overriding the configured
                timeout.

        Returns:
            An :class:`ApiResponse` carrying either the HTTP status and body
            or the transport error.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        output = get_output()
        request = build_httpx_request(self._client, descriptor)
        if timeout is not None:
            request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()

        output.debug(f"{descriptor.method} {descriptor.url}")
        try:
            response = self._client.send(request)
        except httpx.HTTPError as exc:
            output.debug(f"Transport failure: {exc!r}")
            return failure_response(descriptor, exc)

        return to_api_response(descriptor, response)
