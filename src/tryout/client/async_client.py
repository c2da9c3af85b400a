"""Asynchronous execution -- mirrors :class:`~tryout.client.sync_client.SyncClient`.

:class:`AsyncClient` wraps :class:`httpx.AsyncClient` with the same policy:
one attempt per request, an optional per-request timeout, and responses
(including transport failures) reported as data.  Cancelling the awaiting
task cancels the request; :class:`asyncio.CancelledError` propagates to
the caller unchanged.
"""

from __future__ import annotations

from typing import Optional

import httpx

from tryout.client.response import build_httpx_request, failure_response, to_api_response
from tryout.models import ApiResponse, RequestConfig, RequestDescriptor
from tryout.output import get_output


class AsyncClient:
    """Asynchronous client that executes :class:`RequestDescriptor` values.

    Must be used as an async context manager.

    Args:
        config: Timeout and SSL settings.  Defaults to :class:`RequestConfig`.
        transport: Optional async httpx transport.

    Example::

        async with AsyncClient() as client:
            response = await client.send(descriptor, timeout=2.0)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AsyncClient:
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        descriptor: RequestDescriptor,
        timeout: Optional[float] = None,
    ) -> ApiResponse:
        """Send *descriptor* once and report the outcome as data.

        See :meth:`SyncClient.send <tryout.client.sync_client.SyncClient.send>`.
        """
        assert self._client is not None, "Client not initialised -- use as async context manager"

        request = build_httpx_request(self._client, descriptor)
        if timeout is not None:
            request.extensions["timeout"] = httpx.Timeout(timeout).as_dict()

        get_output().debug(f"{descriptor.method} {descriptor.url}")
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            get_output().debug(f"Transport failure: {exc!r}")
            return failure_response(descriptor, exc)

        return to_api_response(descriptor, response)
