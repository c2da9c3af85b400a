"""HTTP execution of assembled requests.

Provides synchronous and asynchronous clients that wrap :mod:`httpx` and
execute a :class:`~tryout.models.RequestDescriptor` exactly once, reporting
the outcome (any status, or a transport failure) as an
:class:`~tryout.models.ApiResponse`.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.

Example::

    from tryout.client import SyncClient

    with SyncClient() as client:
        response = client.send(descriptor, timeout=10)
"""

from tryout.client.async_client import AsyncClient
from tryout.client.sync_client import SyncClient

__all__ = ["SyncClient", "AsyncClient"]
