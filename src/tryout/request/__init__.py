"""Request building -- parameter registry, serializers, assembly and curl text.

This sub-package is the second half of the tryout pipeline: it turns a
parsed :class:`~tryout.models.OperationSchema` plus user-supplied
:class:`~tryout.models.RequestValues` into an executable
:class:`~tryout.models.RequestDescriptor` and its curl rendering.

Typical usage::

    from tryout.request import build_curl_text, build_request

    descriptor = build_request("get", host, op.path, op, values)
    print(build_curl_text("get", host, op.path, op, values))

Sub-modules:

* :mod:`~tryout.request.registry` -- name-indexed parameter declarations
  and the per-location style defaults.
* :mod:`~tryout.request.serializers` -- ``style`` / ``explode`` rule tables.
* :mod:`~tryout.request.assembler` -- path substitution, URL and body.
* :mod:`~tryout.request.curl` -- the curl command rendering.
* :mod:`~tryout.request.inputs` -- typed values from command-line text.
"""

from tryout.request.assembler import build_request
from tryout.request.curl import build_curl_text
from tryout.request.registry import ParameterRegistry

__all__ = ["build_request", "build_curl_text", "ParameterRegistry"]
