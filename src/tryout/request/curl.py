"""Render a request as a human-readable ``curl`` command.

The text is for display only; it is never executed.  It reuses
:func:`~tryout.request.assembler.prepare_request`, so method, host, path
and query always agree with :func:`~tryout.request.assembler.build_request`.
Cookies, which the executable descriptor leaves out, are rendered here.

Layout (every continuation line is indented by four spaces)::

    curl -XPOST \\
        https://api.example.com/pets?tag=cat \\
        -H <header value> \\
        --cookie <name=value> \\
        -d \\
    '{
        "name": "Rex"
    }'
"""

from __future__ import annotations

import json

from tryout.models import OperationSchema, RequestValues
from tryout.request.assembler import prepare_request

_CONTINUATION = " \\\n    "


def build_curl_text(
    method: str,
    host: str,
    path_template: str,
    operation: OperationSchema,
    values: RequestValues,
) -> str:
    """Build the curl command for *operation* with the given *values*.

    One ``-H`` flag is emitted per header value and one ``--cookie`` flag
    per cookie, in input order.  When a body is present a ``-d`` flag is
    followed by the body as 4-space indented JSON in single quotes.

    Raises:
        MissingParameterDefinition: For a value with no declaration.
        MalformedValueShape: For a value whose shape does not fit its style.
    """
    prepared = prepare_request(method, host, path_template, operation, values)

    text = f"curl -X{prepared.method}{_CONTINUATION}{prepared.url}"
    text += "".join(f"{_CONTINUATION}-H {value}" for value in prepared.headers.values())
    text += "".join(f"{_CONTINUATION}--cookie {value}" for value in prepared.cookies.values())
    if prepared.body is not None:
        body = json.dumps(prepared.body, indent=4, ensure_ascii=False)
        text += f"{_CONTINUATION}-d \\\n'{body}'"
    return text
