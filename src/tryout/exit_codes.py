"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~tryout.exceptions.TryoutError` subclass.

Example::

    $ tryout curl openapi.yaml getPet -Q nope=1
    $ echo $?
    8   # EXIT_SERIALIZATION_ERROR -- the request could not be built
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or unparseable values."""

EXIT_CONNECTION_ERROR = 6
"""The request was sent but no response arrived (timeout, DNS failure, connection refused)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded, parsed or dereferenced."""

EXIT_SERIALIZATION_ERROR = 8
"""The request could not be built from the supplied values."""
