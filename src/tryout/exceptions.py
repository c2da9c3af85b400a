"""Exception hierarchy for tryout.

All exceptions inherit from :class:`TryoutError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`tryout.exit_codes`.
The top-level error handler in :func:`tryout.app.main` catches
``TryoutError`` and exits with the appropriate code.

Every error raised while building a request is raised *before* any network
call is attempted, so a partially built request is never sent.  Network
failures and non-2xx responses are not exceptions; the client reports them
as data (see :class:`~tryout.models.ApiResponse`).

Subclass hierarchy::

    TryoutError (exit 1)
    +-- InvalidUsageError            (exit 2)
    +-- SpecParseError               (exit 7)
    |   +-- CyclicReferenceError
    +-- SerializationError           (exit 8)
    |   +-- MissingParameterDefinition
    |   +-- MalformedValueShape
    +-- ConfigError                  (exit 1)
"""

from __future__ import annotations

from tryout.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_SERIALIZATION_ERROR,
    EXIT_SPEC_PARSE_ERROR,
)


class TryoutError(Exception):
    """Base exception for all tryout errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TryoutError):
    """Raised for invalid CLI arguments or user input that cannot be parsed."""

    exit_code = EXIT_INVALID_USAGE


class SpecParseError(TryoutError):
    """Raised when the OpenAPI document cannot be loaded, parsed or dereferenced."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class CyclicReferenceError(SpecParseError):
    """Raised when following ``$ref`` pointers revisits a pointer.

    Args:
        pointer: The pointer that was reached a second time.
        chain: Pointers visited before the repeat, in order.
    """

    def __init__(self, pointer: str, chain: tuple[str, ...] = ()):
        path = " -> ".join((*chain, pointer))
        super().__init__(f"Cyclic $ref detected: {path}")
        self.pointer = pointer
        self.chain = chain


class SerializationError(TryoutError):
    """Base class for errors raised while serializing request parameters."""

    exit_code = EXIT_SERIALIZATION_ERROR


class MissingParameterDefinition(SerializationError):
    """Raised when a value is supplied for a parameter the operation does not declare.

    Args:
        name: The parameter name the value was supplied under.
        location: The location (``path``, ``query``, ``header``, ``cookie``)
            the value was supplied for.
    """

    def __init__(self, name: str, location: str):
        super().__init__(
            f"No {location} parameter named '{name}' is declared on this operation"
        )
        self.name = name
        self.location = location


UnknownParameterError = MissingParameterDefinition


class MalformedValueShape(SerializationError):
    """Raised when a value's shape does not fit the parameter's declared style."""


class ConfigError(TryoutError):
    """Raised for configuration problems (invalid JSON, bad values, no usable host)."""

    exit_code = EXIT_GENERIC_FAILURE
