"""Helpers shared by the command modules."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer

from tryout.exceptions import InvalidUsageError, TryoutError
from tryout.models import OperationSchema, ParsedSpec
from tryout.output import debug, error


@contextmanager
def reported_errors() -> Iterator[None]:
    """Print a :class:`TryoutError` to stderr and exit with its code."""
    try:
        yield
    except TryoutError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def open_spec(source: str) -> ParsedSpec:
    """Load, validate and extract the OpenAPI document at *source*.

    Raises:
        SpecParseError: If the document cannot be read or is not OpenAPI 3.x.
    """
    from tryout.parser import extract_spec, load_spec, validate_openapi_version

    raw = load_spec(source)
    version = validate_openapi_version(raw)
    spec = extract_spec(raw, version)
    debug(f"Loaded {spec.info.title} ({len(spec.operations)} operations, OpenAPI {version})")
    return spec


def find_operation(spec: ParsedSpec, key: str) -> OperationSchema:
    """Look up *key* (an operationId or ``"METHOD /path"``) in *spec*.

    Raises:
        InvalidUsageError: If no operation matches.
    """
    operation = spec.find_operation(key)
    if operation is None:
        raise InvalidUsageError(
            f"No operation '{key}' in {spec.info.title}. "
            "Run 'tryout operations' to list them."
        )
    return operation
