"""Load OpenAPI documents from a URL, a local file, or stdin.

This module is the I/O edge of the parser: it fetches the document text,
decodes it as JSON or YAML (YAML is decoded into the same JSON value model),
and checks that the result is an OpenAPI 3.x document.

The two public functions are:

* :func:`load_spec` -- Read and decode a document from any supported source.
* :func:`validate_openapi_version` -- Return the ``openapi`` version string,
  rejecting Swagger 2.0 and unknown major versions.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import httpx
import yaml

from tryout.exceptions import SpecParseError

_JSON_SUFFIXES = frozenset({".json"})
_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def load_spec(source: str, timeout: float = 30.0) -> dict[str, Any]:
    """Load an OpenAPI document from a URL, a file path, or stdin (``-``).

    Args:
        source: An ``http(s)://`` URL, a file path, or ``"-"`` for stdin.
        timeout: Seconds to wait when *source* is a URL.

    Returns:
        The decoded document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be read or decoded.
    """
    if source == "-":
        text, hint = _read_stdin(), ""
    elif source.startswith(("http://", "https://")):
        text, hint = _fetch_url(source, timeout)
    else:
        text, hint = _read_file(source)
    return parse_document(text, hint=hint, origin=source)


def _read_stdin() -> str:
    try:
        text = sys.stdin.read()
    except OSError as exc:
        raise SpecParseError(f"Failed to read from stdin: {exc}") from exc
    if not text.strip():
        raise SpecParseError("No input received from stdin")
    return text


def _fetch_url(url: str, timeout: float) -> tuple[str, str]:
    """Fetch *url*, returning its text and a format hint from the content type."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        return response.text, "json"
    if "yaml" in content_type or "yml" in content_type:
        return response.text, "yaml"
    return response.text, ""


def _read_file(path: str) -> tuple[str, str]:
    """Read a local file, returning its text and a format hint from the suffix."""
    file_path = Path(path)
    if not file_path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc
    if not text.strip():
        raise SpecParseError(f"Spec file is empty: {path}")

    suffix = file_path.suffix.lower()
    if suffix in _JSON_SUFFIXES:
        return text, "json"
    if suffix in _YAML_SUFFIXES:
        return text, "yaml"
    return text, ""


def parse_document(text: str, hint: str = "", origin: str = "document") -> dict[str, Any]:
    """Decode *text* as JSON or YAML.

    JSON is tried first unless *hint* is ``"yaml"``; a ``"json"`` hint
    disables the YAML fallback.  YAML is decoded with ``yaml.safe_load``.

    Args:
        text: Raw document text.
        hint: ``"json"``, ``"yaml"`` or ``""`` (unknown).
        origin: Where the text came from, used in error messages.

    Returns:
        The decoded mapping.

    Raises:
        SpecParseError: If the text decodes to neither, or to a non-mapping.
    """
    errors: list[str] = []

    if hint != "yaml":
        try:
            return _require_mapping(json.loads(text), origin)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON in {origin}: {exc}") from exc
            errors.append(f"JSON error: {exc}")

    try:
        return _require_mapping(yaml.safe_load(text), origin)
    except yaml.YAMLError as exc:
        errors.append(f"YAML error: {exc}")

    raise SpecParseError(
        f"Failed to parse {origin} as JSON or YAML\n  " + "\n  ".join(errors)
    )


def _require_mapping(document: Any, origin: str) -> dict[str, Any]:
    if not isinstance(document, dict):
        kind = "empty document" if document is None else type(document).__name__
        raise SpecParseError(f"{origin} must be a JSON/YAML object (got {kind})")
    return document


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the OpenAPI version string.

    Any ``3.x`` version is accepted; the serialization rules implemented
    here are those of OpenAPI 3.0, which 3.1 did not change.

    Raises:
        SpecParseError: If the version is missing, is Swagger 2.0, or is
            not a 3.x version.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.x documents are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    version = spec.get("openapi")
    if version is None:
        raise SpecParseError(
            "Missing 'openapi' field. Is this an OpenAPI 3.x document?"
        )

    version_str = str(version)
    if not version_str.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version_str}. "
            "Only OpenAPI 3.x documents are supported."
        )
    return version_str
