"""OpenAPI document parser -- load, dereference, and extract operations.

This sub-package turns a raw OpenAPI 3.x document (JSON or YAML, local file
or remote URL) into a :class:`~tryout.models.ParsedSpec`.

Typical usage::

    from tryout.parser import load_spec, validate_openapi_version, extract_spec

    raw = load_spec("https://petstore3.swagger.io/api/v3/openapi.json")
    parsed = extract_spec(raw, validate_openapi_version(raw))

Sub-modules:

* :mod:`~tryout.parser.loader` -- I/O layer (URL, file, stdin) plus format
  detection and OpenAPI version validation.
* :mod:`~tryout.parser.resolver` -- ``$ref`` chain following with cycle
  detection.
* :mod:`~tryout.parser.extractor` -- Walks the document and produces
  :class:`~tryout.models.ParsedSpec` containing
  :class:`~tryout.models.OperationSchema` objects.
"""

from tryout.parser.extractor import extract_spec
from tryout.parser.loader import load_spec, validate_openapi_version

__all__ = ["load_spec", "validate_openapi_version", "extract_spec"]
