"""tryout -- Render OpenAPI 3.0 documents and try their operations.

The package turns an OpenAPI 3.0 document plus user-supplied values into
an executable HTTP request, following the parameter serialization rules
(``style`` / ``explode``) of the OpenAPI specification, and renders
representative example values for the schemas the document declares.

Typical workflow::

    tryout operations openapi.yaml
    tryout curl openapi.yaml getPetById -P petId=7

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the entire package.
    values: Value-shape classification and scalar rendering.
    examples: Example values for (possibly composite) schemas.
    request: Parameter registry, serializers, request assembly, curl text.
    client: HTTP execution of an assembled request.
    config: XDG-aware configuration and host selection.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
