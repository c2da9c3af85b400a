"""Canonical Pydantic models shared across all tryout modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config directory:
    :class:`RequestConfig`, :class:`OutputConfig` and :class:`GlobalConfig`.

**Document models** -- produced by the parser from an OpenAPI 3.0 document:
    :class:`HTTPMethod`, :class:`ParameterLocation`, :class:`ParameterSchema`,
    :class:`RequestBodyInfo`, :class:`ResponseInfo`, :class:`OperationSchema`,
    :class:`APIInfo`, :class:`ServerInfo` and :class:`ParsedSpec`.

**Request models** -- user input and the serializer's output:
    :class:`RequestValues`, :class:`RequestDescriptor` and :class:`ApiResponse`.

Schemas are kept as the raw JSON-shaped dicts found in the document so that
``$ref`` pointers inside them can still be followed against the root
document by :mod:`tryout.parser.resolver` and :mod:`tryout.examples`.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Config ---


class RequestConfig(BaseModel):
    """Default HTTP settings applied when executing a request."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/tryout/config.json``.

    Loaded and saved by :func:`~tryout.config.load_global_config` and
    :func:`~tryout.config.save_global_config`. Fields here have the
    lowest precedence and can be overridden by environment variables or
    CLI flags. See :func:`~tryout.config.resolve_config`.
    """

    default_host: Optional[str] = Field(
        default=None, description="Host used when the command line names none"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Document models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods recognised by OpenAPI 3.x path-item objects."""

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"
    TRACE = "trace"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class ParameterSchema(BaseModel):
    """A single parameter declared on an OpenAPI operation.

    Maps to an OpenAPI *Parameter Object*. ``style`` is kept as declared
    (empty when absent); the location default is applied once, when the
    operation's :class:`~tryout.request.registry.ParameterRegistry` is
    built. An absent ``explode`` is ``False``.

    Example::

        ParameterSchema.model_validate(
            {"name": "id", "in": "path", "style": "matrix", "explode": True,
             "schema": {"type": "array", "items": {"type": "integer"}}}
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation = Field(alias="in")
    required: bool = False
    style: str = ""
    explode: bool = False
    schema_: dict[str, Any] = Field(default_factory=dict, alias="schema")
    description: Optional[str] = None


class RequestBodyInfo(BaseModel):
    """Request body declared on an operation, keyed by media type."""

    required: bool = False
    description: Optional[str] = None
    content: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Media type -> raw schema"
    )


class ResponseInfo(BaseModel):
    """Declared response for a single status code, keyed by media type."""

    status_code: str
    description: Optional[str] = None
    content: dict[str, dict[str, Any]] = Field(default_factory=dict)


class OperationSchema(BaseModel):
    """A single parsed API operation (one URL path + HTTP method pair).

    Immutable input to the request assembler. ``parameters`` keeps the
    declaration order of the document (path-level parameters first, then
    operation-level ones).
    """

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation_id: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    parameters: list[ParameterSchema] = Field(default_factory=list)
    request_body: Optional[RequestBodyInfo] = None
    responses: list[ResponseInfo] = Field(default_factory=list)
    deprecated: bool = False


class APIInfo(BaseModel):
    """API metadata extracted from the document's *Info Object*."""

    title: str
    version: str
    description: Optional[str] = None
    terms_of_service: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_url: Optional[str] = None
    license_name: Optional[str] = None
    license_url: Optional[str] = None


class ServerInfo(BaseModel):
    """A server entry from the document's ``servers`` array.

    ``variables`` maps each server variable to its default value; use
    :meth:`resolved_url` for the URL with those defaults substituted.
    """

    url: str
    description: Optional[str] = None
    variables: dict[str, str] = Field(default_factory=dict)

    def resolved_url(self) -> str:
        url = self.url
        for name, default in self.variables.items():
            url = url.replace("{" + name + "}", default)
        return url


class ParsedSpec(BaseModel):
    """Complete parsed representation of an OpenAPI document.

    ``raw_spec`` is the root document that ``$ref`` pointers in parameter,
    body and response schemas are resolved against.
    """

    info: APIInfo
    servers: list[ServerInfo] = Field(default_factory=list)
    operations: list[OperationSchema] = Field(default_factory=list)
    openapi_version: str = Field(
        description="Original OpenAPI version string (e.g., '3.0.3')"
    )
    raw_spec: dict[str, Any] = Field(default_factory=dict)

    def find_operation(self, key: str) -> Optional[OperationSchema]:
        """Find an operation by ``operationId`` or by ``"METHOD /path"``.

        Args:
            key: An operationId (``"getPetById"``) or a method and path
                separated by whitespace (``"GET /pets/{petId}"``).

        Returns:
            The matching :class:`OperationSchema`, or ``None``.
        """
        for operation in self.operations:
            if operation.operation_id == key:
                return operation

        method, _, path = key.strip().partition(" ")
        path = path.strip()
        for operation in self.operations:
            if operation.method.value == method.lower() and operation.path == path:
                return operation
        return None


# --- Request models ---


class RequestValues(BaseModel):
    """User input for one request, keyed first by location then by parameter name.

    Values are JSON-shaped: scalars, lists or dicts. Insertion order of
    ``path`` decides the order in which path tokens are substituted.
    """

    path: dict[str, Any] = Field(default_factory=dict)
    query: dict[str, Any] = Field(default_factory=dict)
    header: dict[str, Any] = Field(default_factory=dict)
    cookie: dict[str, Any] = Field(default_factory=dict)
    body: Any = None

    def for_location(self, location: ParameterLocation) -> dict[str, Any]:
        return getattr(self, location.value)


class RequestDescriptor(BaseModel):
    """An executable HTTP request: the serializer's output.

    A plain immutable value with no network state. Cookies are not part of
    it; they only appear in the curl rendering.
    """

    model_config = ConfigDict(frozen=True)

    method: str
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body_text: Optional[str] = None


class ApiResponse(BaseModel):
    """The outcome of executing a :class:`RequestDescriptor`, reported as data.

    Exactly one of ``status_code`` or ``error`` is set: ``error`` holds a
    transport failure message (connection refused, timeout, ...), while any
    HTTP status, including 4xx and 5xx, is reported through ``status_code``.
    """

    method: str
    url: str
    status_code: Optional[int] = None
    reason: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    text: str = ""
    elapsed_ms: float = 0.0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300
