"""Typed data models for parsed OpenAPI documents.

Loaders convert raw YAML/JSON documents into these models, which the
request synthesizer reads. Validation is deliberately lenient: shapes the
synthesizer cannot use are coerced to "absent" instead of rejected.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

HTTP_METHODS = ("get", "post", "put", "delete", "patch")


class SchemaType(str, Enum):
    """JSON Schema types the example generator knows how to fill."""

    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"


_SCHEMA_TYPES = {t.value for t in SchemaType}


def _text(value) -> str:
    """Coerce YAML scalars to text: `version: 1.0` loads as a float, `summary:` as None."""
    if value is None or isinstance(value, (dict, list)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Schema(BaseModel):
    """The subset of a JSON Schema used to synthesize example values."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    ref: str | None = Field(default=None, alias="$ref")
    type: SchemaType | None = None
    properties: dict[str, "Schema"] | None = None
    items: "Schema | None" = None
    example: Any = None
    enum: list | None = None
    default: Any = None

    @field_validator("ref", mode="before")
    @classmethod
    def _coerce_ref(cls, value):
        return value if isinstance(value, str) else None

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value):
        # OpenAPI 3.1 allows a list of types, e.g. [string, "null"]
        if isinstance(value, SchemaType):
            return value
        if isinstance(value, list):
            value = next((v for v in value if v != "null"), None)
        if isinstance(value, str) and value in _SCHEMA_TYPES:
            return value
        return None

    @field_validator("properties", mode="before")
    @classmethod
    def _coerce_properties(cls, value):
        if not isinstance(value, dict):
            return None
        return {
            str(name): prop if isinstance(prop, (dict, Schema)) else {}
            for name, prop in value.items()
        }

    @field_validator("items", mode="before")
    @classmethod
    def _coerce_items(cls, value):
        if value is None or isinstance(value, (dict, Schema)):
            return value
        return {}

    @field_validator("enum", mode="before")
    @classmethod
    def _coerce_enum(cls, value):
        return value if isinstance(value, list) else None

    @property
    def has_example(self) -> bool:
        """True when `example` was declared, even as an explicit null."""
        return "example" in self.model_fields_set


def _schema_or_none(value):
    return value if isinstance(value, (dict, Schema)) else None


class Parameter(BaseModel):
    """A single operation parameter (query, path, header, or cookie)."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = ""
    location: str = Field(default="", alias="in")  # query / path / header / cookie
    required: bool = False
    schema_: Schema | None = Field(default=None, alias="schema")
    description: str | None = None
    ref: str | None = Field(default=None, alias="$ref")

    @field_validator("name", "location", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value):
        return None if value is None else _text(value)

    @field_validator("required", mode="before")
    @classmethod
    def _coerce_required(cls, value):
        return value is True

    @field_validator("schema_", mode="before")
    @classmethod
    def _coerce_schema(cls, value):
        return _schema_or_none(value)

    @property
    def key(self) -> str:
        """Identity used when merging path-level and operation-level parameters."""
        return f"{self.name}:{self.location}"


class MediaType(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    schema_: Schema | None = Field(default=None, alias="schema")
    example: Any = None

    @field_validator("schema_", mode="before")
    @classmethod
    def _coerce_schema(cls, value):
        return _schema_or_none(value)


class RequestBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    description: str | None = None
    required: bool = False
    content: dict[str, MediaType | None] = {}

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value):
        return None if value is None else _text(value)

    @field_validator("required", mode="before")
    @classmethod
    def _coerce_required(cls, value):
        return value is True

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, value):
        if not isinstance(value, dict):
            return {}
        return {
            str(media): entry if isinstance(entry, (dict, MediaType)) else None
            for media, entry in value.items()
        }


class Operation(BaseModel):
    """A single HTTP operation on a path."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    summary: str = ""
    description: str = ""
    operation_id: str | None = Field(default=None, alias="operationId")
    parameters: list[Parameter] = []
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict = {}  # {status_code: {description}}
    tags: list[str] = []

    @field_validator("summary", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text(value)

    @field_validator("operation_id", mode="before")
    @classmethod
    def _coerce_operation_id(cls, value):
        return None if value is None else _text(value)

    @field_validator("parameters", mode="before")
    @classmethod
    def _coerce_parameters(cls, value):
        return [p for p in value if isinstance(p, (dict, Parameter))] if isinstance(value, list) else []

    @field_validator("request_body", mode="before")
    @classmethod
    def _coerce_request_body(cls, value):
        if value is None or isinstance(value, (dict, RequestBody)):
            return value
        return None

    @field_validator("responses", mode="before")
    @classmethod
    def _coerce_responses(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value):
        return [_text(t) for t in value] if isinstance(value, list) else []


class PathItem(BaseModel):
    """Operations available on one path, plus parameters shared by all of them."""

    model_config = ConfigDict(extra="allow")

    summary: str = ""
    description: str = ""
    parameters: list[Parameter] = []
    get: Operation | None = None
    post: Operation | None = None
    put: Operation | None = None
    delete: Operation | None = None
    patch: Operation | None = None

    @field_validator("summary", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text(value)

    @field_validator("parameters", mode="before")
    @classmethod
    def _coerce_parameters(cls, value):
        return [p for p in value if isinstance(p, (dict, Parameter))] if isinstance(value, list) else []

    @field_validator("get", "post", "put", "delete", "patch", mode="before")
    @classmethod
    def _coerce_operation(cls, value):
        if value is None or isinstance(value, (dict, Operation)):
            return value
        return None

    def operations(self) -> list[tuple[str, Operation]]:
        """Return (method, operation) pairs in the order they are offered to users."""
        return [(m, getattr(self, m)) for m in HTTP_METHODS if getattr(self, m) is not None]


class Server(BaseModel):
    url: str = ""
    description: str = ""

    @field_validator("url", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text(value)


class Info(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    version: str = ""
    description: str = ""

    @field_validator("title", "version", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return _text(value)


class OpenApiDocument(BaseModel):
    """Root of a parsed OpenAPI 3.x document."""

    model_config = ConfigDict(extra="allow")

    openapi: str = ""
    info: Info = Info()
    servers: list[Server] = []
    paths: dict[str, PathItem] = {}
    components: dict = {}
    security: list[dict] | None = None

    _tree: dict | None = PrivateAttr(default=None)

    @field_validator("openapi", mode="before")
    @classmethod
    def _coerce_version(cls, value):
        return _text(value)

    @field_validator("info", mode="before")
    @classmethod
    def _coerce_info(cls, value):
        return value if isinstance(value, (dict, Info)) else {}

    @field_validator("servers", mode="before")
    @classmethod
    def _coerce_servers(cls, value):
        if not isinstance(value, list):
            return []
        return [s for s in value if isinstance(s, (dict, Server))]

    @field_validator("components", mode="before")
    @classmethod
    def _coerce_components(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("security", mode="before")
    @classmethod
    def _coerce_security(cls, value):
        if not isinstance(value, list):
            return None
        return [req for req in value if isinstance(req, dict)]

    @field_validator("paths", mode="before")
    @classmethod
    def _drop_empty_paths(cls, value):
        if not isinstance(value, dict):
            return {}
        return {str(path): item if isinstance(item, dict) else {} for path, item in value.items()}

    def as_tree(self) -> dict:
        """Plain-dict view of the document, used to walk `$ref` pointers."""
        if self._tree is None:
            self._tree = self.model_dump(by_alias=True, exclude_unset=True)
        return self._tree


class Endpoint(BaseModel):
    """A (method, path) pair selected from a document."""

    method: str  # GET / POST / PUT / DELETE / PATCH
    path: str  # /pets/{petId}
    summary: str = ""
    operation: Operation
    path_item: PathItem
