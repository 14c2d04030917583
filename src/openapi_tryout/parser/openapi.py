"""OpenAPI document loader.

Parses OpenAPI 3.x YAML or JSON text into an OpenApiDocument and
enumerates the endpoints it declares.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .base import Endpoint, OpenApiDocument

logger = logging.getLogger(__name__)


class SpecLoadError(ValueError):
    """Raised when text cannot be parsed as an OpenAPI document."""


def is_openapi(data) -> bool:
    """Return True if a parsed mapping looks like an OpenAPI/Swagger document."""
    return isinstance(data, dict) and ("openapi" in data or "swagger" in data)


def parse_document(text: str) -> OpenApiDocument:
    """Parse YAML or JSON text into an OpenApiDocument.

    JSON is a subset of YAML, so a single safe_load handles both.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"Failed to parse specification: {e}") from e

    if not is_openapi(data):
        raise SpecLoadError("Not an OpenAPI document (missing 'openapi' or 'swagger' key)")
    if "openapi" not in data:
        # Swagger 2.0 keeps bodies in `in: body` parameters and has no `servers`
        raise SpecLoadError(f"Swagger {data['swagger']} documents are not supported, convert to OpenAPI 3.x first")

    try:
        doc = OpenApiDocument.model_validate(data)
    except ValidationError as e:
        raise SpecLoadError(f"Invalid OpenAPI document: {e.error_count()} validation error(s)") from e

    logger.debug("Parsed %r with %d paths", doc.info.title, len(doc.paths))
    return doc


def load_document(file_path: Path) -> OpenApiDocument:
    """Read and parse an OpenAPI file."""
    text = file_path.read_text(encoding="utf-8")
    return parse_document(text)


def iter_endpoints(doc: OpenApiDocument) -> list[Endpoint]:
    """List every supported operation in declaration order."""
    endpoints = []
    for path, path_item in doc.paths.items():
        for method, operation in path_item.operations():
            endpoints.append(
                Endpoint(
                    method=method.upper(),
                    path=path,
                    summary=operation.summary,
                    operation=operation,
                    path_item=path_item,
                )
            )
    return endpoints


def find_endpoint(doc: OpenApiDocument, method: str, path: str) -> Endpoint | None:
    """Look up a single operation by method and path."""
    for ep in iter_endpoints(doc):
        if ep.method == method.upper() and ep.path == path:
            return ep
    return None


def first_endpoint(doc: OpenApiDocument) -> Endpoint | None:
    """The operation selected by default when a document is opened."""
    endpoints = iter_endpoints(doc)
    return endpoints[0] if endpoints else None
