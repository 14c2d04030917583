"""Request builder: seeds an editable RequestModel from an OpenAPI operation.

Parameter merging follows OpenAPI override rules (operation-level entries
replace path-level entries with the same name and location). Body and
header defaults are UI heuristics, not OpenAPI requirements.
"""

from typing import Literal

from pydantic import ValidationError

from openapi_tryout.config import SynthConfig
from openapi_tryout.parser.base import Endpoint, OpenApiDocument, Operation, Parameter, PathItem
from openapi_tryout.synth.example import dump_json, generate_example
from openapi_tryout.synth.models import PLACEHOLDER_BODY, AuthConfig, HeaderRow, ParamRow, RequestModel
from openapi_tryout.synth.refs import resolve_ref

BodyType = Literal["none", "json", "form-data", "x-www-form-urlencoded", "binary"]

PARAM_LOCATIONS = ("query", "path", "cookie")

_BODY_CONTENT_TYPES = {
    "json": "application/json",
    "form-data": "multipart/form-data",
    "x-www-form-urlencoded": "application/x-www-form-urlencoded",
    "binary": "application/octet-stream",
    "none": "",
}


def build_request_defaults(
    path: str,
    method: str,
    operation: Operation,
    path_item: PathItem | None,
    spec: OpenApiDocument,
    server: str | None = None,
    config: SynthConfig | None = None,
) -> RequestModel:
    """Derive the initial request for an operation.

    `server` is the base URL the user picked; when omitted the document's
    first server (or the configured fallback) is used.
    """
    config = config or SynthConfig()
    base_url = server or default_server_url(spec, config)

    params = merge_parameters(path_item, operation, spec)
    param_rows, header_rows = _route_parameters(params)
    param_rows.append(ParamRow())

    headers = [h.model_copy() for h in config.default_headers]
    headers.extend(header_rows)
    headers.append(HeaderRow())

    return RequestModel(
        method=method.upper(),
        url=f"{base_url}{path}",
        params=param_rows,
        headers=headers,
        auth=detect_auth(spec),
        body=build_body_default(operation, spec),
    )


def build_endpoint_defaults(
    endpoint: Endpoint,
    spec: OpenApiDocument,
    server: str | None = None,
    config: SynthConfig | None = None,
) -> RequestModel:
    return build_request_defaults(
        endpoint.path, endpoint.method, endpoint.operation, endpoint.path_item, spec, server, config
    )


def default_server_url(spec: OpenApiDocument | None, config: SynthConfig | None = None) -> str:
    config = config or SynthConfig()
    if spec is not None and spec.servers and spec.servers[0].url:
        return spec.servers[0].url
    return config.fallback_url


def is_dummy_fallback_url(url: str, spec: OpenApiDocument | None, config: SynthConfig | None = None) -> bool:
    """True when `url` is the placeholder used for a document without servers."""
    config = config or SynthConfig()
    return url == config.fallback_url and (spec is None or not spec.servers)


def merge_parameters(
    path_item: PathItem | None,
    operation: Operation,
    spec: OpenApiDocument | None = None,
) -> list[Parameter]:
    """Merge path-level and operation-level parameters keyed by (name, in)."""
    shared = path_item.parameters if path_item is not None else []
    merged: dict[str, Parameter] = {}
    for param in [*shared, *operation.parameters]:
        param = _resolve_parameter(param, spec)
        if param is not None:
            merged[param.key] = param
    return list(merged.values())


def _resolve_parameter(param: Parameter, spec: OpenApiDocument | None) -> Parameter | None:
    if not param.ref:
        return param
    target = resolve_ref(param.ref, spec)
    if not isinstance(target, dict):
        return None
    try:
        return Parameter.model_validate(target)
    except ValidationError:
        return None


def _route_parameters(params: list[Parameter]) -> tuple[list[ParamRow], list[HeaderRow]]:
    param_rows: list[ParamRow] = []
    header_rows: list[HeaderRow] = []
    for param in params:
        default = param.schema_.default if param.schema_ is not None else None
        if param.location == "header":
            # Header parameters are always pre-enabled, whatever `required` says.
            header_rows.append(
                HeaderRow(enabled=True, key=param.name, value=_stringify(default) if default else "")
            )
        elif param.location in PARAM_LOCATIONS:
            # An unfilled path parameter breaks the URL, so path params are always on.
            param_rows.append(
                ParamRow(
                    enabled=param.location == "path" or param.required,
                    key=param.name,
                    value=_stringify(default),
                    description=param.description,
                    param_in=param.location,
                )
            )
    return param_rows, header_rows


def build_body_default(operation: Operation, spec: OpenApiDocument | None = None) -> str:
    """Pick a body for the operation's preferred content type.

    Preference: application/json, application/x-www-form-urlencoded,
    text/plain, then whatever is declared first.
    """
    request_body = operation.request_body
    if request_body is None:
        return PLACEHOLDER_BODY

    content = request_body.content
    json_content = content.get("application/json")
    form_content = content.get("application/x-www-form-urlencoded")
    text_content = content.get("text/plain")
    first_type = next(iter(content), None)

    if json_content is not None:
        if json_content.schema_ is not None:
            return generate_example(json_content.schema_, 0, spec)
        if json_content.example:
            return dump_json(json_content.example)
    elif form_content is not None:
        properties = form_content.schema_.properties if form_content.schema_ is not None else None
        if properties is not None:
            return "&".join(f"{key}=value" for key in properties) or "key=value"
        return "key=value&key2=value2"
    elif text_content is not None:
        return _as_text(text_content.example) if text_content.example else "Plain text content"
    elif first_type is not None and content[first_type] is not None:
        example = content[first_type].example
        if example:
            return _as_text(example)
    return PLACEHOLDER_BODY


def detect_auth(spec: OpenApiDocument | None) -> AuthConfig:
    """Guess the auth type from the first global security requirement.

    Alternative and per-operation requirements are not considered.
    """
    if spec is None:
        return AuthConfig()
    schemes = spec.components.get("securitySchemes")
    if not isinstance(schemes, dict) or not schemes or not spec.security:
        return AuthConfig()

    requirement = spec.security[0]
    if not isinstance(requirement, dict) or not requirement:
        return AuthConfig()
    scheme = schemes.get(next(iter(requirement)))
    if not isinstance(scheme, dict):
        return AuthConfig()

    scheme_type = scheme.get("type")
    http_scheme = str(scheme.get("scheme", "")).lower()
    if scheme_type == "http" and http_scheme == "bearer":
        return AuthConfig(type="bearer")
    if scheme_type == "http" and http_scheme == "basic":
        return AuthConfig(type="basic")
    if scheme_type == "apiKey":
        return AuthConfig(type="api-key")
    return AuthConfig()


def detect_body_type(operation: Operation | None) -> BodyType:
    """Classify the operation's body by its first declared content type."""
    if operation is None or operation.request_body is None:
        return "none"
    content_types = list(operation.request_body.content)
    if not content_types:
        return "none"

    first = content_types[0]
    if "json" in first:
        return "json"
    if "form-data" in first:
        return "form-data"
    if "x-www-form-urlencoded" in first:
        return "x-www-form-urlencoded"
    if "octet-stream" in first or "binary" in first:
        return "binary"
    return "json"


def body_type_to_content_type(body_type: BodyType) -> str:
    return _BODY_CONTENT_TYPES[body_type]


def _stringify(value) -> str:
    """Render a schema default the way a browser's String() would."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(_stringify(item) for item in value)
    return str(value)


def _as_text(value) -> str:
    return value if isinstance(value, str) else dump_json(value)
