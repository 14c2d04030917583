"""Turns an edited RequestModel into a dispatchable RequestDescriptor."""

from urllib.parse import quote

from openapi_tryout.synth.models import BODY_METHODS, RequestDescriptor, RequestModel

# Characters encodeURIComponent leaves unescaped besides alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"

NON_QUERY_LOCATIONS = ("path", "header", "cookie")


def encode_uri_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def serialize(model: RequestModel) -> RequestDescriptor:
    """Assemble headers, URL and body. Performs no I/O.

    Path placeholders without a value are left in the URL as-is.
    """
    headers: dict[str, str] = {}
    for row in model.headers:
        if row.enabled and row.key and row.value:
            headers[row.key] = row.value

    url = model.url
    for param in model.params:
        if param.param_in == "path" and param.key and param.value:
            url = url.replace(f"{{{param.key}}}", encode_uri_component(param.value), 1)

    query = [
        f"{encode_uri_component(p.key)}={encode_uri_component(p.value)}"
        for p in model.params
        if p.enabled and p.key and p.value and p.param_in not in NON_QUERY_LOCATIONS
    ]
    if query:
        url = f"{url}?{'&'.join(query)}"

    return RequestDescriptor(
        method=model.method,
        url=url,
        headers=headers,
        body=model.body if model.method.upper() in BODY_METHODS else None,
        auth=model.auth,
    )
