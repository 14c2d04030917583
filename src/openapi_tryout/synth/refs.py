"""Local `$ref` resolution against a root OpenAPI document."""

from openapi_tryout.parser.base import OpenApiDocument


def resolve_ref(ref: str, root: OpenApiDocument | dict | None):
    """Resolve a local JSON pointer like '#/components/schemas/Pet'.

    Returns the node the pointer targets, or None when the pointer is not
    local, a segment is missing, or a segment indexes into a scalar.
    External file and URL references are not supported.
    """
    if not isinstance(ref, str) or not ref.startswith("#/") or root is None:
        return None

    current = root.as_tree() if isinstance(root, OpenApiDocument) else root
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            current = current.get(part)
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            return None
    return current
