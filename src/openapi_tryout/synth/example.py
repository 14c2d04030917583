"""Example generator: turns a JSON Schema into a representative JSON value.

Used to pre-fill request bodies in an editor, so every path degrades to a
placeholder value instead of raising.
"""

import json

from pydantic import ValidationError

from openapi_tryout.parser.base import OpenApiDocument, Schema, SchemaType
from openapi_tryout.synth.models import PLACEHOLDER_BODY
from openapi_tryout.synth.refs import resolve_ref

MAX_DEPTH = 5


def generate_example(schema: Schema | dict, depth: int = 0, root: OpenApiDocument | dict | None = None) -> str:
    """Generate a pretty-printed JSON example for `schema`.

    `$ref`s are resolved against `root` when it is given. Nesting deeper
    than MAX_DEPTH yields "{}".
    """
    return _generate(schema, depth, root, frozenset())


def prettify_json(text: str) -> str:
    """Re-indent `text` if it is valid JSON, otherwise return it unchanged."""
    try:
        return dump_json(json.loads(text))
    except (json.JSONDecodeError, TypeError):
        return text


def dump_json(value) -> str:
    # default=str covers YAML dates and other non-JSON scalars
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _generate(schema, depth: int, root, ref_chain: frozenset) -> str:
    if depth > MAX_DEPTH:
        return "{}"
    schema = _as_schema(schema)

    # Following a $ref does not count as a nesting level.
    if schema.ref and root is not None:
        if schema.ref in ref_chain:
            return "{}"
        resolved = resolve_ref(schema.ref, root)
        if resolved is not None:
            return _generate(resolved, depth, root, ref_chain | {schema.ref})

    if schema.has_example:
        return dump_json(schema.example)

    match schema.type:
        case SchemaType.OBJECT if schema.properties is not None:
            obj = {}
            for name, prop in schema.properties.items():
                obj[name] = _property_value(prop, depth, root)
            return dump_json(obj)
        case SchemaType.ARRAY if schema.items is not None:
            item = _generate(schema.items, depth + 1, root, frozenset())
            try:
                return dump_json([json.loads(item)])
            except json.JSONDecodeError:
                return "[]"
        case _:
            return PLACEHOLDER_BODY


def _property_value(prop: Schema, depth: int, root):
    """Value for a single object property. Property refs are resolved one level only."""
    resolved = prop
    if prop.ref and root is not None:
        target = resolve_ref(prop.ref, root)
        resolved = _as_schema(target) if target is not None else None
    if resolved is None:
        return None
    if resolved.has_example:
        return resolved.example

    match resolved.type:
        case SchemaType.STRING:
            first = resolved.enum[0] if resolved.enum else None
            return first or resolved.default or "string"
        case SchemaType.NUMBER | SchemaType.INTEGER:
            return resolved.default if resolved.default is not None else 0
        case SchemaType.BOOLEAN:
            return resolved.default if resolved.default is not None else True
        case SchemaType.ARRAY:
            if resolved.items is None:
                return []
            try:
                return [json.loads(_generate(resolved.items, depth + 1, root, frozenset()))]
            except json.JSONDecodeError:
                return []
        case SchemaType.OBJECT:
            try:
                return json.loads(_generate(resolved, depth + 1, root, frozenset()))
            except json.JSONDecodeError:
                return {}
        case _:
            return None


def _as_schema(node) -> Schema:
    if isinstance(node, Schema):
        return node
    if isinstance(node, dict):
        try:
            return Schema.model_validate(node)
        except ValidationError:
            return Schema()
    return Schema()
